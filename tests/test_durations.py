from datetime import timedelta

import pytest
from inputlog.durations import format_duration, parse_duration


@pytest.mark.parametrize(
    "delta,expected",
    (
        (timedelta(hours=72, minutes=3, milliseconds=500), "72h3m0.5s"),
        (timedelta(), "0"),
        (timedelta(microseconds=1), "1us"),
        (timedelta(milliseconds=1), "1ms"),
        (timedelta(milliseconds=1, microseconds=200), "1.2ms"),
        (timedelta(seconds=1), "1s"),
        (timedelta(minutes=5), "5m"),
        (timedelta(hours=1, seconds=1), "1h1s"),
        (timedelta(minutes=1, milliseconds=250), "1m0.25s"),
        (timedelta(seconds=-1), "-1s"),
        (-timedelta(hours=1, minutes=1, milliseconds=250), "-1h1m0.25s"),
    ),
)
def test_format_duration(delta: timedelta, expected: str):
    assert format_duration(delta) == expected


@pytest.mark.parametrize(
    "duration,expected",
    (
        ("0", timedelta()),
        ("-0", timedelta()),
        ("+0", timedelta()),
        ("0s", timedelta()),
        ("1us", timedelta(microseconds=1)),
        ("1ms", timedelta(milliseconds=1)),
        ("1s", timedelta(seconds=1)),
        ("2m", timedelta(minutes=2)),
        ("3h", timedelta(hours=3)),
        ("2h3m4s", timedelta(hours=2, minutes=3, seconds=4)),
        ("3m4s5us", timedelta(minutes=3, seconds=4, microseconds=5)),
        ("2us3m4s5h", timedelta(hours=5, minutes=3, seconds=4, microseconds=2)),
        ("1.5s", timedelta(seconds=1, milliseconds=500)),
        ("0.25m", timedelta(seconds=15)),
        ("-1m30s", -timedelta(minutes=1, seconds=30)),
    ),
)
def test_parse_duration(duration: str, expected: timedelta):
    assert parse_duration(duration) == expected


@pytest.mark.parametrize("duration", ("", "-", "s", "5", "5x", "1h 2m", ".5s", "1s2"))
def test_parse_duration_rejects(duration: str):
    with pytest.raises(ValueError):
        parse_duration(duration)
