import pathlib

import pytest
import trio
from inputlog.device.hwtypes import ButtonDown, KeyDown, KeyUp, PointerMove, Wheel
from inputlog.device.recorded_source import RecordedSignal, Recorder, ReplaySource, load_recording
from inputlog.device.types import EventSource

RECORDING = b"""\
{"delay":0.0,"signal":{"type":"KeyDown","key":30}}
{"delay":0.25,"signal":{"type":"KeyUp","key":30}}

{"delay":1.5,"signal":{"type":"PointerMove","x":10.0,"y":20.5}}
{"delay":0,"signal":{"type":"Wheel","delta_x":0,"delta_y":-1}}
"""


def test_load_recording(tmp_path: pathlib.Path):
    path = tmp_path / "session.jsonl"
    path.write_bytes(RECORDING)
    assert load_recording(path) == [
        RecordedSignal(delay=0.0, signal=KeyDown(key=30)),
        RecordedSignal(delay=0.25, signal=KeyUp(key=30)),
        RecordedSignal(delay=1.5, signal=PointerMove(x=10.0, y=20.5)),
        RecordedSignal(delay=0.0, signal=Wheel(delta_x=0, delta_y=-1)),
    ]


@pytest.mark.parametrize(
    "line",
    (
        b'{"delay":0.0,"signal":{"type":"Teleport","x":1}}',
        b'{"delay":0.0,"signal":{"type":"KeyDown"}}',
        b'{"signal":{"type":"KeyDown","key":30}}',
        b"garbage",
    ),
)
def test_load_recording_reports_bad_line(tmp_path: pathlib.Path, line: bytes):
    path = tmp_path / "session.jsonl"
    path.write_bytes(b'{"delay":0.0,"signal":{"type":"KeyDown","key":30}}\n' + line + b"\n")
    with pytest.raises(ValueError, match=r"session\.jsonl:2"):
        load_recording(path)


async def test_replay_keeps_timing(autojump_clock):
    source = ReplaySource(
        [
            RecordedSignal(delay=1.0, signal=KeyDown(key=30)),
            RecordedSignal(delay=0.0, signal=KeyUp(key=30)),
            RecordedSignal(delay=2.5, signal=ButtonDown(button="left")),
        ]
    )
    assert isinstance(source, EventSource)
    seen = []
    start = trio.current_time()
    await source.run(lambda signal: seen.append((trio.current_time() - start, signal)))
    assert seen == [
        (pytest.approx(1.0), KeyDown(key=30)),
        (pytest.approx(1.0), KeyUp(key=30)),
        (pytest.approx(3.5), ButtonDown(button="left")),
    ]


async def test_replay_can_be_cancelled(autojump_clock):
    source = ReplaySource([RecordedSignal(delay=1.0, signal=KeyDown(key=n)) for n in range(1, 11)])
    seen = []
    with trio.move_on_after(3.5):
        await source.run(seen.append)
    assert seen == [KeyDown(key=n) for n in range(1, 4)]


async def test_recorder_saves_what_it_passes_along(tmp_path: pathlib.Path, autojump_clock):
    signals = [KeyDown(key=42), KeyDown(key=30), KeyUp(key=30), KeyUp(key=42), PointerMove(x=1.0, y=2.0)]
    recorder = Recorder(ReplaySource([RecordedSignal(delay=0.5, signal=signal) for signal in signals]))
    seen = []
    await recorder.run(seen.append)
    assert seen == signals

    path = tmp_path / "recorded.jsonl"
    recorder.save_events(path)
    recording = load_recording(path)
    assert [entry.signal for entry in recording] == signals
    assert recording[0].delay == 0.0
    assert all(entry.delay >= 0 for entry in recording)
    assert [entry.signal for entry in ReplaySource.from_path(path).recording] == signals
