import datetime
import json
import pathlib

import pytest
from inputlog.commontypes import SettingsError
from inputlog.device.eventsource import KeyCode
from inputlog.settings import Settings


def test_defaults():
    settings = Settings.defaults(pathlib.Path("out.jsonl"))
    assert settings.log_path == pathlib.Path("out.jsonl")
    assert settings.buffer_capacity == 100
    assert settings.flush_interval == datetime.timedelta(seconds=5)
    assert settings.run_duration == datetime.timedelta(minutes=5)
    assert settings.keymaps[KeyCode.KEY_A] == ["a", "A"]
    assert settings.keymaps[KeyCode.KEY_ENTER] == ["\n", "\n"]


def test_default_log_path_is_timestamped():
    name = Settings.defaults().log_path.name
    assert name.startswith("log_")
    assert name.endswith(".jsonl")


def test_load_and_save(tmp_path: pathlib.Path):
    src = tmp_path / "settings.json"
    src.write_text(
        json.dumps(
            {
                "log_path": str(tmp_path / "input.jsonl"),
                "buffer_capacity": 250,
                "flush_interval": "1m30s",
                "run_duration": 600,
                "keymaps": {"KEY_A": ["a", "A"], "KEY_1": ["1", "!"]},
            }
        )
    )
    settings = Settings.load(src)
    assert settings.log_path == tmp_path / "input.jsonl"
    assert settings.buffer_capacity == 250
    assert settings.flush_interval == datetime.timedelta(minutes=1, seconds=30)
    assert settings.run_duration == datetime.timedelta(minutes=10)
    assert settings.keymaps == {KeyCode.KEY_A: ["a", "A"], KeyCode.KEY_1: ["1", "!"]}

    dest = tmp_path / "saved.json"
    settings.save(dest)
    saved = json.loads(dest.read_text())
    assert saved["flush_interval"] == "1m30s"
    assert saved["run_duration"] == "10m"
    assert saved["keymaps"] == {"KEY_A": ["a", "A"], "KEY_1": ["1", "!"]}
    assert "_path" not in saved
    assert Settings.load(dest).replace(_path=src) == settings


def test_load_fills_in_defaults(tmp_path: pathlib.Path):
    src = tmp_path / "settings.json"
    src.write_text(json.dumps({"buffer_capacity": 7}))
    settings = Settings.load(src)
    assert settings.buffer_capacity == 7
    assert settings.flush_interval == datetime.timedelta(seconds=5)
    assert settings.log_path.name.startswith("log_")


def test_replace_skips_unset_values():
    settings = Settings.for_test()
    replaced = settings.replace(buffer_capacity=None, run_duration=datetime.timedelta(seconds=3))
    assert replaced.buffer_capacity == settings.buffer_capacity
    assert replaced.run_duration == datetime.timedelta(seconds=3)


@pytest.mark.parametrize(
    "changes",
    (
        {"buffer_capacity": 0},
        {"flush_interval": datetime.timedelta()},
        {"run_duration": datetime.timedelta(seconds=-1)},
        {"keymaps": {KeyCode.KEY_A: ["a"]}},
        {"keymaps": {KeyCode.KEY_A: ["", "A"]}},
        {"keymaps": {KeyCode.KEY_E: ["e\u0301", "E\u0301"]}},
        {"keymaps": {KeyCode.KEY_1: ["1", "!!"]}},
    ),
)
def test_invalid_values(changes):
    with pytest.raises(SettingsError):
        Settings.for_test().replace(**changes)


@pytest.mark.parametrize(
    "raw",
    (
        "not json",
        json.dumps({"buffer_capacity": "lots"}),
        json.dumps({"flush_interval": "soon"}),
        json.dumps({"keymaps": {"KEY_NOPE": ["x", "X"]}}),
        json.dumps({"buffer_capacity": -3}),
        json.dumps({"keymaps": {"KEY_A": ["", "A"]}}),
        json.dumps({"keymaps": {"KEY_E": ["e\u0301", "E\u0301"]}}),
    ),
)
def test_load_rejects_bad_settings(tmp_path: pathlib.Path, raw: str):
    src = tmp_path / "settings.json"
    src.write_text(raw)
    with pytest.raises(SettingsError):
        Settings.load(src)


def test_load_missing_file(tmp_path: pathlib.Path):
    with pytest.raises(SettingsError):
        Settings.load(tmp_path / "nope.json")
