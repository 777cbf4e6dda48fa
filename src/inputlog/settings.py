import dataclasses
import datetime
import json
import operator
import pathlib
import typing

import cattrs
import cattrs.gen

from .commontypes import SettingsError
from .device.eventsource import KeyCode
from .durations import format_duration, parse_duration
from .util import default_log_path

KEYMAPS = {
    "KEY_GRAVE": ["`", "~"],
    "KEY_1": ["1", "!"],
    "KEY_2": ["2", "@"],
    "KEY_3": ["3", "#"],
    "KEY_4": ["4", "$"],
    "KEY_5": ["5", "%"],
    "KEY_6": ["6", "^"],
    "KEY_7": ["7", "&"],
    "KEY_8": ["8", "*"],
    "KEY_9": ["9", "("],
    "KEY_0": ["0", ")"],
    "KEY_MINUS": ["-", "_"],
    "KEY_EQUAL": ["=", "+"],
    "KEY_Q": ["q", "Q"],
    "KEY_W": ["w", "W"],
    "KEY_E": ["e", "E"],
    "KEY_R": ["r", "R"],
    "KEY_T": ["t", "T"],
    "KEY_Y": ["y", "Y"],
    "KEY_U": ["u", "U"],
    "KEY_I": ["i", "I"],
    "KEY_O": ["o", "O"],
    "KEY_P": ["p", "P"],
    "KEY_LEFTBRACE": ["[", "{"],
    "KEY_RIGHTBRACE": ["]", "}"],
    "KEY_BACKSLASH": ["\\", "|"],
    "KEY_A": ["a", "A"],
    "KEY_S": ["s", "S"],
    "KEY_D": ["d", "D"],
    "KEY_F": ["f", "F"],
    "KEY_G": ["g", "G"],
    "KEY_H": ["h", "H"],
    "KEY_J": ["j", "J"],
    "KEY_K": ["k", "K"],
    "KEY_L": ["l", "L"],
    "KEY_SEMICOLON": [";", ":"],
    "KEY_APOSTROPHE": ["'", '"'],
    "KEY_Z": ["z", "Z"],
    "KEY_X": ["x", "X"],
    "KEY_C": ["c", "C"],
    "KEY_V": ["v", "V"],
    "KEY_B": ["b", "B"],
    "KEY_N": ["n", "N"],
    "KEY_M": ["m", "M"],
    "KEY_COMMA": [",", "<"],
    "KEY_DOT": [".", ">"],
    "KEY_SLASH": ["/", "?"],
    "KEY_SPACE": [" ", " "],
    "KEY_TAB": ["\t", "\t"],
    "KEY_ENTER": ["\n", "\n"],
}

DEFAULT_BUFFER_CAPACITY = 100
DEFAULT_FLUSH_INTERVAL = "5s"
DEFAULT_RUN_DURATION = "5m"


def timedelta_seconds(seconds: datetime.timedelta | int | float | str):
    if isinstance(seconds, datetime.timedelta):
        return seconds
    if isinstance(seconds, (int, float)):
        return datetime.timedelta(seconds=seconds)
    return parse_duration(seconds)


settings_converter = cattrs.Converter()
settings_converter.register_unstructure_hook(datetime.timedelta, format_duration)
settings_converter.register_structure_hook(datetime.timedelta, lambda d, _: timedelta_seconds(d))
settings_converter.register_unstructure_hook(KeyCode, operator.attrgetter("name"))
settings_converter.register_structure_hook(KeyCode, lambda v, _: KeyCode[v])
settings_converter.register_unstructure_hook(pathlib.Path, str)
settings_converter.register_structure_hook(pathlib.Path, lambda v, _: pathlib.Path(v))


@dataclasses.dataclass(kw_only=True)
class Settings:
    _path: typing.Optional[pathlib.Path] = None
    log_path: pathlib.Path
    buffer_capacity: int = DEFAULT_BUFFER_CAPACITY
    flush_interval: datetime.timedelta = dataclasses.field(default_factory=lambda: parse_duration(DEFAULT_FLUSH_INTERVAL))
    run_duration: datetime.timedelta = dataclasses.field(default_factory=lambda: parse_duration(DEFAULT_RUN_DURATION))
    keymaps: dict[KeyCode, list[str]] = dataclasses.field(default_factory=lambda: structure_keymaps(KEYMAPS))

    def __post_init__(self):
        if self.buffer_capacity < 1:
            raise SettingsError(f"buffer_capacity must be at least 1, not {self.buffer_capacity}")
        if self.flush_interval <= datetime.timedelta():
            raise SettingsError(f"flush_interval must be positive, not {format_duration(self.flush_interval)}")
        if self.run_duration <= datetime.timedelta():
            raise SettingsError(f"run_duration must be positive, not {format_duration(self.run_duration)}")
        for key, glyphs in self.keymaps.items():
            if len(glyphs) != 2:
                raise SettingsError(f"keymap for {key.name} needs an unshifted and a shifted glyph, got {glyphs!r}")
            for glyph in glyphs:
                # a glyph is a single code point; "e" plus a combining accent is two
                if not isinstance(glyph, str) or len(glyph) != 1:
                    raise SettingsError(f"keymap for {key.name} has {glyph!r}, which is not a single character")

    def replace(self, **changes):
        return dataclasses.replace(self, **{k: v for k, v in changes.items() if v is not None})

    def save(self, dest: typing.Optional[pathlib.Path] = None):
        if dest is None:
            dest = self._path
        raw = settings_converter.unstructure(self)
        del raw["_path"]
        with dest.open("w") as outfile:
            json.dump(raw, outfile, indent=2)

    @classmethod
    def load(cls, src: pathlib.Path):
        try:
            with src.open() as infile:
                raw = json.load(infile)
        except (OSError, ValueError) as exc:
            raise SettingsError(f"Unable to read settings from {src}: {exc}") from exc
        raw["_path"] = str(src)
        raw.setdefault("log_path", str(default_log_path()))
        try:
            return settings_converter.structure(raw, cls)
        except cattrs.BaseValidationError as exc:
            # cattrs wraps whatever went wrong; surface our own complaint if it was one
            for inner in exc.exceptions:
                if isinstance(inner, SettingsError):
                    raise inner from exc
            raise SettingsError(f"Invalid settings in {src}: {cattrs.transform_error(exc)}") from exc

    @classmethod
    def defaults(cls, log_path: typing.Optional[pathlib.Path] = None):
        return cls(log_path=log_path if log_path is not None else default_log_path())

    @classmethod
    def for_test(cls, log_path: pathlib.Path = pathlib.Path("test.jsonl")):
        return settings_converter.structure(
            {
                "_path": "test.settings.json",
                "log_path": str(log_path),
                "buffer_capacity": 5,
                "flush_interval": "1s",
                "run_duration": "10s",
                "keymaps": KEYMAPS,
            },
            cls,
        )


def structure_keymaps(keymaps: dict[str, list[str]]) -> dict[KeyCode, list[str]]:
    return settings_converter.structure(keymaps, dict[KeyCode, list[str]])


settings_converter.register_structure_hook(Settings, cattrs.gen.make_dict_structure_fn(Settings, settings_converter))
