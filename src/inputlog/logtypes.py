from __future__ import annotations

import datetime
import typing

import msgspec


class EventKind(msgspec.Struct, frozen=True, tag=True, tag_field="type"):
    pass


class KeyPress(EventKind, frozen=True):
    code: str


class KeyRelease(EventKind, frozen=True):
    code: str


class CharInput(EventKind, frozen=True):
    character: str


class ButtonPress(EventKind, frozen=True):
    button: str


class ButtonRelease(EventKind, frozen=True):
    button: str


class MouseMove(EventKind, frozen=True):
    x: float
    y: float


class Wheel(EventKind, frozen=True):
    delta_x: int
    delta_y: int


LoggedKind = KeyPress | KeyRelease | CharInput | ButtonPress | ButtonRelease | MouseMove | Wheel


class LoggedEvent(msgspec.Struct, frozen=True):
    timestamp: datetime.datetime
    kind: LoggedKind

    def to_record(self) -> dict[str, typing.Any]:
        # one flat object per line: the timestamp, then the tagged kind
        return {"timestamp": self.timestamp.isoformat(timespec="milliseconds"), **msgspec.to_builtins(self.kind)}

    @classmethod
    def from_record(cls, record: dict[str, typing.Any]) -> LoggedEvent:
        record = dict(record)
        timestamp = datetime.datetime.fromisoformat(record.pop("timestamp"))
        return cls(timestamp=timestamp, kind=msgspec.convert(record, LoggedKind))
