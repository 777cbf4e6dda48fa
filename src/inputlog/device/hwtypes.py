from __future__ import annotations

import typing

import msgspec

from .eventsource import as_keycode, key_name

if typing.TYPE_CHECKING:
    from .eventsource import KeyCode


class Signal(msgspec.Struct, frozen=True, tag=True, tag_field="type"):
    pass


class KeyDown(Signal, frozen=True):
    key: int

    @property
    def keycode(self) -> KeyCode | int:
        return as_keycode(self.key)

    @property
    def name(self) -> str:
        return key_name(self.key)


class KeyUp(Signal, frozen=True):
    key: int

    @property
    def keycode(self) -> KeyCode | int:
        return as_keycode(self.key)

    @property
    def name(self) -> str:
        return key_name(self.key)


class ButtonDown(Signal, frozen=True):
    button: str


class ButtonUp(Signal, frozen=True):
    button: str


class PointerMove(Signal, frozen=True):
    x: float
    y: float


class Wheel(Signal, frozen=True):
    delta_x: int
    delta_y: int


RawSignal = KeyDown | KeyUp | ButtonDown | ButtonUp | PointerMove | Wheel


class ModifierState(msgspec.Struct, frozen=True):
    shift_down: bool = False
    capslock_active: bool = False
