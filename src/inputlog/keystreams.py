# SPDX-FileCopyrightText: 2021 Rose Davidson <rose@metaclassical.com>
#
# SPDX-License-Identifier: GPL-3.0-or-later
from __future__ import annotations

import logging
import typing
import unicodedata

from . import logtypes
from .device import hwtypes
from .device.eventsource import KeyCode
from .device.hwtypes import KeyDown, KeyUp, ModifierState

if typing.TYPE_CHECKING:
    from .buffer import EventBuffer

logger = logging.getLogger(__name__)


# track modifier keydown/up and convert key presses into characters
class KeyTranslator:
    def __init__(self, keymaps: dict[KeyCode, list[str]]):
        self.keymaps = keymaps
        self.momentary_state = {
            KeyCode.KEY_LEFTSHIFT: False,
            KeyCode.KEY_RIGHTSHIFT: False,
        }
        self.lock_state = {
            KeyCode.KEY_CAPSLOCK: False,
        }

    @property
    def modifiers(self) -> ModifierState:
        return ModifierState(
            shift_down=self.momentary_state[KeyCode.KEY_LEFTSHIFT] or self.momentary_state[KeyCode.KEY_RIGHTSHIFT],
            capslock_active=self.lock_state[KeyCode.KEY_CAPSLOCK],
        )

    def translate(self, signal: KeyDown | KeyUp) -> typing.Optional[logtypes.CharInput]:
        key = signal.keycode
        pressed = isinstance(signal, KeyDown)
        if key in self.momentary_state:
            self.momentary_state[key] = pressed
            return None
        if key in self.lock_state:
            if pressed:
                self.lock_state[key] = not self.lock_state[key]
            return None
        if not pressed or key not in self.keymaps:
            return None

        keymap = self.keymaps[key]
        modifiers = self.modifiers
        is_shifted = modifiers.shift_down
        is_letter = unicodedata.category(keymap[0]).startswith("L")
        if is_letter:
            is_shifted ^= modifiers.capslock_active
        level = 1 if is_shifted else 0
        return logtypes.CharInput(character=keymap[level])


class Dispatcher:
    """Classifies raw signals from an event source and feeds the resulting events into the buffer.

    This is the callback handed to the event source, so it may run on the input hook's own thread. It never touches
    the disk.
    """

    def __init__(self, translator: KeyTranslator, buffer: EventBuffer):
        self.translator = translator
        self.buffer = buffer
        self.dropped = 0

    def __call__(self, signal: hwtypes.RawSignal):
        self.dispatch(signal)

    def dispatch(self, signal: hwtypes.RawSignal):
        match signal:
            case hwtypes.KeyDown():
                character = self.translator.translate(signal)
                if character is not None:
                    self.buffer.append(character)
                self.buffer.append(logtypes.KeyPress(code=signal.name))
            case hwtypes.KeyUp():
                self.translator.translate(signal)
                self.buffer.append(logtypes.KeyRelease(code=signal.name))
            case hwtypes.ButtonDown(button=button):
                self.buffer.append(logtypes.ButtonPress(button=button))
            case hwtypes.ButtonUp(button=button):
                self.buffer.append(logtypes.ButtonRelease(button=button))
            case hwtypes.PointerMove(x=x, y=y):
                self.buffer.append(logtypes.MouseMove(x=x, y=y))
            case hwtypes.Wheel(delta_x=delta_x, delta_y=delta_y):
                self.buffer.append(logtypes.Wheel(delta_x=delta_x, delta_y=delta_y))
            case _:
                self.dropped += 1
                logger.debug("Dropping unrecognized signal %r", signal)
