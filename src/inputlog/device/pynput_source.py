from __future__ import annotations

import logging
import typing

import trio

from ..settings import KEYMAPS
from .eventsource import PLATFORM_CODE_BASE, KeyCode
from .hwtypes import ButtonDown, ButtonUp, KeyDown, KeyUp, PointerMove, Wheel

if typing.TYPE_CHECKING:
    from .types import SignalCallback

logger = logging.getLogger(__name__)

# pynput's names for keys that don't produce a character
NAMED_KEYS = {
    "alt": KeyCode.KEY_LEFTALT,
    "alt_l": KeyCode.KEY_LEFTALT,
    "alt_r": KeyCode.KEY_RIGHTALT,
    "alt_gr": KeyCode.KEY_RIGHTALT,
    "backspace": KeyCode.KEY_BACKSPACE,
    "caps_lock": KeyCode.KEY_CAPSLOCK,
    "cmd": KeyCode.KEY_LEFTMETA,
    "cmd_l": KeyCode.KEY_LEFTMETA,
    "cmd_r": KeyCode.KEY_RIGHTMETA,
    "ctrl": KeyCode.KEY_LEFTCTRL,
    "ctrl_l": KeyCode.KEY_LEFTCTRL,
    "ctrl_r": KeyCode.KEY_RIGHTCTRL,
    "delete": KeyCode.KEY_DELETE,
    "down": KeyCode.KEY_DOWN,
    "end": KeyCode.KEY_END,
    "enter": KeyCode.KEY_ENTER,
    "esc": KeyCode.KEY_ESC,
    "home": KeyCode.KEY_HOME,
    "insert": KeyCode.KEY_INSERT,
    "left": KeyCode.KEY_LEFT,
    "media_next": KeyCode.KEY_NEXTSONG,
    "media_play_pause": KeyCode.KEY_PLAYPAUSE,
    "media_previous": KeyCode.KEY_PREVIOUSSONG,
    "media_volume_down": KeyCode.KEY_VOLUMEDOWN,
    "media_volume_mute": KeyCode.KEY_MUTE,
    "media_volume_up": KeyCode.KEY_VOLUMEUP,
    "menu": KeyCode.KEY_COMPOSE,
    "num_lock": KeyCode.KEY_NUMLOCK,
    "page_down": KeyCode.KEY_PAGEDOWN,
    "page_up": KeyCode.KEY_PAGEUP,
    "pause": KeyCode.KEY_PAUSE,
    "print_screen": KeyCode.KEY_SYSRQ,
    "right": KeyCode.KEY_RIGHT,
    "scroll_lock": KeyCode.KEY_SCROLLLOCK,
    "shift": KeyCode.KEY_LEFTSHIFT,
    "shift_l": KeyCode.KEY_LEFTSHIFT,
    "shift_r": KeyCode.KEY_RIGHTSHIFT,
    "space": KeyCode.KEY_SPACE,
    "tab": KeyCode.KEY_TAB,
    "up": KeyCode.KEY_UP,
}
NAMED_KEYS.update({f"f{n}": KeyCode[f"KEY_F{n}"] for n in range(1, 21)})


def _glyph_keys():
    glyphs = {}
    for keyname, levels in KEYMAPS.items():
        for glyph in levels:
            glyphs.setdefault(glyph, KeyCode[keyname])
    return glyphs


# pynput reports the character a key produced, already shifted; map it back to the physical key
GLYPH_KEYS = _glyph_keys()


def keycode_for(key) -> int:
    name = getattr(key, "name", None)
    if name is not None and name in NAMED_KEYS:
        return NAMED_KEYS[name]
    char = getattr(key, "char", None)
    if char is not None and len(char) == 1:
        if char in GLYPH_KEYS:
            return GLYPH_KEYS[char]
        if 0 < ord(char) < 27:
            # ctrl+letter arrives as a control character on some platforms
            return GLYPH_KEYS[chr(ord(char) + 96)]
    vk = getattr(key, "vk", None)
    if vk is None and name is not None:
        vk = getattr(getattr(key, "value", None), "vk", None)
    return PLATFORM_CODE_BASE + (vk or 0)


class PynputSource:
    """Global keyboard and mouse hook, via pynput's listener threads.

    Signals are delivered straight from pynput's threads.
    """

    def __init__(self, poll_interval: float = 1.0):
        self.poll_interval = poll_interval

    async def run(self, deliver: SignalCallback, *, task_status=trio.TASK_STATUS_IGNORED):
        # pynput needs a running display server (or OS hook) the moment it's imported, so don't import it until now
        from pynput import keyboard, mouse

        def on_press(key):
            deliver(KeyDown(key=keycode_for(key)))

        def on_release(key):
            deliver(KeyUp(key=keycode_for(key)))

        def on_move(x, y):
            deliver(PointerMove(x=float(x), y=float(y)))

        def on_click(x, y, button, pressed):
            deliver((ButtonDown if pressed else ButtonUp)(button=button.name))

        def on_scroll(x, y, dx, dy):
            deliver(Wheel(delta_x=int(dx), delta_y=int(dy)))

        keyboard_listener = keyboard.Listener(on_press=on_press, on_release=on_release)
        mouse_listener = mouse.Listener(on_move=on_move, on_click=on_click, on_scroll=on_scroll)
        keyboard_listener.start()
        mouse_listener.start()
        try:
            task_status.started()
            while keyboard_listener.is_alive() and mouse_listener.is_alive():
                await trio.sleep(self.poll_interval)
            logger.error("An input listener stopped unexpectedly; no further input will be captured")
        finally:
            keyboard_listener.stop()
            mouse_listener.stop()
