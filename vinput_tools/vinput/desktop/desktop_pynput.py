#!/usr/bin/env python3
"""
pynput Desktop

Injects events through pynput, which talks to the display server (X11) or
the platform input APIs (Windows, macOS).
"""

from typing import Any, Dict, Tuple

from .catalog import Button, Key, Symbol, key_char, key_name
from .desktop import POINTER_MAX, Desktop, DesktopError, DesktopUnavailableError

# pynput.keyboard.Key attribute for each control key
PYNPUT_KEY_NAMES: Dict[Key, str] = {
    Key.BACKSPACE: "backspace",
    Key.TAB: "tab",
    Key.RETURN: "enter",
    Key.ESCAPE: "esc",
    Key.DELETE: "delete",
    Key.SPACE: "space",
    Key.CONTROL_L: "ctrl_l",
    Key.SHIFT_L: "shift_l",
    Key.ALT_L: "alt_l",
    Key.META_L: "cmd_l",
    Key.SUPER_L: "cmd_l",
    Key.CONTROL_R: "ctrl_r",
    Key.SHIFT_R: "shift_r",
    Key.ALT_R: "alt_r",
    Key.META_R: "cmd_r",
    Key.SUPER_R: "cmd_r",
}

# pynput.mouse.Button attribute for each clickable button
PYNPUT_BUTTON_NAMES: Dict[Button, str] = {
    Button.LEFT: "left",
    Button.MIDDLE: "middle",
    Button.RIGHT: "right",
}

# Vertical wheel steps for the scroll buttons
SCROLL_STEPS: Dict[Button, int] = {
    Button.SCROLL_UP: 1,
    Button.SCROLL_DOWN: -1,
}


class PynputDesktop(Desktop):
    """Desktop backed by pynput keyboard and mouse controllers"""

    name = "pynput"

    def __init__(self) -> None:
        try:
            from pynput import keyboard, mouse
        except Exception as e:
            # pynput fails at import time when no display server is reachable
            raise DesktopUnavailableError(self.name, str(e))

        try:
            self.keyboard = keyboard.Controller()
            self.mouse = mouse.Controller()
        except Exception as e:
            raise DesktopUnavailableError(self.name, str(e))

        self._keys = self._build_key_map(keyboard.Key)
        self._buttons = {
            button: getattr(mouse.Button, attr)
            for button, attr in PYNPUT_BUTTON_NAMES.items()
        }

    @staticmethod
    def _build_key_map(pynput_keys: Any) -> Dict[Key, Any]:
        key_map: Dict[Key, Any] = {}
        for key in Key:
            attr = PYNPUT_KEY_NAMES.get(key)
            if attr is not None:
                key_map[key] = getattr(pynput_keys, attr)
            else:
                key_map[key] = key_char(key)
        return key_map

    def ready(self) -> bool:
        return True

    def press(self, symbol: Symbol) -> None:
        self._send(symbol, pressed=True)

    def release(self, symbol: Symbol) -> None:
        self._send(symbol, pressed=False)

    def move_to(self, x: int, y: int) -> None:
        x = min(max(x, 0), POINTER_MAX)
        y = min(max(y, 0), POINTER_MAX)
        try:
            self.mouse.position = (x, y)
        except Exception as e:
            raise DesktopError(self.name, f"cannot move pointer: {e}")

    def current_pointer(self) -> Tuple[int, int]:
        try:
            x, y = self.mouse.position
        except Exception as e:
            raise DesktopError(self.name, f"cannot read pointer: {e}")
        return (
            min(max(int(x), 0), POINTER_MAX),
            min(max(int(y), 0), POINTER_MAX),
        )

    def flush(self) -> None:
        # pynput delivers every event synchronously
        pass

    def _send(self, symbol: Symbol, pressed: bool) -> None:
        try:
            if isinstance(symbol, Key):
                target = self._keys[symbol]
                if target is None:
                    raise DesktopError(
                        self.name, f"key <{key_name(symbol)}> not available"
                    )
                if pressed:
                    self.keyboard.press(target)
                else:
                    self.keyboard.release(target)
            elif symbol in SCROLL_STEPS:
                if pressed:
                    self.mouse.scroll(0, SCROLL_STEPS[symbol])
            elif pressed:
                self.mouse.press(self._buttons[symbol])
            else:
                self.mouse.release(self._buttons[symbol])
        except DesktopError:
            raise
        except Exception as e:
            raise DesktopError(self.name, f"cannot send event: {e}")
