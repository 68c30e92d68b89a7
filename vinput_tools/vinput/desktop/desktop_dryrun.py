#!/usr/bin/env python3
"""
Dry-run Desktop

Prints the events it receives instead of injecting them. Useful for checking
what a script would do without touching the real keyboard and mouse.
"""

import sys
from typing import Optional, TextIO, Tuple

from .catalog import Key, Symbol, symbol_name
from .desktop import Desktop


class DryRunDesktop(Desktop):
    """Desktop that writes one line per event to a text stream"""

    name = "dry-run"

    def __init__(self, out: Optional[TextIO] = None):
        self.out = out if out is not None else sys.stdout
        self.pointer_position: Tuple[int, int] = (0, 0)

    def ready(self) -> bool:
        return True

    def press(self, symbol: Symbol) -> None:
        self._write_press_action("press", symbol)

    def release(self, symbol: Symbol) -> None:
        self._write_press_action("release", symbol)

    def move_to(self, x: int, y: int) -> None:
        self.pointer_position = (x, y)
        self.out.write(f"* move pointer to ({x},{y})\n")

    def current_pointer(self) -> Tuple[int, int]:
        return self.pointer_position

    def flush(self) -> None:
        self.out.flush()

    def _write_press_action(self, action: str, symbol: Symbol) -> None:
        kind = "key" if isinstance(symbol, Key) else "button"
        self.out.write(f"* {action:<8} {kind:>6} <{symbol_name(symbol)}>\n")
