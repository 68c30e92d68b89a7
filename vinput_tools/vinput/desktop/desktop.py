#!/usr/bin/env python3
"""
Desktop Target Interface

Abstract interface of the OS desktop input operations the script player
drives. Backends inject the events; the player only relies on this contract.
"""

from abc import ABC, abstractmethod
from typing import Any, Tuple

from .catalog import Symbol

# Pointer coordinates are unsigned 16-bit values
POINTER_MAX = 0xFFFF


class DesktopError(Exception):
    """Exception raised when a desktop backend fails"""

    def __init__(self, desktop_name: str, message: str):
        super().__init__(f"{desktop_name}: {message}")
        self.desktop_name = desktop_name
        self.message = message


class DesktopUnavailableError(DesktopError):
    """Exception raised when a desktop backend cannot be used on this host"""

    def __init__(self, desktop_name: str, reason: str = ""):
        message = "not available"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(desktop_name, message)


class Desktop(ABC):
    """Destination of synthetic input events"""

    name = "desktop"

    @abstractmethod
    def ready(self) -> bool:
        """Check whether the desktop is connected and ready for events"""

    @abstractmethod
    def press(self, symbol: Symbol) -> None:
        """Send a press event for a key or a button"""

    @abstractmethod
    def release(self, symbol: Symbol) -> None:
        """Send a release event for a key or a button"""

    @abstractmethod
    def move_to(self, x: int, y: int) -> None:
        """Place the pointer at an absolute position"""

    @abstractmethod
    def current_pointer(self) -> Tuple[int, int]:
        """Return the current pointer position"""

    @abstractmethod
    def flush(self) -> None:
        """Deliver any buffered events immediately"""

    def close(self) -> None:
        """Release backend resources"""

    def __bool__(self) -> bool:
        return self.ready()

    def __enter__(self) -> "Desktop":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()
