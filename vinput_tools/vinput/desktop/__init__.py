"""
vinput Desktop Targets

Key/button catalog, the abstract desktop interface and its backends.
"""

from .catalog import (
    Button,
    Key,
    button_from_name,
    button_name,
    key_from_name,
    key_name,
)
from .desktop import Desktop, DesktopError, DesktopUnavailableError
from .desktop_dryrun import DryRunDesktop
from .desktop_pynput import PynputDesktop
from .desktops import connect_current_desktop, disconnect_desktop, probe_desktops

__all__ = [
    "Key",
    "Button",
    "key_from_name",
    "key_name",
    "button_from_name",
    "button_name",
    "Desktop",
    "DesktopError",
    "DesktopUnavailableError",
    "DryRunDesktop",
    "PynputDesktop",
    "connect_current_desktop",
    "disconnect_desktop",
    "probe_desktops",
]
