#!/usr/bin/env python3
"""
Desktop Registry

Connects to the desktop backend that works on this host.
"""

from typing import Callable, Dict, List, Optional, Tuple

from .desktop import Desktop, DesktopError, DesktopUnavailableError
from .desktop_dryrun import DryRunDesktop
from .desktop_pynput import PynputDesktop

# Backends tried, in order, when no backend is named
AUTO_DESKTOPS: List[str] = ["pynput"]

DESKTOP_FACTORIES: Dict[str, Callable[[], Desktop]] = {
    "pynput": PynputDesktop,
    "dry-run": DryRunDesktop,
}


def connect_current_desktop(name: Optional[str] = None) -> Desktop:
    """Connect the named desktop, or the first available one"""
    if name is not None:
        factory = DESKTOP_FACTORIES.get(name)
        if factory is None:
            raise DesktopError("vinput", f"unknown desktop '{name}'")
        return factory()

    for candidate in AUTO_DESKTOPS:
        try:
            return DESKTOP_FACTORIES[candidate]()
        except DesktopUnavailableError:
            continue
    raise DesktopError("vinput", "cannot find available desktop")


def disconnect_desktop(desktop: Desktop) -> None:
    desktop.close()


def probe_desktops() -> List[Tuple[str, bool, str]]:
    """Try every backend and report (name, available, reason)"""
    results = []
    for name, factory in DESKTOP_FACTORIES.items():
        try:
            desktop = factory()
        except DesktopError as e:
            results.append((name, False, e.message))
            continue
        disconnect_desktop(desktop)
        results.append((name, True, ""))
    return results
