"""Suppress the default wheel scroll of a window while a zoom is in progress."""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, Hashable, Protocol, Set


class ScrollHost(Protocol):
    """Window-side hooks for installing a capturing wheel handler."""

    def add_wheel_filter(self, handler: Callable[[Any], bool]) -> None: ...

    def remove_wheel_filter(self, handler: Callable[[Any], bool]) -> None: ...


def prevent_default_scroll(event: Any) -> bool:
    """Wheel handler that consumes the event so the view does not scroll."""

    return True


class ScrollInterceptor:
    """Toggle wheel scrolling per window.

    ``disable`` and ``enable`` are idempotent: the handler is installed at
    most once per window and only removed if it was installed.
    """

    def __init__(self) -> None:
        self._hosts: Dict[Hashable, ScrollHost] = {}
        self._disabled: Set[Hashable] = set()

    def attach(self, window: Hashable, host: ScrollHost) -> None:
        self._hosts[window] = host

    def detach(self, window: Hashable) -> None:
        self.enable(window)
        self._hosts.pop(window, None)

    def is_disabled(self, window: Hashable) -> bool:
        return window in self._disabled

    def disable(self, window: Hashable) -> None:
        if window in self._disabled:
            return
        host = self._hosts.get(window)
        if host is None:
            logging.debug("No scroll host attached for %r", window)
            return
        host.add_wheel_filter(prevent_default_scroll)
        self._disabled.add(window)

    def enable(self, window: Hashable) -> None:
        if window not in self._disabled:
            return
        self._hosts[window].remove_wheel_filter(prevent_default_scroll)
        self._disabled.discard(window)
