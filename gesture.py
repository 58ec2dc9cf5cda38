"""Modifier-key gesture tracking and wheel target classification.

A wheel tick counts as a zoom gesture only while the modifier key is held.
Key-up events get lost when focus moves away (for example Alt+Tab), so the
held state recorded from key events is re-checked against the modifier flag
carried by every wheel event.
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, FrozenSet, Hashable, Optional

CANVAS_BLOCKER_CLASS = "canvas-node-content-blocker"
CANVAS_NODE_CLASS = "canvas-node-content"
IMAGE_TAG = "IMG"


class GestureState(enum.Enum):
    IDLE = "idle"
    ARMED = "armed"


class TargetKind(enum.Enum):
    CANVAS_BLOCKER = "canvas_blocker"
    CANVAS_NODE = "canvas_node"
    IMAGE = "image"
    OTHER = "other"


ZOOMABLE_KINDS = frozenset(
    {TargetKind.CANVAS_BLOCKER, TargetKind.CANVAS_NODE, TargetKind.IMAGE}
)


@dataclass(frozen=True)
class TargetDescriptor:
    """Toolkit-independent description of the element under the cursor.

    ``element`` is an opaque host reference used only to find the document
    the element belongs to.
    """

    tag: str
    classes: FrozenSet[str] = frozenset()
    ancestor_classes: FrozenSet[str] = frozenset()
    src: Optional[str] = None
    width: int = 0
    element: Any = None


@dataclass(frozen=True)
class WheelInput:
    """One wheel tick.  ``delta_y < 0`` means the wheel moved up."""

    modifier_held: bool
    delta_y: float
    target: TargetDescriptor


def classify_target(target: TargetDescriptor) -> TargetKind:
    """Classify a wheel target into exactly one :class:`TargetKind`."""

    if CANVAS_BLOCKER_CLASS in target.classes:
        return TargetKind.CANVAS_BLOCKER
    # closest() matches the element itself as well as its ancestors
    if CANVAS_NODE_CLASS in target.classes or CANVAS_NODE_CLASS in target.ancestor_classes:
        return TargetKind.CANVAS_NODE
    if target.tag.upper() == IMAGE_TAG:
        return TargetKind.IMAGE
    return TargetKind.OTHER


class GestureStateMachine:
    """Per-window ``IDLE``/``ARMED`` state for the zoom modifier key.

    ``on_release`` is called with the window id whenever a window is forced
    back to ``IDLE`` (key-up, stale modifier, teardown) and is used to give
    the default scroll behaviour back.
    """

    def __init__(self, on_release: Callable[[Hashable], None]) -> None:
        self._states: Dict[Hashable, GestureState] = {}
        self._on_release = on_release

    def register(self, window: Hashable) -> None:
        self._states[window] = GestureState.IDLE

    def unregister(self, window: Hashable) -> None:
        if window in self._states:
            self._release(window)
            del self._states[window]

    def state(self, window: Hashable) -> Optional[GestureState]:
        return self._states.get(window)

    @property
    def windows(self):
        return list(self._states)

    def key_down(self, window: Hashable) -> None:
        if window not in self._states:
            logging.debug("Key down for unregistered window %r ignored", window)
            return
        if self._states[window] is GestureState.IDLE:
            logging.debug("Zoom gesture armed for %r", window)
        self._states[window] = GestureState.ARMED

    def key_up(self, window: Hashable) -> None:
        if window not in self._states:
            logging.debug("Key up for unregistered window %r ignored", window)
            return
        self._release(window)

    def check_wheel(self, window: Hashable, modifier_live: bool) -> bool:
        """Return ``True`` if this wheel tick is part of a live gesture.

        An armed window whose wheel event reports the modifier as released
        is dropped back to ``IDLE`` before the tick is handled.
        """

        if self._states.get(window) is not GestureState.ARMED:
            return False
        if not modifier_live:
            logging.debug("Stale modifier state for %r, disarming", window)
            self._release(window)
            return False
        return True

    def release_all(self) -> None:
        for window in list(self._states):
            self._release(window)

    def _release(self, window: Hashable) -> None:
        self._states[window] = GestureState.IDLE
        self._on_release(window)
