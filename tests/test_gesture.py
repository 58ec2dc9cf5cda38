import os
import sys

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")
sys.path.append(os.getcwd())

import pytest

from gesture import (
    CANVAS_BLOCKER_CLASS,
    CANVAS_NODE_CLASS,
    GestureState,
    GestureStateMachine,
    TargetDescriptor,
    TargetKind,
    classify_target,
)
from scroll_interceptor import ScrollInterceptor


class FakeHost:
    """Records wheel handler installation like a window would."""

    def __init__(self):
        self.handlers = []
        self.added = 0
        self.removed = 0

    def add_wheel_filter(self, handler):
        self.added += 1
        self.handlers.append(handler)

    def remove_wheel_filter(self, handler):
        self.removed += 1
        self.handlers.remove(handler)


@pytest.mark.parametrize(
    "target,kind",
    [
        (TargetDescriptor("DIV", classes=frozenset({CANVAS_BLOCKER_CLASS})), TargetKind.CANVAS_BLOCKER),
        (TargetDescriptor("IMG", ancestor_classes=frozenset({"x", CANVAS_NODE_CLASS})), TargetKind.CANVAS_NODE),
        (TargetDescriptor("DIV", classes=frozenset({CANVAS_NODE_CLASS})), TargetKind.CANVAS_NODE),
        (TargetDescriptor("img"), TargetKind.IMAGE),
        (TargetDescriptor("IMG", classes=frozenset({"inline"})), TargetKind.IMAGE),
        (TargetDescriptor("P"), TargetKind.OTHER),
        (TargetDescriptor("DIV", ancestor_classes=frozenset({CANVAS_BLOCKER_CLASS})), TargetKind.OTHER),
    ],
)
def test_classify_target(target, kind):
    assert classify_target(target) is kind


def test_blocker_class_wins_over_image_tag():
    target = TargetDescriptor("IMG", classes=frozenset({CANVAS_BLOCKER_CLASS}))
    assert classify_target(target) is TargetKind.CANVAS_BLOCKER


def _machine():
    released = []
    machine = GestureStateMachine(on_release=released.append)
    machine.register("win")
    return machine, released


def test_key_down_and_up():
    machine, released = _machine()
    assert machine.state("win") is GestureState.IDLE
    machine.key_down("win")
    assert machine.state("win") is GestureState.ARMED
    assert machine.check_wheel("win", True) is True
    machine.key_up("win")
    assert machine.state("win") is GestureState.IDLE
    assert released == ["win"]


def test_stale_modifier_disarms_before_wheel():
    machine, released = _machine()
    machine.key_down("win")
    assert machine.check_wheel("win", False) is False
    assert machine.state("win") is GestureState.IDLE
    assert released == ["win"]
    # the modifier flag alone does not re-arm
    assert machine.check_wheel("win", True) is False


def test_idle_wheel_is_not_a_gesture():
    machine, released = _machine()
    assert machine.check_wheel("win", True) is False
    assert released == []


def test_windows_are_independent():
    machine, _ = _machine()
    machine.register("other")
    machine.key_down("win")
    assert machine.state("other") is GestureState.IDLE
    assert machine.check_wheel("other", True) is False
    assert machine.check_wheel("win", True) is True


def test_unregistered_window_is_ignored():
    machine, released = _machine()
    machine.key_down("ghost")
    machine.key_up("ghost")
    assert machine.state("ghost") is None
    assert machine.check_wheel("ghost", True) is False
    assert released == []


def test_release_all_and_unregister():
    machine, released = _machine()
    machine.register("other")
    machine.key_down("win")
    machine.key_down("other")
    machine.release_all()
    assert machine.state("win") is GestureState.IDLE
    assert machine.state("other") is GestureState.IDLE
    assert sorted(released) == ["other", "win"]

    machine.unregister("win")
    assert machine.state("win") is None
    assert machine.windows == ["other"]


def test_scroll_interceptor_is_idempotent():
    host = FakeHost()
    scroll = ScrollInterceptor()
    scroll.attach("win", host)

    scroll.enable("win")
    assert host.removed == 0

    scroll.disable("win")
    scroll.disable("win")
    assert host.added == 1
    assert scroll.is_disabled("win")
    assert host.handlers[0](object()) is True

    scroll.enable("win")
    scroll.enable("win")
    assert host.removed == 1
    assert host.handlers == []
    assert not scroll.is_disabled("win")


def test_scroll_interceptor_detach_restores_scroll():
    host = FakeHost()
    scroll = ScrollInterceptor()
    scroll.attach("win", host)
    scroll.disable("win")
    scroll.detach("win")
    assert host.handlers == []
    # no host left, nothing to install
    scroll.disable("win")
    assert host.added == 1
    assert not scroll.is_disabled("win")


def test_scroll_host_handler_signature():
    import typing

    from scroll_interceptor import ScrollHost

    for name in ("add_wheel_filter", "remove_wheel_filter"):
        hints = typing.get_type_hints(getattr(ScrollHost, name))
        assert hints["handler"] == typing.Callable[[typing.Any], bool]
