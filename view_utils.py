"""Qt helpers bridging widgets and the toolkit-independent zoom logic.

This module provides :class:`EmbedImageLabel`, the widget that displays an
embedded PNG at its annotated width, :class:`WheelBlocker`, the event filter
that swallows wheel events while scrolling is intercepted, and functions
that translate Qt widgets and events into the plain descriptors consumed by
:mod:`gesture`.
"""

from __future__ import annotations

import base64
import binascii
import io
from typing import Callable, Optional

from PIL import Image, UnidentifiedImageError
from PyQt6.QtCore import QEvent, QObject, Qt
from PyQt6.QtGui import QImage, QPixmap
from PyQt6.QtWidgets import QLabel, QWidget

from embed_rewriter import ImageEmbed
from gesture import IMAGE_TAG, TargetDescriptor, WheelInput

MODIFIER_FLAGS = {
    "Alt": Qt.KeyboardModifier.AltModifier,
    "Control": Qt.KeyboardModifier.ControlModifier,
    "Shift": Qt.KeyboardModifier.ShiftModifier,
    "Meta": Qt.KeyboardModifier.MetaModifier,
}

MODIFIER_KEYS = {
    Qt.Key.Key_Alt.value: "Alt",
    Qt.Key.Key_Control.value: "Control",
    Qt.Key.Key_Shift.value: "Shift",
    Qt.Key.Key_Meta.value: "Meta",
}


def pil_to_pixmap(img: Image.Image) -> QPixmap:
    """Convert a PIL image to ``QPixmap``."""

    img = img.convert("RGBA")
    data = img.tobytes("raw", "RGBA")
    qimg = QImage(data, img.width, img.height, img.width * 4, QImage.Format.Format_RGBA8888)
    # copy() detaches the image from ``data`` before it is freed
    return QPixmap.fromImage(qimg.copy())


def pixmap_from_data_uri(uri: str) -> Optional[QPixmap]:
    """Decode a ``data:image/...;base64,`` URI, or return ``None``."""

    _, sep, payload = uri.partition("base64,")
    if not sep:
        return None
    try:
        img = Image.open(io.BytesIO(base64.b64decode(payload)))
        img.load()
    except (binascii.Error, ValueError, OSError, UnidentifiedImageError):
        return None
    return pil_to_pixmap(img)


class EmbedImageLabel(QLabel):
    """Label showing one embedded image at its annotated width."""

    def __init__(self, embed: ImageEmbed, parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)
        self.src = embed.uri
        self.setProperty("tagName", IMAGE_TAG)
        self.rendered_width = 0

        pixmap = pixmap_from_data_uri(embed.uri)
        if pixmap is None:
            self.setText("[image]")
            return
        if embed.width:
            pixmap = pixmap.scaledToWidth(
                embed.width, Qt.TransformationMode.SmoothTransformation
            )
        self.setPixmap(pixmap)
        self.setFixedSize(pixmap.size())
        self.rendered_width = pixmap.width()


class WheelBlocker(QObject):
    """Event filter passing wheel events to ``handler``; ``True`` consumes them."""

    def __init__(self, handler: Callable, parent: Optional[QObject] = None) -> None:
        super().__init__(parent)
        self.handler = handler

    def eventFilter(self, obj, event) -> bool:  # type: ignore[override]
        if event.type() == QEvent.Type.Wheel:
            return bool(self.handler(event))
        return False


def _widget_classes(widget: QWidget) -> set:
    value = widget.property("classes")
    return set(str(value).split()) if value else set()


def describe_widget(widget: QWidget) -> TargetDescriptor:
    """Build a :class:`gesture.TargetDescriptor` for ``widget``."""

    ancestor_classes: set = set()
    parent = widget.parentWidget()
    while parent is not None:
        ancestor_classes |= _widget_classes(parent)
        parent = parent.parentWidget()

    tag = widget.property("tagName") or type(widget).__name__
    return TargetDescriptor(
        tag=str(tag),
        classes=frozenset(_widget_classes(widget)),
        ancestor_classes=frozenset(ancestor_classes),
        src=getattr(widget, "src", None),
        width=getattr(widget, "rendered_width", widget.width()),
        element=widget,
    )


def key_name(key: int) -> Optional[str]:
    """Name of the modifier ``key`` as used by the controller."""

    return MODIFIER_KEYS.get(key)


def wheel_input(event, widget: QWidget, modifier_key: str) -> Optional[WheelInput]:
    """Translate a ``QWheelEvent`` into a :class:`gesture.WheelInput`.

    Some platforms turn Alt+wheel into horizontal scrolling, so the x delta
    is used when there is no vertical one.  Returns ``None`` for ticks
    without any rotation.
    """

    angle = event.angleDelta()
    step = angle.y() or angle.x()
    if step == 0:
        return None
    flag = MODIFIER_FLAGS.get(modifier_key)
    held = flag is not None and bool(event.modifiers() & flag)
    # Qt reports away-from-user as positive, the controller wants it negative
    return WheelInput(modifier_held=held, delta_y=-step, target=describe_widget(widget))
