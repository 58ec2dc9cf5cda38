"""Resize embedded PNG images with modifier + mouse wheel.

:class:`ImageZoomController` ties the pieces together: the gesture state
decides whether a wheel tick is a zoom, the scroll interceptor keeps the
view from scrolling while the user zooms, and a confirmed image target is
resized by rewriting its embed in the document text.

The controller knows nothing about the GUI toolkit.  The host feeds it key
and wheel events, a :class:`scroll_interceptor.ScrollHost` per window, a
document store with ``read``/``modify`` and a ``locate_document`` callable
mapping a target element to the path of the document that shows it.
"""

from __future__ import annotations

import logging
import threading
from collections import defaultdict
from typing import Any, Callable, Dict, Hashable, Optional

from embed_rewriter import embed_text, rewrite_embed
from errors import DecodeError, TargetNotFoundError, RewriteMismatchError
from gesture import (
    GestureStateMachine,
    TargetDescriptor,
    TargetKind,
    WheelInput,
    ZOOMABLE_KINDS,
    classify_target,
)
from png_width import decode_png_width
from scroll_interceptor import ScrollHost, ScrollInterceptor
from zoom import compute_new_width

PNG_DATA_URI = "data:image/png"
DEFAULT_MODIFIER = "Alt"


class ImageZoomController:
    """Handle zoom gestures for every registered window."""

    def __init__(
        self,
        documents: Any,
        locate_document: Callable[[Any], str],
        modifier_key: str = DEFAULT_MODIFIER,
    ) -> None:
        self.documents = documents
        self.locate_document = locate_document
        self.modifier_key = modifier_key
        self.scroll = ScrollInterceptor()
        self.gestures = GestureStateMachine(on_release=self.scroll.enable)
        self._locks: Dict[str, threading.Lock] = defaultdict(threading.Lock)
        self._locks_guard = threading.Lock()
        self.loaded = False

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------
    def load(self) -> None:
        self.loaded = True
        logging.info("Loaded: image mouse wheel zoom (modifier %s)", self.modifier_key)

    def unload(self) -> None:
        """Drop every gesture and give scrolling back to all windows."""

        self.gestures.release_all()
        self.loaded = False
        logging.info("Unloaded: image mouse wheel zoom")

    def register_window(self, window: Hashable, host: ScrollHost) -> None:
        self.scroll.attach(window, host)
        self.gestures.register(window)

    def unregister_window(self, window: Hashable) -> None:
        self.gestures.unregister(window)
        self.scroll.detach(window)

    # ------------------------------------------------------------------
    # Events
    # ------------------------------------------------------------------
    def on_key_down(self, window: Hashable, key: str) -> None:
        if not self.loaded:
            return
        if key == self.modifier_key:
            self.gestures.key_down(window)

    def on_key_up(self, window: Hashable, key: str) -> None:
        if key == self.modifier_key:
            self.gestures.key_up(window)

    def on_wheel(self, window: Hashable, wheel: WheelInput) -> bool:
        """Process one wheel tick; return ``True`` if an image was resized."""

        if not self.loaded:
            return False
        if not self.gestures.check_wheel(window, wheel.modifier_held):
            return False

        kind = classify_target(wheel.target)
        if kind in ZOOMABLE_KINDS:
            self.scroll.disable(window)
        if kind is not TargetKind.IMAGE:
            # canvas nodes block scrolling but are not resized
            return False
        return self.zoom_image(wheel.target, wheel.delta_y) is not None

    # ------------------------------------------------------------------
    # Zooming
    # ------------------------------------------------------------------
    def zoom_image(self, target: TargetDescriptor, delta_y: float) -> Optional[int]:
        """Resize the image ``target`` by one step and persist the new embed.

        Returns the new width, or ``None`` when nothing was written.
        """

        uri = target.src
        if not uri or PNG_DATA_URI not in uri:
            return None

        path = None
        try:
            path = self.locate_document(target.element)
            with self._document_lock(path):
                text = self.documents.read(path)
                native_width = decode_png_width(uri)
                if native_width <= 0:
                    raise DecodeError(f"Invalid PNG width {native_width}")
                has_annotation = embed_text(uri) not in text
                new_width = compute_new_width(
                    native_width, target.width, has_annotation, delta_y
                )
                old_width = target.width if has_annotation else None
                new_text = rewrite_embed(text, uri, old_width, new_width)
                self.documents.modify(path, new_text)
        except (DecodeError, TargetNotFoundError, RewriteMismatchError) as e:
            logging.debug("Zoom skipped: %s", e)
            return None
        except (OSError, UnicodeDecodeError) as e:
            logging.error("Failed to update document %s: %s", path, e)
            return None
        except ValueError as e:
            logging.warning("Zoom skipped for image of width %s: %s", target.width, e)
            return None

        logging.debug("Resized image in %s to %d px", path, new_width)
        return new_width

    def _document_lock(self, path: str) -> threading.Lock:
        with self._locks_guard:
            return self._locks[path]
