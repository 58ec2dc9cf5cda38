"""Document window showing a markdown file with zoomable embedded images."""

from __future__ import annotations

import logging
import os
from typing import Any, Callable, Iterable, List

from PyQt6.QtCore import QEvent, Qt
from PyQt6.QtWidgets import (
    QApplication,
    QLabel,
    QMainWindow,
    QScrollArea,
    QVBoxLayout,
    QWidget,
)

from documents import TextDocumentStore
from embed_rewriter import find_embeds
from errors import TargetNotFoundError
from image_zoom import DEFAULT_MODIFIER, ImageZoomController
from view_utils import EmbedImageLabel, WheelBlocker, key_name, wheel_input


class DocumentWindow(QMainWindow):
    """Main window rendering one markdown document.

    The window forwards modifier key and wheel events to the shared
    :class:`image_zoom.ImageZoomController` and serves as the scroll host
    for its own scroll area.
    """

    def __init__(
        self,
        path: str,
        controller: ImageZoomController,
        documents: TextDocumentStore,
    ) -> None:
        super().__init__()
        self.path = path
        self.controller = controller
        self.documents = documents
        self.setWindowTitle(os.path.basename(path))

        # Ensure the window can receive key events for the modifier.
        self.setFocusPolicy(Qt.FocusPolicy.StrongFocus)

        self.content = QWidget()
        self.content_layout = QVBoxLayout(self.content)
        self.scroll_area = QScrollArea()
        self.scroll_area.setWidgetResizable(True)
        self.scroll_area.setWidget(self.content)
        self.setCentralWidget(self.scroll_area)

        self.viewport = self.scroll_area.viewport()
        self.viewport.installEventFilter(self)
        self._wheel_blocker = None
        self.image_labels: List[EmbedImageLabel] = []

        documents.add_listener(self.on_document_modified)
        controller.register_window(self, self)
        self.load_document()

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------
    def load_document(self) -> None:
        """Read the document from the store and render it."""

        try:
            text = self.documents.read(self.path)
        except (OSError, UnicodeDecodeError) as e:
            logging.error("Failed to read document %s: %s", self.path, e)
            text = ""
        self.render_text(text)

    def render_text(self, text: str) -> None:
        """Lay out text blocks and images for ``text``."""

        while self.content_layout.count():
            item = self.content_layout.takeAt(0)
            if item.widget() is not None:
                item.widget().deleteLater()
        self.image_labels = []

        pos = 0
        for embed in find_embeds(text):
            self._add_text(text[pos:embed.start])
            label = EmbedImageLabel(embed, self.content)
            self._add_widget(label)
            self.image_labels.append(label)
            pos = embed.end
        self._add_text(text[pos:])
        self.content_layout.addStretch()

    def _add_text(self, text: str) -> None:
        text = text.strip()
        if not text:
            return
        label = QLabel(text, self.content)
        label.setWordWrap(True)
        label.setTextInteractionFlags(Qt.TextInteractionFlag.TextSelectableByMouse)
        self._add_widget(label)

    def _add_widget(self, widget: QWidget) -> None:
        widget.installEventFilter(self)
        self.content_layout.addWidget(widget)

    def on_document_modified(self, path: str, text: str) -> None:
        if os.path.abspath(path) == os.path.abspath(self.path):
            self.render_text(text)

    # ------------------------------------------------------------------
    # Scroll host
    # ------------------------------------------------------------------
    def add_wheel_filter(self, handler: Callable[[Any], bool]) -> None:
        if self._wheel_blocker is None:
            self._wheel_blocker = WheelBlocker(handler, self)
        self.viewport.installEventFilter(self._wheel_blocker)
        # Re-installing moves our own filter in front of the blocker so the
        # modifier check still sees every tick.
        self.viewport.installEventFilter(self)

    def remove_wheel_filter(self, handler: Callable[[Any], bool]) -> None:
        if self._wheel_blocker is not None:
            self.viewport.removeEventFilter(self._wheel_blocker)
            self._wheel_blocker.deleteLater()
            self._wheel_blocker = None

    # ------------------------------------------------------------------
    # Events
    # ------------------------------------------------------------------
    def eventFilter(self, obj, event) -> bool:  # type: ignore[override]
        if event.type() == QEvent.Type.Wheel and isinstance(obj, QWidget):
            wheel = wheel_input(event, obj, self.controller.modifier_key)
            if wheel is not None and self.controller.on_wheel(self, wheel):
                event.accept()
                return True
            return False
        return super().eventFilter(obj, event)

    def keyPressEvent(self, event) -> None:  # type: ignore[override]
        name = key_name(event.key())
        if name is not None:
            self.controller.on_key_down(self, name)
        super().keyPressEvent(event)

    def keyReleaseEvent(self, event) -> None:  # type: ignore[override]
        name = key_name(event.key())
        if name is not None:
            self.controller.on_key_up(self, name)
        super().keyReleaseEvent(event)

    def closeEvent(self, event) -> None:  # type: ignore[override]
        self.documents.remove_listener(self.on_document_modified)
        self.controller.unregister_window(self)
        super().closeEvent(event)


def find_document_for(windows: Iterable[DocumentWindow], element) -> str:
    """Return the path of the open document whose window contains ``element``."""

    for window in windows:
        if isinstance(element, QWidget) and window.isAncestorOf(element):
            return window.path
    raise TargetNotFoundError("No open document contains the image")


def run_interface(paths: List[str], modifier_key: str = DEFAULT_MODIFIER) -> None:
    """Launch one PyQt6 window per markdown document."""

    app = QApplication.instance() or QApplication([])
    documents = TextDocumentStore()
    windows: List[DocumentWindow] = []
    controller = ImageZoomController(
        documents,
        lambda element: find_document_for(windows, element),
        modifier_key,
    )
    controller.load()
    for path in paths:
        window = DocumentWindow(path, controller, documents)
        window.show()
        windows.append(window)
    app.aboutToQuit.connect(controller.unload)
    app.exec()
