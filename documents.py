"""Plain-text storage for the markdown documents being edited."""

from __future__ import annotations

from typing import Callable, List

DocumentListener = Callable[[str, str], None]


class TextDocumentStore:
    """Read and write UTF-8 documents by path and announce modifications."""

    def __init__(self) -> None:
        self._listeners: List[DocumentListener] = []

    def add_listener(self, callback: DocumentListener) -> None:
        """Call ``callback(path, text)`` after every successful :meth:`modify`."""

        self._listeners.append(callback)

    def remove_listener(self, callback: DocumentListener) -> None:
        if callback in self._listeners:
            self._listeners.remove(callback)

    def read(self, path: str) -> str:
        with open(path, encoding="utf-8", newline="") as f:
            return f.read()

    def modify(self, path: str, text: str) -> None:
        with open(path, "w", encoding="utf-8", newline="") as f:
            f.write(text)
        for callback in list(self._listeners):
            callback(path, text)
