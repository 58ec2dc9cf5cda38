"""Markdown image embeds: parsing for display and exact-match rewriting."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterator, Optional

from errors import RewriteMismatchError

EMBED_PATTERN = re.compile(r"!\[(?:\|(?P<width>\d+))?\]\((?P<uri>[^)\s]+)\)")


@dataclass(frozen=True)
class ImageEmbed:
    """An image embed found in document text."""

    uri: str
    width: Optional[int]
    start: int
    end: int


def embed_text(uri: str, width: Optional[int] = None) -> str:
    """Build ``![](uri)`` or ``![|width](uri)``."""

    if width is None:
        return f"![]({uri})"
    return f"![|{width}]({uri})"


def find_embeds(text: str) -> Iterator[ImageEmbed]:
    """Yield every bare or width-annotated image embed in ``text``."""

    for match in EMBED_PATTERN.finditer(text):
        width = match.group("width")
        yield ImageEmbed(
            uri=match.group("uri"),
            width=int(width) if width is not None else None,
            start=match.start(),
            end=match.end(),
        )


def rewrite_embed(
    text: str, uri: str, old_width: Optional[int], new_width: int
) -> str:
    """Replace the exact prior embed of ``uri`` with one annotated ``new_width``.

    The prior form is ``![](uri)`` when ``old_width`` is ``None`` and
    ``![|old_width](uri)`` otherwise.  Only verbatim occurrences are replaced;
    all of them are, so identical embeds of one image stay identical.

    Raises:
        RewriteMismatchError: If the prior form does not occur in ``text``.
    """

    old = embed_text(uri, old_width)
    if old not in text:
        raise RewriteMismatchError(
            f"Embed {old[:40]!r}... not found in document"
        )
    return text.replace(old, embed_text(uri, new_width))
