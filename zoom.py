"""Discrete zoom ladder for embedded images.

Widths always sit on ``floor(ZOOM_RATIO ** power * native_width)`` for an
integer ``power``, so zooming in and back out returns to the same width
(give or take the floor rounding).
"""

from __future__ import annotations

import math

ZOOM_RATIO = 1.05
MIN_SHRINK_WIDTH = 25


def implied_power(current_width: int, native_width: int) -> int:
    """Nearest ladder step for ``current_width`` relative to ``native_width``."""

    return math.floor(
        math.log(current_width / native_width) / math.log(ZOOM_RATIO) + 0.5
    )


def compute_new_width(
    native_width: int,
    current_width: int,
    has_existing_annotation: bool,
    delta_y: float,
) -> int:
    """Return the width after one wheel tick.

    Args:
        native_width: Pixel width stored in the image header.
        current_width: Width the image is currently displayed at.
        has_existing_annotation: ``True`` when the document holds a
            ``![|W](uri)`` embed rather than a bare ``![](uri)``.
        delta_y: Wheel delta; negative means the wheel moved up (zoom in).

    Returns:
        int: New display width on the zoom ladder.
    """

    if native_width <= 0:
        raise ValueError(f"Native width must be positive, got {native_width}")

    reference = native_width
    power = 0
    if has_existing_annotation:
        if current_width <= 0:
            raise ValueError(f"Displayed width must be positive, got {current_width}")
        reference = current_width
        power = implied_power(current_width, native_width)

    if delta_y < 0:
        power += 1
    elif reference > MIN_SHRINK_WIDTH:
        power -= 1

    return math.floor(ZOOM_RATIO ** power * native_width)
