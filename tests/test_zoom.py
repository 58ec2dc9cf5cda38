import math
import os
import sys

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")
sys.path.append(os.getcwd())

import pytest

from zoom import MIN_SHRINK_WIDTH, compute_new_width, implied_power


def test_zoom_in_from_bare_embed():
    assert compute_new_width(100, 100, False, -1) == 105


def test_zoom_out_from_bare_embed():
    assert compute_new_width(100, 100, False, 1) == 95


def test_bare_embed_starts_at_native_width():
    """Without an annotation the rendered width does not shift the ladder."""

    assert compute_new_width(100, 140, False, -1) == 105


def test_annotated_width_recovers_ladder_step():
    assert implied_power(926, 800) == 3
    assert compute_new_width(800, 926, True, -1) == 972
    assert compute_new_width(800, 972, True, 1) == 926


@pytest.mark.parametrize("power", range(-10, 11))
def test_zoom_in_then_out_returns_to_start(power):
    start = math.floor(1.05 ** power * 640)
    zoomed = compute_new_width(640, start, True, -120)
    restored = compute_new_width(640, zoomed, True, 120)
    assert zoomed > start
    assert abs(restored - start) <= 1


def test_results_stay_on_ladder():
    width = 500
    for delta in (-1, -1, -1, 1, -1, 1, 1, 1, 1):
        width = compute_new_width(500, width, True, delta)
        assert width == math.floor(1.05 ** implied_power(width, 500) * 500)


def test_shrink_stops_at_floor():
    assert compute_new_width(100, 25, True, 1) == 25
    assert compute_new_width(100, 24, True, 1) == 24
    # reference above the floor still shrinks, possibly past it
    assert compute_new_width(100, 26, True, 1) == 24
    # a small native image is not shrunk either
    assert compute_new_width(20, 20, False, 1) == 20


def test_repeated_zoom_out_settles():
    width = 100
    for _ in range(80):
        width = compute_new_width(100, width, True, 1)
    assert width <= MIN_SHRINK_WIDTH
    assert compute_new_width(100, width, True, 1) == width


def test_zoom_in_below_floor_still_grows():
    assert compute_new_width(100, 24, True, -1) == 25


@pytest.mark.parametrize("native,current", [(0, 10), (10, 0), (-5, 10)])
def test_non_positive_widths_rejected(native, current):
    with pytest.raises(ValueError):
        compute_new_width(native, current, True, -1)


def test_bare_embed_ignores_unrendered_width():
    assert compute_new_width(100, 0, False, -1) == 105
