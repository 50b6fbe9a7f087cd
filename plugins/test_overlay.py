#!/usr/bin/env python3
"""
Tests for the interaction overlay (cursor, border, random points, text).

Verifies:
1. Border is idempotent and leaves the interior alone
2. Disc stamping size, clipping, cursor no-op without a pointer
3. Random points: count, bounds, black centers
4. Text stamp: line splitting, two centered lines, outline + fill colors
"""

import numpy as np

from feedback_diffusion.overlay import (
    BLACK, WHITE, border_width, draw_border, draw_cursor, load_font,
    render_text_layer, seed_random_points, split_lines, stamp_circle, stamp_text,
)


def _ink_runs(mask_1d):
    """Number of separate True runs in a 1D boolean array."""
    padded = np.concatenate([[False], mask_1d, [False]])
    return int(np.count_nonzero(padded[1:] & ~padded[:-1]))


def test_border_idempotent():
    print("Testing border...")
    rng = np.random.default_rng(3)
    frame = rng.random((300, 300)).astype(np.float32)
    interior = frame[20:-20, 20:-20].copy()

    once = draw_border(frame.copy())
    twice = draw_border(draw_border(frame.copy()))
    assert np.array_equal(once, twice), "Border(Border(F)) should equal Border(F)"

    inner = int(round(border_width(300) / 2))
    assert inner == 6, f"300px canvas should get a 6 texel inner band, got {inner}"
    assert np.all(once[:inner, :] == WHITE), "Top band should be white"
    assert np.all(once[:, -inner:] == WHITE), "Right band should be white"
    assert np.array_equal(once[20:-20, 20:-20], interior), "Interior must be untouched"
    print("  ✓ Border working correctly")


def test_stamp_circle_area():
    frame = np.ones((200, 200), dtype=np.float32)
    stamp_circle(frame, 100, 100, 50, BLACK)
    area = int((frame == BLACK).sum())
    expected = np.pi * 25 ** 2
    assert abs(area - expected) / expected < 0.05, f"Disc area {area} should be ~{expected:.0f}"
    assert frame[100, 100] == BLACK, "Center should be filled"
    assert frame[100, 100 + 30] == WHITE, "Outside the radius should be untouched"


def test_stamp_circle_clipped_at_edge():
    frame = np.ones((50, 50), dtype=np.float32)
    stamp_circle(frame, -5, 2, 30, BLACK)
    assert frame[0, 0] == BLACK, "Overhanging disc should still paint inside the frame"
    stamp_circle(frame, 500, 500, 10, BLACK)  # fully outside: no error


def test_cursor_only_while_pressed():
    frame = np.ones((64, 64), dtype=np.float32)
    draw_cursor(frame, None, 20, BLACK)
    assert np.all(frame == WHITE), "No pointer means no cursor stamp"
    draw_cursor(frame, (32, 32), 20, BLACK)
    assert frame[32, 32] == BLACK, "Pressed pointer should stamp the cursor color"


def test_random_points_in_bounds():
    print("Testing random points...")
    frame = np.ones((300, 300), dtype=np.float32)
    rng = np.random.default_rng(7)
    centers = seed_random_points(frame, 50, 50, rng)

    assert len(centers) == 50, f"Should draw exactly 50 points, got {len(centers)}"
    for x, y in centers:
        assert 0 <= x < 300 and 0 <= y < 300, f"Center {(x, y)} out of bounds"
        assert frame[int(y), int(x)] == BLACK, "Each point center should be black"
    assert set(np.unique(frame)) <= {BLACK, WHITE}, "Points are solid black on white"
    print("  ✓ Random points working correctly")


def test_split_lines():
    assert split_lines("AB") == ["AB"]
    assert split_lines("AB/CD") == ["AB", "CD"]
    assert split_lines("模/様") == ["模", "様"]


def test_text_two_lines_centered():
    """A delimiter produces two separate lines, block centered on the canvas."""
    print("Testing text layout...")
    lum, alpha = render_text_layer((300, 300), "AB/CD", size=40, weight=0,
                                   outline_weight=0, font_name="Gothic",
                                   fill_value=WHITE, stroke_value=BLACK)
    ink = alpha > 0.5
    rows = ink.any(axis=1)
    assert _ink_runs(rows) == 2, "Two delimited segments should render as two lines"

    ys = np.nonzero(rows)[0]
    xs = np.nonzero(ink.any(axis=0))[0]
    cy = (ys[0] + ys[-1]) / 2
    cx = (xs[0] + xs[-1]) / 2
    assert abs(cy - 150) < 15, f"Text block should be vertically centered, got {cy}"
    assert abs(cx - 150) < 12, f"Text block should be horizontally centered, got {cx}"

    single_alpha = render_text_layer((300, 300), "AB", 40, 0, 0, "Gothic", WHITE, BLACK)[1]
    assert _ink_runs((single_alpha > 0.5).any(axis=1)) == 1, "No delimiter means one line"
    print("  ✓ Text layout working correctly")


def test_text_outline_and_fill():
    frame = np.full((300, 300), 0.5, dtype=np.float32)
    stamp_text(frame, "AB", size=120, weight=0, outline_weight=8,
               font_name="Mincho", fill_value=WHITE, stroke_value=BLACK)
    center = frame[90:210, 40:260]
    assert (center < 0.1).any(), "Outline pass should leave black strokes"
    assert (center > 0.9).any(), "Fill pass should leave white glyph bodies"
    assert np.allclose(frame[:10, :10], 0.5), "Corners should be untouched"


def test_unknown_font_falls_back():
    font = load_font("Fraktur", 32)
    assert font is not None, "Unsupported font should fall back silently"


if __name__ == "__main__":
    print("\n=== Testing Interaction Overlay ===\n")

    test_border_idempotent()
    test_stamp_circle_area()
    test_stamp_circle_clipped_at_edge()
    test_cursor_only_while_pressed()
    test_random_points_in_bounds()
    test_split_lines()
    test_text_two_lines_centered()
    test_text_outline_and_fill()
    test_unknown_font_falls_back()

    print("\n✓ All tests passed!\n")
