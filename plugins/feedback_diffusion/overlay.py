"""
Interaction Overlay

Direct writes into the visible frame, outside the feedback pipeline:

  - cursor stamp     filled circle under the pressed pointer
  - border           white outline at the canvas edge, redrawn every tick
  - random points    black filled circles at uniform random positions
  - text stamp       outlined glyphs centered on the canvas

Coordinates are in frame texels with the origin at the top-left corner.
Circle sizes are diameters.
"""

from functools import lru_cache

import numpy as np
from PIL import Image, ImageDraw, ImageFont


WHITE = 1.0
BLACK = 0.0

LINE_DELIMITER = "/"

# Candidate font files per variant, searched in the system font folders.
# Japanese faces first, then a Latin face in the same spirit.
FONT_CANDIDATES = {
    "Mincho": (
        "ヒラギノ明朝 ProN.ttc", "HiraginoMincho.ttc", "msmincho.ttc",
        "ipaexm.ttf", "ipam.ttf", "NotoSerifCJK-Regular.ttc",
        "NotoSerifCJKjp-Regular.otf", "DejaVuSerif.ttf",
    ),
    "Gothic": (
        "ヒラギノ角ゴシック W3.ttc", "meiryo.ttc", "msgothic.ttc",
        "ipaexg.ttf", "ipag.ttf", "NotoSansCJK-Regular.ttc",
        "NotoSansCJKjp-Regular.otf", "DejaVuSans.ttf",
    ),
}


def stamp_circle(frame, cx, cy, diameter, value):
    """Fill a disc of `diameter` centered at (cx, cy) with `value` in place.

    A texel is inside when its center is within the radius. Discs that
    overhang the edge are clipped.
    """
    h, w = frame.shape
    r = diameter / 2.0
    x0 = max(0, int(np.floor(cx - r)))
    x1 = min(w, int(np.ceil(cx + r)) + 1)
    y0 = max(0, int(np.floor(cy - r)))
    y1 = min(h, int(np.ceil(cy + r)) + 1)
    if x0 >= x1 or y0 >= y1:
        return frame
    Y, X = np.ogrid[y0:y1, x0:x1]
    inside = (X + 0.5 - cx) ** 2 + (Y + 0.5 - cy) ** 2 <= r * r
    frame[y0:y1, x0:x1][inside] = value
    return frame


def draw_cursor(frame, pointer, diameter, color):
    """Stamp the cursor disc while the pointer is pressed (pointer not None)."""
    if pointer is None:
        return frame
    return stamp_circle(frame, pointer[0], pointer[1], diameter, color)


def border_width(size):
    """Stroke width of the canvas outline for a square canvas of `size`."""
    return size / 24


def draw_border(frame, stroke_width=None, value=WHITE):
    """Unfilled outline rectangle on the canvas bounds.

    The stroke is centered on the edge, so half of it lands inside the
    frame. Drawing it twice gives the same frame as drawing it once.
    """
    h, w = frame.shape
    if stroke_width is None:
        stroke_width = border_width(min(h, w))
    inner = max(1, int(round(stroke_width / 2)))
    frame[:inner, :] = value
    frame[-inner:, :] = value
    frame[:, :inner] = value
    frame[:, -inner:] = value
    return frame


def seed_random_points(frame, count, size, rng=None):
    """Scatter `count` black discs of diameter `size` uniformly over the frame.

    Returns the list of (x, y) centers that were drawn.
    """
    rng = rng if rng is not None else np.random.default_rng()
    h, w = frame.shape
    xs = rng.uniform(0, w, count)
    ys = rng.uniform(0, h, count)
    centers = []
    for x, y in zip(xs, ys):
        stamp_circle(frame, x, y, size, BLACK)
        centers.append((float(x), float(y)))
    return centers


def split_lines(content, delimiter=LINE_DELIMITER):
    """Text content uses `/` as the line break."""
    return content.split(delimiter)


@lru_cache(maxsize=32)
def load_font(font_name, size):
    """TrueType face for a font variant, or Pillow's default font.

    Unknown variants and missing font files fall back to the default
    face at the requested size without raising.
    """
    size = max(1, int(round(size)))
    for candidate in FONT_CANDIDATES.get(font_name, ()):
        try:
            return ImageFont.truetype(candidate, size)
        except OSError:
            continue
    return ImageFont.load_default(size=size)


def _gray(value):
    v = int(round(float(np.clip(value, 0.0, 1.0)) * 255))
    return (v, v, v, 255)


def render_text_layer(shape, content, size, weight, outline_weight,
                      font_name, fill_value, stroke_value):
    """Rasterize the outlined text stamp into (luminance, alpha) planes.

    Two passes over a transparent layer: first the outline pass (stroke
    width = outline_weight, stroke color), then the fill pass (stroke width
    = weight, fill color). Each pass overwrites what lies under its strokes.
    """
    h, w = shape
    layer = Image.new("RGBA", (w, h), (0, 0, 0, 0))
    draw = ImageDraw.Draw(layer)
    font = load_font(font_name, size)
    text = "\n".join(split_lines(content))
    center = (w / 2, h / 2)

    stroke = _gray(stroke_value)
    draw.multiline_text(center, text, fill=stroke, font=font, anchor="mm",
                        align="center", stroke_width=int(round(outline_weight)),
                        stroke_fill=stroke)
    fill = _gray(fill_value)
    draw.multiline_text(center, text, fill=fill, font=font, anchor="mm",
                        align="center", stroke_width=int(round(weight)),
                        stroke_fill=fill)

    rgba = np.asarray(layer, dtype=np.float32) / 255.0
    return rgba[..., 0], rgba[..., 3]


def stamp_text(frame, content, size, weight, outline_weight, font_name,
               fill_value=WHITE, stroke_value=BLACK):
    """Composite the outlined text stamp over the frame in place."""
    lum, alpha = render_text_layer(frame.shape, content, size, weight,
                                   outline_weight, font_name,
                                   fill_value, stroke_value)
    frame *= 1.0 - alpha
    frame += lum * alpha
    return frame
