"""
Frame storage, seed images and PNG export

A frame is a (H, W) float32 array of grayscale intensities in [0, 1],
0 = black, 1 = white. FrameStore owns the single visible frame:

  snapshot()  copy of the frame committed at the end of the previous tick
  commit(f)   swap in the pipeline result as a whole
  draw()      the live array, for in-place overlay stamping

The pipeline always reads a snapshot taken before any overlay drawing of
the current tick, so half-drawn state never feeds back into the loop.
"""

import os
import time

import numpy as np
from PIL import Image, UnidentifiedImageError
from scipy.ndimage import gaussian_filter


class SeedImageError(RuntimeError):
    """The seed image is missing or cannot be decoded (startup-fatal)."""


def blank_frame(size, value=1.0):
    """Uniform frame, white by default."""
    return np.full((size, size), value, dtype=np.float32)


def noise_seed(size, seed=2024):
    """Default seed texture: smoothed binary mono noise.

    Deterministic for a given seed so restarts and reinitialisations at the
    same resolution always start from the same picture.
    """
    rng = np.random.default_rng(seed)
    cell = max(1, size // 100)
    small = (rng.random((size // cell + 1, size // cell + 1)) > 0.5).astype(np.float32)
    noise = np.repeat(np.repeat(small, cell, axis=0), cell, axis=1)[:size, :size]
    noise = gaussian_filter(noise, sigma=0.75 * cell, mode="wrap")
    return np.clip(noise, 0.0, 1.0).astype(np.float32)


def load_seed_image(path, size):
    """Read any Pillow-readable image as a size x size grayscale frame."""
    try:
        with Image.open(path) as img:
            gray = img.convert("L").resize((size, size), Image.Resampling.BILINEAR)
    except FileNotFoundError as e:
        raise SeedImageError(f"Seed image not found: {path}") from e
    except (UnidentifiedImageError, OSError) as e:
        raise SeedImageError(f"Seed image could not be decoded: {path} ({e})") from e
    return np.asarray(gray, dtype=np.float32) / 255.0


def seed_frame(size, seed_image=None):
    """Initial frame for a (re)initialisation at `size`."""
    if seed_image is None:
        return noise_seed(size)
    return load_seed_image(seed_image, size)


class FrameStore:
    """Holds the one visible frame; read-then-replace once per tick."""

    def __init__(self, frame):
        frame = np.asarray(frame, dtype=np.float32)
        if frame.ndim != 2:
            raise ValueError(f"Frame must be 2D, got shape {frame.shape}")
        self._frame = frame.copy()

    @property
    def shape(self):
        return self._frame.shape

    @property
    def size(self):
        return self._frame.shape[1]

    def snapshot(self):
        """Copy of the last committed frame (pipeline input)."""
        return self._frame.copy()

    def commit(self, frame):
        """Replace the visible frame wholesale."""
        frame = np.asarray(frame, dtype=np.float32)
        if frame.shape != self._frame.shape:
            raise ValueError(f"Frame shape {frame.shape} does not match "
                             f"store shape {self._frame.shape}")
        self._frame = frame

    def draw(self):
        """Live array for overlay operations that paint in place."""
        return self._frame

    def replace_blank(self, value=1.0):
        """Clear to a uniform frame (white by default), bypassing the pipeline."""
        self._frame = blank_frame(self.size, value)


def to_uint8(frame):
    """Quantise a float frame to 8-bit grayscale."""
    return (np.clip(frame, 0.0, 1.0) * 255 + 0.5).astype(np.uint8)


def export_filename(timestamp=None):
    """`reaction-diffusion_<Y-M-D_H-M-S>.png`, fields unpadded."""
    t = time.localtime(timestamp)
    stamp = (f"{t.tm_year}-{t.tm_mon}-{t.tm_mday}_"
             f"{t.tm_hour}-{t.tm_min}-{t.tm_sec}")
    return f"reaction-diffusion_{stamp}.png"


def save_frame_png(frame, directory, timestamp=None):
    """Write a frame as a grayscale PNG. Returns the file path."""
    os.makedirs(directory, exist_ok=True)
    path = os.path.join(directory, export_filename(timestamp))
    Image.fromarray(to_uint8(frame)).save(path)
    return path
