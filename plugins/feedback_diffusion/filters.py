"""
Feedback Filter Pipeline

Each tick the previous frame is pushed through two stages:

  1. Blur    - separable 9-tap gaussian, horizontal pass then vertical
               pass, taps spaced `spread` texels apart.
  2. Unsharp - wider gaussian of the blurred frame (sigma = radius),
               out = clip(blurred + amount * (blurred - wide), 0, 1)

The mild blur loses a little detail every tick; the unsharp stage
restores and exaggerates edges far more than was lost. Iterated, this
grows branching, cellular structure -- a cheap visual analog of
reaction-diffusion without solving coupled concentration equations.

All functions are pure: same input and parameters, same output.

References:
  noones img - Reaction-diffusion in 20 seconds (TouchDesigner tutorial)
  ArtOfSoulburn - Reaction Diffusion In Photoshop
"""

import math
import numpy as np
from scipy.ndimage import correlate1d, gaussian_filter


# One side of a normalised 9-tap gaussian (center first)
GAUSS_9 = (0.227027, 0.1945946, 0.1216216, 0.054054, 0.016216)

HORIZONTAL = 1  # array axis sampled by the x pass
VERTICAL = 0    # array axis sampled by the y pass


def blur_kernel(spread):
    """1D kernel for the 9 taps spaced `spread` texels apart.

    Fractional offsets are split between the two neighbouring texels,
    the way bilinear texture sampling resolves them. The kernel is
    normalised so a flat frame stays flat.
    """
    half = int(math.ceil(4 * spread))
    kernel = np.zeros(2 * half + 1, dtype=np.float64)
    for i in range(-4, 5):
        w = GAUSS_9[abs(i)]
        offset = i * spread
        lo = math.floor(offset)
        frac = offset - lo
        kernel[lo + half] += w * (1.0 - frac)
        if frac > 0.0:
            kernel[lo + 1 + half] += w * frac
    return kernel / kernel.sum()


def blur_pass(texture, axis, spread, out=None):
    """Single 1D convolution along `axis`, clamp-to-edge."""
    return correlate1d(texture, blur_kernel(spread), axis=axis,
                       output=out, mode="nearest")


def blur(texture, spread):
    """Two-pass separable blur: horizontal, then vertical on that result."""
    texture = np.asarray(texture, dtype=np.float32)
    horizontal = blur_pass(texture, HORIZONTAL, spread)
    return blur_pass(horizontal, VERTICAL, spread)


def sharpen(blurred, radius, amount):
    """Unsharp mask against an internally computed wider blur."""
    blurred = np.asarray(blurred, dtype=np.float32)
    wide = gaussian_filter(blurred, sigma=radius, mode="nearest")
    out = blurred - wide
    out *= np.float32(amount)
    out += blurred
    np.clip(out, 0.0, 1.0, out=out)
    return out


def run_pipeline(frame, spread, radius, amount):
    """Frame -> Frame: sharpen(blur(frame, spread), radius, amount)."""
    return sharpen(blur(frame, spread), radius, amount)


class FeedbackPipeline:
    """Blur -> Unsharp with preallocated ping-pong buffers.

    The two blur passes alternate between two work buffers so no pass ever
    reads the array it is writing. The unsharp stage writes a fresh array,
    so the returned frame never aliases pipeline internals.
    """

    def __init__(self, size):
        self.size = size
        self._ping = np.empty((size, size), dtype=np.float32)
        self._pong = np.empty((size, size), dtype=np.float32)
        self.runs = 0

    def run(self, frame, params):
        """One feedback step. Parameters are read once, at the start."""
        spread = params.blur_spread
        radius = params.unsharp_radius
        amount = params.unsharp_amount

        frame = np.asarray(frame, dtype=np.float32)
        blur_pass(frame, HORIZONTAL, spread, out=self._ping)
        blur_pass(self._ping, VERTICAL, spread, out=self._pong)
        result = sharpen(self._pong, radius, amount)
        self.runs += 1
        return result
