"""
Color policies for Mandelbrot visualization.

Each policy is a pure function of (iteration, max_iter) returning an
(r, g, b) tuple of ints in [0, 255]. Points that reached max_iter are
inside the set and always black.

Two policies are available:
- Banded: three linear gradients over the escape percentage
- Hue Rotation: hue advances 10 degrees per iteration (HSL, s=0.7, l=0.5)

To add a new policy:
1. Write a jitted color_xxx(iteration, max_iter) function
2. Give it a PALETTE_* id and dispatch to it in palette_color
3. Add it to the PALETTES dictionary at the bottom of this file
"""

import math

import numpy as np
from numba import jit, prange


PALETTE_BANDED = 0
PALETTE_HUE_ROTATION = 1

# Band edges in percent of max_iter
BAND_LOW = 33.0
BAND_HIGH = 66.0

HUE_STEP_DEGREES = 10
HUE_SATURATION = 0.7
HUE_LIGHTNESS = 0.5


@jit(nopython=True, cache=True)
def color_banded(iteration, max_iter):
    """
    Banded policy: white -> blue, blue -> red, red -> yellow.

    The band is picked from percentage = iteration * 100 / max_iter;
    each band interpolates linearly from its own start color.
    """
    if iteration >= max_iter:
        return 0, 0, 0

    percentage = iteration * 100.0 / max_iter

    if percentage < BAND_LOW:
        intensity = int(math.floor((percentage / BAND_LOW) * 255.0))
        return 255 - intensity, 255 - intensity, 255
    elif percentage < BAND_HIGH:
        intensity = int(math.floor(((percentage - BAND_LOW) / (BAND_HIGH - BAND_LOW)) * 255.0))
        return intensity, 0, 255 - intensity
    else:
        intensity = int(math.floor(((percentage - BAND_HIGH) / (100.0 - BAND_HIGH)) * 255.0))
        return 255, intensity, 0


@jit(nopython=True, cache=True)
def _hue_to_channel(p, q, t):
    if t < 0.0:
        t += 1.0
    if t > 1.0:
        t -= 1.0
    if t < 1.0 / 6.0:
        return p + (q - p) * 6.0 * t
    if t < 0.5:
        return q
    if t < 2.0 / 3.0:
        return p + (q - p) * (2.0 / 3.0 - t) * 6.0
    return p


@jit(nopython=True, cache=True)
def hsl_to_rgb(h, s, l):
    """
    Convert HSL (all 0-1) to RGB (0-255), rounding half up.
    """
    if s == 0.0:
        r = l
        g = l
        b = l
    else:
        q = l * (1.0 + s) if l < 0.5 else l + s - l * s
        p = 2.0 * l - q
        r = _hue_to_channel(p, q, h + 1.0 / 3.0)
        g = _hue_to_channel(p, q, h)
        b = _hue_to_channel(p, q, h - 1.0 / 3.0)
    return (int(math.floor(r * 255.0 + 0.5)),
            int(math.floor(g * 255.0 + 0.5)),
            int(math.floor(b * 255.0 + 0.5)))


@jit(nopython=True, cache=True)
def color_hue_rotation(iteration, max_iter):
    """Hue rotation policy: hue = (iteration * 10) mod 360 degrees."""
    if iteration >= max_iter:
        return 0, 0, 0
    hue = (iteration * HUE_STEP_DEGREES) % 360
    return hsl_to_rgb(hue / 360.0, HUE_SATURATION, HUE_LIGHTNESS)


@jit(nopython=True, cache=True)
def palette_color(palette_id, iteration, max_iter):
    """Dispatch to the policy selected by palette_id (see PALETTE_* constants)."""
    if palette_id == PALETTE_HUE_ROTATION:
        return color_hue_rotation(iteration, max_iter)
    return color_banded(iteration, max_iter)


@jit(nopython=True, parallel=True, cache=True)
def apply_palette(counts, max_iter, palette_id, out):
    """
    Paint escape counts into an RGBA image.

    Args:
        counts: 2D array of escape counts from compute_escape_counts
        max_iter: Iteration cap (points with this value are black)
        palette_id: Which policy to use (see PALETTE_* constants)
        out: Output RGBA image array (height, width, 4), modified in place
    """
    height, width = counts.shape
    for py in prange(height):
        for px in range(width):
            r, g, b = palette_color(palette_id, counts[py, px], max_iter)
            out[py, px, 0] = r
            out[py, px, 1] = g
            out[py, px, 2] = b
            out[py, px, 3] = 255


# Registry of all available palettes.
# Keys are display names, values are palette ids.
PALETTES = {
    'Banded': PALETTE_BANDED,
    'Hue Rotation': PALETTE_HUE_ROTATION,
}


def get_palette_id(name):
    """
    Get a palette id by name.

    Raises:
        KeyError if name not found
    """
    return PALETTES[name]


def list_palette_names():
    """Get list of available palette names."""
    return list(PALETTES.keys())


def color_for(name, iteration, max_iter):
    """Color of a single escape count under the named palette."""
    r, g, b = palette_color(get_palette_id(name), int(iteration), int(max_iter))
    return int(r), int(g), int(b)


def palette_preview(name, max_iter, steps=None):
    """
    Colors of escape counts 0..max_iter-1, for drawing a legend strip.

    Returns:
        uint8 array of shape (steps, 3)
    """
    palette_id = get_palette_id(name)
    steps = steps or max_iter
    colors = np.zeros((steps, 3), dtype=np.uint8)
    for i in range(steps):
        iteration = int(i * max_iter / steps)
        colors[i] = palette_color(palette_id, iteration, max_iter)
    return colors
