"""
Escape-time computation functions using Numba JIT compilation.

This module contains the numeric kernel of the playground. These
functions handle:
- Mapping pixel positions to points of the complex plane
- The escape-time iteration of z -> z² + c for a single point
- Recording the orbit of a single point (Learn mode)
- Computing escape counts for a whole image

Everything here is stateless: each call receives all of its inputs and
returns freshly allocated outputs.
"""

import math
from dataclasses import dataclass
from typing import Tuple

import numpy as np
from numba import jit, prange


# Escape test: a point is still bounded while |z|² <= ESCAPE_RADIUS_SQ
ESCAPE_RADIUS_SQ = 4.0


@dataclass(frozen=True)
class IterationResult:
    """Outcome of iterating a single point."""

    final_iteration: int
    escaped: bool


@dataclass(frozen=True)
class TrajectoryStep:
    """One recorded value of z before an iteration is applied."""

    iteration: int
    re: float
    im: float
    magnitude: float


@dataclass(frozen=True)
class Trajectory:
    """The full orbit of a sample point, in ascending iteration order."""

    x0: float
    y0: float
    max_iterations: int
    steps: Tuple[TrajectoryStep, ...]
    result: IterationResult

    def __len__(self):
        return len(self.steps)

    def __iter__(self):
        return iter(self.steps)


@jit(nopython=True, cache=True)
def pixel_to_complex(px, py, width, height, center_x, center_y, zoom,
                     real_span, imag_span, anchor_x, anchor_y):
    """
    Map a pixel position to a point of the complex plane.

    With anchor (0.5, 0.5) this is the canonical centered mapping:
    x0 = (px - width/2) * (real_span/width) / zoom + center_x

    Args:
        px, py: Pixel position (may be fractional)
        width, height: Image dimensions in pixels
        center_x, center_y: Complex coordinate at the anchor pixel
        zoom: Magnification (1 shows the whole window)
        real_span, imag_span: Size of the window at zoom 1
        anchor_x, anchor_y: Fraction of the image where the center sits

    Returns:
        (x0, y0): Real and imaginary parts
    """
    x0 = (px - width * anchor_x) * (real_span / width) / zoom + center_x
    y0 = (py - height * anchor_y) * (imag_span / height) / zoom + center_y
    return x0, y0


@jit(nopython=True, cache=True)
def complex_to_pixel(x, y, width, height, center_x, center_y, zoom,
                     real_span, imag_span, anchor_x, anchor_y):
    """Inverse of pixel_to_complex (fractional pixel position)."""
    px = (x - center_x) * zoom * (width / real_span) + width * anchor_x
    py = (y - center_y) * zoom * (height / imag_span) + height * anchor_y
    return px, py


@jit(nopython=True, cache=True)
def escape_time(x0, y0, max_iter):
    """
    Iterate z -> z² + c from z = 0 and count iterations until escape.

    Args:
        x0, y0: Real and imaginary parts of c
        max_iter: Iteration cap

    Returns:
        Number of iterations performed. Equal to max_iter when the
        point never escaped (treated as inside the set).
    """
    xi = 0.0
    yi = 0.0
    iteration = 0
    while iteration < max_iter and xi * xi + yi * yi <= ESCAPE_RADIUS_SQ:
        tmp = xi * xi - yi * yi + x0
        yi = 2.0 * xi * yi + y0
        xi = tmp
        iteration += 1
    return iteration


@jit(nopython=True, cache=True)
def escape_orbit(x0, y0, max_iter):
    """
    Same iteration as escape_time, recording z before every step.

    Returns:
        Array of shape (n, 3) holding (re, im, |z|) per step, where n is
        the final iteration count.
    """
    orbit = np.empty((max_iter, 3), dtype=np.float64)
    xi = 0.0
    yi = 0.0
    iteration = 0
    while iteration < max_iter and xi * xi + yi * yi <= ESCAPE_RADIUS_SQ:
        orbit[iteration, 0] = xi
        orbit[iteration, 1] = yi
        orbit[iteration, 2] = math.sqrt(xi * xi + yi * yi)
        tmp = xi * xi - yi * yi + x0
        yi = 2.0 * xi * yi + y0
        xi = tmp
        iteration += 1
    return orbit[:iteration].copy()


@jit(nopython=True, parallel=True, cache=True)
def compute_escape_counts(width, height, center_x, center_y, zoom,
                          real_span, imag_span, anchor_x, anchor_y, max_iter):
    """
    Compute the escape count of every pixel of an image.

    Rows are independent, so they are spread over threads with prange;
    the result is identical to a sequential row-major sweep.

    Returns:
        2D int32 array of shape (height, width). Points in the set have
        value = max_iter.
    """
    result = np.zeros((height, width), dtype=np.int32)
    for py in prange(height):
        for px in range(width):
            x0, y0 = pixel_to_complex(
                px, py, width, height, center_x, center_y, zoom,
                real_span, imag_span, anchor_x, anchor_y
            )
            result[py, px] = escape_time(x0, y0, max_iter)
    return result


def check_max_iterations(max_iterations):
    """Reject iteration caps the kernel cannot work with."""
    if (isinstance(max_iterations, bool) or not math.isfinite(max_iterations)
            or int(max_iterations) != max_iterations):
        raise ValueError(f"max_iterations must be an integer, got {max_iterations!r}")
    if max_iterations < 1:
        raise ValueError(f"max_iterations must be >= 1, got {max_iterations}")
    return int(max_iterations)


def _check_point(x0, y0):
    if not (math.isfinite(x0) and math.isfinite(y0)):
        raise ValueError(f"sample point must be finite, got ({x0}, {y0})")
    return float(x0), float(y0)


def iterate(x0, y0, max_iterations):
    """
    Evaluate the escape time of a single point.

    Args:
        x0, y0: The point c = x0 + i·y0
        max_iterations: Iteration cap (>= 1)

    Returns:
        IterationResult
    """
    x0, y0 = _check_point(x0, y0)
    max_iterations = check_max_iterations(max_iterations)
    n = int(escape_time(x0, y0, max_iterations))
    return IterationResult(final_iteration=n, escaped=n < max_iterations)


def trace(x0, y0, max_iterations):
    """
    Record the orbit of a single point for the Learn mode table.

    Returns:
        Trajectory whose steps are ordered by iteration and whose length
        equals the final iteration count.
    """
    x0, y0 = _check_point(x0, y0)
    max_iterations = check_max_iterations(max_iterations)
    orbit = escape_orbit(x0, y0, max_iterations)
    steps = [
        TrajectoryStep(i, float(row[0]), float(row[1]), float(row[2]))
        for i, row in enumerate(orbit)
    ]
    n = len(steps)
    return Trajectory(
        x0=x0,
        y0=y0,
        max_iterations=max_iterations,
        steps=tuple(steps),
        result=IterationResult(final_iteration=n, escaped=n < max_iterations),
    )


def warmup_jit():
    """
    Warm up JIT compilation with tiny inputs.

    Call this once at startup so the first real render does not pay
    the compilation delay.
    """
    _ = compute_escape_counts(4, 4, -0.5, 0.0, 1.0, 3.5, 2.0, 0.5, 0.5, 4)
    _ = escape_orbit(0.0, 0.0, 4)
    _ = complex_to_pixel(0.0, 0.0, 4, 4, -0.5, 0.0, 1.0, 3.5, 2.0, 0.5, 0.5)
