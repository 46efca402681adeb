"""Viewport geometry: which rectangle of the complex plane lands on the pixel grid."""

import math
from dataclasses import dataclass, field

from .compute import complex_to_pixel, pixel_to_complex


@dataclass(frozen=True)
class AspectWindow:
    """
    Size of the visible window at zoom 1, and where the center sits.

    anchor_x/anchor_y give the fraction of the image width/height at
    which the viewport center is drawn.
    """

    real_span: float = 3.5
    imag_span: float = 2.0
    anchor_x: float = 0.5
    anchor_y: float = 0.5

    def __post_init__(self):
        for name in ("real_span", "imag_span"):
            value = getattr(self, name)
            if not math.isfinite(value) or value <= 0:
                raise ValueError(f"{name} must be positive and finite, got {value}")
        for name in ("anchor_x", "anchor_y"):
            if not math.isfinite(getattr(self, name)):
                raise ValueError(f"{name} must be finite")


# Canonical mapping: (px - w/2) * (3.5/w) / zoom + cx
CENTERED = AspectWindow()

# ((px/w) * 3.5 - 2.5) / zoom + cx, i.e. the real range [-2.5, 1.0] is
# laid over the image before the center offset is added.
OFFSET = AspectWindow(real_span=3.5, imag_span=2.0, anchor_x=2.5 / 3.5, anchor_y=0.5)

ASPECT_WINDOWS = {
    'centered': CENTERED,
    'offset': OFFSET,
}


def get_aspect_window(name):
    """
    Get an aspect window preset by name.

    Raises:
        KeyError if name not found
    """
    return ASPECT_WINDOWS[name]


def _check_dimension(name, value):
    if isinstance(value, bool) or int(value) != value or value <= 0:
        raise ValueError(f"{name} must be a positive integer, got {value!r}")


@dataclass(frozen=True)
class Viewport:
    """Center, magnification and pixel size of one rendered image."""

    center_x: float
    center_y: float
    zoom: float
    width: int
    height: int
    window: AspectWindow = field(default=CENTERED)

    def __post_init__(self):
        if not (math.isfinite(self.center_x) and math.isfinite(self.center_y)):
            raise ValueError(
                f"center must be finite, got ({self.center_x}, {self.center_y})"
            )
        if not math.isfinite(self.zoom) or self.zoom <= 0:
            raise ValueError(f"zoom must be positive and finite, got {self.zoom}")
        _check_dimension("width", self.width)
        _check_dimension("height", self.height)

    def _args(self):
        w = self.window
        return (self.width, self.height, float(self.center_x), float(self.center_y),
                float(self.zoom), w.real_span, w.imag_span, w.anchor_x, w.anchor_y)

    def pixel_to_complex(self, px, py):
        """Map a (possibly fractional) pixel position to (x0, y0)."""
        x0, y0 = pixel_to_complex(float(px), float(py), *self._args())
        return float(x0), float(y0)

    def complex_to_pixel(self, x, y):
        """Map a complex coordinate back to a fractional pixel position."""
        px, py = complex_to_pixel(float(x), float(y), *self._args())
        return float(px), float(py)

    @property
    def bounds(self):
        """(x_min, x_max, y_min, y_max) covered by the pixel grid."""
        x_min, y_min = self.pixel_to_complex(0, 0)
        x_max, y_max = self.pixel_to_complex(self.width, self.height)
        return x_min, x_max, y_min, y_max


def map_pixel_to_complex(px, py, viewport):
    """
    Map pixel (px, py) of viewport to its complex coordinate (x0, y0).

    This is the single mapping used both for rendering and for turning a
    click position into a point of the plane.
    """
    return viewport.pixel_to_complex(px, py)
