import math

import pytest

from mandelbrot_playground.viewport import (
    ASPECT_WINDOWS,
    CENTERED,
    OFFSET,
    AspectWindow,
    Viewport,
    get_aspect_window,
    map_pixel_to_complex,
)


@pytest.mark.parametrize("cx, cy", [(-0.5, 0.0), (0.3, -0.2), (-1.25, 0.75)])
def test_center_pixel_maps_to_center(cx, cy):
    viewport = Viewport(cx, cy, 1.0, 800, 600)
    x0, y0 = map_pixel_to_complex(400, 300, viewport)
    assert x0 == pytest.approx(cx, abs=1e-15)
    assert y0 == pytest.approx(cy, abs=1e-15)


def test_corner_pixel_formula():
    viewport = Viewport(-0.5, 0.0, 1.0, 800, 600)
    x0, y0 = map_pixel_to_complex(0, 0, viewport)
    assert x0 == pytest.approx((0 - 400) * (3.5 / 800) - 0.5)
    assert y0 == pytest.approx((0 - 300) * (2.0 / 600))
    assert (x0, y0) == pytest.approx((-2.25, -1.0))


def test_zoom_shrinks_window():
    viewport = Viewport(0.0, 0.0, 4.0, 800, 600)
    x_min, x_max, y_min, y_max = viewport.bounds
    assert x_max - x_min == pytest.approx(3.5 / 4)
    assert y_max - y_min == pytest.approx(2.0 / 4)


def test_bounds_at_default_view():
    viewport = Viewport(-0.5, 0.0, 1.0, 800, 600)
    assert viewport.bounds == pytest.approx((-2.25, 1.25, -1.0, 1.0))


def test_offset_preset_matches_normalized_formula():
    viewport = Viewport(0.0, 0.0, 1.0, 800, 600, OFFSET)
    for px, py in [(0, 0), (200, 150), (800, 600)]:
        x0, y0 = viewport.pixel_to_complex(px, py)
        assert x0 == pytest.approx((px / 800) * 3.5 - 2.5)
        assert y0 == pytest.approx((py / 600) * 2.0 - 1.0)


def test_pixel_round_trip():
    viewport = Viewport(-0.743, 0.131, 64.0, 640, 480)
    x0, y0 = viewport.pixel_to_complex(123, 45)
    px, py = viewport.complex_to_pixel(x0, y0)
    assert px == pytest.approx(123, abs=1e-6)
    assert py == pytest.approx(45, abs=1e-6)


@pytest.mark.parametrize("kwargs", [
    dict(zoom=0.0),
    dict(zoom=-1.0),
    dict(zoom=float("inf")),
    dict(center_x=float("nan")),
    dict(center_y=float("inf")),
    dict(width=0),
    dict(height=-5),
    dict(width=1.5),
])
def test_degenerate_viewports_rejected(kwargs):
    params = dict(center_x=-0.5, center_y=0.0, zoom=1.0, width=800, height=600)
    params.update(kwargs)
    with pytest.raises(ValueError):
        Viewport(**params)


def test_aspect_window_validation():
    with pytest.raises(ValueError):
        AspectWindow(real_span=0.0)
    with pytest.raises(ValueError):
        AspectWindow(imag_span=-2.0)
    with pytest.raises(ValueError):
        AspectWindow(anchor_x=math.nan)


def test_presets():
    assert get_aspect_window('centered') is CENTERED
    assert get_aspect_window('offset') is OFFSET
    assert set(ASPECT_WINDOWS) == {'centered', 'offset'}
    with pytest.raises(KeyError):
        get_aspect_window('stretched')


def test_viewports_are_hashable_values():
    a = Viewport(-0.5, 0.0, 1.0, 800, 600)
    b = Viewport(-0.5, 0.0, 1.0, 800, 600)
    assert a == b
    assert hash(a) == hash(b)
