"""
Mandelbrot Set Playground

An interactive, educational Mandelbrot set explorer using Pygame for
display and Numba for JIT-compiled computation.

Quick Start:
    from mandelbrot_playground import run
    run()

Or from command line:
    python -m mandelbrot_playground

Package Structure:
    - compute.py: JIT-compiled escape-time kernel and orbit tracing
    - viewport.py: Pixel <-> complex plane mapping
    - colormaps.py: Color policies (banded, hue rotation)
    - renderer.py: Image generation and background rendering
    - view_state.py: Immutable view state and its transitions
    - config.py: Settings loading (settings.json)
    - panel.py: Side panel widgets
    - app.py: Main application and event loop

Controls:
    - Click: Zoom in at point (Explore) / select point (Learn)
    - Tab: Switch between Explore and Learn mode
    - Up/Down: Change max iterations
    - R: Reset to default view
    - ESC: Quit
"""

from .compute import IterationResult, Trajectory, TrajectoryStep, iterate, trace
from .viewport import ASPECT_WINDOWS, AspectWindow, Viewport, map_pixel_to_complex
from .colormaps import PALETTES, color_banded, color_for, color_hue_rotation, list_palette_names
from .renderer import MandelbrotRenderer, RenderResult, render_image
from .view_state import ViewState
from .config import load_settings


def run(settings=None, state=None):
    """Open the playground window (imports pygame lazily)."""
    from .app import run as _run
    _run(settings, state)


__version__ = "1.0.0"
__all__ = [
    "run",
    "iterate",
    "trace",
    "IterationResult",
    "Trajectory",
    "TrajectoryStep",
    "AspectWindow",
    "ASPECT_WINDOWS",
    "Viewport",
    "map_pixel_to_complex",
    "PALETTES",
    "color_banded",
    "color_hue_rotation",
    "color_for",
    "list_palette_names",
    "render_image",
    "RenderResult",
    "MandelbrotRenderer",
    "ViewState",
    "load_settings",
]
