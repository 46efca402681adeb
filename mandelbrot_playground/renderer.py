"""
Image generation for the Mandelbrot playground.

render_image is the synchronous, stateless entry point: viewport in,
RGBA buffer out.

The MandelbrotRenderer class wraps it for the interactive window:
- Background computation so the UI stays responsive
- A single pending slot: a newer request replaces an older one that
  has not started yet, so stale renders are never shown after a newer
  one was asked for
- The last finished result is kept so unchanged views are not redrawn
"""

import logging
import threading
import time
from dataclasses import dataclass

import numpy as np

from .colormaps import apply_palette, get_palette_id
from .compute import check_max_iterations, compute_escape_counts

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RenderResult:
    """Escape counts and colored pixels of one rendered viewport."""

    viewport: object
    max_iterations: int
    palette: str
    iterations: np.ndarray
    rgba: np.ndarray

    @property
    def buffer(self):
        """Flat RGBA view; pixel (px, py) starts at (py * width + px) * 4."""
        return self.rgba.reshape(-1)

    def pixel(self, px, py):
        """(r, g, b, a) of one pixel."""
        return tuple(int(v) for v in self.rgba[py, px])

    def inside_mask(self):
        """Boolean mask of pixels that never escaped."""
        return self.iterations >= self.max_iterations


def render_image(viewport, max_iterations, palette='Banded'):
    """
    Render a viewport into an RGBA pixel buffer.

    Args:
        viewport: Viewport to render
        max_iterations: Iteration cap (>= 1)
        palette: Name from colormaps.PALETTES

    Returns:
        RenderResult with iterations (height, width) and rgba
        (height, width, 4), alpha always 255
    """
    max_iterations = check_max_iterations(max_iterations)
    palette_id = get_palette_id(palette)
    w = viewport.window

    start = time.perf_counter()
    counts = compute_escape_counts(
        viewport.width, viewport.height,
        float(viewport.center_x), float(viewport.center_y), float(viewport.zoom),
        w.real_span, w.imag_span, w.anchor_x, w.anchor_y,
        max_iterations
    )
    rgba = np.empty((viewport.height, viewport.width, 4), dtype=np.uint8)
    apply_palette(counts, max_iterations, palette_id, rgba)
    logger.debug(
        "rendered %dx%d at zoom %g (%d iterations, %s) in %.1f ms",
        viewport.width, viewport.height, viewport.zoom, max_iterations,
        palette, (time.perf_counter() - start) * 1000.0
    )

    return RenderResult(
        viewport=viewport,
        max_iterations=max_iterations,
        palette=palette,
        iterations=counts,
        rgba=rgba,
    )


class MandelbrotRenderer:
    """
    Handles background rendering for the interactive window.

    Usage:
        renderer = MandelbrotRenderer()
        renderer.compute_async(viewport, max_iter, palette)

        # In your game loop:
        result = renderer.get_result()
        if result is not None:
            display(result.rgba)
    """

    def __init__(self):
        self.computing = False
        self.result_ready = False
        self.pending = None
        self.last_key = None
        self.last_result = None
        self.lock = threading.Lock()
        self._thread = None

    def compute_async(self, viewport, max_iterations, palette='Banded'):
        """
        Start (or queue) a render of the given view.

        If a render is already running, the request waits in the pending
        slot, replacing whatever was waiting there before.

        Returns:
            True if the request matched the last finished render (nothing
            to do), False otherwise
        """
        key = (viewport, max_iterations, palette)
        with self.lock:
            if key == self.last_key and not self.computing:
                return True
            self.pending = key
            if not self.computing:
                self.computing = True
                self._thread = threading.Thread(target=self._compute_thread)
                self._thread.daemon = True
                self._thread.start()
        return False

    def _compute_thread(self):
        """Background thread: render pending views until none is left."""
        while True:
            with self.lock:
                key = self.pending
                self.pending = None
                if key is None:
                    self.computing = False
                    break

            try:
                result = render_image(*key)
            except Exception:
                logger.exception("render failed for %r", key)
                continue

            with self.lock:
                # Only publish if nothing newer was asked for meanwhile
                if self.pending is None:
                    self.last_key = key
                    self.last_result = result
                    self.result_ready = True

    def render_now(self, viewport, max_iterations, palette='Banded'):
        """Render synchronously and make it the current result."""
        result = render_image(viewport, max_iterations, palette)
        with self.lock:
            self.last_key = (viewport, max_iterations, palette)
            self.last_result = result
            self.result_ready = False
        return result

    def get_result(self):
        """
        Get the latest render result if a new one is ready.

        Returns:
            RenderResult, or None if nothing new finished since last call
        """
        with self.lock:
            if self.result_ready:
                self.result_ready = False
                return self.last_result
        return None

    def wait(self, timeout=None):
        """Block until the background thread has drained its queue."""
        thread = self._thread
        if thread is not None:
            thread.join(timeout)
        return not self.computing
