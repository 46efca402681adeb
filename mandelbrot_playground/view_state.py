"""
Immutable view state of the playground window.

The window owns one ViewState at a time and replaces it on every user
action; the kernel only ever receives the Viewport derived from it.
"""

from dataclasses import dataclass, field, replace

from .colormaps import PALETTES
from .config import DEFAULT_SETTINGS, clamp_iterations
from .viewport import CENTERED, AspectWindow, Viewport, get_aspect_window

MODE_EXPLORE = 'explore'
MODE_LEARN = 'learn'
MODES = (MODE_EXPLORE, MODE_LEARN)


@dataclass(frozen=True)
class ViewState:
    """What the user is looking at: view, iteration cap, mode, selection."""

    center_x: float = -0.5
    center_y: float = 0.0
    zoom: float = 1.0
    max_iterations: int = 138
    mode: str = MODE_EXPLORE
    selected_x: float = 0.2
    selected_y: float = 0.0
    palette: str = 'Banded'
    window: AspectWindow = CENTERED
    settings: dict = field(default=None, compare=False, repr=False)

    def __post_init__(self):
        if self.mode not in MODES:
            raise ValueError(f"mode must be one of {MODES}, got {self.mode!r}")
        if self.palette not in PALETTES:
            raise KeyError(self.palette)

    @classmethod
    def initial(cls, settings=None):
        """Build the start-up state from settings (see config.load_settings)."""
        settings = settings or DEFAULT_SETTINGS
        cx, cy = settings['default_center']
        sx, sy = settings['default_selected_point']
        return cls(
            center_x=float(cx),
            center_y=float(cy),
            zoom=1.0,
            max_iterations=clamp_iterations(settings['default_max_iterations'], settings),
            mode=MODE_EXPLORE,
            selected_x=float(sx),
            selected_y=float(sy),
            palette=settings['default_palette'],
            window=get_aspect_window(settings['aspect_window']),
            settings=settings,
        )

    @property
    def _settings(self):
        return self.settings or DEFAULT_SETTINGS

    def viewport(self, width, height):
        """Viewport of this state on a width x height pixel grid."""
        return Viewport(self.center_x, self.center_y, self.zoom, width, height, self.window)

    @property
    def zoom_label(self):
        return f"{self.zoom:g}x"

    def click(self, px, py, width, height):
        """
        Apply a click at pixel (px, py) of the image.

        Explore mode: recenter on the clicked point and zoom in. Once the
        next step would pass the max_zoom setting the click is ignored.
        Learn mode: select the clicked point, the view stays put.
        """
        x0, y0 = self.viewport(width, height).pixel_to_complex(px, py)
        if self.mode == MODE_EXPLORE:
            zoom = self.zoom * self._settings['zoom_step']
            if zoom > self._settings.get('max_zoom', DEFAULT_SETTINGS['max_zoom']):
                return self
            return replace(self, center_x=x0, center_y=y0, zoom=zoom)
        return replace(self, selected_x=x0, selected_y=y0)

    @property
    def at_max_zoom(self):
        return self.zoom * self._settings['zoom_step'] > \
            self._settings.get('max_zoom', DEFAULT_SETTINGS['max_zoom'])

    def select_point(self, x, y):
        return replace(self, selected_x=float(x), selected_y=float(y))

    def reset(self):
        """Back to the default center, zoom 1 and default iteration cap."""
        settings = self._settings
        cx, cy = settings['default_center']
        return replace(
            self,
            center_x=float(cx),
            center_y=float(cy),
            zoom=1.0,
            max_iterations=clamp_iterations(settings['default_max_iterations'], settings),
        )

    def with_max_iterations(self, max_iterations):
        return replace(self, max_iterations=clamp_iterations(max_iterations, self._settings))

    def with_mode(self, mode):
        return replace(self, mode=mode)

    def toggle_mode(self):
        return self.with_mode(MODE_LEARN if self.mode == MODE_EXPLORE else MODE_EXPLORE)

    def with_palette(self, palette):
        return replace(self, palette=palette)

    def render_key(self):
        """The part of the state that decides the rendered image."""
        return (self.center_x, self.center_y, self.zoom, self.max_iterations,
                self.palette, self.window)
