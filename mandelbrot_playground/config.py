"""
Settings for the Mandelbrot playground.

Defaults live in settings.json next to this file. Any key missing from
the file, or holding a value that cannot be used, falls back to
DEFAULT_SETTINGS. An unreadable file falls back as a whole.
"""

import json
import logging
import math
import os

from .colormaps import PALETTES
from .viewport import ASPECT_WINDOWS

logger = logging.getLogger(__name__)

SETTINGS_PATH = os.path.join(os.path.dirname(__file__), 'settings.json')

DEFAULT_SETTINGS = {
    'window_width': 800,
    'window_height': 600,
    'panel_width': 300,
    'default_max_iterations': 138,
    'iteration_range': [20, 1000],
    'iteration_step': 10,
    'default_center': [-0.5, 0.0],
    'default_selected_point': [0.2, 0.0],
    'zoom_step': 2.0,
    'max_zoom': 1e15,
    'default_palette': 'Banded',
    'aspect_window': 'centered',
    'render_delay_ms': 25,
}


def _is_int(value):
    return isinstance(value, int) and not isinstance(value, bool)


def _is_number(value):
    return (isinstance(value, (int, float)) and not isinstance(value, bool)
            and math.isfinite(value))


def _positive_int(value):
    return _is_int(value) and value > 0


def _point(value):
    return isinstance(value, list) and len(value) == 2 and all(_is_number(v) for v in value)


def _iteration_range(value):
    return (isinstance(value, list) and len(value) == 2
            and all(_is_int(v) for v in value) and 1 <= value[0] < value[1])


# One check per key; a value failing its check keeps the default
VALIDATORS = {
    'window_width': _positive_int,
    'window_height': _positive_int,
    'panel_width': _positive_int,
    'default_max_iterations': _positive_int,
    'iteration_range': _iteration_range,
    'iteration_step': _positive_int,
    'default_center': _point,
    'default_selected_point': _point,
    'zoom_step': lambda v: _is_number(v) and v > 1,
    'max_zoom': lambda v: _is_number(v) and v >= 1,
    'default_palette': lambda v: isinstance(v, str) and v in PALETTES,
    'aspect_window': lambda v: isinstance(v, str) and v in ASPECT_WINDOWS,
    'render_delay_ms': lambda v: _is_int(v) and v >= 0,
}


def load_settings(path=None):
    """
    Load settings from a JSON file, merged over DEFAULT_SETTINGS.

    Args:
        path: File to read (default: the packaged settings.json)

    Returns:
        dict with every key of DEFAULT_SETTINGS
    """
    settings = dict(DEFAULT_SETTINGS)
    settings_path = path or SETTINGS_PATH
    try:
        with open(settings_path, 'r', encoding='utf-8') as f:
            loaded = json.load(f)
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
        logger.warning("Could not load %s: %s; using defaults", settings_path, e)
        return settings

    if not isinstance(loaded, dict):
        logger.warning("Ignoring %s: top level is not an object", settings_path)
        return settings

    unknown = set(loaded) - set(DEFAULT_SETTINGS)
    if unknown:
        logger.warning("Ignoring unknown settings: %s", ", ".join(sorted(unknown)))
    for key, is_valid in VALIDATORS.items():
        if key not in loaded:
            continue
        if is_valid(loaded[key]):
            settings[key] = loaded[key]
        else:
            logger.warning("Invalid value for %s: %r; using %r",
                           key, loaded[key], DEFAULT_SETTINGS[key])
    return settings


def clamp_iterations(value, settings):
    """Clamp an iteration count into the configured slider range."""
    low, high = settings['iteration_range']
    return max(low, min(high, int(value)))
