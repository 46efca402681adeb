import json
import logging

import pytest

from mandelbrot_playground.config import (
    DEFAULT_SETTINGS,
    SETTINGS_PATH,
    clamp_iterations,
    load_settings,
)
from mandelbrot_playground.view_state import ViewState
from mandelbrot_playground.viewport import CENTERED


def test_packaged_settings_match_defaults():
    with open(SETTINGS_PATH) as f:
        assert json.load(f) == DEFAULT_SETTINGS
    assert load_settings() == DEFAULT_SETTINGS


def test_missing_file_falls_back(tmp_path, caplog):
    with caplog.at_level(logging.WARNING, logger='mandelbrot_playground.config'):
        settings = load_settings(str(tmp_path / 'nope.json'))
    assert settings == DEFAULT_SETTINGS
    assert settings is not DEFAULT_SETTINGS
    assert 'using defaults' in caplog.text


def test_malformed_file_falls_back(tmp_path, caplog):
    path = tmp_path / 'settings.json'
    path.write_text('{"window_width": 640,')
    with caplog.at_level(logging.WARNING, logger='mandelbrot_playground.config'):
        assert load_settings(str(path)) == DEFAULT_SETTINGS
    assert caplog.records


def test_non_object_file_falls_back(tmp_path):
    path = tmp_path / 'settings.json'
    path.write_text('[1, 2, 3]')
    assert load_settings(str(path)) == DEFAULT_SETTINGS


def test_partial_file_merges_over_defaults(tmp_path, caplog):
    path = tmp_path / 'settings.json'
    path.write_text(json.dumps({'window_width': 640, 'default_palette': 'Hue Rotation',
                                'favourite_colour': 'teal'}))
    with caplog.at_level(logging.WARNING, logger='mandelbrot_playground.config'):
        settings = load_settings(str(path))
    assert settings['window_width'] == 640
    assert settings['default_palette'] == 'Hue Rotation'
    assert settings['window_height'] == DEFAULT_SETTINGS['window_height']
    assert 'favourite_colour' not in settings
    assert 'favourite_colour' in caplog.text


def test_clamp_iterations():
    assert clamp_iterations(5, DEFAULT_SETTINGS) == 20
    assert clamp_iterations(138, DEFAULT_SETTINGS) == 138
    assert clamp_iterations(1e6, DEFAULT_SETTINGS) == 1000
    assert clamp_iterations(50, {'iteration_range': [60, 70]}) == 60


@pytest.mark.parametrize("key, bad", [
    ('default_palette', 'Rainbow'),
    ('aspect_window', 'wide'),
    ('iteration_range', [500, 100]),
    ('iteration_range', [20]),
    ('iteration_range', [0, 100]),
    ('window_width', 0),
    ('window_height', -600),
    ('panel_width', 'wide'),
    ('default_max_iterations', 2.5),
    ('default_center', [0.0]),
    ('zoom_step', 1.0),
    ('max_zoom', 0),
    ('render_delay_ms', -1),
])
def test_invalid_value_keeps_default(tmp_path, caplog, key, bad):
    path = tmp_path / 'settings.json'
    path.write_text(json.dumps({key: bad, 'window_width': 640} if key != 'window_width'
                               else {key: bad}))
    with caplog.at_level(logging.WARNING, logger='mandelbrot_playground.config'):
        settings = load_settings(str(path))
    assert settings[key] == DEFAULT_SETTINGS[key]
    assert key in caplog.text
    if key != 'window_width':
        assert settings['window_width'] == 640


@pytest.mark.parametrize("content", [
    {'default_palette': 'Rainbow'},
    {'aspect_window': 'wide'},
    {'iteration_range': [1000, 20], 'default_max_iterations': 5000},
])
def test_invalid_values_still_give_a_startable_state(tmp_path, content):
    path = tmp_path / 'settings.json'
    path.write_text(json.dumps(content))
    state = ViewState.initial(load_settings(str(path)))
    assert state.palette == 'Banded'
    assert state.window is CENTERED
    assert 20 <= state.max_iterations <= 1000


def test_directory_path_falls_back(tmp_path, caplog):
    with caplog.at_level(logging.WARNING, logger='mandelbrot_playground.config'):
        assert load_settings(str(tmp_path)) == DEFAULT_SETTINGS
    assert 'using defaults' in caplog.text


def test_non_utf8_file_falls_back(tmp_path):
    path = tmp_path / 'settings.json'
    path.write_bytes(b'{"default_palette": "\xff\xfe"}')
    assert load_settings(str(path)) == DEFAULT_SETTINGS
