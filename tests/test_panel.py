import pygame
import pytest

from mandelbrot_playground.compute import trace
from mandelbrot_playground.config import DEFAULT_SETTINGS
from mandelbrot_playground.panel import (
    ControlPanel,
    Slider,
    TrajectoryTable,
    format_step,
    quick_guide_lines,
)
from mandelbrot_playground.view_state import MODE_EXPLORE, MODE_LEARN, ViewState


def click(pos, button=1):
    return pygame.event.Event(pygame.MOUSEBUTTONDOWN, button=button, pos=pos)


def motion(pos):
    return pygame.event.Event(pygame.MOUSEMOTION, pos=pos, rel=(0, 0), buttons=(1, 0, 0))


def release(pos):
    return pygame.event.Event(pygame.MOUSEBUTTONUP, button=1, pos=pos)


@pytest.fixture
def state():
    return ViewState.initial()


@pytest.fixture
def panel(state):
    return ControlPanel(800, 0, 300, 600, DEFAULT_SETTINGS, state)


def test_slider_value_at():
    slider = Slider(0, 0, 100, 20, 1000, 138)
    assert slider.value_at(0) == 20
    assert slider.value_at(50) == 510
    assert slider.value_at(100) == 1000
    assert slider.value_at(-30) == 20
    assert slider.value_at(500) == 1000


def test_slider_drag():
    slider = Slider(0, 0, 100, 20, 1000, 138)
    assert slider.handle_event(click((50, 8))) == (True, True)
    assert slider.value == 510
    assert slider.handle_event(motion((200, 8))) == (True, True)
    assert slider.value == 1000
    assert slider.handle_event(release((200, 8))) == (True, False)
    assert slider.handle_event(motion((0, 8))) == (False, False)
    assert slider.value == 1000


def test_tabs_switch_mode(panel, state):
    handled, new_state = panel.handle_event(click((1000, 20)), state)
    assert handled
    assert new_state.mode == MODE_LEARN
    handled, again = panel.handle_event(click((850, 20)), new_state)
    assert handled
    assert again.mode == MODE_EXPLORE


def test_slider_sets_max_iterations(panel, state):
    handled, new_state = panel.handle_event(click((950, 130)), state)
    assert handled
    assert new_state.max_iterations == 510
    handled, new_state = panel.handle_event(motion((5000, 130)), new_state)
    assert handled
    assert new_state.max_iterations == 1000
    panel.handle_event(release((5000, 130)), new_state)


def test_reset_button(panel, state):
    moved = state.click(10, 10, 800, 600).with_max_iterations(400)
    handled, new_state = panel.handle_event(click((1000, 75)), moved)
    assert handled
    assert (new_state.center_x, new_state.center_y, new_state.zoom) == (-0.5, 0.0, 1.0)
    assert new_state.max_iterations == 138
    assert panel.slider.value == 138


def test_palette_dropdown(panel, state):
    handled, same = panel.handle_event(click((900, 170)), state)
    assert handled and same == state
    assert panel.palette_dropdown.expanded
    handled, new_state = panel.handle_event(click((900, 220)), state)
    assert handled
    assert new_state.palette == 'Hue Rotation'
    assert not panel.palette_dropdown.expanded


def test_clicks_outside_panel_pass_through(panel, state):
    handled, new_state = panel.handle_event(click((100, 100)), state)
    assert not handled
    assert new_state is state


def test_clicks_on_empty_panel_area_are_consumed(panel, state):
    handled, new_state = panel.handle_event(click((900, 580)), state)
    assert handled
    assert new_state is state


def test_sync_follows_keyboard_changes(panel, state):
    changed = state.toggle_mode().with_max_iterations(250).with_palette('Hue Rotation')
    panel.sync(changed)
    assert panel.tabs.get_value() == MODE_LEARN
    assert panel.slider.value == 250
    assert panel.palette_dropdown.get_value() == 'Hue Rotation'


def test_format_step():
    trajectory = trace(-0.5, 0.5, 10)
    assert format_step(trajectory.steps[0]) == ('0', '0.0000 + 0.0000i', '0.0000')
    assert format_step(trajectory.steps[1]) == ('1', '-0.5000 + 0.5000i', '0.7071')


def test_trajectory_table_scroll():
    table = TrajectoryTable(0, 0, 200, 18 * 11)
    assert table.visible_rows == 10
    table.scroll_by(5)
    assert table.scroll == 0

    table.set_trajectory(trace(0.0, 0.0, 50))
    table.scroll_by(15)
    assert table.scroll == 15
    table.scroll_by(100)
    assert table.scroll == 40
    table.scroll_by(-100)
    assert table.scroll == 0

    table.scroll_by(7)
    table.set_trajectory(trace(2.0, 0.0, 50))
    assert table.scroll == 0


def test_palette_dropdown_follows_iterations(panel, state):
    panel.sync(state.with_max_iterations(400))
    assert panel.palette_dropdown.max_iterations == 400


def test_dropdown_closes_on_click_elsewhere(panel, state):
    panel.handle_event(click((900, 170)), state)
    handled, new_state = panel.handle_event(click((100, 100)), state)
    assert handled
    assert new_state is state
    assert not panel.palette_dropdown.expanded
    assert panel.palette_dropdown.get_rect().height == 24


def test_quick_guide_lines():
    lines = quick_guide_lines(30)
    headings = [text for text, is_heading in lines if is_heading]
    assert headings == ['What am I looking at?', 'How to use this playground:']
    body = [text for text, is_heading in lines if not is_heading]
    assert body
    assert all(len(text) <= 30 for text in body)
    assert any('Explore' in text for text in body)
    assert any('Learn' in text for text in body)
