"""
Side panel for the Mandelbrot playground window.

Provides the mode tabs (Explore / Learn), the max-iterations slider,
the reset button, a color scheme dropdown showing each palette as a
strip, the color guide and quick guide (Explore mode), and the Learn
mode table of trajectory steps.

Every widget follows the same protocol: handle_event(event) returns
(handled, changed) and draw(screen, font, small_font) paints it.
"""

import textwrap

import pygame

from .colormaps import color_for, list_palette_names, palette_preview
from .view_state import MODE_EXPLORE, MODE_LEARN


ROW_HEIGHT = 18
GUIDE_LINE_HEIGHT = 15
GUIDE_WRAP_CHARS = 44

QUICK_GUIDE = (
    ('What am I looking at?',
     'Points whose sequence z -> z*z + c stays bounded are black. Colored '
     'points escape to infinity; the color tells how quickly.'),
    ('How to use this playground:',
     'Explore: click anywhere to zoom in on the detail. '
     'Learn: click a point to see its sequence step by step. '
     'Max Iterations: raise it to see more of the boundary.'),
)


def quick_guide_lines(width_chars=GUIDE_WRAP_CHARS):
    """(text, is_heading) lines of the quick guide, wrapped to width_chars."""
    lines = []
    for heading, body in QUICK_GUIDE:
        lines.append((heading, True))
        lines.extend((line, False) for line in textwrap.wrap(body, width_chars))
    return lines


class Tabs:
    """A row of tab buttons, one of which is active."""

    def __init__(self, x, y, width, options, labels, selected_idx=0):
        self.x = x
        self.y = y
        self.width = width
        self.height = 26
        self.options = options
        self.labels = labels
        self.selected_idx = selected_idx

    def get_value(self):
        return self.options[self.selected_idx]

    def set_value(self, value):
        if value in self.options:
            self.selected_idx = self.options.index(value)

    def _tab_rect(self, i):
        tab_w = self.width // len(self.options)
        return pygame.Rect(self.x + i * tab_w, self.y, tab_w, self.height)

    def handle_event(self, event):
        """Returns (handled, value_changed)."""
        if event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
            for i in range(len(self.options)):
                if self._tab_rect(i).collidepoint(event.pos):
                    old_idx = self.selected_idx
                    self.selected_idx = i
                    return True, old_idx != i
        return False, False

    def draw(self, screen, font, small_font):
        for i, label in enumerate(self.labels):
            rect = self._tab_rect(i)
            active = i == self.selected_idx
            pygame.draw.rect(screen, (70, 100, 70) if active else (55, 55, 55), rect)
            pygame.draw.rect(screen, (100, 100, 100), rect, 1)
            color = (255, 255, 255) if active else (180, 180, 180)
            text = font.render(label, True, color)
            screen.blit(text, (rect.centerx - text.get_width() // 2,
                               rect.centery - text.get_height() // 2))


class Slider:
    """A horizontal integer slider; click or drag to set the value."""

    def __init__(self, x, y, width, low, high, value):
        self.x = x
        self.y = y
        self.width = width
        self.height = 16
        self.low = low
        self.high = high
        self.value = value
        self.dragging = False

    def get_rect(self):
        return pygame.Rect(self.x, self.y, self.width, self.height)

    def value_at(self, mx):
        """Slider value under horizontal position mx (clamped)."""
        t = (mx - self.x) / float(self.width)
        t = max(0.0, min(1.0, t))
        return int(round(self.low + t * (self.high - self.low)))

    def _set_from(self, mx):
        old = self.value
        self.value = self.value_at(mx)
        return old != self.value

    def handle_event(self, event):
        """Returns (handled, value_changed)."""
        if event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
            if self.get_rect().inflate(0, 8).collidepoint(event.pos):
                self.dragging = True
                return True, self._set_from(event.pos[0])
        elif event.type == pygame.MOUSEMOTION and self.dragging:
            return True, self._set_from(event.pos[0])
        elif event.type == pygame.MOUSEBUTTONUP and event.button == 1 and self.dragging:
            self.dragging = False
            return True, False
        return False, False

    def draw(self, screen, font, small_font):
        rect = self.get_rect()
        track = pygame.Rect(rect.x, rect.centery - 2, rect.width, 4)
        pygame.draw.rect(screen, (80, 80, 80), track)
        t = (self.value - self.low) / float(self.high - self.low)
        filled = pygame.Rect(rect.x, rect.centery - 2, int(rect.width * t), 4)
        pygame.draw.rect(screen, (100, 140, 180), filled)
        knob_x = rect.x + int(rect.width * t)
        pygame.draw.circle(screen, (220, 220, 220), (knob_x, rect.centery), 7)


class Button:
    """A clickable push button."""

    def __init__(self, x, y, width, label, height=26):
        self.x = x
        self.y = y
        self.width = width
        self.height = height
        self.label = label

    def get_rect(self):
        return pygame.Rect(self.x, self.y, self.width, self.height)

    def handle_event(self, event):
        """Returns (handled, clicked)."""
        if event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
            if self.get_rect().collidepoint(event.pos):
                return True, True
        return False, False

    def draw(self, screen, font, small_font):
        rect = self.get_rect()
        pygame.draw.rect(screen, (60, 90, 140), rect)
        pygame.draw.rect(screen, (100, 140, 180), rect, 1)
        text = font.render(self.label, True, (230, 235, 255))
        screen.blit(text, (rect.centerx - text.get_width() // 2,
                           rect.centery - text.get_height() // 2))


class PaletteDropdown:
    """Color scheme selector; the button and each option show a palette strip."""

    ITEM_HEIGHT = 22
    SWATCH_WIDTH = 90

    def __init__(self, x, y, width, names, max_iterations=100):
        self.x = x
        self.y = y
        self.width = width
        self.height = 24
        self.names = names
        self.selected_idx = 0
        self.max_iterations = max_iterations
        self.expanded = False

    def get_value(self):
        return self.names[self.selected_idx]

    def set_value(self, name):
        if name in self.names:
            self.selected_idx = self.names.index(name)

    def _button_rect(self):
        return pygame.Rect(self.x, self.y, self.width, self.height)

    def _item_rect(self, i):
        return pygame.Rect(self.x, self.y + self.height + i * self.ITEM_HEIGHT,
                           self.width, self.ITEM_HEIGHT)

    def get_rect(self):
        """Button rect, plus the option list while expanded."""
        rect = self._button_rect()
        if self.expanded:
            rect.height += len(self.names) * self.ITEM_HEIGHT
        return rect

    def handle_event(self, event):
        """Returns (handled, value_changed); any click closes an open list."""
        if event.type != pygame.MOUSEBUTTONDOWN or event.button != 1:
            return False, False

        if self._button_rect().collidepoint(event.pos):
            self.expanded = not self.expanded
            return True, False
        if not self.expanded:
            return False, False

        self.expanded = False
        for i in range(len(self.names)):
            if self._item_rect(i).collidepoint(event.pos):
                old_idx = self.selected_idx
                self.selected_idx = i
                return True, old_idx != i
        return True, False

    def _draw_swatch(self, screen, name, rect):
        strip = palette_preview(name, self.max_iterations, self.SWATCH_WIDTH)
        left = rect.right - self.SWATCH_WIDTH - 24
        for i, color in enumerate(strip):
            pygame.draw.line(screen, tuple(int(c) for c in color),
                             (left + i, rect.y + 6), (left + i, rect.bottom - 7))

    def draw(self, screen, font, small_font):
        button = self._button_rect()
        pygame.draw.rect(screen, (55, 55, 55), button)
        pygame.draw.rect(screen, (100, 100, 100), button, 1)
        screen.blit(small_font.render(self.get_value(), True, (220, 220, 220)),
                    (button.x + 8, button.y + 5))
        self._draw_swatch(screen, self.get_value(), button)
        arrow = small_font.render("^" if self.expanded else "v", True, (150, 150, 150))
        screen.blit(arrow, (button.right - 18, button.y + 5))

        if not self.expanded:
            return
        for i, name in enumerate(self.names):
            rect = self._item_rect(i)
            active = i == self.selected_idx
            pygame.draw.rect(screen, (70, 100, 70) if active else (50, 50, 50), rect)
            pygame.draw.rect(screen, (80, 80, 80), rect, 1)
            color = (255, 255, 255) if active else (180, 180, 180)
            screen.blit(small_font.render(name, True, color), (rect.x + 8, rect.y + 4))
            self._draw_swatch(screen, name, rect)


def format_step(step):
    """Table cells for one trajectory step: iteration, value, magnitude."""
    value = f"{step.re:.4f} + {step.im:.4f}i"
    return str(step.iteration), value, f"{step.magnitude:.4f}"


class TrajectoryTable:
    """Scrollable table of the steps of the selected point's orbit."""

    HEADERS = ('Iteration', 'Value', 'Magnitude')

    def __init__(self, x, y, width, height):
        self.x = x
        self.y = y
        self.width = width
        self.height = height
        self.trajectory = None
        self.scroll = 0
        self.hovered = False

    def get_rect(self):
        return pygame.Rect(self.x, self.y, self.width, self.height)

    @property
    def visible_rows(self):
        return max(0, (self.height - ROW_HEIGHT) // ROW_HEIGHT)

    def set_trajectory(self, trajectory):
        self.trajectory = trajectory
        self.scroll = 0

    def scroll_by(self, rows):
        total = len(self.trajectory) if self.trajectory is not None else 0
        max_scroll = max(0, total - self.visible_rows)
        self.scroll = max(0, min(max_scroll, self.scroll + rows))

    def handle_event(self, event):
        """Returns (handled, changed); the wheel scrolls while hovered."""
        if event.type == pygame.MOUSEMOTION:
            self.hovered = self.get_rect().collidepoint(event.pos)
        elif event.type == pygame.MOUSEWHEEL and self.hovered:
            self.scroll_by(-event.y * 3)
            return True, False
        return False, False

    def draw(self, screen, font, small_font):
        rect = self.get_rect()
        pygame.draw.rect(screen, (35, 35, 40), rect)
        pygame.draw.rect(screen, (80, 80, 80), rect, 1)

        col_x = (rect.x + 6, rect.x + 70, rect.x + rect.width - 70)
        for cx, header in zip(col_x, self.HEADERS):
            screen.blit(small_font.render(header, True, (180, 180, 180)), (cx, rect.y + 3))

        if self.trajectory is None:
            return
        row_y = rect.y + ROW_HEIGHT
        steps = self.trajectory.steps[self.scroll:self.scroll + self.visible_rows]
        for i, step in enumerate(steps):
            if i % 2:
                pygame.draw.rect(screen, (42, 42, 48),
                                 pygame.Rect(rect.x + 1, row_y, rect.width - 2, ROW_HEIGHT))
            for cx, cell in zip(col_x, format_step(step)):
                screen.blit(small_font.render(cell, True, (220, 220, 220)), (cx, row_y + 2))
            row_y += ROW_HEIGHT


class ControlPanel:
    """
    The side panel: tabs, zoom read-out, reset, iteration slider,
    color scheme, and either the color guide or the trajectory table.
    """

    MODE_HINTS = {
        MODE_EXPLORE: 'Click to zoom into any interesting area',
        MODE_LEARN: 'Click any point to see how its sequence behaves',
    }

    def __init__(self, x, y, width, height, settings, state):
        self.x = x
        self.y = y
        self.width = width
        self.height = height
        self.settings = settings

        self.font = None
        self.small_font = None

        inner_x = x + 10
        inner_w = width - 20
        low, high = settings['iteration_range']

        self.tabs = Tabs(inner_x, y + 10, inner_w, [MODE_EXPLORE, MODE_LEARN],
                         ['Explore Mode', 'Learn Mode'])
        self.tabs.set_value(state.mode)
        self.reset_button = Button(inner_x + inner_w - 110, y + 66, 110, 'Reset View')
        self.slider = Slider(inner_x, y + 124, inner_w, low, high, state.max_iterations)
        self.palette_dropdown = PaletteDropdown(inner_x, y + 166, inner_w, list_palette_names(),
                                                state.max_iterations)
        self.palette_dropdown.set_value(state.palette)
        table_top = y + 262
        self.table = TrajectoryTable(inner_x, table_top, inner_w, y + height - table_top - 10)

    def init_fonts(self):
        pygame.font.init()
        self.font = pygame.font.SysFont('Arial', 14)
        self.small_font = pygame.font.SysFont('Arial', 12)

    def get_rect(self):
        return pygame.Rect(self.x, self.y, self.width, self.height)

    def sync(self, state):
        """Make the widgets show state (after keyboard shortcuts, reset...)."""
        self.tabs.set_value(state.mode)
        self.slider.value = state.max_iterations
        self.palette_dropdown.set_value(state.palette)
        self.palette_dropdown.max_iterations = state.max_iterations

    def set_trajectory(self, trajectory):
        self.table.set_trajectory(trajectory)

    def handle_event(self, event, state):
        """
        Handle a pygame event against the current view state.

        Returns:
            (handled, new_state): new_state is state itself when nothing
            changed
        """
        # Open dropdown takes priority over widgets underneath it
        if self.palette_dropdown.expanded:
            handled, changed = self.palette_dropdown.handle_event(event)
            if handled:
                if changed:
                    state = state.with_palette(self.palette_dropdown.get_value())
                return True, state

        handled, changed = self.slider.handle_event(event)
        if handled:
            if changed:
                state = state.with_max_iterations(self.slider.value)
            return True, state

        if state.mode == MODE_LEARN:
            handled, _ = self.table.handle_event(event)
            if handled:
                return True, state

        if event.type != pygame.MOUSEBUTTONDOWN:
            return False, state

        handled, changed = self.tabs.handle_event(event)
        if handled:
            if changed:
                state = state.with_mode(self.tabs.get_value())
            return True, state

        handled, _ = self.reset_button.handle_event(event)
        if handled:
            state = state.reset()
            self.sync(state)
            return True, state

        handled, _ = self.palette_dropdown.handle_event(event)
        if handled:
            return True, state

        if self.get_rect().collidepoint(event.pos):
            return True, state
        return False, state

    def draw(self, screen, state):
        if self.font is None:
            self.init_fonts()

        rect = self.get_rect()
        pygame.draw.rect(screen, (40, 40, 40), rect)
        pygame.draw.line(screen, (100, 100, 100), rect.topleft, rect.bottomleft)

        inner_x = self.x + 10
        self.tabs.draw(screen, self.font, self.small_font)

        hint = self.small_font.render(self.MODE_HINTS[state.mode], True, (160, 160, 160))
        screen.blit(hint, (inner_x, self.y + 44))

        zoom_text = f'Current Zoom: {state.zoom_label}'
        if state.at_max_zoom:
            zoom_text += ' (max)'
        zoom = self.font.render(zoom_text, True, (220, 220, 220))
        screen.blit(zoom, (inner_x, self.y + 70))
        self.reset_button.draw(screen, self.font, self.small_font)

        label = self.small_font.render(f'Max Iterations: {state.max_iterations}',
                                       True, (180, 180, 180))
        screen.blit(label, (inner_x, self.y + 104))
        self.slider.draw(screen, self.font, self.small_font)

        label = self.small_font.render('Color Scheme:', True, (180, 180, 180))
        screen.blit(label, (inner_x, self.y + 148))

        if state.mode == MODE_LEARN:
            self._draw_point_analysis(screen, state, self.y + 222)
        else:
            self._draw_color_guide(screen, state, self.y + 222)
            self._draw_quick_guide(screen, self.y + 310)

        # Dropdown last so its item list overlays everything else
        self.palette_dropdown.draw(screen, self.font, self.small_font)

    def _draw_color_guide(self, screen, state, top):
        n = state.max_iterations
        entries = [
            ((0, 0, 0), 'Inside set (sequence stays bounded)'),
            (color_for(state.palette, 1, n), 'Outside set - escapes quickly'),
            (color_for(state.palette, n - 1, n), 'Outside set - escapes slowly'),
        ]
        label = self.small_font.render('Color Guide:', True, (180, 180, 180))
        screen.blit(label, (self.x + 10, top))
        y = top + 20
        for color, text in entries:
            pygame.draw.rect(screen, color, pygame.Rect(self.x + 10, y, 12, 12))
            pygame.draw.rect(screen, (120, 120, 120), pygame.Rect(self.x + 10, y, 12, 12), 1)
            screen.blit(self.small_font.render(text, True, (200, 200, 200)), (self.x + 30, y))
            y += 20

    def _draw_point_analysis(self, screen, state, top):
        trajectory = self.table.trajectory
        text = f'Selected Point: ({state.selected_x:.3f}, {state.selected_y:.3f})'
        screen.blit(self.small_font.render(text, True, (220, 220, 220)), (self.x + 10, top))
        if trajectory is not None:
            outcome = ('escaped after %d iterations' % trajectory.result.final_iteration
                       if trajectory.result.escaped
                       else 'stayed bounded for %d iterations' % trajectory.max_iterations)
            screen.blit(self.small_font.render(outcome, True, (160, 160, 160)),
                        (self.x + 10, top + 18))
        self.table.draw(screen, self.font, self.small_font)

    def _draw_quick_guide(self, screen, top):
        y = top
        for text, is_heading in quick_guide_lines():
            if y + GUIDE_LINE_HEIGHT > self.y + self.height - 6:
                break
            if is_heading and y > top:
                y += 6
            font = self.font if is_heading else self.small_font
            color = (220, 220, 220) if is_heading else (170, 170, 170)
            screen.blit(font.render(text, True, color), (self.x + 10, y))
            y += GUIDE_LINE_HEIGHT + (3 if is_heading else 0)
