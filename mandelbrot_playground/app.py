"""
Main application module for the Mandelbrot playground.

Contains the PlaygroundApp class which handles:
- Window setup and main loop
- User input (click to zoom or select, keyboard shortcuts)
- Rendering and display of the image, marker and orbit
- Interaction between renderer, view state and side panel
"""

import logging

import numpy as np
import pygame

from .compute import trace, warmup_jit
from .config import DEFAULT_SETTINGS
from .panel import ControlPanel
from .renderer import MandelbrotRenderer
from .view_state import MODE_LEARN, ViewState

logger = logging.getLogger(__name__)

CAPTION = "Mandelbrot Set Playground - Click to explore, Tab to switch mode, R to reset"


class PlaygroundApp:
    """
    Main application class for the Mandelbrot playground.

    Handles the pygame window, event loop, and coordinates between the
    renderer, the side panel and the current ViewState.
    """

    MAX_ORBIT_POINTS = 200  # Orbit points drawn over the image in Learn mode

    def __init__(self, settings=None, state=None):
        """
        Initialize the application.

        Args:
            settings: Settings dict (see config.load_settings)
            state: Initial ViewState (default: built from settings)
        """
        self.settings = settings or DEFAULT_SETTINGS
        self.width = self.settings['window_width']
        self.height = self.settings['window_height']
        self.panel_width = self.settings['panel_width']
        self.state = state or ViewState.initial(self.settings)

        # Pygame state (initialized in run())
        self.screen = None
        self.clock = None

        # Components
        self.renderer = None
        self.panel = None

        # Display state
        self.current_surface = None
        self.current_result = None
        self.trajectory = None

        # Render timing
        self.last_action_time = 0
        self.pending_render = False

        self.running = False

    def run(self):
        """Run the application main loop."""
        self._init_pygame()
        self._init_components()
        self._warmup_and_initial_render()

        self.running = True
        while self.running:
            current_time = pygame.time.get_ticks()

            self._handle_events(current_time)
            self._check_render_result()
            self._maybe_start_render(current_time)
            self._draw()

            self.clock.tick(60)

        pygame.quit()

    def _init_pygame(self):
        """Initialize pygame and create window."""
        pygame.init()
        self.screen = pygame.display.set_mode(
            (self.width + self.panel_width, self.height),
            pygame.DOUBLEBUF
        )
        pygame.display.set_caption(CAPTION)
        self.clock = pygame.time.Clock()

    def _init_components(self):
        """Initialize renderer and side panel."""
        self.renderer = MandelbrotRenderer()
        self.panel = ControlPanel(
            self.width, 0, self.panel_width, self.height, self.settings, self.state
        )
        self._update_trajectory()

    def _warmup_and_initial_render(self):
        """Warm up JIT and do initial render."""
        pygame.display.set_caption("Compiling (first run only)...")
        warmup_jit()

        result = self.renderer.render_now(
            self._viewport(), self.state.max_iterations, self.state.palette
        )
        self._show_result(result)
        self.screen.blit(self.current_surface, (0, 0))
        pygame.display.flip()

        pygame.display.set_caption(CAPTION)

    def _viewport(self):
        return self.state.viewport(self.width, self.height)

    def _set_state(self, new_state, current_time):
        """Replace the view state and schedule whatever it invalidates."""
        old_state = self.state
        if new_state == old_state:
            return
        self.state = new_state
        logger.debug("view state: %r", new_state)

        if new_state.render_key() != old_state.render_key():
            self.last_action_time = current_time
            self.pending_render = True

        if (new_state.selected_x, new_state.selected_y, new_state.max_iterations) != \
           (old_state.selected_x, old_state.selected_y, old_state.max_iterations):
            self._update_trajectory()

        self.panel.sync(new_state)

    def _update_trajectory(self):
        self.trajectory = trace(
            self.state.selected_x, self.state.selected_y, self.state.max_iterations
        )
        self.panel.set_trajectory(self.trajectory)

    def _handle_events(self, current_time):
        """Process all pending pygame events."""
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self.running = False
                continue

            # Panel gets first crack at events
            handled, new_state = self.panel.handle_event(event, self.state)
            self._set_state(new_state, current_time)
            if handled:
                continue

            if event.type == pygame.MOUSEBUTTONDOWN:
                self._handle_mouse_down(event, current_time)
            elif event.type == pygame.KEYDOWN:
                self._handle_key(event, current_time)

    def _handle_mouse_down(self, event, current_time):
        """Left click on the image zooms (Explore) or selects (Learn)."""
        if event.button != 1:
            return
        mx, my = event.pos
        if 0 <= mx < self.width and 0 <= my < self.height:
            self._set_state(self.state.click(mx, my, self.width, self.height), current_time)

    def _handle_key(self, event, current_time):
        """Handle keyboard input."""
        step = self.settings['iteration_step']
        if event.key == pygame.K_r:
            self._set_state(self.state.reset(), current_time)
        elif event.key == pygame.K_TAB:
            self._set_state(self.state.toggle_mode(), current_time)
        elif event.key == pygame.K_UP:
            self._set_state(
                self.state.with_max_iterations(self.state.max_iterations + step), current_time
            )
        elif event.key == pygame.K_DOWN:
            self._set_state(
                self.state.with_max_iterations(self.state.max_iterations - step), current_time
            )
        elif event.key == pygame.K_ESCAPE:
            self.running = False

    def _show_result(self, result):
        self.current_result = result
        self.current_surface = pygame.surfarray.make_surface(
            np.ascontiguousarray(result.rgba[..., :3].swapaxes(0, 1))
        )

    def _check_render_result(self):
        """Check if async render has completed."""
        result = self.renderer.get_result()
        if result is not None:
            self._show_result(result)
            pygame.display.set_caption(CAPTION)

    def _maybe_start_render(self, current_time):
        """Start a new render once input has settled."""
        delay = self.settings['render_delay_ms']
        if self.pending_render and current_time - self.last_action_time > delay:
            self.pending_render = False
            up_to_date = self.renderer.compute_async(
                self._viewport(), self.state.max_iterations, self.state.palette
            )
            if not up_to_date:
                pygame.display.set_caption("Computing...")

    def _draw(self):
        """Draw the current frame."""
        self.screen.fill((0, 0, 0))
        if self.current_surface is not None:
            self.screen.blit(self.current_surface, (0, 0))

        if self.state.mode == MODE_LEARN:
            self._draw_orbit()

        self.panel.draw(self.screen, self.state)
        pygame.display.flip()

    def _draw_orbit(self):
        """Mark the selected point and connect the first steps of its orbit."""
        viewport = self._viewport()
        image_rect = pygame.Rect(0, 0, self.width, self.height)

        if self.trajectory is not None and len(self.trajectory) > 1:
            points = []
            for step in self.trajectory.steps[:self.MAX_ORBIT_POINTS]:
                px, py = viewport.complex_to_pixel(step.re, step.im)
                # Far off-screen at deep zoom; pygame needs small ints
                px = max(-10000.0, min(10000.0, px))
                py = max(-10000.0, min(10000.0, py))
                points.append((int(px), int(py)))
            self.screen.set_clip(image_rect)
            pygame.draw.lines(self.screen, (255, 255, 255), False, points, 1)
            for point in points:
                pygame.draw.circle(self.screen, (255, 220, 80), point, 2)
            self.screen.set_clip(None)

        sx, sy = viewport.complex_to_pixel(self.state.selected_x, self.state.selected_y)
        if image_rect.collidepoint(sx, sy):
            pygame.draw.circle(self.screen, (255, 60, 60), (int(sx), int(sy)), 6, 2)


def run(settings=None, state=None):
    """
    Run the Mandelbrot playground.

    Args:
        settings: Settings dict (default: built-in defaults)
        state: Initial ViewState (default: built from settings)
    """
    app = PlaygroundApp(settings, state)
    try:
        app.run()
    except KeyboardInterrupt:
        pygame.quit()
