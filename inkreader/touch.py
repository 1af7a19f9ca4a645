"""On-screen touch buttons drawn along the top edge of the display."""

from __future__ import annotations

import logging
from typing import Protocol

from inkreader.actions import ActionCallback, UIAction

__all__ = [
    "BUTTON_WIDTH",
    "BUTTON_HEIGHT",
    "MARGIN_TOP",
    "TOUCH_ROW_LIMIT",
    "Renderer",
    "TouchControls",
]

logger = logging.getLogger("TOUCH")

BUTTON_WIDTH = 120
BUTTON_HEIGHT = 34
# Top margin the page content uses below the touch buttons.
MARGIN_TOP = 35
# Touches at or below this y coordinate never hit a button.
TOUCH_ROW_LIMIT = 200

_BLACK = 0
_WHITE = 255


class Renderer(Protocol):
    """The drawing operations the touch controls need."""

    def set_margin_top(self, margin: int) -> None: ...
    def draw_rect(self, x: int, y: int, width: int, height: int, color: int) -> None: ...
    def draw_triangle(
        self, x0: int, y0: int, x1: int, y1: int, x2: int, y2: int, color: int
    ) -> None: ...
    def fill_triangle(
        self, x0: int, y0: int, x1: int, y1: int, x2: int, y2: int, color: int
    ) -> None: ...
    def draw_circle(self, x: int, y: int, radius: int, color: int) -> None: ...
    def fill_circle(self, x: int, y: int, radius: int, color: int) -> None: ...
    def flush_area(self, x: int, y: int, width: int, height: int) -> None: ...


class TouchControls:
    """Three tap targets (down, up, select) turned into UI actions."""

    def __init__(self, on_action: ActionCallback, renderer: Renderer | None = None) -> None:
        self._on_action = on_action
        self.renderer = renderer
        self.button_width = BUTTON_WIDTH
        self.button_height = BUTTON_HEIGHT
        self.last_action = UIAction.NONE

    @property
    def _select_circle_x(self) -> int:
        return (self.button_width * 2 + 60) + self.button_width // 2 + 9

    def handle_touch(self, x: int, y: int) -> UIAction:
        """Turn a tap at (x, y) into an action and report it."""
        logger.info("Received touch event %d,%d", x, y)
        width = self.button_width
        if 10 <= x <= 10 + width and y < TOUCH_ROW_LIMIT:
            action = UIAction.DOWN
            if self.renderer is not None:
                self.render_pressed_state(self.renderer, UIAction.UP, False)
        elif 150 <= x <= 150 + width and y < TOUCH_ROW_LIMIT:
            action = UIAction.UP
            if self.renderer is not None:
                self.render_pressed_state(self.renderer, UIAction.DOWN, False)
        elif 300 <= x <= 300 + width and y < TOUCH_ROW_LIMIT:
            action = UIAction.SELECT
        else:
            action = UIAction.LAST_INTERACTION
        self.last_action = action
        if action is not UIAction.NONE:
            self._on_action(action)
        return action

    def render(self, renderer: Renderer) -> None:
        """Draw the three button outlines and their symbols."""
        renderer.set_margin_top(0)
        width, height = self.button_width, self.button_height

        x_offset = 10
        x_tri = x_offset + 70
        renderer.draw_rect(x_offset, 1, width, height, _BLACK)
        renderer.draw_triangle(x_tri, 20, x_tri - 5, 6, x_tri + 5, 6, _BLACK)

        x_offset = width + 30
        x_tri = x_offset + 70
        renderer.draw_rect(x_offset, 1, width, height, _BLACK)
        renderer.draw_triangle(x_tri, 6, x_tri - 5, 20, x_tri + 5, 20, _BLACK)

        x_offset = width * 2 + 60
        renderer.draw_rect(x_offset, 1, width, height, _BLACK)
        renderer.draw_circle(x_offset + width // 2 + 9, 15, 5, _BLACK)

        renderer.set_margin_top(MARGIN_TOP)

    def render_pressed_state(
        self, renderer: Renderer, action: UIAction, state: bool = True
    ) -> None:
        """Fill (or clear, when ``state`` is false) the symbol of ``action``."""
        renderer.set_margin_top(0)
        if action is UIAction.DOWN:
            if state:
                renderer.fill_triangle(80, 20, 75, 6, 85, 6, _BLACK)
            else:
                renderer.fill_triangle(81, 19, 76, 7, 86, 7, _WHITE)
            renderer.flush_area(76, 6, 10, 15)
        elif action is UIAction.UP:
            if state:
                renderer.fill_triangle(220, 6, 215, 20, 225, 20, _BLACK)
            else:
                renderer.fill_triangle(221, 7, 216, 19, 226, 19, _WHITE)
            renderer.flush_area(195, 225, 10, 15)
        elif action is UIAction.SELECT:
            x_circle = self._select_circle_x
            renderer.fill_circle(x_circle, 15, 5, _BLACK)
            renderer.flush_area(x_circle - 3, 12, 6, 6)
        renderer.set_margin_top(MARGIN_TOP)