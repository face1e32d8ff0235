"""
Chart Viewport
==============
Pan/zoom state for one viewer and the pointer gesture handling that turns a
click into a chart selection.

The chart content is drawn with `translate(pan) then scale(zoom)` over a fixed
500x500 logical canvas. `to_chart` is the exact inverse of `to_screen`.
"""

import math
from dataclasses import dataclass
from typing import Callable, Optional, Tuple

from concert_buddy.seating.layout import VenueLayout, hit_test

CHART_SIZE = 500
MIN_ZOOM = 0.5
MAX_ZOOM = 3.0
ZOOM_STEP = 1.2
PRIMARY_BUTTON = 0

# Pointer travel (screen px) after which a press counts as a pan, not a click
DRAG_THRESHOLD = 4.0


@dataclass
class ViewportState:
    zoom: float = 1.0
    pan_x: float = 0.0
    pan_y: float = 0.0
    is_dragging: bool = False
    drag_anchor: Tuple[float, float] = (0.0, 0.0)

    def zoom_in(self) -> float:
        self.zoom = min(self.zoom * ZOOM_STEP, MAX_ZOOM)
        return self.zoom

    def zoom_out(self) -> float:
        self.zoom = max(self.zoom / ZOOM_STEP, MIN_ZOOM)
        return self.zoom

    def reset(self) -> None:
        self.zoom = 1.0
        self.pan_x = 0.0
        self.pan_y = 0.0

    def to_chart(self, px: float, py: float, rect_left: float = 0.0, rect_top: float = 0.0) -> Tuple[float, float]:
        """Device pointer coordinates -> logical chart coordinates."""
        x = (px - rect_left - self.pan_x) / self.zoom
        y = (py - rect_top - self.pan_y) / self.zoom
        return x, y

    def to_screen(self, x: float, y: float, rect_left: float = 0.0, rect_top: float = 0.0) -> Tuple[float, float]:
        """Logical chart coordinates -> device pointer coordinates."""
        px = x * self.zoom + self.pan_x + rect_left
        py = y * self.zoom + self.pan_y + rect_top
        return px, py


@dataclass(frozen=True)
class Selection:
    x: float
    y: float
    section_name: Optional[str] = None


class ChartInteraction:
    """
    Pointer gesture state machine for a seating chart.

    press -> move* -> release is a pan. A click arriving while a drag is in
    progress, or right after a press that moved past DRAG_THRESHOLD, is
    swallowed. Every other click is resolved to chart coordinates and a
    section name (if any) and handed to `on_select`.
    """

    def __init__(
        self,
        layout: VenueLayout,
        on_select: Optional[Callable[[Selection], None]] = None,
        viewport: Optional[ViewportState] = None,
    ):
        self.layout = layout
        self.on_select = on_select
        self.viewport = viewport or ViewportState()
        self.pending: Optional[Selection] = None
        self._press_origin: Optional[Tuple[float, float]] = None
        self._panned = False

    def press(self, px: float, py: float, button: int = PRIMARY_BUTTON) -> bool:
        if button != PRIMARY_BUTTON:
            return False
        vp = self.viewport
        vp.is_dragging = True
        vp.drag_anchor = (px - vp.pan_x, py - vp.pan_y)
        self._press_origin = (px, py)
        self._panned = False
        return True

    def move(self, px: float, py: float) -> None:
        vp = self.viewport
        if not vp.is_dragging:
            return
        vp.pan_x = px - vp.drag_anchor[0]
        vp.pan_y = py - vp.drag_anchor[1]
        if self._press_origin is not None:
            ox, oy = self._press_origin
            if math.hypot(px - ox, py - oy) > DRAG_THRESHOLD:
                self._panned = True

    def release(self) -> None:
        self.viewport.is_dragging = False
        self._press_origin = None

    # Pointer leaving the canvas ends the drag the same way
    leave = release

    def click(self, px: float, py: float, rect_left: float = 0.0, rect_top: float = 0.0) -> Optional[Selection]:
        if self.viewport.is_dragging or self._panned:
            self._panned = False
            return None

        x, y = self.viewport.to_chart(px, py, rect_left, rect_top)
        section = hit_test(self.layout, x, y)
        selection = Selection(x=x, y=y, section_name=section.name if section else None)
        self.pending = selection
        if self.on_select is not None:
            self.on_select(selection)
        return selection
