"""Pointer commands and the per-frame simulation tick.

The host UI owns the event loop and timer; it forwards pointer events to
an :class:`InteractionController` and calls :meth:`~InteractionController.tick`
once per frame.  Everything runs synchronously on the caller's thread.
"""

from __future__ import annotations

import logging
from typing import Callable, List, Optional

from .frame import Frame, build_frame
from .layout import LayoutEngine
from .models import Point, VertexId
from .viewport import Viewport

logger = logging.getLogger(__name__)

ClickAction = Callable[[VertexId], None]


class InteractionController:
    """Drag, pan, hover and click handling over a :class:`LayoutEngine`.

    Pressing on a vertex drags it; pressing elsewhere pans the view.
    Pointer queries return nothing until the first frame has been built,
    since nothing is on screen to hit before then.
    """

    def __init__(
        self,
        engine: LayoutEngine,
        viewport: Optional[Viewport] = None,
        auto_fit: bool = True,
    ) -> None:
        self.engine = engine
        self.viewport = viewport or Viewport()
        self.auto_fit = auto_fit
        self.hovered: Optional[VertexId] = None
        self._active = False
        self._drawn = False
        self._panning = False
        self._press_point: Point = (0.0, 0.0)
        self._shift_buffer: Point = (0.0, 0.0)
        self._click_actions: List[ClickAction] = []

    # ── Simulation control ──────────────────────────────────────────

    @property
    def active(self) -> bool:
        return self._active

    def start(self) -> None:
        self._active = True

    def stop(self) -> None:
        self._active = False

    def tick(self) -> Optional[Frame]:
        """Advance one frame's worth of steps, fit the view and build a frame.

        Returns None while no graph is bound.
        """
        if not self.engine.is_bound:
            self._drawn = False
            return None
        if self._active:
            self.engine.advance(self.engine.config.simulation.steps_per_frame)
        if self.auto_fit:
            self.engine.fit(self.viewport)
        self._drawn = True
        return build_frame(self.engine, self.viewport)

    # ── Pointer commands ────────────────────────────────────────────

    def vertex_at(self, x: float, y: float) -> Optional[VertexId]:
        if not self._drawn or not self.engine.is_bound:
            return None
        return self.engine.pick(self.viewport, (x, y))

    def press(self, x: float, y: float) -> Optional[VertexId]:
        """Start dragging the vertex under the pointer, or start panning."""
        hit = self.vertex_at(x, y)
        if hit is not None:
            self.engine.begin_drag(hit)
            self._panning = False
        else:
            self._panning = True
            self._press_point = (x, y)
            self._shift_buffer = self.viewport.shift
        return hit

    def move(self, x: float, y: float) -> None:
        if self.engine.dragged is not None:
            self.engine.update_drag(self.viewport.to_model((x, y)))
        elif self._panning:
            self.viewport.shift_x = self._shift_buffer[0] + (x - self._press_point[0])
            self.viewport.shift_y = self._shift_buffer[1] + (y - self._press_point[1])

    def release(self) -> None:
        self.engine.end_drag()
        self._panning = False

    def hover(self, x: float, y: float) -> Optional[VertexId]:
        self.hovered = self.vertex_at(x, y)
        return self.hovered

    def on_click(self, action: ClickAction) -> None:
        self._click_actions.append(action)

    def click(self, x: float, y: float) -> Optional[VertexId]:
        hit = self.vertex_at(x, y)
        if hit is not None:
            logger.debug("Clicked vertex %s", hit)
            for action in self._click_actions:
                action(hit)
        return hit
