"""Model <-> screen transform with pan, zoom and auto-fit.

``screen = model * zoom + shift`` componentwise.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, Optional

from .config import CanvasConfig
from .geometry import Bounds, bounding_box
from .models import Point

logger = logging.getLogger(__name__)


@dataclass
class Viewport:
    shift_x: float = 0.0
    shift_y: float = 0.0
    zoom: float = 1.0

    def __setattr__(self, name: str, value) -> None:
        if name == "zoom" and value < 0:
            raise ValueError(f"zoom must be >= 0, got {value}")
        object.__setattr__(self, name, value)

    @property
    def shift(self) -> Point:
        return (self.shift_x, self.shift_y)

    def to_screen(self, point: Point) -> Point:
        return (
            point[0] * self.zoom + self.shift_x,
            point[1] * self.zoom + self.shift_y,
        )

    def to_model(self, point: Point) -> Point:
        """Inverse of :meth:`to_screen`.

        A zero zoom has no inverse; the shift alone is undone, as if the
        zoom were 1.
        """
        if self.zoom == 0:
            return (point[0] - self.shift_x, point[1] - self.shift_y)
        return (
            (point[0] - self.shift_x) / self.zoom,
            (point[1] - self.shift_y) / self.zoom,
        )

    def pan(self, dx: float, dy: float) -> None:
        self.shift_x += dx
        self.shift_y += dy

    def zoom_by(self, factor: float, anchor: Optional[Point] = None) -> None:
        """Scale the zoom by *factor*, keeping screen point *anchor* fixed."""
        if factor <= 0:
            raise ValueError(f"zoom factor must be > 0, got {factor}")
        if anchor is None:
            self.zoom *= factor
            return
        model = self.to_model(anchor)
        self.zoom *= factor
        self.shift_x = anchor[0] - model[0] * self.zoom
        self.shift_y = anchor[1] - model[1] * self.zoom

    def fit(self, bounds: Bounds, canvas: CanvasConfig) -> bool:
        """Zoom and shift so *bounds* fills the padded canvas, centred.

        An axis with zero extent does not constrain the zoom.  When both
        axes are degenerate nothing changes and False is returned.
        """
        min_x, min_y, max_x, max_y = bounds
        usable = 1 - canvas.padding_factor
        ratios = []
        if max_x - min_x > 0:
            ratios.append(usable * canvas.width / (max_x - min_x))
        if max_y - min_y > 0:
            ratios.append(usable * canvas.height / (max_y - min_y))
        if not ratios:
            return False

        self.zoom = min(ratios)
        self.shift_x = canvas.width / 2 - self.zoom * (min_x + max_x) / 2
        self.shift_y = canvas.height / 2 - self.zoom * (min_y + max_y) / 2
        logger.debug("Fitted viewport: zoom=%.4f shift=(%.2f, %.2f)", self.zoom, self.shift_x, self.shift_y)
        return True

    def fit_points(self, points: Iterable[Point], canvas: CanvasConfig) -> bool:
        """Auto-fit over *points*; fewer than two points leave the viewport alone."""
        points = list(points)
        if len(points) < 2:
            return False
        bounds = bounding_box(points)
        assert bounds is not None
        return self.fit(bounds, canvas)
