from __future__ import annotations

"""Frame-scoped line segment obstacles.

Obstacles are rebuilt for every frame from evaluated shapes and never outlive
it. :class:`ObstacleSet` stores them as parallel numpy arrays so a batch of
ray sample points can be tested against every segment at once.
"""

from dataclasses import dataclass
from typing import Iterable, List

import numpy as np


@dataclass(frozen=True)
class Obstacle:
    """One directed edge ``(x1, y1) -> (x2, y2)`` of an obstacle polygon."""

    x1: float
    y1: float
    x2: float
    y2: float
    opacity: float = 100.0
    reflectance: float | None = 0.0
    roughness: float = 0.0
    color: int = 0

    @property
    def direction(self) -> tuple[float, float]:
        return (self.x2 - self.x1, self.y2 - self.y1)


def polygon_edges(
    vertices: np.ndarray,
    *,
    opacity: float,
    reflectance: float | None,
    roughness: float = 0.0,
    color: int = 0,
) -> List[Obstacle]:
    """Return one obstacle per edge of the closed loop ``vertices``."""

    if len(vertices) < 2:
        return []
    ends = np.roll(vertices, -1, axis=0)
    return [
        Obstacle(
            float(a[0]),
            float(a[1]),
            float(b[0]),
            float(b[1]),
            opacity=opacity,
            reflectance=reflectance,
            roughness=roughness,
            color=color,
        )
        for a, b in zip(vertices, ends)
    ]


class ObstacleSet:
    """Immutable, vectorised collection of one frame's obstacles."""

    def __init__(self, obstacles: Iterable[Obstacle] = ()) -> None:
        self.obstacles: tuple[Obstacle, ...] = tuple(obstacles)
        seg = np.array(
            [(o.x1, o.y1, o.x2, o.y2) for o in self.obstacles], dtype=float
        ).reshape(-1, 4)
        self._x1 = seg[:, 0]
        self._y1 = seg[:, 1]
        self._dx = seg[:, 2] - seg[:, 0]
        self._dy = seg[:, 3] - seg[:, 1]
        self._x2 = seg[:, 2]
        self._y2 = seg[:, 3]
        self._len2 = self._dx**2 + self._dy**2

    def __len__(self) -> int:
        return len(self.obstacles)

    def __iter__(self):
        return iter(self.obstacles)

    def __getitem__(self, index: int) -> Obstacle:
        return self.obstacles[index]

    def first_hits(self, points: np.ndarray, tolerance: float) -> np.ndarray:
        """Return, per point, the index of the first obstacle within ``tolerance``.

        A point hits a segment when it is within ``tolerance`` of either
        endpoint, or when its projection falls on the segment and the
        perpendicular distance is within ``tolerance``. Obstacles are checked
        in insertion order; ``-1`` marks points that hit nothing.

        Parameters
        ----------
        points:
            Array of shape ``(n, 2)``.
        tolerance:
            Hit radius in scene units.
        """

        points = np.asarray(points, dtype=float).reshape(-1, 2)
        if not self.obstacles or not len(points):
            return np.full(len(points), -1, dtype=int)
        tol2 = tolerance * tolerance
        px = points[:, 0:1]
        py = points[:, 1:2]
        d1 = (px - self._x1) ** 2 + (py - self._y1) ** 2
        d2 = (px - self._x2) ** 2 + (py - self._y2) ** 2
        near_end = (d1 <= tol2) | (d2 <= tol2)

        with np.errstate(divide="ignore", invalid="ignore"):
            t = ((px - self._x1) * self._dx + (py - self._y1) * self._dy) / self._len2
        on_span = (self._len2 > 0) & (t >= 0) & (t <= 1)
        t = np.where(on_span, t, 0.0)
        cx = self._x1 + t * self._dx
        cy = self._y1 + t * self._dy
        near_line = on_span & (((px - cx) ** 2 + (py - cy) ** 2) <= tol2)

        hits = near_end | near_line
        first = hits.argmax(axis=1)
        return np.where(hits.any(axis=1), first, -1)


__all__ = ["Obstacle", "ObstacleSet", "polygon_edges"]
