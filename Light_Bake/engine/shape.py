from __future__ import annotations

"""Animated polygons and their evaluation at simulation time."""

import math
from dataclasses import dataclass, field
from typing import Any, Dict, List, Sequence

import numpy as np

from .keyframes import Track

#: Coordinate an unspawned shape collapses to, far outside any scene.
OFFSCREEN = 9999.0


@dataclass(frozen=True)
class InheritMask:
    """Which parent channels a child follows."""

    move: bool = False
    scale: bool = False
    rotate: bool = False

    @classmethod
    def from_string(cls, bits: str | int | None) -> "InheritMask":
        """Parse the editor's ``"101"``-style move/scale/rotate mask."""

        if isinstance(bits, int):
            bits = f"{bits:03d}"
        text = str(bits if bits is not None else "000").ljust(3, "0")
        return cls(move=text[0] == "1", scale=text[1] == "1", rotate=text[2] == "1")


@dataclass
class ParentBinding:
    """Parent transform copied by value from the parent object."""

    id: str
    move: Track
    scale: Track
    rotate: Track
    spawn_time: float = 0.0
    mask: InheritMask = field(default_factory=InheritMask)


@dataclass
class ShapeState:
    """Result of evaluating a :class:`Shape` at one instant."""

    vertices: np.ndarray
    move: tuple[float, float]
    scale: tuple[float, float]
    rotate: float
    opacity: float
    color: int
    spawned: bool = True

    @classmethod
    def unspawned(cls) -> "ShapeState":
        return cls(
            vertices=np.array([[OFFSCREEN, OFFSCREEN]]),
            move=(0.0, 0.0),
            scale=(0.0, 0.0),
            rotate=0.0,
            opacity=0.0,
            color=0,
            spawned=False,
        )


def scale_vertices(vertices: np.ndarray, sx: float, sy: float) -> np.ndarray:
    return vertices * np.array([sx, sy])


def rotate_vertices(vertices: np.ndarray, degrees: float) -> np.ndarray:
    """Rotate ``vertices`` about the origin by ``degrees`` counter-clockwise."""

    rad = math.radians(degrees)
    c, s = math.cos(rad), math.sin(rad)
    return vertices @ np.array([[c, s], [-s, c]])


def move_vertices(vertices: np.ndarray, dx: float, dy: float) -> np.ndarray:
    return vertices + np.array([dx, dy])


class Shape:
    """A polygon animated by move, scale, rotate and color tracks.

    ``original_vertices`` is never modified. Every call to :meth:`evaluate`
    starts again from it, so evaluations are independent of each other and
    of call order.
    """

    def __init__(
        self,
        id: str,
        vertices: Sequence[Sequence[float]],
        move: Track,
        scale: Track,
        rotate: Track,
        color: Track,
        spawn_time: float = 0.0,
        parent: ParentBinding | None = None,
        name: str = "",
    ) -> None:
        self.id = id
        self.name = name
        self.original_vertices = np.array(vertices, dtype=float).reshape(-1, 2)
        self.original_vertices.setflags(write=False)
        self.vertices = self.original_vertices.copy()
        self.move = move
        self.scale = scale
        self.rotate = rotate
        self.color = color
        self.spawn_time = float(spawn_time or 0.0)
        self.parent = parent

    @classmethod
    def from_events(
        cls,
        id: str,
        vertices: Sequence[Sequence[float]],
        events: List[Dict[str, Any]],
        spawn_time: float = 0.0,
        parent: ParentBinding | None = None,
        name: str = "",
    ) -> "Shape":
        """Build a shape from the editor's four-entry ``e`` list."""

        events = list(events or []) + [{}] * (4 - len(events or []))
        return cls(
            id,
            vertices,
            move=Track.from_event(events[0]),
            scale=Track.from_event(events[1]),
            rotate=Track.from_event(events[2]),
            color=Track.from_event(events[3]),
            spawn_time=spawn_time,
            parent=parent,
            name=name,
        )

    def reset_vertices(self) -> None:
        self.vertices = self.original_vertices.copy()

    def evaluate(self, time: float) -> ShapeState:
        """Return the shape's transform and vertices at ``time`` seconds.

        Before :attr:`spawn_time` the shape collapses to a single offscreen
        point with zero scale and opacity. Otherwise its own scale, rotation
        and translation are applied in that order, followed by the inherited
        parent channels enabled by the parent's :class:`InheritMask`.
        """

        self.reset_vertices()
        if time < self.spawn_time:
            return ShapeState.unspawned()
        local = time - self.spawn_time

        sx, sy = self.scale.evaluate(local, (1.0, 1.0))
        self.vertices = scale_vertices(self.vertices, sx, sy)
        (rotation,) = self.rotate.evaluate(local, (0.0,))
        self.vertices = rotate_vertices(self.vertices, rotation)
        mx, my = self.move.evaluate(local, (0.0, 0.0))
        self.vertices = move_vertices(self.vertices, mx, my)
        color, opacity = self.color.evaluate(local, (0.0, 0.0), discrete=(0,))

        if self.parent is not None:
            sx, sy, rotation, mx, my = self._apply_parent(
                time, sx, sy, rotation, mx, my
            )

        return ShapeState(
            vertices=self.vertices,
            move=(mx, my),
            scale=(sx, sy),
            rotate=rotation,
            opacity=opacity,
            color=int(color),
        )

    def _apply_parent(
        self, time: float, sx: float, sy: float, rotation: float, mx: float, my: float
    ) -> tuple[float, float, float, float, float]:
        parent = self.parent
        local = max(0.0, time - parent.spawn_time)
        if parent.mask.scale:
            psx, psy = parent.scale.evaluate(local, (1.0, 1.0))
            self.vertices = scale_vertices(self.vertices, psx, psy)
            sx, sy = sx * psx, sy * psy
        if parent.mask.rotate:
            (prot,) = parent.rotate.evaluate(local, (0.0,))
            self.vertices = rotate_vertices(self.vertices, prot)
            rotation += prot
        if parent.mask.move:
            pmx, pmy = parent.move.evaluate(local, (0.0, 0.0))
            self.vertices = move_vertices(self.vertices, pmx, pmy)
            mx, my = mx + pmx, my + pmy
        return sx, sy, rotation, mx, my


__all__ = [
    "InheritMask",
    "OFFSCREEN",
    "ParentBinding",
    "Shape",
    "ShapeState",
    "move_vertices",
    "rotate_vertices",
    "scale_vertices",
]
