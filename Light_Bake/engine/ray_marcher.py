from __future__ import annotations

"""Fixed-step ray marching with attenuated reflections."""

import logging
import math
from dataclasses import dataclass
from functools import partial
from typing import Iterable, List, Sequence

import numpy as np

from ..config import Config
from .backend.dispatch import LightDispatcher
from .lights import LightPlacement
from .obstacles import Obstacle, ObstacleSet

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MarchOptions:
    """Tuning for :class:`RayMarcher`."""

    max_reflections: int = 5
    min_brightness: float = 0.1
    step: float = 0.25
    tolerance: float = 0.125
    max_distance: float = 500.0
    #: Ray samples tested per vectorised batch.
    chunk: int = 256

    @classmethod
    def from_config(cls) -> "MarchOptions":
        return cls(
            max_reflections=int(Config.max_reflections),
            min_brightness=float(Config.min_brightness_before_drop),
            step=float(Config.step_speed),
            tolerance=float(Config.collision_tolerance),
            max_distance=float(Config.max_distance_before_drop),
        )


@dataclass(frozen=True)
class CollisionEvent:
    """Energy a ray deposits where it hits an obstacle."""

    position: tuple[float, float]
    color: int
    brightness: float


def reflect(incoming: Sequence[float], segment: Sequence[float]) -> np.ndarray:
    """Reflect ``incoming`` off a segment with direction ``segment``.

    The normal is the normalised segment direction rotated by 90 degrees. A
    zero-length segment has no normal and leaves the direction unchanged.
    """

    incoming = np.asarray(incoming, dtype=float)
    length = math.hypot(segment[0], segment[1])
    if length == 0:
        return incoming
    normal = np.array([segment[1] / length, -segment[0] / length])
    return incoming - 2 * float(incoming @ normal) * normal


def fan_angles(span: float, rays: int, rotation: float) -> np.ndarray:
    """Return the ray directions of a light in radians.

    ``rays`` directions are spread evenly over ``span`` degrees, starting at
    ``rotation - span / 2``.
    """

    span_rad = math.radians(span)
    return span_rad * (np.arange(rays) / rays) - span_rad / 2 + math.radians(rotation)


class RayMarcher:
    """Cast the rays of every light through one frame's obstacles."""

    def __init__(self, options: MarchOptions | None = None) -> None:
        self.options = options or MarchOptions.from_config()

    # ------------------------------------------------------------------
    def cast_rays(
        self,
        lights: Iterable[LightPlacement],
        obstacles: ObstacleSet,
        dispatcher: LightDispatcher | None = None,
    ) -> List[CollisionEvent]:
        """Return the collisions of every ray of every light, in light order."""

        light_list = list(lights)
        if light_list and not len(obstacles):
            logger.warning("There are no scene obstacles; no collisions possible")
            return []
        work = partial(self.cast_light, obstacles=obstacles)
        if dispatcher is None:
            per_light = [work(light) for light in light_list]
        else:
            per_light = dispatcher.map(work, light_list)
        return [event for events in per_light for event in events]

    def cast_light(
        self, light: LightPlacement, obstacles: ObstacleSet
    ) -> List[CollisionEvent]:
        profile = light.profile
        events: List[CollisionEvent] = []
        for angle in fan_angles(profile.span, profile.rays, light.rotation):
            events.extend(
                self.cast_ray(
                    light.position,
                    float(angle),
                    profile.brightness,
                    light.color,
                    obstacles,
                )
            )
        return events

    def cast_ray(
        self,
        origin: Sequence[float],
        angle: float,
        brightness: float,
        color: int,
        obstacles: ObstacleSet,
    ) -> List[CollisionEvent]:
        """Trace one ray and its reflections.

        Each hit records the share of the ray's brightness the obstacle
        absorbs, ``brightness * (1 - reflectance / 100)``. The remainder
        continues, reflected off opaque obstacles and undeviated through
        fully transparent ones, until it misses, runs out of bounces or
        drops to ``min_brightness``.

        Parameters
        ----------
        origin:
            Start position.
        angle:
            Initial direction in radians.
        brightness:
            Starting brightness, 0-100.
        color:
            Palette channel carried by the ray.
        obstacles:
            The frame's obstacles.

        Returns
        -------
        list of CollisionEvent
            In the order the hits occur along the ray.
        """

        opts = self.options
        events: List[CollisionEvent] = []
        position = np.array(origin, dtype=float)
        direction = np.array([math.cos(angle), math.sin(angle)])
        depth = 0
        while True:
            if depth > 0:
                position = self._step_out(position, direction, obstacles)
            hit = self._march(position, direction, obstacles)
            if hit is None:
                break
            position, obstacle = hit
            reflectance = self._reflectance(obstacle)
            events.append(
                CollisionEvent(
                    position=(float(position[0]), float(position[1])),
                    color=color,
                    brightness=brightness * (1 - reflectance / 100),
                )
            )
            if depth + 1 > opts.max_reflections:
                break
            if obstacle.opacity > 0:
                direction = reflect(direction, obstacle.direction)
            brightness = brightness * (reflectance / 100)
            if brightness <= opts.min_brightness:
                break
            depth += 1
        return events

    # ------------------------------------------------------------------
    @staticmethod
    def _reflectance(obstacle: Obstacle) -> float:
        if obstacle.reflectance is None:
            logger.warning("Obstacle has undefined reflectance; using 0")
            return 0.0
        return float(obstacle.reflectance)

    def _samples(self, position: np.ndarray, direction: np.ndarray, start: int):
        steps = np.arange(start, start + self.options.chunk)[:, None]
        return position + steps * (self.options.step * direction)

    def _out_of_bounds(self, points: np.ndarray) -> np.ndarray:
        return (np.abs(points) > self.options.max_distance).any(axis=1)

    def _march(
        self, position: np.ndarray, direction: np.ndarray, obstacles: ObstacleSet
    ) -> tuple[np.ndarray, Obstacle] | None:
        """Step from ``position`` until an obstacle is hit or bounds are left."""

        start = 0
        while True:
            points = self._samples(position, direction, start)
            hits = obstacles.first_hits(points, self.options.tolerance)
            stop = (hits >= 0) | self._out_of_bounds(points)
            if stop.any():
                i = int(stop.argmax())
                if hits[i] < 0:
                    return None
                return points[i], obstacles[int(hits[i])]
            start += self.options.chunk

    def _step_out(
        self, position: np.ndarray, direction: np.ndarray, obstacles: ObstacleSet
    ) -> np.ndarray:
        """Advance past the obstacle a ray is currently touching."""

        start = 0
        while True:
            points = self._samples(position, direction, start)
            hits = obstacles.first_hits(points, self.options.tolerance)
            clear = (hits < 0) | self._out_of_bounds(points)
            if clear.any():
                return points[int(clear.argmax())]
            start += self.options.chunk


__all__ = [
    "CollisionEvent",
    "MarchOptions",
    "RayMarcher",
    "fan_angles",
    "reflect",
]
