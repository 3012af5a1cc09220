from __future__ import annotations

"""Turn level objects into per-frame obstacles and light placements."""

import logging
from typing import Any, List, Mapping, Sequence

from ..config import Config
from ..level.model import find_object
from .keyframes import Track
from .lights import LightPlacement, LightProfile, classify_light
from .obstacles import Obstacle, ObstacleSet, polygon_edges
from .shape import InheritMask, ParentBinding, Shape
from .shapes import TEXT_SHAPE, shape_vertices

logger = logging.getLogger(__name__)


class SceneSampler:
    """Classify level objects once and sample them frame by frame.

    Objects whose name starts with ``obstacle_marker`` become obstacle shapes,
    those starting with ``light_marker`` become lights. Everything else is
    ignored. Parents are resolved by id when the sampler is built and copied
    into each child by value.

    Parameters
    ----------
    objects:
        The level's object list.
    simulation_rate:
        Frames per second used by :meth:`frame_time`. Defaults to
        :attr:`Config.simulation_rate`.
    """

    def __init__(
        self,
        objects: Sequence[Mapping[str, Any]],
        *,
        simulation_rate: float | None = None,
        obstacle_marker: str | None = None,
        light_marker: str | None = None,
        reflectance: float | None = None,
        default_parent_type: str | None = None,
        light_presets: Mapping[str, Mapping[str, float]] | None = None,
    ) -> None:
        self.objects = list(objects)
        self.simulation_rate = float(
            Config.simulation_rate if simulation_rate is None else simulation_rate
        )
        if self.simulation_rate <= 0:
            raise ValueError("simulation_rate must be positive")
        self.obstacle_marker = (
            Config.obstacle_marker if obstacle_marker is None else obstacle_marker
        )
        self.light_marker = (
            Config.light_marker if light_marker is None else light_marker
        )
        self.reflectance = (
            Config.obstacle_reflectance if reflectance is None else reflectance
        )
        self.default_parent_type = (
            Config.default_parent_type
            if default_parent_type is None
            else default_parent_type
        )
        presets = Config.light_presets if light_presets is None else light_presets

        self.obstacle_shapes: List[Shape] = []
        self.lights: List[tuple[Shape, LightProfile]] = []
        for obj in self.objects:
            name = str(obj.get("n", ""))
            if name.startswith(self.obstacle_marker):
                if obj.get("s") == TEXT_SHAPE:
                    logger.warning("Skipping text object %r", name)
                    continue
                self.obstacle_shapes.append(self._build_shape(obj))
            elif name.startswith(self.light_marker):
                profile = LightProfile.for_kind(classify_light(name), presets)
                self.lights.append((self._build_shape(obj), profile))

        if not self.obstacle_shapes:
            logger.warning(
                "No obstacles detected! Start obstacle object names with %r.",
                self.obstacle_marker,
            )
        if not self.lights:
            logger.warning(
                "No light sources detected! Start light object names with %r.",
                self.light_marker,
            )
        logger.info(
            "Generated %d animated scene shapes and %d light sources",
            len(self.obstacle_shapes),
            len(self.lights),
        )

    # ------------------------------------------------------------------
    def find_object(self, object_id: str) -> Mapping[str, Any] | None:
        """Return the level object with ``object_id`` or ``None``."""

        obj = find_object(self.objects, object_id)
        if obj is None:
            logger.warning("Search for object with id %r failed", object_id)
        return obj

    def _build_shape(self, obj: Mapping[str, Any]) -> Shape:
        parent = None
        parent_id = obj.get("p_id")
        if parent_id:
            parent_obj = self.find_object(parent_id)
            if parent_obj is not None:
                events = list(parent_obj.get("e") or []) + [{}] * 3
                parent = ParentBinding(
                    id=parent_id,
                    move=Track.from_event(events[0]),
                    scale=Track.from_event(events[1]),
                    rotate=Track.from_event(events[2]),
                    spawn_time=float(parent_obj.get("st") or 0.0),
                    mask=InheritMask.from_string(
                        obj.get("p_t", self.default_parent_type)
                    ),
                )
        return Shape.from_events(
            str(obj.get("id", "")),
            shape_vertices(obj.get("s"), obj.get("so")),
            obj.get("e") or [],
            spawn_time=float(obj.get("st") or 0.0),
            parent=parent,
            name=str(obj.get("n", "")),
        )

    # ------------------------------------------------------------------
    def frame_time(self, frame: int) -> float:
        """Return the elapsed seconds at simulation ``frame``."""

        return frame / self.simulation_rate

    def obstacles_at(self, frame: int) -> ObstacleSet:
        """Return the closed-polygon edges of every spawned obstacle at ``frame``."""

        time = self.frame_time(frame)
        obstacles: List[Obstacle] = []
        for shape in self.obstacle_shapes:
            state = shape.evaluate(time)
            if not state.spawned:
                continue
            obstacles.extend(
                polygon_edges(
                    state.vertices,
                    opacity=state.opacity,
                    reflectance=self.reflectance,
                    color=state.color,
                )
            )
        return ObstacleSet(obstacles)

    def lights_at(self, frame: int) -> List[LightPlacement]:
        """Return the placement of every spawned light at ``frame``."""

        time = self.frame_time(frame)
        placements: List[LightPlacement] = []
        for shape, profile in self.lights:
            state = shape.evaluate(time)
            if not state.spawned:
                continue
            placements.append(
                LightPlacement(
                    profile=profile,
                    position=state.move,
                    rotation=state.rotate,
                    opacity=state.opacity,
                    color=state.color,
                )
            )
        return placements


__all__ = ["SceneSampler"]
