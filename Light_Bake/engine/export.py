from __future__ import annotations

"""Translate compacted buffer tracks into editor objects and a prefab."""

import logging
import random
from typing import Any, Dict, Iterable, List

from ..config import Config
from .buffer import CellTrack

logger = logging.getLogger(__name__)

ID_ALPHABET = (
    "abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ1234567890()[]{}/?<>"
)
PREFAB_NAME = "Light Bake Render"
PREFAB_TYPE = 11
POINT_SHAPE_OPTION = 5


class BakeExporter:
    """Build the parent node, point objects and prefab for one render.

    Parameters
    ----------
    precision, pixel_blur:
        Output points are ``precision * pixel_blur`` units wide.
    simulation_rate:
        One simulation tick, ``1 / simulation_rate``, is the largest leading
        delay kept before a point's first keyframe.
    spawn_time:
        Spawn time given to every emitted object before the shift pass.
    seed:
        Seed for object ids. ``None`` gives fresh ids on every run.
    """

    def __init__(
        self,
        precision: float | None = None,
        pixel_blur: float | None = None,
        simulation_rate: float | None = None,
        spawn_time: float | None = None,
        seed: int | None = None,
    ) -> None:
        self.precision = float(
            Config.buffer_precision if precision is None else precision
        )
        self.pixel_blur = float(
            Config.buffer_pixel_blur if pixel_blur is None else pixel_blur
        )
        self.simulation_rate = float(
            Config.simulation_rate if simulation_rate is None else simulation_rate
        )
        if self.simulation_rate <= 0:
            raise ValueError("simulation_rate must be positive")
        self.spawn_time = float(
            Config.output_spawn_time if spawn_time is None else spawn_time
        )
        self._rng = random.Random(Config.random_seed if seed is None else seed)

    def make_id(self) -> str:
        return "".join(self._rng.choice(ID_ALPHABET) for _ in range(10))

    # ------------------------------------------------------------------
    def parent_object(self) -> Dict[str, Any]:
        """The empty transform node every point is parented to."""

        return {
            "id": self.make_id(),
            "ak_t": 2,
            "ak_o": 100,
            "ot": 0,
            "n": "Scene Parent",
            "o": {"x": 0, "y": 0},
            "ed": {"l": 0},
            "e": [
                {"k": [{"ev": [0, 0]}]},
                {"k": [{"ev": [1, 1]}]},
                {"k": [{"ev": [0]}]},
                {"k": [{"ev": [0]}]},
            ],
            "st": self.spawn_time,
        }

    def point_object(self, track: CellTrack, parent_id: str) -> Dict[str, Any]:
        x, y = track.position
        size = self.precision * self.pixel_blur
        return {
            "id": self.make_id(),
            "p_id": parent_id,
            "p_t": "111",
            "ak_t": 1,
            "ak_o": 0,
            "ot": 5,
            "n": f"Pixel | x:{x:g}, y:{y:g}",
            "o": {"x": 0, "y": 0},
            "so": POINT_SHAPE_OPTION,
            "ed": {"l": 5},
            "e": [
                {"k": [{"ev": [x, y]}]},
                {"k": [{"ev": [size, size]}]},
                {"k": [{"ev": [0]}]},
                {"k": [k.to_dict() for k in track.keyframes]},
            ],
            "st": self.spawn_time,
        }

    def translate(self, tracks: Iterable[CellTrack]) -> List[Dict[str, Any]]:
        """Return the parent node followed by one point per track.

        Object counts above the configured soft and hard limits are reported
        but the objects are returned regardless.
        """

        parent = self.parent_object()
        objects = [parent]
        objects.extend(self.point_object(track, parent["id"]) for track in tracks)
        points = len(objects) - 1
        logger.info("Exported %d objects.", points)
        if points > Config.object_hard_limit:
            logger.warning(
                "Finished render has more than %d objects, "
                "this will not open in-editor.",
                Config.object_hard_limit,
            )
        if points > Config.object_soft_limit:
            logger.warning(
                "Finished render has more than %d objects, you may want to reduce "
                "your buffer precision or make your scene less complicated.",
                Config.object_soft_limit,
            )
        return self.optimize_spawn_times(objects)

    def optimize_spawn_times(
        self, objects: List[Dict[str, Any]]
    ) -> List[Dict[str, Any]]:
        """Move idle leading time of each object into its spawn time.

        When an object's first timed keyframe comes later than one simulation
        tick, its spawn time is pushed forward by that keyframe's time and
        every keyframe time is shifted back by the same amount.
        """

        tick = 1.0 / self.simulation_rate
        shifted = 0
        for obj in objects:
            keyframes = obj["e"][3]["k"]
            if len(keyframes) < 2:
                continue
            delay = keyframes[1].get("t")
            if delay is None or delay <= tick:
                continue
            obj["st"] += delay
            for keyframe in keyframes:
                if "t" in keyframe:
                    keyframe["t"] -= delay
            shifted += 1
        logger.info("Optimized spawn times of %d objects.", shifted)
        return objects

    def pack_prefab(
        self, objects: List[Dict[str, Any]], preview: str = ""
    ) -> Dict[str, Any]:
        """Wrap ``objects`` in a prefab entry for the level's ``prefabs`` list."""

        return {
            "n": PREFAB_NAME,
            "id": self.make_id(),
            "type": PREFAB_TYPE,
            "preview": preview,
            "o": 0.0,
            "objs": objects,
        }


__all__ = ["BakeExporter", "PREFAB_NAME"]
