from __future__ import annotations

"""Grid accumulation of collision energy into per-cell keyframe histories.

The buffer is a dense grid of cells, each with nine colour channels. During a
frame collisions overwrite channel values; :meth:`PixelBuffer.commit` then
freezes every touched (or previously touched) channel into one keyframe and
resets the frame state. After the last frame the histories are compacted and
handed to :mod:`Light_Bake.engine.export`.
"""

import logging
import math
from dataclasses import dataclass
from typing import Dict, Iterable, Iterator, List, Tuple

import numpy as np

from ..config import Config
from .keyframes import Keyframe, instant_keyframe

logger = logging.getLogger(__name__)

CHANNELS = 9
UNTOUCHED = -1.0
MAX_VALUE = 100.0

Cell = Tuple[int, int]


@dataclass
class CellTrack:
    """One surviving ``(cell, channel)`` pair ready for export."""

    cell: Cell
    channel: int
    position: tuple[float, float]
    keyframes: List[Keyframe]


def default_keyframe(channel: int) -> Keyframe:
    """The untimed keyframe every channel history starts with."""

    return Keyframe(None, (int(channel), 0))


class PixelBuffer:
    """Dense grid of channel accumulators and keyframe histories.

    Parameters
    ----------
    precision:
        Cell size in scene units.
    width, height:
        Logical scene size; the grid has ``width / precision`` by
        ``height / precision`` cells with the scene origin at its centre.
    simulation_rate:
        Frames per second used to time committed keyframes.
    warn_out_of_bounds:
        Log a warning when a write falls outside the grid.
    """

    def __init__(
        self,
        precision: float | None = None,
        width: float | None = None,
        height: float | None = None,
        simulation_rate: float | None = None,
        warn_out_of_bounds: bool | None = None,
    ) -> None:
        self.precision = float(
            Config.buffer_precision if precision is None else precision
        )
        if self.precision <= 0:
            raise ValueError("precision must be positive")
        self.simulation_rate = float(
            Config.simulation_rate if simulation_rate is None else simulation_rate
        )
        if self.simulation_rate <= 0:
            raise ValueError("simulation_rate must be positive")
        self.multiplier = 1.0 / self.precision
        width = Config.buffer_width if width is None else width
        height = Config.buffer_height if height is None else height
        self.width = int(round(width * self.multiplier))
        self.height = int(round(height * self.multiplier))
        if self.width <= 0 or self.height <= 0:
            raise ValueError("buffer width and height must cover at least one cell")
        self.warn_out_of_bounds = (
            Config.log_buffer_exceeded
            if warn_out_of_bounds is None
            else warn_out_of_bounds
        )
        self._half = (self.width // 2, self.height // 2)
        self.values = np.full(
            (self.width, self.height, CHANNELS), UNTOUCHED, dtype=np.float32
        )
        self.has_history = np.zeros((self.width, self.height, CHANNELS), dtype=bool)
        self.peak = np.zeros((self.width, self.height, CHANNELS), dtype=np.float32)
        self.history: Dict[Tuple[int, int, int], List[Keyframe]] = {}
        self.dropped = 0
        self.stripped_cells = 0
        self.removed_keyframes = 0
        logger.info("Populated buffer of size %dx%d", self.width, self.height)

    # ------------------------------------------------------------------
    def scene_to_grid(self, x: float, y: float) -> Cell:
        """Return the cell containing scene point ``(x, y)``."""

        gx = math.floor(x * self.multiplier + 0.5) + self._half[0]
        gy = math.floor(y * self.multiplier + 0.5) + self._half[1]
        return gx, gy

    def grid_to_scene(self, gx: int, gy: int) -> tuple[float, float]:
        """Return the scene position of the centre of cell ``(gx, gy)``."""

        return (
            (gx - self._half[0]) * self.precision,
            (gy - self._half[1]) * self.precision,
        )

    def in_bounds(self, gx: int, gy: int) -> bool:
        return 0 <= gx < self.width and 0 <= gy < self.height

    # ------------------------------------------------------------------
    def add_value(self, x: float, y: float, channel: int, amount: float) -> bool:
        """Set ``channel`` of the cell at ``(x, y)`` to ``min(amount, 100)``.

        Writes within a frame overwrite each other; the last one wins.
        Returns ``False`` when the write was dropped.
        """

        gx, gy = self.scene_to_grid(x, y)
        if not self.in_bounds(gx, gy):
            self.dropped += 1
            if self.warn_out_of_bounds:
                logger.warning(
                    "Buffer [%d, %d] is out of bounds (ray may have left the scene)",
                    gx,
                    gy,
                )
            return False
        if not 0 <= channel < CHANNELS:
            self.dropped += 1
            logger.warning(
                "Collision channel %s is outside 0-%d", channel, CHANNELS - 1
            )
            return False
        self.values[gx, gy, channel] = min(float(amount), MAX_VALUE)
        return True

    def handle_collision_events(self, events: Iterable) -> int:
        """Apply collision events in order and return how many were kept."""

        kept = 0
        for event in events:
            x, y = event.position
            if self.add_value(x, y, int(event.color), event.brightness):
                kept += 1
        return kept

    def commit(self, frame: int) -> int:
        """Freeze this frame's values into keyframes and reset the accumulators.

        Every channel touched this frame gets an instant keyframe with its
        value at ``(frame + 1) / simulation_rate``. Channels touched in an
        earlier frame but not this one get a zero keyframe at the same time.
        Channels never touched are left without history.

        Returns
        -------
        int
            Number of keyframes appended.
        """

        time = (frame + 1) / self.simulation_rate
        touched = self.values != UNTOUCHED
        due = touched | self.has_history
        appended = 0
        for gx, gy, ch in np.argwhere(due):
            key = (int(gx), int(gy), int(ch))
            track = self.history.get(key)
            if track is None:
                track = self.history[key] = [default_keyframe(key[2])]
            value = float(self.values[gx, gy, ch]) if touched[gx, gy, ch] else 0.0
            track.append(instant_keyframe(time, (key[2], value, key[2])))
            appended += 1
        np.maximum(self.peak, np.where(touched, self.values, 0), out=self.peak)
        self.has_history |= touched
        self.values.fill(UNTOUCHED)
        return appended

    # ------------------------------------------------------------------
    def discard_empty_cells(self) -> int:
        """Return the number of cells without any channel history.

        Those cells produce no output; the stripped share is logged.
        """

        total = self.width * self.height
        kept = int(self.has_history.any(axis=2).sum())
        removed = total - kept
        share = math.floor(removed / total * 10000) / 100 if total else 100.0
        logger.info("Stripped %.2f%% (%d total) unmodified pixels.", share, removed)
        if kept == 0:
            logger.warning(
                "No pixels were preserved; it's possible nothing was rendered."
            )
        return removed

    def optimize_keyframes(self) -> int:
        """Drop keyframes that repeat the previous kept keyframe's value.

        Returns the number of removed keyframes.
        """

        removed = 0
        for key, track in self.history.items():
            compact = [track[0]]
            for keyframe in track[1:]:
                if keyframe.value[1] == compact[-1].value[1]:
                    removed += 1
                    continue
                compact.append(keyframe)
            self.history[key] = compact
        logger.info("Removed %d unnecessary keyframes.", removed)
        return removed

    def surviving_cells(self) -> List[Cell]:
        """Cells with at least one non-empty channel history, in grid order."""

        return [
            (int(gx), int(gy)) for gx, gy in np.argwhere(self.has_history.any(axis=2))
        ]

    def cell_tracks(self) -> Iterator[CellTrack]:
        """Yield every surviving ``(cell, channel)`` history in grid order."""

        for gx, gy in self.surviving_cells():
            for ch in range(CHANNELS):
                track = self.history.get((gx, gy, ch))
                if not track:
                    continue
                yield CellTrack(
                    cell=(gx, gy),
                    channel=ch,
                    position=self.grid_to_scene(gx, gy),
                    keyframes=track,
                )

    def flush(self) -> List[CellTrack]:
        """Compact the histories and return every surviving channel track."""

        self.stripped_cells = self.discard_empty_cells()
        self.removed_keyframes = self.optimize_keyframes()
        return list(self.cell_tracks())


__all__ = [
    "CHANNELS",
    "CellTrack",
    "PixelBuffer",
    "UNTOUCHED",
    "default_keyframe",
]
