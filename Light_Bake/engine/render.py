from __future__ import annotations

"""Frame loop driving the sampler, ray marcher and pixel buffer."""

import logging
import time
from dataclasses import dataclass, field
from typing import Any, Dict, List

from ..config import Config
from ..level.model import LevelModel
from .backend.dispatch import LightDispatcher
from .buffer import PixelBuffer
from .export import BakeExporter
from .logging.logger import add_metric, flush_metrics, log_record
from .logging_models import FrameStatsLog, RenderSummaryLog
from .preview import encode_preview, render_preview
from .ray_marcher import RayMarcher
from .sampler import SceneSampler

logger = logging.getLogger(__name__)


@dataclass
class RenderResult:
    """Outcome of :func:`render_level`."""

    prefab: Dict[str, Any]
    frames: int
    collisions: int
    seconds: float
    buffer: PixelBuffer = field(repr=False)

    @property
    def objects(self) -> List[Dict[str, Any]]:
        return self.prefab["objs"]


class _Progress:
    """Log completion percentage and ETA in steps of ``every`` percent."""

    def __init__(self, total: int, every: int = 10) -> None:
        self.total = total
        self.every = every
        self.started = time.perf_counter()
        self._next = every

    def update(self, done: int) -> None:
        if not self.total:
            return
        percent = done * 100 // self.total
        if percent < self._next:
            return
        elapsed = time.perf_counter() - self.started
        eta = elapsed / done * (self.total - done)
        logger.info(
            "Rendering %d%% (%d/%d frames), ETA %.1fs", percent, done, self.total, eta
        )
        self._next = (percent // self.every + 1) * self.every


def render_level(
    level: LevelModel,
    *,
    sampler: SceneSampler | None = None,
    marcher: RayMarcher | None = None,
    buffer: PixelBuffer | None = None,
    exporter: BakeExporter | None = None,
) -> RenderResult:
    """Bake the lighting of ``level`` and append the result as a prefab.

    Frames in :meth:`Config.frame_range` are processed strictly in order:
    each frame's obstacles and lights are sampled, every light's rays are
    cast (in parallel when ``Config.thread_count > 1``) and the collisions
    are applied to the buffer in light order before the frame is committed.

    Parameters
    ----------
    level:
        The loaded level. Its ``prefabs`` list receives the new prefab.
    sampler, marcher, buffer, exporter:
        Optional pre-built components; by default each is created from
        :class:`~Light_Bake.config.Config`.
    """

    sampler = sampler or SceneSampler(level.objects)
    marcher = marcher or RayMarcher()
    buffer = buffer or PixelBuffer()
    exporter = exporter or BakeExporter()

    frames = Config.frame_range()
    progress = _Progress(len(frames))
    logger.info(
        "Rendering %d frames (%.3fs to %.3fs at %s fps)",
        len(frames),
        Config.start_time,
        Config.end_time,
        Config.simulation_rate,
    )
    total_collisions = 0
    with LightDispatcher(Config.thread_count) as dispatcher:
        for done, frame in enumerate(frames, start=1):
            obstacles = sampler.obstacles_at(frame)
            lights = sampler.lights_at(frame)
            events = marcher.cast_rays(lights, obstacles, dispatcher)
            kept = buffer.handle_collision_events(events)
            appended = buffer.commit(frame)
            total_collisions += len(events)
            logger.debug(
                "Frame %d: %d obstacles, %d lights, %d collisions",
                frame,
                len(obstacles),
                len(lights),
                len(events),
            )
            if Config.frame_log:
                _log_frame(
                    FrameStatsLog(
                        frame=frame,
                        time=sampler.frame_time(frame),
                        obstacles=len(obstacles),
                        lights=len(lights),
                        collisions=len(events),
                        kept=kept,
                        keyframes=appended,
                    )
                )
            progress.update(done)

    tracks = buffer.flush()
    objects = exporter.translate(tracks)
    preview = ""
    if Config.embed_preview:
        preview = encode_preview(render_preview(buffer, Config.preview_size))
    prefab = exporter.pack_prefab(objects, preview)
    level.add_prefab(prefab)

    seconds = time.perf_counter() - progress.started
    logger.info("Render finished in %.2fs", seconds)
    if Config.frame_log:
        log_record(
            "render",
            "render_finished",
            value=RenderSummaryLog(
                frames=len(frames),
                seconds=seconds,
                objects=len(objects),
                stripped_cells=buffer.stripped_cells,
                removed_keyframes=buffer.removed_keyframes,
                dropped_writes=buffer.dropped,
                level_file=Config.level_file,
            ),
        )
    return RenderResult(
        prefab=prefab,
        frames=len(frames),
        collisions=total_collisions,
        seconds=seconds,
        buffer=buffer,
    )


def _log_frame(stats: FrameStatsLog) -> None:
    log_record("frame", "frame_rendered", frame=stats.frame, value=stats)
    add_metric("collisions", stats.collisions)
    add_metric("kept", stats.kept)
    add_metric("keyframes", stats.keyframes)
    flush_metrics(stats.frame)


__all__ = ["RenderResult", "render_level"]
