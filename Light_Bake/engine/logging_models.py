import uuid
from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, Field


def new_log_id() -> str:
    """Return a unique identifier for a log entry."""
    return f"log_{uuid.uuid4()}"


class BaseLogEntry(BaseModel):
    """Common metadata for all render log entries."""

    log_id: str = Field(default_factory=new_log_id)
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class FrameStatsLog(BaseLogEntry):
    event_type: str = "FrameRendered"
    frame: int
    time: float
    obstacles: int
    lights: int
    collisions: int
    kept: int
    keyframes: int


class RenderSummaryLog(BaseLogEntry):
    event_type: str = "RenderFinished"
    frames: int
    seconds: float
    objects: int
    stripped_cells: int
    removed_keyframes: int
    dropped_writes: int
    level_file: Optional[str] = None
