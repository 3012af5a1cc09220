"""Level document model and file helpers."""

from .io import load_level, save_level, write_backup
from .model import LevelModel

__all__ = ["LevelModel", "load_level", "save_level", "write_backup"]
