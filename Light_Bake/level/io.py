"""File IO helpers for :mod:`Light_Bake.level`."""

from __future__ import annotations

import json
import logging
import os
from typing import Any

from .model import LevelModel

logger = logging.getLogger(__name__)


def load_level(path: str) -> LevelModel:
    """Load a level from ``path`` and return a :class:`LevelModel`.

    Raises
    ------
    FileNotFoundError
        If ``path`` does not exist.
    json.JSONDecodeError
        If the file is not valid JSON.
    ValueError
        If the document does not have the expected layout.
    """
    with open(path, encoding="utf-8") as f:
        data = json.load(f)
    _validate_level(data)
    model = LevelModel.from_dict(data)
    logger.info("Loaded level %s with %d objects", path, len(model.objects))
    return model


def save_level(path: str, level: LevelModel) -> None:
    """Write ``level`` to ``path`` in JSON format."""
    directory = os.path.dirname(path)
    if directory:
        os.makedirs(directory, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(level.to_dict(), f)
    logger.info("Saved level to %s", path)


def write_backup(path: str, level: LevelModel) -> None:
    """Persist an untouched copy of ``level`` before it is modified."""
    save_level(path, level)
    logger.info("Backed up level to %s", path)


def _validate_level(data: Any) -> None:
    if not isinstance(data, dict):
        raise ValueError("Level file must contain a JSON object")
    if "objects" not in data:
        raise ValueError("Level file must contain 'objects'")
    if not isinstance(data["objects"], list):
        raise ValueError("'objects' must be a list")
    for obj in data["objects"]:
        if not isinstance(obj, dict):
            raise ValueError("object entries must be objects")
    if data.get("prefabs") is not None and not isinstance(data["prefabs"], list):
        raise ValueError("'prefabs' must be a list")
