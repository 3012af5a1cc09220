from __future__ import annotations

from typing import Any, Dict, List, TypedDict

# Reusable typed mappings for level documents

KeyframeData = TypedDict(
    "KeyframeData",
    {
        "t": float,
        "ct": str,
        "ev": List[float],
    },
    total=False,
)

EventData = TypedDict("EventData", {"k": List[KeyframeData]}, total=False)

LevelObject = TypedDict(
    "LevelObject",
    {
        "id": str,
        "n": str,
        "p_id": str,
        "p_t": str | int,
        "s": int,
        "so": int,
        "st": float,
        "ak_t": int,
        "ak_o": float,
        "ot": int,
        "o": Dict[str, float],
        "ed": Dict[str, Any],
        "e": List[EventData],
    },
    total=False,
)

PrefabData = TypedDict(
    "PrefabData",
    {
        "n": str,
        "id": str,
        "type": int,
        "preview": str,
        "o": float,
        "objs": List[LevelObject],
    },
    total=False,
)


class LevelDict(TypedDict, total=False):
    """Top-level layout of a ``.vgd`` level document."""

    objects: List[LevelObject]
    prefabs: List[PrefabData]
