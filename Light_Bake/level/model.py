from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Mapping

from .types import LevelDict, LevelObject, PrefabData


def find_object(
    objects: Iterable[Mapping[str, Any]], object_id: str
) -> Mapping[str, Any] | None:
    """Return the first object in ``objects`` whose ``id`` is ``object_id``."""
    for obj in objects:
        if obj.get("id") == object_id:
            return obj
    return None


@dataclass
class LevelModel:
    """In-memory representation of a level document.

    Only ``objects`` and ``prefabs`` are interpreted. Every other top-level
    key is kept in :attr:`extra` and written back unchanged.
    """

    objects: List[LevelObject] = field(default_factory=list)
    prefabs: List[PrefabData] = field(default_factory=list)
    extra: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> LevelDict:
        """Serialize the model to a plain ``dict`` suitable for JSON."""
        data: Dict[str, Any] = dict(self.extra)
        data["objects"] = self.objects
        data["prefabs"] = self.prefabs
        return data

    @classmethod
    def from_dict(cls, data: LevelDict) -> "LevelModel":
        """Construct a :class:`LevelModel` from ``data``."""
        model = cls()
        model.objects = list(data.get("objects", []))
        model.prefabs = list(data.get("prefabs") or [])
        model.extra = {
            k: v for k, v in data.items() if k not in ("objects", "prefabs")
        }
        return model

    def add_prefab(self, prefab: PrefabData) -> None:
        self.prefabs.append(prefab)

    def find_object(self, object_id: str) -> LevelObject | None:
        """Return the object with ``object_id`` if present."""
        return find_object(self.objects, object_id)
