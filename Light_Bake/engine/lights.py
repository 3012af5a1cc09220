from __future__ import annotations

"""Light source presets and their selection from object names."""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Mapping


class LightKind(Enum):
    """The four light presets an object name can select."""

    GENERIC = "generic"
    POINT = "point"
    CONE = "cone"
    LASER = "laser"


#: Built-in ``(rays, span in degrees, base brightness)`` per kind.
DEFAULT_PRESETS: Dict[LightKind, tuple[int, float, float]] = {
    LightKind.GENERIC: (450, 45.0, 90.0),
    LightKind.POINT: (3600, 360.0, 100.0),
    LightKind.CONE: (450, 45.0, 100.0),
    LightKind.LASER: (1, 1.0, 100.0),
}

# Checked in this order; the first keyword found in the name wins.
_KEYWORDS = (LightKind.CONE, LightKind.POINT, LightKind.LASER)


@dataclass(frozen=True)
class LightProfile:
    """Fixed emission parameters of one light."""

    kind: LightKind
    rays: int
    span: float
    brightness: float

    @classmethod
    def for_kind(
        cls, kind: LightKind, overrides: Mapping[str, Mapping[str, float]] | None = None
    ) -> "LightProfile":
        """Return the preset for ``kind`` with optional per-kind ``overrides``."""

        rays, span, brightness = DEFAULT_PRESETS[kind]
        custom = (overrides or {}).get(kind.value, {})
        return cls(
            kind=kind,
            rays=int(custom.get("rays", rays)),
            span=float(custom.get("span", span)),
            brightness=float(custom.get("brightness", brightness)),
        )


@dataclass(frozen=True)
class LightPlacement:
    """A light's profile together with its evaluated transform for one frame."""

    profile: LightProfile
    position: tuple[float, float]
    rotation: float = 0.0
    opacity: float = 0.0
    color: int = 0


def classify_light(name: str) -> LightKind:
    """Return the :class:`LightKind` selected by keywords in ``name``."""

    for kind in _KEYWORDS:
        if kind.value in name:
            return kind
    return LightKind.GENERIC


__all__ = [
    "DEFAULT_PRESETS",
    "LightKind",
    "LightPlacement",
    "LightProfile",
    "classify_light",
]
