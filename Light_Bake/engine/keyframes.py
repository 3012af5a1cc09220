from __future__ import annotations

"""Keyframe tracks and their evaluation at arbitrary simulation time."""

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Sequence, Tuple

from .easing import INSTANT, LINEAR, get_ease_function_or_default, interpolate

Value = Tuple[float, ...]


@dataclass(frozen=True)
class Keyframe:
    """One time-stamped value on a :class:`Track`.

    ``time`` is ``None`` for keyframes the editor stores without a timestamp;
    those are considered already active. ``easing`` names the curve used to
    reach this keyframe from the previous one.
    """

    time: float | None
    value: Value
    easing: str = LINEAR

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Keyframe":
        """Build a keyframe from the editor's ``{"t", "ct", "ev"}`` mapping."""

        raw = data.get("ev") or [0.0]
        value = tuple(float(v) for v in raw[:2])
        time = data.get("t")
        return cls(
            time=None if time is None else float(time),
            value=value,
            easing=data.get("ct") or LINEAR,
        )

    def to_dict(self) -> Dict[str, Any]:
        """Serialise back into the editor's mapping."""

        data: Dict[str, Any] = {}
        if self.time is not None:
            data["t"] = self.time
            data["ct"] = self.easing
        data["ev"] = list(self.value)
        return data


@dataclass
class Track:
    """Ordered keyframes for a single animated channel."""

    keyframes: List[Keyframe] = field(default_factory=list)

    @classmethod
    def from_event(cls, event: Dict[str, Any] | None) -> "Track":
        """Build a track from an editor event entry ``{"k": [...]}``."""

        if not event:
            return cls()
        return cls([Keyframe.from_dict(k) for k in event.get("k", [])])

    @classmethod
    def constant(cls, *value: float) -> "Track":
        return cls([Keyframe(None, tuple(float(v) for v in value))])

    def to_event(self) -> Dict[str, Any]:
        return {"k": [k.to_dict() for k in self.keyframes]}

    def __len__(self) -> int:
        return len(self.keyframes)

    def __iter__(self):
        return iter(self.keyframes)

    def evaluate(
        self, time: float, default: Sequence[float], discrete: Iterable[int] = ()
    ) -> Value:
        """Shortcut for :func:`evaluate_track`."""

        return evaluate_track(self, time, default, discrete)


def _component(value: Value, index: int, fallback: float) -> float:
    return value[index] if index < len(value) else fallback


def evaluate_track(
    track: Track,
    time: float,
    default: Sequence[float],
    discrete: Iterable[int] = (),
) -> Value:
    """Evaluate ``track`` at ``time``.

    Keyframes are scanned in order. Each keyframe at or before ``time`` (or
    without a timestamp) is adopted outright. The first keyframe after
    ``time`` is interpolated towards from the last adopted value using its own
    easing curve, after which scanning stops. An exhausted track holds its
    last adopted value.

    Parameters
    ----------
    track:
        Track to evaluate.
    time:
        Query time in seconds, relative to the owner's spawn time.
    default:
        Value used before any keyframe has been adopted. Its length fixes
        the number of returned components.
    discrete:
        Component indices that are never interpolated, such as a palette
        slot. They keep the last adopted value until the next keyframe is
        reached.

    Returns
    -------
    tuple
        One float per component of ``default``.
    """

    held = tuple(float(v) for v in default)
    held_time = 0.0
    fixed = set(discrete)
    for key in track.keyframes:
        key_time = key.time
        if key_time is None or key_time <= time:
            held = tuple(_component(key.value, i, held[i]) for i in range(len(held)))
            held_time = key_time or 0.0
            continue
        span = key_time - held_time
        fraction = (time - held_time) / span if span > 0 else 1.0
        if fraction <= 0:
            return held
        ease = get_ease_function_or_default(key.easing)
        return tuple(
            held[i]
            if i in fixed
            else interpolate(held[i], _component(key.value, i, held[i]), fraction, ease)
            for i in range(len(held))
        )
    return held


def instant_keyframe(time: float, value: Sequence[float]) -> Keyframe:
    """Return a keyframe that jumps to ``value`` exactly at ``time``.

    Components keep their types, so integer palette slots stay integers
    when the keyframe is written out.
    """

    return Keyframe(time, tuple(value), INSTANT)


__all__ = ["Keyframe", "Track", "evaluate_track", "instant_keyframe"]
