from __future__ import annotations

"""Easing curves used between keyframes.

Every curve maps a progress fraction in ``[0, 1]`` to an eased fraction with
``ease(0) == 0`` and ``ease(1) == 1``. The single exception is ``Instant``,
which holds the previous value until the target keyframe is reached.
"""

import math
from typing import Callable, Dict

EaseFunction = Callable[[float], float]

_PI2 = math.pi / 2.0
_B1 = 1.0 / 2.75
_B2 = 2.0 / 2.75
_B3 = 1.5 / 2.75
_B4 = 2.5 / 2.75
_B5 = 2.25 / 2.75
_B6 = 2.625 / 2.75

INSTANT = "Instant"
LINEAR = "Linear"


def _out_bounce(t: float) -> float:
    if t < _B1:
        return 7.5625 * t * t
    if t < _B2:
        return 7.5625 * (t - _B3) * (t - _B3) + 0.75
    if t < _B4:
        return 7.5625 * (t - _B5) * (t - _B5) + 0.9375
    return 7.5625 * (t - _B6) * (t - _B6) + 0.984375


def _in_bounce(t: float) -> float:
    return 1.0 - _out_bounce(1.0 - t)


def _in_out_bounce(t: float) -> float:
    if t < 0.5:
        return _in_bounce(t * 2) / 2
    return _out_bounce(t * 2 - 1) / 2 + 0.5


def _in_elastic(t: float) -> float:
    return math.sin(13 * _PI2 * t) * math.pow(2, 10 * (t - 1))


def _out_elastic(t: float) -> float:
    if t == 1:
        return 1.0
    return math.sin(-13 * _PI2 * (t + 1)) * math.pow(2, -10 * t) + 1


def _in_out_elastic(t: float) -> float:
    if t < 0.5:
        return 0.5 * math.sin(13 * _PI2 * (2 * t)) * math.pow(2, 10 * (2 * t - 1))
    u = 2 * t - 1
    return 0.5 * (math.sin(-13 * _PI2 * (u + 1)) * math.pow(2, -10 * u) + 2)


def _in_back(t: float) -> float:
    return t * t * (2.70158 * t - 1.70158)


def _out_back(t: float) -> float:
    u = t - 1
    return 1 + u * u * (2.70158 * u + 1.70158)


def _in_out_back(t: float) -> float:
    t *= 2
    if t < 1:
        return _in_back(t) / 2
    u = t - 2
    return (u * u * (2.70158 * u + 1.70158) + 2) / 2


def _in_out_quad(t: float) -> float:
    if t <= 0.5:
        return t * t * 2
    u = t - 1
    return 1 - u * u * 2


def _in_out_circ(t: float) -> float:
    if t <= 0.5:
        return (math.sqrt(1 - t * t * 4) - 1) / -2
    u = t * 2 - 2
    return (math.sqrt(1 - u * u) + 1) / 2


def _in_expo(t: float) -> float:
    return 0.0 if t == 0 else math.pow(2, 10 * (t - 1))


def _out_expo(t: float) -> float:
    return 1.0 if t == 1 else 1 - math.pow(2, -10 * t)


def _in_out_expo(t: float) -> float:
    if t == 0:
        return 0.0
    if t == 1:
        return 1.0
    if t < 0.5:
        return math.pow(2, 10 * (t * 2 - 1)) / 2
    return (2 - math.pow(2, -10 * (t * 2 - 1))) / 2


EASE_FUNCTIONS: Dict[str, EaseFunction] = {
    LINEAR: lambda t: t,
    INSTANT: lambda t: 0.0,
    "InSine": lambda t: 1.0 if t == 1 else 1 - math.cos(_PI2 * t),
    "OutSine": lambda t: math.sin(_PI2 * t),
    "InOutSine": lambda t: -math.cos(math.pi * t) / 2 + 0.5,
    "InElastic": _in_elastic,
    "OutElastic": _out_elastic,
    "InOutElastic": _in_out_elastic,
    "InBack": _in_back,
    "OutBack": _out_back,
    "InOutBack": _in_out_back,
    "InBounce": _in_bounce,
    "OutBounce": _out_bounce,
    "InOutBounce": _in_out_bounce,
    "InQuad": lambda t: t * t,
    "OutQuad": lambda t: -t * (t - 2),
    "InOutQuad": _in_out_quad,
    "InCirc": lambda t: 1 - math.sqrt(1 - t * t),
    "OutCirc": lambda t: math.sqrt(1 - (t - 1) * (t - 1)),
    "InOutCirc": _in_out_circ,
    "InExpo": _in_expo,
    "OutExpo": _out_expo,
    "InOutExpo": _in_out_expo,
}

# Editor files are not consistent about capitalisation ("instant", "linear").
_LOOKUP = {name.lower(): func for name, func in EASE_FUNCTIONS.items()}


def get_ease_function(name: str | None) -> EaseFunction | None:
    """Return the easing curve called ``name`` or ``None`` if unknown."""

    if name is None:
        return None
    return _LOOKUP.get(name.lower())


def get_ease_function_or_default(name: str | None) -> EaseFunction:
    """Return the easing curve called ``name``, falling back to ``Linear``."""

    return get_ease_function(name) or EASE_FUNCTIONS[LINEAR]


def interpolate(start: float, end: float, t: float, ease: EaseFunction) -> float:
    """Return ``start`` moved towards ``end`` by the eased fraction ``t``."""

    return start + (end - start) * ease(t)


__all__ = [
    "EASE_FUNCTIONS",
    "INSTANT",
    "LINEAR",
    "get_ease_function",
    "get_ease_function_or_default",
    "interpolate",
]
