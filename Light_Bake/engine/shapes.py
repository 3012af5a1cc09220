from __future__ import annotations

"""Vertex loops for the editor's primitive shapes.

Loops are centred on the origin with unit extent and listed in winding order.
The outer index is the editor's shape id (``s``), the inner one its shape
option (``so``).
"""

import logging
import math
from typing import Dict, List, Tuple

logger = logging.getLogger(__name__)

Vertex = Tuple[float, float]

TEXT_SHAPE = 4


def _regular(sides: int, radius: float = 0.5, phase: float = 0.0) -> List[Vertex]:
    step = 2 * math.pi / sides
    return [
        (radius * math.cos(phase + i * step), radius * math.sin(phase + i * step))
        for i in range(sides)
    ]


_SQUARE: List[Vertex] = [(-0.5, -0.5), (0.5, -0.5), (0.5, 0.5), (-0.5, 0.5)]
_CIRCLE = _regular(24)
_HALF_CIRCLE = [
    (0.5 * math.cos(math.pi * i / 12), 0.5 * math.sin(math.pi * i / 12))
    for i in range(13)
]
_TRIANGLE: List[Vertex] = [(-0.5, -0.5), (0.5, -0.5), (0.0, 0.5)]
_RIGHT_TRIANGLE: List[Vertex] = [(-0.5, -0.5), (0.5, -0.5), (-0.5, 0.5)]
_ARROW: List[Vertex] = [
    (-0.5, -0.15),
    (0.1, -0.15),
    (0.1, -0.4),
    (0.5, 0.0),
    (0.1, 0.4),
    (0.1, 0.15),
    (-0.5, 0.15),
]
_HEXAGON = _regular(6)

SHAPES: Dict[int, List[List[Vertex]]] = {
    0: [_SQUARE, _SQUARE, _SQUARE],
    1: [_CIRCLE, _CIRCLE, _HALF_CIRCLE, _HALF_CIRCLE],
    2: [_TRIANGLE, _TRIANGLE, _RIGHT_TRIANGLE, _RIGHT_TRIANGLE],
    3: [_ARROW, _ARROW],
    5: [_HEXAGON, _HEXAGON],
}


def shape_vertices(shape: int | None, option: int | None = 0) -> List[Vertex]:
    """Return a copy of the vertex loop for ``shape``/``option``.

    Unknown options fall back to the shape's first option and unknown shapes
    to the square, with a warning.
    """

    shape = shape or 0
    option = option or 0
    options = SHAPES.get(shape)
    if options is None:
        logger.warning("Unknown shape %s; using a square", shape)
        return list(_SQUARE)
    if not 0 <= option < len(options):
        logger.warning("Unknown option %s for shape %s; using option 0", option, shape)
        option = 0
    return list(options[option])


__all__ = ["SHAPES", "TEXT_SHAPE", "Vertex", "shape_vertices"]
