from __future__ import annotations

"""Thumbnail of a finished bake for the prefab ``preview`` field."""

import base64

import imageio.v3 as iio
import matplotlib
import numpy as np

matplotlib.use("Agg")
from matplotlib import colormaps

from .buffer import CHANNELS, MAX_VALUE, PixelBuffer


def channel_colors(cmap: str = "tab10") -> np.ndarray:
    """Return one RGB colour in ``[0, 1]`` per buffer channel."""

    colors = colormaps[cmap]
    return np.array([colors(ch)[:3] for ch in range(CHANNELS)])


def render_preview(buffer: PixelBuffer, size: int = 64) -> np.ndarray:
    """Return an RGB ``uint8`` image of the brightest value each cell reached.

    The image is ``size`` pixels wide, keeps the buffer's aspect ratio and
    has the scene's positive y axis pointing up.
    """

    intensity = np.clip(buffer.peak / MAX_VALUE, 0.0, 1.0)
    rgb = np.clip(intensity @ channel_colors(), 0.0, 1.0)
    width = max(1, int(size))
    height = max(1, int(round(width * buffer.height / buffer.width)))
    xs = np.linspace(0, buffer.width - 1, width).round().astype(int)
    ys = np.linspace(0, buffer.height - 1, height).round().astype(int)
    sampled = rgb[np.ix_(xs, ys)]
    image = np.transpose(sampled, (1, 0, 2))[::-1]
    return (image * 255).round().astype(np.uint8)


def encode_preview(image: np.ndarray) -> str:
    """Return ``image`` as a base64 encoded PNG."""

    data = iio.imwrite("<bytes>", image, extension=".png")
    return base64.b64encode(data).decode("ascii")


__all__ = ["channel_colors", "encode_preview", "render_preview"]
