"""Light_Bake package initialization."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:  # pragma: no cover - imported for typing only
    from .engine.render import render_level

__all__ = ["render_level"]


def __getattr__(name: str) -> Any:  # pragma: no cover - attribute access
    """Lazily expose :func:`render_level`."""

    if name == "render_level":
        from .engine.render import render_level as _render_level

        return _render_level
    raise AttributeError(name)
