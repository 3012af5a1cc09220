"""Execution backends for ray casting."""

from .dispatch import LightDispatcher

__all__ = ["LightDispatcher"]
