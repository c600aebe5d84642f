"""Shared utilities for circadianlight."""

from circadianlight.core.utils.math import clamp, clamp01, lerp, wrap

__all__ = [
    "clamp",
    "clamp01",
    "lerp",
    "wrap",
]
