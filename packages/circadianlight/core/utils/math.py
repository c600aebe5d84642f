"""Math utilities for gain calculations."""

from __future__ import annotations


def clamp(value: float, min_val: float, max_val: float) -> float:
    """Clamp value to range [min_val, max_val].

    Args:
        value: Value to clamp
        min_val: Minimum allowed value
        max_val: Maximum allowed value

    Returns:
        Clamped value
    """
    return max(min_val, min(max_val, value))


def clamp01(value: float) -> float:
    """Clamp value to the unit interval."""
    return clamp(value, 0.0, 1.0)


def lerp(a: float, b: float, t: float) -> float:
    """Linear interpolation between a and b.

    Args:
        a: Start value
        b: End value
        t: Interpolation factor [0, 1]

    Returns:
        Interpolated value
    """
    return float(a) + (float(b) - float(a)) * t


def wrap(value: float, period: float) -> float:
    """Wrap value into [0, period).

    Python's modulo already returns a non-negative result for a positive
    period, but a tiny negative value can round up to exactly ``period``.
    """
    wrapped = value % period
    if wrapped >= period:
        return 0.0
    return wrapped
