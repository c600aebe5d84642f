"""Tests for math utility functions."""

from __future__ import annotations

import pytest

from circadianlight.core.utils.math import clamp, clamp01, lerp, wrap


def test_clamp_within_range():
    """Test clamping values within range."""
    assert clamp(5, 0, 10) == 5
    assert clamp(0, 0, 10) == 0
    assert clamp(10, 0, 10) == 10


def test_clamp_outside_range():
    assert clamp(-1.5, 0.0, 10.0) == 0.0
    assert clamp(11.5, 0.0, 10.0) == 10.0


def test_clamp01():
    assert clamp01(-0.2) == 0.0
    assert clamp01(0.4) == 0.4
    assert clamp01(1.0000001) == 1.0


def test_lerp_basic():
    """Test basic linear interpolation."""
    assert lerp(0.0, 10.0, 0.0) == 0.0
    assert lerp(0.0, 10.0, 1.0) == 10.0
    assert lerp(0.0, 10.0, 0.5) == 5.0


def test_lerp_decreasing():
    assert lerp(1.0, 0.65, 0.5) == pytest.approx(0.825)
    assert lerp(1.0, 0.45, 0.5) == pytest.approx(0.725)


@pytest.mark.parametrize(
    ("value", "expected"),
    [(0.0, 0.0), (23.5, 23.5), (24.0, 0.0), (25.0, 1.0), (-1.0, 23.0), (-24.0, 0.0)],
)
def test_wrap(value, expected):
    assert wrap(value, 24.0) == pytest.approx(expected)


def test_wrap_tiny_negative_stays_in_range():
    result = wrap(-1e-18, 24.0)
    assert 0.0 <= result < 24.0
