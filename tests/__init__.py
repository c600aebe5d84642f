"""Test suite for circadianlight."""
