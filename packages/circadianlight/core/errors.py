"""Exception hierarchy for circadianlight."""

from __future__ import annotations


class CircadianError(Exception):
    """Base exception for all circadianlight errors."""


class InvalidConfiguration(CircadianError, ValueError):
    """Phase boundaries or config values are invalid.

    Subclasses ValueError so pydantic validators can raise it directly and
    have it reported as a field error.
    """


class DisplayUnavailable(CircadianError):
    """No usable X display, xrandr binary or connected output.

    Attributes:
        output: Output name involved, if known
    """

    def __init__(self, message: str, *, output: str | None = None) -> None:
        self.output = output
        super().__init__(message)

    def __str__(self) -> str:
        message = super().__str__()
        if self.output:
            return f"{message} | output={self.output}"
        return message
