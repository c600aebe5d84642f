"""Wall-clock helpers: fractional hours and hour parsing."""

from __future__ import annotations

from datetime import datetime, time
import math

from circadianlight.core.errors import InvalidConfiguration
from circadianlight.core.utils.math import wrap

HOURS_PER_DAY = 24.0


def normalize_hour(hour: float) -> float:
    """Normalize an hour value into [0, 24).

    Args:
        hour: Any finite hour value (negative and >= 24 wrap around)

    Returns:
        Equivalent hour in [0, 24)

    Raises:
        InvalidConfiguration: If hour is NaN or infinite

    Example:
        >>> normalize_hour(25.5)
        1.5
        >>> normalize_hour(-2.0)
        22.0
    """
    hour = float(hour)
    if not math.isfinite(hour):
        raise InvalidConfiguration(f"Hour must be a finite number, got {hour}")
    return wrap(hour, HOURS_PER_DAY)


def hours_from_time(value: time | datetime) -> float:
    """Convert a time of day into fractional hours since midnight.

    Seconds and microseconds are kept, so the service loop sees a smooth
    curve instead of minute steps.

    Example:
        >>> hours_from_time(time(20, 30))
        20.5
    """
    return (
        value.hour
        + value.minute / 60.0
        + value.second / 3600.0
        + value.microsecond / 3_600_000_000.0
    )


def parse_hour(text: str) -> float:
    """Parse ``HH:MM``, ``HH:MM:SS`` or a decimal hour into fractional hours.

    ``24:00`` is accepted and means midnight.

    Raises:
        InvalidConfiguration: If the text is not a valid time of day

    Example:
        >>> parse_hour("18:30")
        18.5
        >>> parse_hour("21.25")
        21.25
    """
    raw = text.strip()
    if not raw:
        raise InvalidConfiguration("Empty hour value")

    if ":" not in raw:
        try:
            value = float(raw)
        except ValueError as e:
            raise InvalidConfiguration(f"Invalid hour '{text}'") from e
        return normalize_hour(value)

    parts = raw.split(":")
    if len(parts) not in (2, 3):
        raise InvalidConfiguration(f"Invalid time '{text}', expected HH:MM or HH:MM:SS")
    try:
        numbers = [int(part) for part in parts]
    except ValueError as e:
        raise InvalidConfiguration(f"Invalid time '{text}', expected HH:MM or HH:MM:SS") from e

    hours, minutes = numbers[0], numbers[1]
    seconds = numbers[2] if len(numbers) == 3 else 0
    if not (0 <= minutes < 60 and 0 <= seconds < 60):
        raise InvalidConfiguration(f"Invalid time '{text}', minutes/seconds out of range")
    if not 0 <= hours <= 24 or (hours == 24 and (minutes or seconds)):
        raise InvalidConfiguration(f"Invalid time '{text}', hour out of range")

    return normalize_hour(hours + minutes / 60.0 + seconds / 3600.0)


def format_hour(hour: float, seconds: bool = False) -> str:
    """Format fractional hours as ``HH:MM``, or ``HH:MM:SS`` with seconds=True.

    Example:
        >>> format_hour(18.5)
        '18:30'
        >>> format_hour(parse_hour("22:15:30"), seconds=True)
        '22:15:30'
    """
    if seconds:
        total_seconds = int(round(normalize_hour(hour) * 3600)) % (24 * 3600)
        minutes, secs = divmod(total_seconds, 60)
        return f"{minutes // 60:02d}:{minutes % 60:02d}:{secs:02d}"

    total_minutes = int(round(normalize_hour(hour) * 60)) % (24 * 60)
    return f"{total_minutes // 60:02d}:{total_minutes % 60:02d}"
