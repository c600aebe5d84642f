"""Time-to-color mapper.

Maps a wall-clock hour to RGB gamma gains:

    day   [day_start, dusk_start)    -> (1, 1, 1)
    dusk  [dusk_start, night_start)  -> linear blend from (1, 1, 1) to night
    night [night_start, day_start)   -> night target

All comparisons use offsets from ``day_start`` modulo 24h, so boundaries
wrapping past midnight behave like any other. The functions here are pure.
"""

from __future__ import annotations

from circadianlight.core.schedule.clock import HOURS_PER_DAY, normalize_hour
from circadianlight.core.schedule.models import (
    DayPhase,
    GammaTriple,
    PhaseReading,
    ScheduleConfig,
    boundary_offsets,
)
from circadianlight.core.utils.math import clamp01, lerp, wrap


def resolve_phase(hour: float, config: ScheduleConfig) -> tuple[DayPhase, float]:
    """Classify an hour and compute its dusk progress.

    Lower bounds are inclusive and upper bounds exclusive. When dusk and
    night start coincide, hours at or after dusk start are night.

    Args:
        hour: Hour of day; any finite value, normalized into [0, 24)
        config: Phase configuration

    Returns:
        Tuple of (phase, progress) where progress is 0.0 for day, the clamped
        dusk fraction for dusk, and 1.0 for night

    Raises:
        InvalidConfiguration: If the boundaries violate the cyclic order
    """
    dusk_offset, night_offset = boundary_offsets(
        config.day_start, config.dusk_start, config.night_start
    )
    offset = wrap(normalize_hour(hour) - config.day_start, HOURS_PER_DAY)

    if offset < dusk_offset:
        return DayPhase.DAY, 0.0
    if offset < night_offset:
        fraction = (offset - dusk_offset) / (night_offset - dusk_offset)
        return DayPhase.DUSK, clamp01(fraction)
    return DayPhase.NIGHT, 1.0


def _blend(night: GammaTriple, fraction: float) -> GammaTriple:
    return GammaTriple(
        red=clamp01(lerp(1.0, night.red, fraction)),
        green=clamp01(lerp(1.0, night.green, fraction)),
        blue=clamp01(lerp(1.0, night.blue, fraction)),
    )


def read_phase(hour: float, config: ScheduleConfig) -> PhaseReading:
    """Compute phase, dusk progress and gains for an hour.

    Example:
        >>> reading = read_phase(20.0, ScheduleConfig())
        >>> reading.phase, reading.progress
        (<DayPhase.DUSK: 'dusk'>, 0.5)
    """
    phase, progress = resolve_phase(hour, config)

    if phase is DayPhase.DAY:
        gamma = GammaTriple.identity()
    elif phase is DayPhase.NIGHT:
        gamma = config.night
    else:
        gamma = _blend(config.night, progress)

    return PhaseReading(hour=normalize_hour(hour), phase=phase, progress=progress, gamma=gamma)


def gamma_for_hour(hour: float, config: ScheduleConfig) -> GammaTriple:
    """Map an hour of day to RGB gamma gains.

    Args:
        hour: Hour of day (fractional; normalized into [0, 24))
        config: Phase configuration

    Returns:
        Channel gains for that hour

    Raises:
        InvalidConfiguration: If the boundaries violate the cyclic order

    Example:
        >>> config = ScheduleConfig(day_start=6, dusk_start=18, night_start=22)
        >>> gamma_for_hour(12.0, config).as_tuple()
        (1.0, 1.0, 1.0)
        >>> gamma_for_hour(23.0, config).as_tuple()
        (1.0, 0.65, 0.45)
    """
    return read_phase(hour, config).gamma


def sample_day(config: ScheduleConfig, step_minutes: int = 60) -> list[PhaseReading]:
    """Sample the curve over one day, starting at midnight.

    Args:
        config: Phase configuration
        step_minutes: Minutes between samples (1..1440)

    Returns:
        One reading per step

    Raises:
        ValueError: If step_minutes is out of range
    """
    if not 1 <= step_minutes <= 24 * 60:
        raise ValueError(f"step_minutes must be in 1..1440, got {step_minutes}")

    return [
        read_phase(minute / 60.0, config) for minute in range(0, 24 * 60, step_minutes)
    ]
