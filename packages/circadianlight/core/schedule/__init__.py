"""Time-of-day to gamma mapping."""

from circadianlight.core.schedule.clock import (
    HOURS_PER_DAY,
    format_hour,
    hours_from_time,
    normalize_hour,
    parse_hour,
)
from circadianlight.core.schedule.mapper import (
    gamma_for_hour,
    read_phase,
    resolve_phase,
    sample_day,
)
from circadianlight.core.schedule.models import (
    DayPhase,
    GammaTriple,
    PhaseReading,
    ScheduleConfig,
    boundary_offsets,
)

__all__ = [
    # Models
    "DayPhase",
    "GammaTriple",
    "PhaseReading",
    "ScheduleConfig",
    # Mapper
    "boundary_offsets",
    "gamma_for_hour",
    "read_phase",
    "resolve_phase",
    "sample_day",
    # Clock
    "HOURS_PER_DAY",
    "format_hour",
    "hours_from_time",
    "normalize_hour",
    "parse_hour",
]
