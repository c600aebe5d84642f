"""Schedule models: day phases, gamma triples and the phase configuration."""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from circadianlight.core.errors import InvalidConfiguration
from circadianlight.core.schedule.clock import HOURS_PER_DAY, format_hour, normalize_hour, parse_hour
from circadianlight.core.utils.math import wrap


class DayPhase(str, Enum):
    """Phase of the day a given hour falls into.

    Attributes:
        DAY: Full gain on every channel.
        DUSK: Transition from full gain to the night target.
        NIGHT: Night target gain, wrapping past midnight.
    """

    DAY = "day"
    DUSK = "dusk"
    NIGHT = "night"


class GammaTriple(BaseModel):
    """Per-channel gamma gains, each in [0, 1].

    Example:
        >>> GammaTriple(red=1.0, green=0.65, blue=0.45).as_tuple()
        (1.0, 0.65, 0.45)
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    red: float = Field(ge=0.0, le=1.0, description="Red channel gain")
    green: float = Field(ge=0.0, le=1.0, description="Green channel gain")
    blue: float = Field(ge=0.0, le=1.0, description="Blue channel gain")

    @classmethod
    def identity(cls) -> GammaTriple:
        """Full gain on every channel (the day value)."""
        return cls(red=1.0, green=1.0, blue=1.0)

    def as_tuple(self) -> tuple[float, float, float]:
        return (self.red, self.green, self.blue)

    def __str__(self) -> str:
        return f"red={self.red:.3f} green={self.green:.3f} blue={self.blue:.3f}"


def _default_night() -> GammaTriple:
    return GammaTriple(red=1.0, green=0.65, blue=0.45)


def boundary_offsets(day_start: float, dusk_start: float, night_start: float) -> tuple[float, float]:
    """Return dusk and night start as offsets from day start, modulo 24h.

    The boundaries must follow the cyclic order day -> dusk -> night, so the
    offsets satisfy ``0 < dusk_offset <= night_offset < 24``. Equal dusk and
    night offsets mean the dusk phase is empty.

    Args:
        day_start: Day start hour
        dusk_start: Dusk start hour
        night_start: Night start hour

    Returns:
        Tuple of (dusk_offset, night_offset) in hours

    Raises:
        InvalidConfiguration: If the boundaries violate the cyclic order

    Example:
        >>> boundary_offsets(10.0, 19.0, 1.0)
        (9.0, 15.0)
    """
    day = normalize_hour(day_start)
    dusk_offset = wrap(normalize_hour(dusk_start) - day, HOURS_PER_DAY)
    night_offset = wrap(normalize_hour(night_start) - day, HOURS_PER_DAY)

    if dusk_offset == 0.0:
        raise InvalidConfiguration(
            f"Dusk start {format_hour(dusk_start)} must differ from day start "
            f"{format_hour(day_start)}"
        )
    if night_offset < dusk_offset:
        raise InvalidConfiguration(
            "Phase boundaries violate day -> dusk -> night order: "
            f"day {format_hour(day_start)}, dusk {format_hour(dusk_start)}, "
            f"night {format_hour(night_start)}"
        )
    return dusk_offset, night_offset


class ScheduleConfig(BaseModel):
    """Phase boundaries and night target.

    Hours are fractional (18.5 = 18:30). Strings in ``HH:MM`` form are
    accepted and every value is normalized into [0, 24). The day phase
    always uses full gain.

    Immutable after creation; validation enforces the cyclic
    day -> dusk -> night order.

    Example:
        >>> config = ScheduleConfig(day_start="06:00", dusk_start=18, night_start=22)
        >>> config.night.green
        0.65
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    day_start: float = Field(default=6.0, description="Hour the day phase starts")
    dusk_start: float = Field(default=18.0, description="Hour the dusk transition starts")
    night_start: float = Field(default=22.0, description="Hour the night phase starts")
    night: GammaTriple = Field(
        default_factory=_default_night, description="Gamma gains during the night phase"
    )

    @field_validator("day_start", "dusk_start", "night_start", mode="before")
    @classmethod
    def parse_clock_strings(cls, v: Any) -> Any:
        """Accept ``HH:MM`` strings alongside numbers."""
        if isinstance(v, str):
            return parse_hour(v)
        return v

    @field_validator("night", mode="before")
    @classmethod
    def fill_night_channels(cls, v: Any) -> Any:
        """Channels missing from a partial mapping keep their defaults."""
        if isinstance(v, dict):
            return {**_default_night().model_dump(), **v}
        return v

    @field_validator("day_start", "dusk_start", "night_start")
    @classmethod
    def normalize_boundary(cls, v: float) -> float:
        """Wrap boundaries into [0, 24)."""
        return normalize_hour(v)

    @model_validator(mode="after")
    def validate_order(self) -> ScheduleConfig:
        """Check the cyclic day -> dusk -> night order."""
        boundary_offsets(self.day_start, self.dusk_start, self.night_start)
        return self


class PhaseReading(BaseModel):
    """Detailed mapper result for one hour.

    Attributes:
        hour: Normalized hour in [0, 24)
        phase: Day phase the hour falls into
        progress: Dusk progress in [0, 1] (0 during day, 1 during night)
        gamma: Resulting channel gains
    """

    model_config = ConfigDict(frozen=True)

    hour: float
    phase: DayPhase
    progress: float = Field(ge=0.0, le=1.0)
    gamma: GammaTriple
