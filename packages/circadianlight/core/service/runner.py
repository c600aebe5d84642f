"""Apply-once and periodic service loop."""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime
import logging
import time

from circadianlight.core.display.protocols import GammaApplier
from circadianlight.core.schedule.clock import format_hour, hours_from_time
from circadianlight.core.schedule.mapper import read_phase
from circadianlight.core.schedule.models import DayPhase, PhaseReading, ScheduleConfig

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]
Sleeper = Callable[[float], None]


def current_reading(
    config: ScheduleConfig, hour: float | None = None, now: Clock = datetime.now
) -> PhaseReading:
    """Compute the reading for an explicit hour, or for the local time now."""
    if hour is None:
        hour = hours_from_time(now())
    return read_phase(hour, config)


def apply_once(
    config: ScheduleConfig,
    applier: GammaApplier,
    hour: float | None = None,
    now: Clock = datetime.now,
) -> PhaseReading:
    """Compute gains for the given hour (default: now) and apply them once.

    Args:
        config: Phase configuration
        applier: Display gamma applier
        hour: Explicit hour of day; None uses the local clock
        now: Clock used when hour is None

    Returns:
        The applied reading

    Raises:
        InvalidConfiguration: If the boundaries are out of order (nothing is applied)
        DisplayUnavailable: If the display cannot be reached
    """
    reading = current_reading(config, hour, now)
    output = applier.apply(reading.gamma)
    logger.info(
        "Applied %s gamma (%s) to %s at %s",
        reading.phase.value,
        reading.gamma,
        output,
        format_hour(reading.hour),
    )
    return reading


def run_service(
    config: ScheduleConfig,
    applier: GammaApplier,
    interval_seconds: float,
    now: Clock = datetime.now,
    sleep: Sleeper = time.sleep,
    max_ticks: int | None = None,
) -> int:
    """Reapply gains every interval until interrupted.

    Gains are reapplied on every tick even when unchanged, so a gamma reset
    by another program is corrected within one interval. Phase changes are
    logged at INFO, every tick at DEBUG. Errors propagate without retry.

    Args:
        config: Phase configuration
        applier: Display gamma applier
        interval_seconds: Seconds to sleep between ticks
        now: Clock returning local time
        sleep: Sleep function
        max_ticks: Stop after this many ticks; None runs forever

    Returns:
        Number of ticks run
    """
    if interval_seconds <= 0:
        raise ValueError(f"interval_seconds must be positive, got {interval_seconds}")

    logger.info("Starting service loop (interval=%ss)", interval_seconds)
    last_phase: DayPhase | None = None
    ticks = 0

    while max_ticks is None or ticks < max_ticks:
        reading = current_reading(config, None, now)
        output = applier.apply(reading.gamma)
        ticks += 1

        if reading.phase is not last_phase:
            logger.info(
                "Entered %s phase at %s on %s (%s)",
                reading.phase.value,
                format_hour(reading.hour),
                output,
                reading.gamma,
            )
            last_phase = reading.phase
        else:
            logger.debug("Tick %d: %s on %s", ticks, reading.gamma, output)

        if max_ticks is not None and ticks >= max_ticks:
            break
        sleep(interval_seconds)

    return ticks
