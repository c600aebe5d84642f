"""Shared pytest fixtures for circadianlight tests."""

from __future__ import annotations

from collections.abc import Iterator
from datetime import datetime
import logging
from pathlib import Path
import subprocess
from typing import Any

import pytest

from circadianlight.core.errors import DisplayUnavailable
from circadianlight.core.schedule.models import GammaTriple, ScheduleConfig

# ============================================================================
# Path Fixtures
# ============================================================================


@pytest.fixture
def project_root() -> Path:
    """Get project root directory."""
    return Path(__file__).parent.parent


@pytest.fixture(autouse=True)
def isolated_config_home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point XDG_CONFIG_HOME at a temp dir so no test reads the real user config."""
    config_dir = tmp_path / "xdg_config"
    config_dir.mkdir()
    monkeypatch.setenv("XDG_CONFIG_HOME", str(config_dir))
    return config_dir


@pytest.fixture(autouse=True)
def restore_root_logging() -> Iterator[None]:
    """Drop handlers installed by configure_logging during a test."""
    root = logging.getLogger()
    level = root.level
    yield
    for handler in root.handlers[:]:
        if type(handler) in (logging.StreamHandler, logging.FileHandler):
            root.removeHandler(handler)
            handler.close()
    root.setLevel(level)


# ============================================================================
# Schedule Fixtures
# ============================================================================


@pytest.fixture
def night_target() -> GammaTriple:
    """Night target used in the reference example."""
    return GammaTriple(red=1.0, green=0.65, blue=0.45)


@pytest.fixture
def example_config(night_target: GammaTriple) -> ScheduleConfig:
    """Day 06:00, dusk 18:00, night 22:00."""
    return ScheduleConfig(day_start=6.0, dusk_start=18.0, night_start=22.0, night=night_target)


@pytest.fixture
def wrapping_config() -> ScheduleConfig:
    """Night starts after midnight: day 10:00, dusk 19:00, night 01:00."""
    return ScheduleConfig(
        day_start=10.0,
        dusk_start=19.0,
        night_start=1.0,
        night=GammaTriple(red=0.9, green=0.5, blue=0.2),
    )


# ============================================================================
# Display Fakes
# ============================================================================


class RecordingApplier:
    """GammaApplier fake that records every applied triple."""

    def __init__(self, output: str = "eDP-1", fail_with: Exception | None = None) -> None:
        self.output = output
        self.fail_with = fail_with
        self.applied: list[GammaTriple] = []

    def apply(self, gamma: GammaTriple) -> str:
        if self.fail_with is not None:
            raise self.fail_with
        self.applied.append(gamma)
        return self.output


@pytest.fixture
def recording_applier() -> RecordingApplier:
    return RecordingApplier()


@pytest.fixture
def failing_applier() -> RecordingApplier:
    return RecordingApplier(fail_with=DisplayUnavailable("No X display available"))


class FakeRunner:
    """subprocess.run stand-in returning canned xrandr output."""

    def __init__(self, query_output: str = "", fail: Exception | None = None) -> None:
        self.query_output = query_output
        self.fail = fail
        self.calls: list[list[str]] = []
        self.kwargs: list[dict[str, Any]] = []

    def __call__(self, command: list[str], **kwargs: Any) -> subprocess.CompletedProcess[str]:
        self.calls.append(command)
        self.kwargs.append(kwargs)
        if self.fail is not None:
            raise self.fail
        stdout = self.query_output if "--query" in command else ""
        return subprocess.CompletedProcess(command, 0, stdout=stdout, stderr="")


XRANDR_QUERY = """\
Screen 0: minimum 8 x 8, current 3840 x 1080, maximum 32767 x 32767
HDMI-1 connected 1920x1080+1920+0 (normal left inverted right x axis y axis) 527mm x 296mm
   1920x1080     60.00*+
eDP-1 connected primary 1920x1080+0+0 (normal left inverted right x axis y axis) 344mm x 194mm
   1920x1080     60.02*+
DP-1 disconnected (normal left inverted right x axis y axis)
"""


@pytest.fixture
def xrandr_query() -> str:
    return XRANDR_QUERY


@pytest.fixture
def fake_runner(xrandr_query: str) -> FakeRunner:
    return FakeRunner(query_output=xrandr_query)


# ============================================================================
# Clock Fixtures
# ============================================================================


class SequenceClock:
    """Clock returning preset datetimes in order, repeating the last one."""

    def __init__(self, *moments: datetime) -> None:
        self.moments = list(moments)
        self.calls = 0

    def __call__(self) -> datetime:
        index = min(self.calls, len(self.moments) - 1)
        self.calls += 1
        return self.moments[index]


@pytest.fixture
def make_clock() -> type[SequenceClock]:
    """Factory for SequenceClock instances."""
    return SequenceClock


@pytest.fixture
def make_runner() -> type[FakeRunner]:
    """Factory for FakeRunner instances."""
    return FakeRunner


@pytest.fixture
def make_applier() -> type[RecordingApplier]:
    """Factory for RecordingApplier instances."""
    return RecordingApplier
