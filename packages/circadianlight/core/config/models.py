"""Configuration models for circadianlight."""

from __future__ import annotations

import os
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field

from circadianlight.core.schedule.models import ScheduleConfig

APP_NAME = "circadianlight"


def config_home() -> Path:
    """Return ``$XDG_CONFIG_HOME``, defaulting to ``~/.config``."""
    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg)
    return Path.home() / ".config"


class ServiceConfig(BaseModel):
    """Service loop and display settings."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    interval_seconds: float = Field(
        default=60.0, gt=0.0, le=3600.0, description="Seconds between gamma updates"
    )
    output: str | None = Field(
        default=None,
        min_length=1,
        description="xrandr output name (e.g. 'eDP-1'); None picks the primary output",
    )
    xrandr_binary: str = Field(default="xrandr", min_length=1, description="xrandr executable")


class LoggingConfig(BaseModel):
    """Logging configuration."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    level: str = Field(default="INFO", pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$")
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    structured: bool = Field(default=False, description="Emit JSON lines instead of text")
    filename: str | None = Field(default=None, description="Log file; None logs to stderr")


class AppConfig(BaseModel):
    """Application configuration: schedule, service and logging.

    Loaded once at startup (file values, then CLI overrides) and never
    mutated afterwards.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    schedule: ScheduleConfig = Field(default_factory=ScheduleConfig)
    service: ServiceConfig = Field(default_factory=ServiceConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @classmethod
    def default_path(cls) -> Path:
        """Default config file location."""
        return config_home() / APP_NAME / "config.yaml"
