"""Configuration management for circadianlight."""

from circadianlight.core.config.loader import (
    ConfigLoader,
    build_app_config,
    detect_format,
    load_app_config,
    load_config,
    merge_overrides,
)
from circadianlight.core.config.models import (
    APP_NAME,
    AppConfig,
    LoggingConfig,
    ServiceConfig,
    config_home,
)

__all__ = [
    # Loaders
    "ConfigLoader",
    "build_app_config",
    "detect_format",
    "load_app_config",
    "load_config",
    "merge_overrides",
    # Models
    "APP_NAME",
    "AppConfig",
    "LoggingConfig",
    "ServiceConfig",
    "config_home",
]
