"""Service runner: apply once or loop on a fixed interval."""

from circadianlight.core.service.runner import apply_once, current_reading, run_service

__all__ = [
    "apply_once",
    "current_reading",
    "run_service",
]
