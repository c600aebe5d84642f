"""systemd user service installation."""

from circadianlight.core.systemd.unit import (
    UNIT_NAME,
    install_unit,
    render_unit,
    uninstall_unit,
    unit_path,
)

__all__ = [
    "UNIT_NAME",
    "install_unit",
    "render_unit",
    "uninstall_unit",
    "unit_path",
]
