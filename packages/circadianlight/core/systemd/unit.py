"""systemd user unit rendering and installation."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
import logging
from pathlib import Path
import shlex

import jinja2

from circadianlight.core.config.models import APP_NAME, config_home

logger = logging.getLogger(__name__)

UNIT_NAME = f"{APP_NAME}.service"

UNIT_TEMPLATE = """\
[Unit]
Description={{ description }}
PartOf=graphical-session.target
After=graphical-session.target

[Service]
Type=simple
ExecStart={{ exec_start }}
{% for key, value in environment.items() %}
Environment={{ key }}={{ value }}
{% endfor %}
Restart=on-failure
RestartSec=30

[Install]
WantedBy=graphical-session.target
"""


def render_unit(
    exec_args: Sequence[str],
    description: str = "Circadian screen gamma adjustment",
    environment: Mapping[str, str] | None = None,
) -> str:
    """Render the user unit file.

    Args:
        exec_args: Command line for ExecStart (program first)
        description: Unit description
        environment: Extra Environment= entries (e.g. DISPLAY)

    Returns:
        Unit file text

    Raises:
        ValueError: If exec_args is empty
    """
    if not exec_args:
        raise ValueError("exec_args cannot be empty")

    env = jinja2.Environment(
        undefined=jinja2.StrictUndefined,
        autoescape=False,
        trim_blocks=True,
        lstrip_blocks=True,
        keep_trailing_newline=True,
    )
    template = env.from_string(UNIT_TEMPLATE)
    return template.render(
        description=description,
        exec_start=shlex.join(exec_args),
        environment=dict(environment or {}),
    )


def unit_path(base_dir: Path | None = None) -> Path:
    """Return the user unit path under ``<config home>/systemd/user``."""
    return (base_dir or config_home()) / "systemd" / "user" / UNIT_NAME


def install_unit(text: str, path: Path | None = None) -> Path:
    """Write the unit file, creating parent directories.

    Returns:
        Path written
    """
    target = path or unit_path()
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(text, encoding="utf-8")
    logger.info("Installed systemd user unit at %s", target)
    return target


def uninstall_unit(path: Path | None = None) -> bool:
    """Remove the unit file.

    Returns:
        True if a file was removed, False if none existed
    """
    target = path or unit_path()
    if not target.exists():
        logger.info("No systemd user unit at %s", target)
        return False
    target.unlink()
    logger.info("Removed systemd user unit at %s", target)
    return True
