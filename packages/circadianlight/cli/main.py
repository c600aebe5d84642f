"""Command-line interface for circadianlight.

Subcommands:
    serve              Reapply gamma on a fixed interval (service mode)
    apply              Apply gamma once for now or a given time
    print              Print gamma for now or a given time; never touches the display
    table              Preview the gamma curve over a whole day
    install-service    Write a systemd user unit running ``serve``
    uninstall-service  Remove the systemd user unit
"""

from __future__ import annotations

import argparse
import json
import logging
import math
import os
from pathlib import Path
import shutil
import sys
from typing import Any

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from circadianlight.core.config.loader import load_app_config
from circadianlight.core.config.models import AppConfig
from circadianlight.core.display.xrandr import XrandrGammaApplier, format_gamma
from circadianlight.core.errors import DisplayUnavailable, InvalidConfiguration
from circadianlight.core.schedule.clock import format_hour, parse_hour
from circadianlight.core.schedule.mapper import sample_day
from circadianlight.core.schedule.models import DayPhase
from circadianlight.core.service.runner import apply_once, current_reading, run_service
from circadianlight.core.systemd.unit import (
    install_unit,
    render_unit,
    uninstall_unit,
    unit_path,
)
from circadianlight.core.utils.logging import configure_logging

console = Console()
err_console = Console(stderr=True)
logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_DISPLAY_UNAVAILABLE = 1
EXIT_INVALID_CONFIG = 2

# Shared flags re-emitted into the systemd ExecStart line: (dest, flag)
_PASSTHROUGH_FLAGS = [
    ("day_start", "--day-start"),
    ("dusk_start", "--dusk-start"),
    ("night_start", "--night-start"),
    ("night_red", "--night-red"),
    ("night_green", "--night-green"),
    ("night_blue", "--night-blue"),
    ("output", "--output"),
    ("log_level", "--log-level"),
]

_HOUR_DESTS = frozenset({"day_start", "dusk_start", "night_start"})

_PHASE_STYLES = {
    DayPhase.DAY: "yellow",
    DayPhase.DUSK: "dark_orange",
    DayPhase.NIGHT: "red",
}


# ============================================================================
# Argument types
# ============================================================================


def _hour_arg(text: str) -> float:
    try:
        return parse_hour(text)
    except InvalidConfiguration as e:
        raise argparse.ArgumentTypeError(str(e)) from e


def _gain_arg(text: str) -> float:
    try:
        value = float(text)
    except ValueError as e:
        raise argparse.ArgumentTypeError(f"Invalid gain '{text}'") from e
    if not 0.0 <= value <= 1.0:
        raise argparse.ArgumentTypeError(f"Gain must be in [0, 1], got {text}")
    return value


def _step_arg(text: str) -> int:
    try:
        value = int(text)
    except ValueError as e:
        raise argparse.ArgumentTypeError(f"Invalid step '{text}'") from e
    if not 1 <= value <= 24 * 60:
        raise argparse.ArgumentTypeError(f"Step must be in 1..1440 minutes, got {text}")
    return value


def _positive_float_arg(text: str) -> float:
    try:
        value = float(text)
    except ValueError as e:
        raise argparse.ArgumentTypeError(f"Invalid number '{text}'") from e
    if not math.isfinite(value) or value <= 0:
        raise argparse.ArgumentTypeError(f"Value must be positive, got {text}")
    return value


# ============================================================================
# Configuration
# ============================================================================


def build_overrides(args: argparse.Namespace) -> dict[str, Any]:
    """Collect config overrides from parsed flags (None means not given)."""
    return {
        "schedule": {
            "day_start": args.day_start,
            "dusk_start": args.dusk_start,
            "night_start": args.night_start,
            "night": {
                "red": args.night_red,
                "green": args.night_green,
                "blue": args.night_blue,
            },
        },
        "service": {
            "output": args.output,
            "interval_seconds": getattr(args, "interval", None),
        },
        "logging": {
            "level": args.log_level,
            "structured": True if args.log_json else None,
        },
    }


# ============================================================================
# Commands
# ============================================================================


def cmd_print(args: argparse.Namespace, config: AppConfig) -> int:
    """Print the gamma for now or ``--time``."""
    reading = current_reading(config.schedule, args.time)

    if args.format == "xrandr":
        text = format_gamma(reading.gamma)
    elif args.format == "json":
        text = json.dumps(reading.model_dump(mode="json"))
    else:
        text = str(reading.gamma)

    console.out(text, highlight=False)
    return EXIT_OK


def cmd_table(args: argparse.Namespace, config: AppConfig) -> int:
    """Print the gamma curve over a day as a table."""
    schedule = config.schedule
    table = Table(
        title=(
            f"Day {format_hour(schedule.day_start)} | Dusk {format_hour(schedule.dusk_start)} "
            f"| Night {format_hour(schedule.night_start)}"
        )
    )
    table.add_column("Time", justify="right")
    table.add_column("Phase")
    table.add_column("Red", justify="right")
    table.add_column("Green", justify="right")
    table.add_column("Blue", justify="right")

    for reading in sample_day(schedule, args.step):
        style = _PHASE_STYLES[reading.phase]
        table.add_row(
            format_hour(reading.hour),
            f"[{style}]{reading.phase.value}[/{style}]",
            f"{reading.gamma.red:.3f}",
            f"{reading.gamma.green:.3f}",
            f"{reading.gamma.blue:.3f}",
        )

    console.print(table)
    return EXIT_OK


def _make_applier(config: AppConfig) -> XrandrGammaApplier:
    return XrandrGammaApplier(
        output=config.service.output, binary=config.service.xrandr_binary
    )


def cmd_apply(args: argparse.Namespace, config: AppConfig) -> int:
    """Apply the gamma once."""
    reading = apply_once(config.schedule, _make_applier(config), hour=args.time)
    console.print(
        f"[green]Applied[/green] {reading.phase.value} gamma "
        f"{format_gamma(reading.gamma)} at {format_hour(reading.hour)}"
    )
    return EXIT_OK


def cmd_serve(args: argparse.Namespace, config: AppConfig) -> int:
    """Run the service loop until interrupted."""
    try:
        run_service(
            config.schedule,
            _make_applier(config),
            interval_seconds=config.service.interval_seconds,
        )
    except KeyboardInterrupt:
        logger.info("Service stopped")
    return EXIT_OK


def _service_command() -> list[str]:
    program = shutil.which("circadianlight")
    if program:
        return [program]
    return [sys.executable, "-m", "circadianlight.cli.main"]


def _number(value: float) -> str:
    return str(int(value)) if value.is_integer() else repr(value)


def _flag_value(dest: str, value: Any) -> str:
    if dest in _HOUR_DESTS:
        return format_hour(value, seconds=True)
    if isinstance(value, float):
        return _number(value)
    return str(value)


def build_service_args(args: argparse.Namespace, config: AppConfig) -> list[str]:
    """Build the ExecStart command line for the systemd unit.

    Everything after the program name must parse with ``build_arg_parser``;
    ``--config`` and the other shared flags belong to the ``serve`` subcommand.
    """
    command = _service_command()
    command += ["serve", "--interval", _number(config.service.interval_seconds)]
    if args.config:
        command += ["--config", str(Path(args.config).resolve())]
    for dest, flag in _PASSTHROUGH_FLAGS:
        value = getattr(args, dest)
        if value is not None:
            command += [flag, _flag_value(dest, value)]
    if args.log_json:
        command.append("--log-json")
    return command


def cmd_install_service(args: argparse.Namespace, config: AppConfig) -> int:
    """Write the systemd user unit (or print it with ``--dry-run``)."""
    environment = {
        key: os.environ[key] for key in ("DISPLAY", "XAUTHORITY") if os.environ.get(key)
    }
    text = render_unit(build_service_args(args, config), environment=environment)

    if args.dry_run:
        console.out(text, highlight=False, end="")
        return EXIT_OK

    path = install_unit(text, unit_path())
    console.print(f"[green]Installed[/green] {escape(str(path))}")
    console.print("Enable it with:")
    console.print("  systemctl --user daemon-reload")
    console.print("  systemctl --user enable --now circadianlight.service")
    return EXIT_OK


def cmd_uninstall_service(args: argparse.Namespace, config: AppConfig) -> int:
    """Remove the systemd user unit."""
    path = unit_path()
    if uninstall_unit(path):
        console.print(f"[green]Removed[/green] {escape(str(path))}")
        console.print("Stop it with: systemctl --user disable --now circadianlight.service")
    else:
        console.print(f"[yellow]No unit installed at[/yellow] {escape(str(path))}")
    return EXIT_OK


COMMANDS = {
    "serve": cmd_serve,
    "apply": cmd_apply,
    "print": cmd_print,
    "table": cmd_table,
    "install-service": cmd_install_service,
    "uninstall-service": cmd_uninstall_service,
}


# ============================================================================
# Parser
# ============================================================================


def _config_parent() -> argparse.ArgumentParser:
    parent = argparse.ArgumentParser(add_help=False)
    group = parent.add_argument_group("configuration")
    group.add_argument(
        "--config",
        default=None,
        help="Path to config file (.yaml/.yml/.json); "
        "default: $XDG_CONFIG_HOME/circadianlight/config.yaml if present",
    )
    group.add_argument(
        "-d", "--day-start", type=_hour_arg, default=None, help="Day start (HH:MM or hours)"
    )
    group.add_argument(
        "-D", "--dusk-start", type=_hour_arg, default=None, help="Dusk start (HH:MM or hours)"
    )
    group.add_argument(
        "-n", "--night-start", type=_hour_arg, default=None, help="Night start (HH:MM or hours)"
    )
    group.add_argument("-r", "--night-red", type=_gain_arg, default=None, help="Night red gain")
    group.add_argument("-g", "--night-green", type=_gain_arg, default=None, help="Night green gain")
    group.add_argument("-b", "--night-blue", type=_gain_arg, default=None, help="Night blue gain")
    group.add_argument(
        "-o", "--output", default=None, help="xrandr output name (default: primary output)"
    )
    group.add_argument(
        "--log-level",
        default=None,
        type=str.upper,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Logging level (default: INFO)",
    )
    group.add_argument(
        "--log-json", action="store_true", help="Emit structured JSON log lines"
    )
    return parent


def build_arg_parser() -> argparse.ArgumentParser:
    """Build argument parser for CLI."""
    parent = _config_parent()
    p = argparse.ArgumentParser(
        prog="circadianlight",
        description="Adjust screen gamma by time of day to reduce blue light in the evening",
    )
    sub = p.add_subparsers(dest="cmd", required=True)

    serve = sub.add_parser("serve", parents=[parent], help="Reapply gamma on a fixed interval")
    serve.add_argument(
        "-s",
        "--interval",
        type=_positive_float_arg,
        default=None,
        help="Seconds between updates (default: 60)",
    )

    apply = sub.add_parser("apply", parents=[parent], help="Apply gamma once")
    apply.add_argument(
        "-t", "--time", type=_hour_arg, default=None, help="Time to compute for (default: now)"
    )

    show = sub.add_parser("print", parents=[parent], help="Print gamma without applying it")
    show.add_argument(
        "-t", "--time", type=_hour_arg, default=None, help="Time to compute for (default: now)"
    )
    show.add_argument(
        "-f",
        "--format",
        choices=["text", "xrandr", "json"],
        default="text",
        help="Output format (default: text)",
    )

    table = sub.add_parser("table", parents=[parent], help="Preview gamma over a whole day")
    table.add_argument(
        "--step",
        type=_step_arg,
        default=60,
        metavar="MINUTES",
        help="Minutes between rows, 1..1440 (default: 60)",
    )

    install = sub.add_parser(
        "install-service", parents=[parent], help="Install a systemd user unit running 'serve'"
    )
    install.add_argument(
        "-s",
        "--interval",
        type=_positive_float_arg,
        default=None,
        help="Seconds between updates (default: 60)",
    )
    install.add_argument(
        "--dry-run", action="store_true", help="Print the unit instead of writing it"
    )

    sub.add_parser("uninstall-service", parents=[parent], help="Remove the systemd user unit")

    return p


def main(argv: list[str] | None = None) -> int:
    """Main entry point for CLI."""
    p = build_arg_parser()
    args = p.parse_args(argv)

    try:
        config = load_app_config(args.config, build_overrides(args))
    except FileNotFoundError as e:
        err_console.print(f"[red]ERROR: {escape(str(e))}[/red]")
        return EXIT_INVALID_CONFIG
    except ValueError as e:
        err_console.print(f"[red]ERROR: Invalid configuration: {escape(str(e))}[/red]")
        return EXIT_INVALID_CONFIG

    configure_logging(
        level=config.logging.level,
        format_string=config.logging.format,
        filename=config.logging.filename,
        structured=config.logging.structured,
    )

    try:
        return COMMANDS[args.cmd](args, config)
    except InvalidConfiguration as e:
        err_console.print(f"[red]ERROR: Invalid configuration: {escape(str(e))}[/red]")
        return EXIT_INVALID_CONFIG
    except DisplayUnavailable as e:
        err_console.print(f"[red]ERROR: Display unavailable: {escape(str(e))}[/red]")
        return EXIT_DISPLAY_UNAVAILABLE


if __name__ == "__main__":
    sys.exit(main())
