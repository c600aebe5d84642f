"""Configuration loading utilities with JSON and YAML support."""

from __future__ import annotations

import json
import logging
from pathlib import Path
import re
from typing import Any

from pydantic import ValidationError
import yaml

from circadianlight.core.config.models import AppConfig
from circadianlight.core.errors import InvalidConfiguration

logger = logging.getLogger(__name__)

_INT_TAG = "tag:yaml.org,2002:int"
_FLOAT_TAG = "tag:yaml.org,2002:float"


class ConfigLoader(yaml.SafeLoader):
    """SafeLoader without YAML 1.1 base-60 numbers.

    ``safe_load`` reads an unquoted ``17:00`` as the integer 1020; here it
    stays the string "17:00" and is parsed as a clock time.
    """


ConfigLoader.yaml_implicit_resolvers = {
    first: [(tag, regexp) for tag, regexp in resolvers if tag not in (_INT_TAG, _FLOAT_TAG)]
    for first, resolvers in yaml.SafeLoader.yaml_implicit_resolvers.items()
}
ConfigLoader.add_implicit_resolver(
    _INT_TAG,
    re.compile(
        r"""^(?:[-+]?0b[0-1_]+
        |[-+]?0[0-7_]+
        |[-+]?(?:0|[1-9][0-9_]*)
        |[-+]?0x[0-9a-fA-F_]+)$""",
        re.X,
    ),
    list("-+0123456789"),
)
ConfigLoader.add_implicit_resolver(
    _FLOAT_TAG,
    re.compile(
        r"""^(?:[-+]?(?:[0-9][0-9_]*)\.[0-9_]*(?:[eE][-+][0-9]+)?
        |\.[0-9][0-9_]*(?:[eE][-+][0-9]+)?
        |[-+]?\.(?:inf|Inf|INF)
        |\.(?:nan|NaN|NAN))$""",
        re.X,
    ),
    list("-+0123456789."),
)


def detect_format(file_path: Path | str) -> str:
    """Detect config file format from extension.

    Args:
        file_path: Path to config file

    Returns:
        Format string: "json" or "yaml"

    Raises:
        ValueError: If format cannot be determined

    Example:
        >>> detect_format("config.json")
        'json'
        >>> detect_format("config.yml")
        'yaml'
    """
    suffix = Path(file_path).suffix.lower()

    if suffix == ".json":
        return "json"
    elif suffix in [".yaml", ".yml"]:
        return "yaml"
    else:
        raise ValueError(f"Unsupported config format: {suffix}")


def load_config(path: str | Path) -> dict[str, Any]:
    """Load and return a raw configuration dictionary.

    Format is auto-detected from the file extension. In YAML files, quote
    clock values ("18:00"): unquoted they parse as base-60 integers.

    Args:
        path: Path to config file (.json, .yaml, or .yml)

    Returns:
        Raw configuration dictionary (empty for an empty YAML file)

    Raises:
        FileNotFoundError: If config file does not exist
        ValueError: If format is not supported or file content is invalid
    """
    path = Path(path)

    if not path.exists():
        raise FileNotFoundError(f"Config file does not exist: {path}")

    fmt = detect_format(path)

    if fmt == "json":
        try:
            with path.open("r", encoding="utf-8") as f:
                content = json.load(f)
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid JSON in {path}: {e}") from e
    else:
        try:
            with path.open("r", encoding="utf-8") as f:
                content = yaml.load(f, Loader=ConfigLoader)
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid YAML in {path}: {e}") from e
        # Empty files load as None
        if content is None:
            content = {}

    if not isinstance(content, dict):
        raise ValueError(f"Config root in {path} must be a mapping, got {type(content).__name__}")
    return content


def merge_overrides(base: dict[str, Any], overrides: dict[str, Any]) -> dict[str, Any]:
    """Deep-merge overrides into a copy of base, skipping None values.

    Example:
        >>> merge_overrides({"schedule": {"day_start": 6}}, {"schedule": {"dusk_start": 17}})
        {'schedule': {'day_start': 6, 'dusk_start': 17}}
    """
    merged = dict(base)
    for key, value in overrides.items():
        if value is None:
            continue
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = merge_overrides(merged[key], value)
        elif isinstance(value, dict):
            merged[key] = merge_overrides({}, value)
        else:
            merged[key] = value
    return merged


def _format_validation_error(error: ValidationError) -> str:
    parts = []
    for item in error.errors():
        location = ".".join(str(p) for p in item["loc"]) or "config"
        parts.append(f"{location}: {item['msg']}")
    return "; ".join(parts)


def build_app_config(
    raw: dict[str, Any] | None = None, overrides: dict[str, Any] | None = None
) -> AppConfig:
    """Validate raw config values plus overrides into an AppConfig.

    Args:
        raw: Values loaded from a config file
        overrides: Values from command-line flags; None entries are ignored

    Returns:
        Validated AppConfig

    Raises:
        InvalidConfiguration: If any value is invalid or the phase
            boundaries are out of order
    """
    merged = merge_overrides(raw or {}, overrides or {})
    try:
        return AppConfig.model_validate(merged)
    except ValidationError as e:
        raise InvalidConfiguration(_format_validation_error(e)) from e


def load_app_config(
    path: str | Path | None = None, overrides: dict[str, Any] | None = None
) -> AppConfig:
    """Load and validate application configuration.

    An explicit path must exist. Without one, the default location is used
    when present and built-in defaults otherwise.

    Args:
        path: Path to config file (.json, .yaml, or .yml)
        overrides: Values from command-line flags

    Returns:
        Validated AppConfig

    Raises:
        FileNotFoundError: If an explicit path does not exist
        ValueError: If the file cannot be parsed
        InvalidConfiguration: If the values are invalid
    """
    if path is None:
        default_path = AppConfig.default_path()
        if default_path.exists():
            logger.debug("Loading config from default path %s", default_path)
            raw = load_config(default_path)
        else:
            raw = {}
    else:
        logger.debug("Loading config from %s", path)
        raw = load_config(path)

    return build_app_config(raw, overrides)
