"""Tests for the config loader with JSON and YAML support."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
import yaml

import circadianlight.core.config.loader as config_loader
from circadianlight.core.config.models import AppConfig
from circadianlight.core.errors import InvalidConfiguration


@pytest.fixture
def sample_config_data():
    """Sample configuration data for testing."""
    return {
        "schedule": {
            "day_start": "07:00",
            "dusk_start": "19:00",
            "night_start": "23:00",
            "night": {"red": 1.0, "green": 0.7, "blue": 0.5},
        },
        "service": {"interval_seconds": 30, "output": "HDMI-1"},
        "logging": {"level": "DEBUG"},
    }


def test_detect_format_json():
    assert config_loader.detect_format("config.json") == "json"
    assert config_loader.detect_format(Path("config.JSON")) == "json"


def test_detect_format_yaml():
    assert config_loader.detect_format("config.yaml") == "yaml"
    assert config_loader.detect_format("config.yml") == "yaml"


def test_detect_format_invalid():
    with pytest.raises(ValueError) as exc_info:
        config_loader.detect_format("config.toml")

    assert "Unsupported config format" in str(exc_info.value)


def test_load_config_json(tmp_path, sample_config_data):
    config_file = tmp_path / "config.json"
    config_file.write_text(json.dumps(sample_config_data))

    config = config_loader.load_config(config_file)

    assert config["schedule"]["day_start"] == "07:00"
    assert config["service"]["output"] == "HDMI-1"


def test_load_config_yaml(tmp_path, sample_config_data):
    config_file = tmp_path / "config.yaml"
    config_file.write_text(yaml.dump(sample_config_data))

    config = config_loader.load_config(config_file)

    assert config["schedule"]["night"]["green"] == 0.7
    assert config["logging"]["level"] == "DEBUG"


def test_load_config_empty_yaml(tmp_path):
    config_file = tmp_path / "config.yml"
    config_file.write_text("")

    assert config_loader.load_config(config_file) == {}


def test_load_config_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        config_loader.load_config(tmp_path / "missing.yaml")


def test_load_config_invalid_json(tmp_path):
    config_file = tmp_path / "config.json"
    config_file.write_text("{not json")

    with pytest.raises(ValueError, match="Invalid JSON"):
        config_loader.load_config(config_file)


def test_load_config_invalid_yaml(tmp_path):
    config_file = tmp_path / "config.yaml"
    config_file.write_text("schedule: [unclosed")

    with pytest.raises(ValueError, match="Invalid YAML"):
        config_loader.load_config(config_file)


def test_load_config_non_mapping_root(tmp_path):
    config_file = tmp_path / "config.yaml"
    config_file.write_text("- a\n- b\n")

    with pytest.raises(ValueError, match="must be a mapping"):
        config_loader.load_config(config_file)


def test_merge_overrides_skips_none():
    merged = config_loader.merge_overrides(
        {"schedule": {"day_start": 6, "night": {"red": 1.0}}},
        {"schedule": {"day_start": None, "night": {"blue": 0.4, "green": None}}},
    )

    assert merged == {"schedule": {"day_start": 6, "night": {"red": 1.0, "blue": 0.4}}}


def test_merge_overrides_does_not_mutate_base():
    base = {"service": {"output": "eDP-1"}}
    config_loader.merge_overrides(base, {"service": {"output": "HDMI-1"}})

    assert base == {"service": {"output": "eDP-1"}}


def test_build_app_config_defaults():
    config = config_loader.build_app_config()

    assert config == AppConfig()
    assert config.service.interval_seconds == 60.0
    assert config.service.output is None


def test_build_app_config_overrides_win(sample_config_data):
    config = config_loader.build_app_config(
        sample_config_data, {"schedule": {"dusk_start": 20.0}, "service": {"output": None}}
    )

    assert config.schedule.dusk_start == 20.0
    assert config.schedule.day_start == 7.0
    assert config.service.output == "HDMI-1"


def test_build_app_config_bad_order_raises_invalid_configuration():
    with pytest.raises(InvalidConfiguration, match="schedule"):
        config_loader.build_app_config(
            {"schedule": {"day_start": 6, "dusk_start": 22, "night_start": 18}}
        )


def test_build_app_config_unknown_key_raises_invalid_configuration():
    with pytest.raises(InvalidConfiguration, match="unknown"):
        config_loader.build_app_config({"unknown": 1})


def test_load_app_config_explicit_path(tmp_path, sample_config_data):
    config_file = tmp_path / "circadian.yaml"
    config_file.write_text(yaml.dump(sample_config_data))

    config = config_loader.load_app_config(config_file)

    assert config.schedule.night_start == 23.0
    assert config.service.interval_seconds == 30.0
    assert config.logging.level == "DEBUG"


def test_load_app_config_explicit_missing_path(tmp_path):
    with pytest.raises(FileNotFoundError):
        config_loader.load_app_config(tmp_path / "nope.yaml")


def test_load_app_config_default_path(isolated_config_home, sample_config_data):
    default_file = isolated_config_home / "circadianlight" / "config.yaml"
    default_file.parent.mkdir(parents=True)
    default_file.write_text(yaml.dump(sample_config_data))

    config = config_loader.load_app_config()

    assert AppConfig.default_path() == default_file
    assert config.service.output == "HDMI-1"


def test_load_app_config_without_default_file_uses_defaults():
    assert config_loader.load_app_config() == AppConfig()


def test_load_config_yaml_keeps_unquoted_clock_times_as_strings(tmp_path):
    config_file = tmp_path / "config.yaml"
    config_file.write_text(
        "schedule:\n  day_start: 07:00\n  dusk_start: 17:00\n  night_start: 21:30\n"
    )

    config = config_loader.load_config(config_file)

    assert config["schedule"] == {
        "day_start": "07:00",
        "dusk_start": "17:00",
        "night_start": "21:30",
    }


def test_load_config_yaml_numbers_still_resolve(tmp_path):
    config_file = tmp_path / "config.yaml"
    config_file.write_text(
        "schedule:\n  dusk_start: 18\n  night_start: 22.5\n"
        "service:\n  interval_seconds: 1_200\n"
        "logging:\n  structured: true\n  filename: null\n"
    )

    config = config_loader.load_config(config_file)

    assert config["schedule"] == {"dusk_start": 18, "night_start": 22.5}
    assert config["service"]["interval_seconds"] == 1200
    assert config["logging"] == {"structured": True, "filename": None}


def test_load_app_config_unquoted_clock_times(tmp_path):
    config_file = tmp_path / "config.yaml"
    config_file.write_text(
        "schedule:\n  day_start: 07:00\n  dusk_start: 17:00\n  night_start: 21:00\n"
    )

    schedule = config_loader.load_app_config(config_file).schedule

    assert (schedule.day_start, schedule.dusk_start, schedule.night_start) == (7.0, 17.0, 21.0)
