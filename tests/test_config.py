"""
Tests for YAML configuration loading.
"""

import logging
from pathlib import Path

import pytest
from pydantic import ValidationError

from bookable.config import AppConfig, DefaultsConfig


def _write(tmp_path: Path, text: str) -> Path:
    path = tmp_path / "config.yaml"
    path.write_text(text, encoding="utf-8")
    return path


class TestAppConfig:
    """Tests for AppConfig validation."""

    def test_defaults(self):
        config = AppConfig()

        assert config.timezone == "Africa/Lagos"
        assert config.defaults.duration_minutes == 30
        assert config.defaults.lookahead_days == 7
        assert config.log_level == "WARNING"

    def test_unknown_timezone(self):
        with pytest.raises(ValidationError, match="Unknown timezone"):
            AppConfig(timezone="Atlantis/Central")

    def test_log_level_is_normalized(self):
        assert AppConfig(log_level=" debug ").log_level == "DEBUG"

    def test_unknown_log_level(self):
        with pytest.raises(ValidationError, match="Unknown log level"):
            AppConfig(log_level="VERBOSE")

    @pytest.mark.parametrize("field", ["duration_minutes", "lookahead_days"])
    def test_defaults_must_be_positive(self, field):
        with pytest.raises(ValidationError, match=field):
            DefaultsConfig(**{field: 0})


class TestLoadFromYaml:
    """Tests for reading config files."""

    def test_load(self, tmp_path):
        path = _write(
            tmp_path,
            "data_file: data/schedules.yaml\n"
            "timezone: Europe/Berlin\n"
            "defaults:\n"
            "  duration_minutes: 45\n"
            "  lookahead_days: 14\n"
            "log_level: info\n",
        )

        config = AppConfig.load_from_yaml(path)

        assert config.timezone == "Europe/Berlin"
        assert config.defaults.duration_minutes == 45
        assert config.defaults.lookahead_days == 14
        assert config.log_level == "INFO"

    def test_relative_data_file_resolves_next_to_config(self, tmp_path):
        config = AppConfig.load_from_yaml(_write(tmp_path, "data_file: data/schedules.yaml\n"))

        assert config.data_file == tmp_path / "data" / "schedules.yaml"

    def test_absolute_data_file_is_kept(self, tmp_path):
        target = tmp_path / "elsewhere" / "schedules.json"

        config = AppConfig.load_from_yaml(_write(tmp_path, f"data_file: {target}\n"))

        assert config.data_file == target

    def test_empty_file_uses_defaults(self, tmp_path):
        config = AppConfig.load_from_yaml(_write(tmp_path, ""))

        assert config.timezone == "Africa/Lagos"
        assert config.data_file == tmp_path / "schedules.yaml"

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError, match="config.example.yaml"):
            AppConfig.load_from_yaml(tmp_path / "config.yaml")

    def test_invalid_yaml(self, tmp_path):
        with pytest.raises(ValueError, match="Invalid YAML"):
            AppConfig.load_from_yaml(_write(tmp_path, "defaults: [broken\n"))

    def test_root_must_be_mapping(self, tmp_path):
        with pytest.raises(ValueError, match="mapping"):
            AppConfig.load_from_yaml(_write(tmp_path, "- a\n- b\n"))

    def test_invalid_values_raise_value_error(self, tmp_path):
        """pydantic's ValidationError is a ValueError, which the CLI reports."""
        with pytest.raises(ValueError):
            AppConfig.load_from_yaml(_write(tmp_path, "timezone: Nowhere/Special\n"))


def test_configure_logging_sets_root_level(monkeypatch):
    calls = {}
    monkeypatch.setattr(logging, "basicConfig", lambda **kwargs: calls.update(kwargs))

    AppConfig(log_level="DEBUG").configure_logging()

    assert calls["level"] == logging.DEBUG
    assert "%(name)s" in calls["format"]
