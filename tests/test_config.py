# ============================================================
# Path: tests/test_config.py
# Purpose: Environment + YAML configuration loading
# ============================================================

import pytest
import yaml
from pydantic import ValidationError

from settlement_engine.config.settings import EngineSettings, load_config, load_settings
from settlement_engine.core.exceptions import ConfigError


def test_defaults(monkeypatch):
    monkeypatch.delenv("SETTLEMENT_BATCH_SIZE", raising=False)
    settings = load_settings()
    assert isinstance(settings, EngineSettings)
    assert settings.batch_size == 50
    assert settings.timezone == "UTC"
    assert settings.logging.level == "INFO"


def test_env_override(monkeypatch):
    monkeypatch.setenv("SETTLEMENT_BATCH_SIZE", "10")
    monkeypatch.setenv("SETTLEMENT_LOGGING__LEVEL", "DEBUG")
    settings = load_settings()
    assert settings.batch_size == 10
    assert settings.logging.level == "DEBUG"


def test_invalid_env_value(monkeypatch):
    monkeypatch.setenv("SETTLEMENT_BATCH_SIZE", "0")
    with pytest.raises(ValidationError):
        load_settings()


def test_yaml_config(tmp_path, monkeypatch):
    monkeypatch.delenv("SETTLEMENT_BATCH_SIZE", raising=False)
    path = tmp_path / "config.yaml"
    path.write_text(yaml.safe_dump({"batch_size": 25, "timezone": "America/New_York"}))

    settings = load_config(str(path))
    assert settings.batch_size == 25
    assert settings.timezone == "America/New_York"


def test_env_wins_over_yaml(tmp_path, monkeypatch):
    monkeypatch.setenv("SETTLEMENT_BATCH_SIZE", "5")
    path = tmp_path / "config.yaml"
    path.write_text(yaml.safe_dump({"batch_size": 25}))

    assert load_config(str(path)).batch_size == 5


def test_missing_config_file(tmp_path):
    with pytest.raises(ConfigError):
        load_config(str(tmp_path / "nope.yaml"))


def test_invalid_yaml_value(tmp_path, monkeypatch):
    monkeypatch.delenv("SETTLEMENT_BATCH_SIZE", raising=False)
    path = tmp_path / "config.yaml"
    path.write_text(yaml.safe_dump({"batch_size": 0}))
    with pytest.raises(ConfigError):
        load_config(str(path))


def test_env_merges_into_yaml_section(tmp_path, monkeypatch):
    monkeypatch.setenv("SETTLEMENT_LOGGING__LEVEL", "DEBUG")
    log_file = str(tmp_path / "engine.log")
    path = tmp_path / "config.yaml"
    path.write_text(yaml.safe_dump({"logging": {"file": log_file, "level": "INFO", "retention_days": 3}}))

    settings = load_config(str(path))
    assert settings.logging.level == "DEBUG"
    assert settings.logging.file == log_file
    assert settings.logging.retention_days == 3
