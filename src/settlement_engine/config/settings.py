# ============================================================
# File: src/settlement_engine/config/settings.py
# Purpose: Load and validate engine configuration using
#          Pydantic Settings, with optional YAML overrides.
# Project: settlement_engine
#
# Dependencies:
# - pydantic
# - pydantic_settings
# - pyyaml
# ============================================================

from pathlib import Path
from typing import Literal, Optional

import yaml
from pydantic import BaseModel, Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from settlement_engine.core.exceptions import ConfigError


class LoggingSettings(BaseModel):
    """
    Logging configuration settings.
    """
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    file: Optional[str] = None
    retention_days: int = Field(default=7, ge=1)


class EngineSettings(BaseSettings):
    """
    Engine settings loaded from environment variables.
    SETTLEMENT_BATCH_SIZE overrides batch_size,
    SETTLEMENT_LOGGING__LEVEL overrides logging.level.
    """
    batch_size: int = Field(default=50, gt=0)
    batch_pause_seconds: float = Field(default=0.1, ge=0)
    timezone: str = "UTC"
    profit_tolerance: float = Field(default=1e-6, ge=0)
    logging: LoggingSettings = LoggingSettings()

    model_config = SettingsConfigDict(
        env_prefix="SETTLEMENT_",
        env_nested_delimiter="__",
        extra="ignore",
    )


def load_settings() -> EngineSettings:
    """
    Load settings from environment variables.

    Returns:
        EngineSettings: Engine configuration object.

    Raises:
        ValidationError: If a value is present but invalid.
    """
    return EngineSettings()


def _merge_env_over_yaml(data: dict, env_model: BaseModel) -> dict:
    """
    Drop top-level YAML keys the environment already sets. Sections are
    merged key by key, with the env values written over the YAML ones.
    """
    merged = dict(data)
    for key in env_model.model_fields_set:
        if key not in merged:
            continue
        env_value = getattr(env_model, key)
        if isinstance(env_value, BaseModel) and isinstance(merged[key], dict):
            section = dict(merged[key])
            section.update(env_value.model_dump(exclude_unset=True))
            merged[key] = section
        else:
            del merged[key]
    return merged


def load_config(path: str = "config.yaml") -> EngineSettings:
    """Load and validate configuration from YAML + environment overrides."""
    config_path = Path(path)
    if not config_path.exists():
        raise ConfigError(f"Config file not found: {config_path}")

    with open(config_path, "r") as f:
        data = yaml.safe_load(f) or {}

    if not isinstance(data, dict):
        raise ConfigError(f"Config file must contain a mapping: {config_path}")

    try:
        # Init kwargs outrank env vars in pydantic-settings.
        overrides = _merge_env_over_yaml(data, EngineSettings())
        return EngineSettings(**overrides)
    except ValidationError as e:
        raise ConfigError(f"Invalid config in {config_path}: {e}") from e
