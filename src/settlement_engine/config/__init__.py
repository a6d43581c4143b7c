from settlement_engine.config.settings import (
    EngineSettings,
    LoggingSettings,
    load_config,
    load_settings,
)

__all__ = ["EngineSettings", "LoggingSettings", "load_config", "load_settings"]
