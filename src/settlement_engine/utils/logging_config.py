# ============================================================
# File: src/settlement_engine/utils/logging_config.py
# Purpose: Configure loguru with console + daily rotating file sink
# Project: settlement_engine
#
# Dependencies:
# - loguru
# ============================================================

import sys
from pathlib import Path
from typing import Optional

from loguru import logger

from settlement_engine.config.settings import LoggingSettings

LOG_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} [{level}] {name}: {message}"


def configure_logging(
    level: Optional[str] = None,
    log_file: Optional[str] = None,
    retention_days: Optional[int] = None,
    settings: Optional[LoggingSettings] = None,
):
    """
    Configure loguru with a stderr sink and, optionally, a file sink
    that rotates at midnight.

    Arguments:
    level -- Minimum level (default: settings.level)
    log_file -- Path to the log file (default: settings.file, none if unset)
    retention_days -- Days of rotated files to keep (default: settings.retention_days)
    """
    settings = settings or LoggingSettings()
    level = (level or settings.level).upper()
    log_file = log_file or settings.file
    retention_days = retention_days or settings.retention_days

    # Reset any existing sinks
    logger.remove()
    logger.add(sys.stderr, level=level, format=LOG_FORMAT)

    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        logger.add(
            log_file,
            level=level,
            format=LOG_FORMAT,
            rotation="00:00",
            retention=f"{retention_days} days",
            encoding="utf-8",
        )

    logger.info(
        f"Logging configured (level: {level}, file: {log_file or 'none'}, "
        f"retention: {retention_days} days)"
    )
    return logger
