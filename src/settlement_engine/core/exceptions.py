# ============================================================
# File: src/settlement_engine/core/exceptions.py
# Purpose: Custom exceptions for settlement and profit errors
# Project: settlement_engine
# ============================================================

from loguru import logger


class EngineError(Exception):
    """Base class for all settlement-engine errors."""

    def __init__(self, message: str = "An error occurred in the settlement engine"):
        super().__init__(message)
        logger.warning(f"{self.__class__.__name__}: {message}")


class InvalidOdds(EngineError):
    """Odds value cannot be converted (zero, non-finite or degenerate)."""

    def __init__(self, message: str = "Invalid odds value", odds=None):
        super().__init__(message)
        self.odds = odds


class InsufficientLegs(EngineError):
    """A parlay needs at least two legs."""

    def __init__(
        self,
        message: str = "A parlay requires at least 2 legs",
        group_id: str = None,
        leg_count: int = 0,
    ):
        super().__init__(message)
        self.group_id = group_id
        self.leg_count = leg_count


class ConfigError(EngineError):
    """Configuration issue."""

    def __init__(self, message: str = "Invalid or missing configuration"):
        super().__init__(message)


class IngestionError(EngineError):
    """A raw bet record could not be parsed."""

    def __init__(self, message: str = "Invalid bet record", index: int = None):
        super().__init__(message)
        self.index = index
