# ============================================================
# Project: Settlement Engine
# Purpose: Parlay-aware settlement, profit and metrics engine
# ============================================================

from settlement_engine.core.exceptions import (
    ConfigError,
    EngineError,
    IngestionError,
    InsufficientLegs,
    InvalidOdds,
)
from settlement_engine.engines.grouping import group_bets
from settlement_engine.engines.metrics import (
    BreakdownRow,
    PerformanceMetrics,
    breakdown_by,
    compute_metrics,
    daily_profit_frame,
)
from settlement_engine.engines.odds import american_to_decimal, decimal_to_american
from settlement_engine.engines.parlay import combine_odds
from settlement_engine.engines.profit import compute_profits
from settlement_engine.engines.settlement import classify
from settlement_engine.engines.window import select_period, select_window
from settlement_engine.ingest import bets_from_frame, bets_from_records
from settlement_engine.models import Bet, GroupedBets, GroupStatus, Outcome, ParlayGroup
from settlement_engine.persistence import (
    RecalculationResult,
    recalculate_and_persist,
    validate_profits,
)

__version__ = "0.1.0"

__all__ = [
    "Bet",
    "BreakdownRow",
    "ConfigError",
    "EngineError",
    "GroupStatus",
    "GroupedBets",
    "IngestionError",
    "InsufficientLegs",
    "InvalidOdds",
    "Outcome",
    "ParlayGroup",
    "PerformanceMetrics",
    "RecalculationResult",
    "american_to_decimal",
    "bets_from_frame",
    "breakdown_by",
    "bets_from_records",
    "classify",
    "combine_odds",
    "compute_metrics",
    "compute_profits",
    "daily_profit_frame",
    "decimal_to_american",
    "group_bets",
    "recalculate_and_persist",
    "select_period",
    "select_window",
    "validate_profits",
]
