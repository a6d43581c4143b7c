from __future__ import annotations

# ============================================================
# Project: Settlement Engine
# Module: Odds Conversion
# File: src/settlement_engine/engines/odds.py
# Purpose: American <-> decimal odds conversions shared by the
#          parlay combiner and profit calculator.
# ============================================================

import math

import numpy as np

from settlement_engine.core.exceptions import InvalidOdds


def _require_finite(value: float) -> float:
    try:
        value = float(value)
    except (TypeError, ValueError):
        raise InvalidOdds(f"Odds must be numeric, got {value!r}", odds=value)
    if not np.isfinite(value):
        raise InvalidOdds(f"Odds must be finite, got {value}", odds=value)
    return value


def _round_half_up(value: float) -> int:
    # Ties go toward +infinity: 212.5 -> 213, -212.5 -> -212.
    return int(math.floor(value + 0.5))


def american_to_decimal(odds: float) -> float:
    """Converts American odds to Decimal odds."""
    odds = _require_finite(odds)
    if odds == 0:
        raise InvalidOdds("Odds cannot be zero.", odds=odds)
    if odds > 0:
        return odds / 100.0 + 1
    return 100.0 / abs(odds) + 1


def decimal_to_american(decimal_odds: float) -> int:
    """Converts Decimal odds to American odds, rounded to the nearest integer."""
    decimal_odds = _require_finite(decimal_odds)
    if decimal_odds <= 1:
        raise InvalidOdds(
            f"Decimal odds must be greater than 1, got {decimal_odds}", odds=decimal_odds
        )
    if decimal_odds >= 2.0:
        return _round_half_up((decimal_odds - 1.0) * 100.0)
    return _round_half_up(-100.0 / (decimal_odds - 1.0))


def implied_probability(odds: float) -> float:
    """Break-even win probability implied by American odds."""
    return 1.0 / american_to_decimal(odds)


def format_american(odds: float) -> str:
    """Signed display string, e.g. +320 or -110."""
    odds = _round_half_up(_require_finite(odds))
    return f"+{odds}" if odds > 0 else str(odds)
