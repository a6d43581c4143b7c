from __future__ import annotations

# ============================================================
# Project: Settlement Engine
# Module: Profit Calculator
# File: src/settlement_engine/engines/profit.py
#
# Description:
#     Per-row profit for straight bets and all-or-nothing parlays.
#     A parlay's single profit value lives on its designated leg;
#     every other leg carries 0 so summing a flat list of rows
#     counts each parlay exactly once.
# ============================================================

from typing import Dict, Iterable, Optional, Sequence

from loguru import logger

from settlement_engine.core.exceptions import InvalidOdds
from settlement_engine.engines.parlay import (
    parlay_decimal_odds,
    partition_bets,
    select_designated_leg,
)
from settlement_engine.engines.settlement import classify
from settlement_engine.models import Bet, Outcome


def single_bet_profit(bet: Bet, outcome: Optional[Outcome] = None) -> Optional[float]:
    """Profit of a straight bet; None while unresolved."""
    outcome = outcome or classify(bet)

    if outcome is Outcome.WIN:
        return bet.potential_payout - bet.stake
    if outcome is Outcome.LOSS:
        return -bet.stake
    if outcome is Outcome.VOID:
        return 0.0
    return None


def parlay_leg_profits(
    legs: Sequence[Bet],
    designated: Optional[Bet] = None,
) -> Dict[str, Optional[float]]:
    """
    Profit for every leg of one parlay group:
      • any leg pending → every leg None
      • any leg lost    → designated leg -stake, others 0
      • any leg void    → every leg 0 (push)
      • all legs won    → designated leg stake * Π decimal - stake, others 0
    """
    if not legs:
        return {}

    designated = designated or select_designated_leg(legs)
    stake = designated.stake
    outcomes = [classify(leg) for leg in legs]

    if Outcome.PENDING in outcomes:
        return {leg.id: None for leg in legs}

    if Outcome.LOSS in outcomes:
        group_profit = -stake
    elif Outcome.VOID in outcomes:
        group_profit = 0.0
    else:
        try:
            payout = stake * parlay_decimal_odds(legs)
        except InvalidOdds:
            logger.warning(
                f"parlay_leg_profits(): invalid leg odds in parlay "
                f"{designated.parlay_id}; profit left unresolved"
            )
            return {leg.id: None for leg in legs}
        group_profit = payout - stake

    return {leg.id: (group_profit if leg.id == designated.id else 0.0) for leg in legs}


def parlay_profit(legs: Sequence[Bet], designated: Optional[Bet] = None) -> Optional[float]:
    """The parlay's single profit value, as carried by its designated leg."""
    if not legs:
        return None
    designated = designated or select_designated_leg(legs)
    return parlay_leg_profits(legs, designated)[designated.id]


def compute_profits(bets: Iterable[Bet]) -> Dict[str, Optional[float]]:
    """
    Per-row profit for a flat list of bets, keyed by bet id.
    Straight bets are settled individually; parlay legs atomically per group.
    """
    straight, groups, _ = partition_bets(bets)

    results: Dict[str, Optional[float]] = {}
    for bet in straight:
        results[bet.id] = single_bet_profit(bet)
    for legs in groups.values():
        results.update(parlay_leg_profits(legs))

    return results
