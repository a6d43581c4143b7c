from __future__ import annotations

# ============================================================
# Project: Settlement Engine
# Module: Parlay Combiner
# File: src/settlement_engine/engines/parlay.py
# ============================================================

from datetime import datetime, timezone
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from loguru import logger

from settlement_engine.core.exceptions import InsufficientLegs
from settlement_engine.engines.odds import american_to_decimal, decimal_to_american
from settlement_engine.models import Bet

MIN_PARLAY_LEGS = 2


def require_legs(legs: Sequence[Bet], group_id: Optional[str] = None) -> None:
    if len(legs) < MIN_PARLAY_LEGS:
        raise InsufficientLegs(
            f"Parlay {group_id or '?'} has {len(legs)} leg(s); at least "
            f"{MIN_PARLAY_LEGS} are required",
            group_id=group_id,
            leg_count=len(legs),
        )


def parlay_decimal_odds(legs: Sequence[Bet]) -> float:
    dec = 1.0
    for leg in legs:
        dec *= american_to_decimal(leg.odds)
    return dec


def combine_odds(legs: Sequence[Bet]) -> int:
    """
    Nominal American price of a parlay, for display only.
    Settled profit uses parlay_decimal_odds() directly so the two agree:
    payout = stake * parlay_decimal_odds(legs).
    """
    require_legs(legs, legs[0].parlay_id if legs else None)
    return decimal_to_american(parlay_decimal_odds(legs))


# ------------------------------------------------------------
# Flat-row partition + designated leg
# ------------------------------------------------------------

_EPOCH = datetime.min.replace(tzinfo=timezone.utc)


def leg_sort_key(leg: Bet):
    """Oldest placement first; legs without a timestamp last, then by id."""
    return (leg.placed_at is None, leg.placed_at or _EPOCH, leg.id)


def sort_legs(legs: Sequence[Bet]) -> List[Bet]:
    return sorted(legs, key=leg_sort_key)


def select_designated_leg(legs: Sequence[Bet]) -> Bet:
    """
    Pick the leg carrying the group's real stake/payout:
      1. first leg with stake > 0 and potential_payout > 0
      2. else first leg with stake > 0
      3. else the first leg
    Legs are scanned oldest-first so the choice does not depend on row order.
    """
    if not legs:
        raise InsufficientLegs("Cannot designate a leg of an empty parlay", leg_count=0)

    ordered = sort_legs(legs)
    for leg in ordered:
        if leg.stake > 0 and leg.potential_payout > 0:
            return leg
    for leg in ordered:
        if leg.stake > 0:
            return leg
    return ordered[0]


def partition_bets(
    bets: Iterable[Bet],
) -> Tuple[List[Bet], Dict[str, List[Bet]], List[str]]:
    """
    Split flat rows into straight bets and parlay legs keyed by group id.
    Groups with fewer than two legs are reported in the diagnostics list
    and their rows are kept as straight bets.
    """
    bets = list(bets)
    groups: Dict[str, List[Bet]] = {}
    for bet in bets:
        if bet.is_parlay_leg:
            groups.setdefault(bet.parlay_id, []).append(bet)

    diagnostics: List[str] = []
    undersized = set()
    for group_id, legs in groups.items():
        try:
            require_legs(legs, group_id)
        except InsufficientLegs as e:
            diagnostics.append(str(e))
            undersized.add(group_id)

    straight = [b for b in bets if not b.is_parlay_leg or b.parlay_id in undersized]
    groups = {gid: legs for gid, legs in groups.items() if gid not in undersized}

    if diagnostics:
        logger.warning(f"partition_bets(): {len(diagnostics)} undersized parlay group(s) kept as straight bets")

    return straight, groups, diagnostics
