from __future__ import annotations

# ============================================================
# Project: Settlement Engine
# Module: Bet Grouper
# File: src/settlement_engine/engines/grouping.py
#
# Description:
#     Turns flat bet rows into straight bets + ParlayGroup
#     aggregates:
#       • group status by fixed precedence (never row order)
#       • stake/payout copied from the designated leg
#       • legs oldest-first, groups newest-first
# ============================================================

from collections import Counter
from datetime import datetime, timezone
from typing import Iterable, Optional, Sequence

from loguru import logger

from settlement_engine.core.exceptions import InvalidOdds
from settlement_engine.engines.parlay import (
    combine_odds,
    partition_bets,
    require_legs,
    select_designated_leg,
    sort_legs,
)
from settlement_engine.engines.profit import parlay_leg_profits
from settlement_engine.engines.settlement import classify
from settlement_engine.models import Bet, GroupedBets, GroupStatus, Outcome, ParlayGroup

MULTI_SPORT = "multi-sport"

_EPOCH = datetime.min.replace(tzinfo=timezone.utc)


def derive_group_status(legs: Sequence[Bet]) -> GroupStatus:
    counts = Counter(classify(leg) for leg in legs)
    total = len(legs)

    if counts[Outcome.LOSS] > 0:
        return GroupStatus.LOST
    if counts[Outcome.VOID] == total:
        return GroupStatus.VOID
    if counts[Outcome.WIN] == total:
        return GroupStatus.WON
    # Pending legs, or a won/void mix with nothing left open.
    return GroupStatus.PENDING


def _group_sport(legs: Sequence[Bet]) -> Optional[str]:
    sports = {leg.sport for leg in legs if leg.sport}
    if not sports:
        return None
    if len(sports) == 1:
        return next(iter(sports))
    return MULTI_SPORT


def build_parlay_group(group_id: str, legs: Sequence[Bet]) -> ParlayGroup:
    require_legs(legs, group_id)

    ordered = sort_legs(legs)
    designated = select_designated_leg(ordered)
    profits = parlay_leg_profits(ordered, designated)
    status = derive_group_status(ordered)

    # Leg rows stay unsettled while any leg is open, but a lost leg
    # already fixes the group result at the full stake.
    if status is GroupStatus.LOST:
        profit = -designated.stake
    else:
        profit = profits[designated.id]

    placed = [leg.placed_at for leg in ordered if leg.placed_at is not None]
    settled = [leg.settled_at for leg in ordered if leg.settled_at is not None]

    try:
        combined = combine_odds(ordered)
    except InvalidOdds:
        combined = None

    return ParlayGroup(
        group_id=group_id,
        legs=tuple(ordered),
        status=status,
        stake=designated.stake,
        potential_payout=designated.potential_payout,
        placed_at=min(placed) if placed else None,
        designated_leg_id=designated.id,
        profit=profit,
        settled_at=max(settled) if settled else None,
        combined_odds=combined,
        sport=_group_sport(ordered),
    )


def sort_groups(groups: Iterable[ParlayGroup]) -> list:
    """Newest placement first; groups without a timestamp last."""
    return sorted(
        groups,
        key=lambda g: (g.placed_at is not None, g.placed_at or _EPOCH),
        reverse=True,
    )


def group_bets(bets: Iterable[Bet]) -> GroupedBets:
    """Partition flat rows into straight bets and parlay groups."""
    straight, groups, diagnostics = partition_bets(bets)

    parlay_groups = [build_parlay_group(group_id, legs) for group_id, legs in groups.items()]

    logger.debug(
        f"group_bets(): {len(straight)} straight bets, {len(parlay_groups)} parlays"
    )
    return GroupedBets(
        straight_bets=straight,
        parlay_groups=sort_groups(parlay_groups),
        diagnostics=diagnostics,
    )
