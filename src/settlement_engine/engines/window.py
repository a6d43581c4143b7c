from __future__ import annotations

# ============================================================
# Project: Settlement Engine
# Module: Time Window Selector
# File: src/settlement_engine/engines/window.py
#
# Description:
#     Decides which straight bets and parlay groups belong to a
#     half-open [start, end) window such as "today".
#       • straight bets: game_date, else placed_at
#       • pending parlays: earliest still-open leg's date
#       • settled parlays: the group's own placed_at
# ============================================================

from datetime import date, datetime, time, timedelta
from typing import Iterable, Optional, Tuple, Union
from zoneinfo import ZoneInfo

from loguru import logger

from settlement_engine.config.settings import EngineSettings
from settlement_engine.engines.grouping import group_bets
from settlement_engine.engines.settlement import classify
from settlement_engine.models import (
    Bet,
    GroupedBets,
    GroupStatus,
    Outcome,
    ParlayGroup,
    ensure_aware,
)

PERIODS = ("today", "week", "month", "year")

Window = Tuple[datetime, datetime]


def in_window(ts: Optional[datetime], start: datetime, end: datetime) -> bool:
    if ts is None:
        return False
    return start <= ensure_aware(ts) < end


def earliest_open_date(group: ParlayGroup) -> Optional[datetime]:
    """Earliest game (or placement) date among the group's pending legs."""
    dates = [
        leg.event_date
        for leg in group.legs
        if classify(leg) is Outcome.PENDING and leg.event_date is not None
    ]
    return min(dates) if dates else None


def parlay_in_window(group: ParlayGroup, start: datetime, end: datetime) -> bool:
    if group.status is GroupStatus.PENDING:
        return in_window(earliest_open_date(group), start, end)
    return in_window(group.placed_at, start, end)


def select_window(
    bets: Union[Iterable[Bet], GroupedBets],
    start: datetime,
    end: datetime,
) -> GroupedBets:
    """Straight bets and parlay groups that belong to [start, end)."""
    start, end = ensure_aware(start), ensure_aware(end)
    if start >= end:
        raise ValueError(f"Window start {start} must precede end {end}")

    grouped = bets if isinstance(bets, GroupedBets) else group_bets(bets)

    straight = [bet for bet in grouped.straight_bets if in_window(bet.event_date, start, end)]
    parlays = [g for g in grouped.parlay_groups if parlay_in_window(g, start, end)]

    logger.debug(
        f"select_window(): [{start.isoformat()}, {end.isoformat()}) → "
        f"{len(straight)} straight, {len(parlays)} parlays"
    )
    return GroupedBets(
        straight_bets=straight,
        parlay_groups=parlays,
        diagnostics=list(grouped.diagnostics),
    )


# ------------------------------------------------------------
# Calendar helpers
# ------------------------------------------------------------

def _zone(tz) -> ZoneInfo:
    return tz if isinstance(tz, ZoneInfo) else ZoneInfo(tz)


def day_bounds(day: date, tz="UTC") -> Window:
    zone = _zone(tz)
    start = datetime.combine(day, time.min, tzinfo=zone)
    end = datetime.combine(day + timedelta(days=1), time.min, tzinfo=zone)
    return start, end


def period_bounds(period: str, now: Optional[datetime] = None, tz="UTC") -> Window:
    """
    [start, end) for a named dashboard period:
      today -- the current calendar day
      week  -- the trailing 7 days including today
      month -- month to date
      year  -- the current calendar year
    """
    zone = _zone(tz)
    now = ensure_aware(now).astimezone(zone) if now else datetime.now(zone)
    today = now.date()
    end_of_today = day_bounds(today, zone)[1]

    if period == "today":
        return day_bounds(today, zone)
    if period == "week":
        return day_bounds(today - timedelta(days=6), zone)[0], end_of_today
    if period == "month":
        return day_bounds(today.replace(day=1), zone)[0], end_of_today
    if period == "year":
        return (
            day_bounds(date(today.year, 1, 1), zone)[0],
            day_bounds(date(today.year + 1, 1, 1), zone)[0],
        )
    raise ValueError(f"Unknown period {period!r}; expected one of {PERIODS}")


def select_period(
    bets: Union[Iterable[Bet], GroupedBets],
    period: str = "today",
    now: Optional[datetime] = None,
    settings: Optional[EngineSettings] = None,
) -> GroupedBets:
    settings = settings or EngineSettings()
    start, end = period_bounds(period, now=now, tz=settings.timezone)
    return select_window(bets, start, end)
