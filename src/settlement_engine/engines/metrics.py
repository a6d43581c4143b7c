from __future__ import annotations

# ============================================================
# Project: Settlement Engine
# Module: Metrics Aggregator
# File: src/settlement_engine/engines/metrics.py
# Purpose:
#     Portfolio rollups over grouped bets:
#       • win rate / ROI with each parlay counted as one unit
#       • profit counted once per parlay, never per leg
#       • cumulative daily profit series in the configured zone
#       • per-sport / per-bet-type breakdowns
# ============================================================

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Iterable, List, Optional, Union
from zoneinfo import ZoneInfo

import pandas as pd
from loguru import logger

from settlement_engine.config.settings import EngineSettings
from settlement_engine.engines.grouping import group_bets
from settlement_engine.engines.profit import single_bet_profit
from settlement_engine.engines.settlement import classify
from settlement_engine.models import Bet, GroupedBets, GroupStatus

DAILY_COLUMNS = ["date", "profit", "cumulative_profit"]
BREAKDOWN_COLUMNS = ["bets", "wins", "losses", "stake", "profit", "win_rate", "roi"]
BREAKDOWN_KEYS = ("sport", "bet_type")

PARLAY_BET_TYPE = "parlay"
UNKNOWN_KEY = "Unknown"


# ------------------------------------------------------------
# Result dataclasses
# ------------------------------------------------------------

@dataclass(frozen=True)
class DailyProfitPoint:
    date: date
    cumulative_profit: float


@dataclass(frozen=True)
class BreakdownRow:
    key: str
    bets: int
    wins: int
    losses: int
    stake: float
    profit: float
    win_rate: float  # wins / (wins + losses)
    roi: float  # percent


@dataclass(frozen=True)
class PerformanceMetrics:
    total_bets: int
    wins: int
    losses: int
    win_rate: float  # wins / (wins + losses)
    total_staked: float
    total_profit: float
    roi: float  # percent
    biggest_win: float = 0.0
    biggest_loss: float = 0.0
    current_streak: int = 0
    streak_type: str = "none"
    daily_profit: List[DailyProfitPoint] = field(default_factory=list)
    straight_bets_count: int = 0  # settled straight bets
    parlay_bets_count: int = 0  # settled parlays
    void_bets_count: int = 0
    avg_stake: float = 0.0
    avg_odds: float = 0.0
    sport_breakdown: List[BreakdownRow] = field(default_factory=list)
    bet_type_breakdown: List[BreakdownRow] = field(default_factory=list)


@dataclass(frozen=True)
class _Unit:
    """One countable bet: a straight bet or a whole parlay."""
    unit_id: str
    status: GroupStatus
    stake: float
    profit: Optional[float]
    placed_at: Optional[datetime]
    settled_at: Optional[datetime]
    is_parlay: bool = False
    odds: Optional[float] = None
    sport: Optional[str] = None
    bet_type: Optional[str] = None

    @property
    def is_decided(self) -> bool:
        return self.status in (GroupStatus.WON, GroupStatus.LOST)

    @property
    def is_settled(self) -> bool:
        return self.status.is_settled


def _as_grouped(bets: Union[Iterable[Bet], GroupedBets]) -> GroupedBets:
    return bets if isinstance(bets, GroupedBets) else group_bets(bets)


def _units(grouped: GroupedBets) -> List[_Unit]:
    units: List[_Unit] = []

    for bet in grouped.straight_bets:
        outcome = classify(bet)
        units.append(
            _Unit(
                unit_id=bet.id,
                status=GroupStatus.from_outcome(outcome),
                stake=bet.stake,
                profit=single_bet_profit(bet, outcome),
                placed_at=bet.placed_at,
                settled_at=bet.settled_at,
                odds=bet.odds,
                sport=bet.sport,
                bet_type=bet.bet_type,
            )
        )

    # A flat query can surface the same parlay more than once.
    processed_parlays = set()
    for group in grouped.parlay_groups:
        if group.group_id in processed_parlays:
            continue
        processed_parlays.add(group.group_id)
        units.append(
            _Unit(
                unit_id=group.group_id,
                status=group.status,
                stake=group.stake,
                profit=group.profit,
                placed_at=group.placed_at,
                settled_at=group.settled_at,
                is_parlay=True,
                odds=group.combined_odds,
                sport=group.sport,
                bet_type=PARLAY_BET_TYPE,
            )
        )

    return units


def _current_streak(units: List[_Unit]):
    decided = [u for u in units if u.is_decided and u.placed_at is not None]
    if not decided:
        return 0, "none"

    decided.sort(key=lambda u: u.placed_at, reverse=True)
    latest = decided[0].status
    streak = 0
    for unit in decided:
        if unit.status is not latest:
            break
        streak += 1

    return streak, "win" if latest is GroupStatus.WON else "loss"


def _local_date(moment: datetime, settings: EngineSettings) -> date:
    return moment.astimezone(ZoneInfo(settings.timezone)).date()


# ------------------------------------------------------------
# Daily series
# ------------------------------------------------------------

def _daily_frame(units: List[_Unit], settings: EngineSettings) -> pd.DataFrame:
    rows = [
        {
            "date": _local_date(u.settled_at or u.placed_at, settings),
            "profit": u.profit or 0.0,
        }
        for u in units
        if u.is_decided and (u.settled_at or u.placed_at) is not None
    ]
    if not rows:
        return pd.DataFrame(columns=DAILY_COLUMNS)

    daily = (
        pd.DataFrame(rows)
        .groupby("date", as_index=False)["profit"]
        .sum()
        .sort_values("date")
        .reset_index(drop=True)
    )
    daily["cumulative_profit"] = daily["profit"].cumsum()
    return daily[DAILY_COLUMNS]


def daily_profit_frame(
    bets: Union[Iterable[Bet], GroupedBets],
    settings: Optional[EngineSettings] = None,
) -> pd.DataFrame:
    """
    Profit per settlement date with a running total starting from 0.
    Dates are calendar days in settings.timezone.
    Columns: date, profit, cumulative_profit.
    """
    settings = settings or EngineSettings()
    return _daily_frame(_units(_as_grouped(bets)), settings)


# ------------------------------------------------------------
# Breakdowns
# ------------------------------------------------------------

def _breakdown_frame(units: List[_Unit], key: str) -> pd.DataFrame:
    if not units:
        return pd.DataFrame(columns=[key] + BREAKDOWN_COLUMNS)

    df = pd.DataFrame(
        {
            key: [getattr(u, key) or UNKNOWN_KEY for u in units],
            "unit_id": [u.unit_id for u in units],
            "status": [u.status.value for u in units],
            "stake": [u.stake for u in units],
            "profit": [u.profit or 0.0 for u in units],
        }
    )

    grouped = (
        df.groupby(key)
        .agg(
            bets=("unit_id", "count"),
            wins=("status", lambda s: (s == GroupStatus.WON.value).sum()),
            losses=("status", lambda s: (s == GroupStatus.LOST.value).sum()),
            stake=("stake", "sum"),
            profit=("profit", "sum"),
        )
        .reset_index()
    )

    decided = grouped["wins"] + grouped["losses"]
    grouped["win_rate"] = (grouped["wins"] / decided.where(decided > 0)).fillna(0.0)
    grouped["roi"] = (grouped["profit"] / grouped["stake"].where(grouped["stake"] > 0) * 100).fillna(0.0)

    return grouped.sort_values(key).reset_index(drop=True)[[key] + BREAKDOWN_COLUMNS]


def breakdown_by(bets: Union[Iterable[Bet], GroupedBets], key: str) -> pd.DataFrame:
    """
    Group units by 'sport' or 'bet_type' and compute:
      - bets, wins, losses, stake, profit, win_rate, roi (percent)
    Each parlay counts once under its group sport and the 'parlay' bet type.
    """
    if key not in BREAKDOWN_KEYS:
        raise ValueError(f"Unsupported breakdown key: {key!r} (expected one of {BREAKDOWN_KEYS})")
    return _breakdown_frame(_units(_as_grouped(bets)), key)


def _breakdown_rows(units: List[_Unit], key: str) -> List[BreakdownRow]:
    frame = _breakdown_frame(units, key)
    return [
        BreakdownRow(
            key=str(row[key]),
            bets=int(row["bets"]),
            wins=int(row["wins"]),
            losses=int(row["losses"]),
            stake=float(row["stake"]),
            profit=float(row["profit"]),
            win_rate=float(row["win_rate"]),
            roi=float(row["roi"]),
        )
        for _, row in frame.iterrows()
    ]


# ------------------------------------------------------------
# Core rollup
# ------------------------------------------------------------

def compute_metrics(
    bets: Union[Iterable[Bet], GroupedBets],
    settings: Optional[EngineSettings] = None,
) -> PerformanceMetrics:
    settings = settings or EngineSettings()
    units = _units(_as_grouped(bets))

    wins = sum(1 for u in units if u.status is GroupStatus.WON)
    losses = sum(1 for u in units if u.status is GroupStatus.LOST)
    decided = wins + losses

    total_staked = float(sum(u.stake for u in units))
    total_profit = float(sum(u.profit for u in units if u.profit is not None))

    settled_profits = [u.profit for u in units if u.is_decided and u.profit is not None]
    streak, streak_type = _current_streak(units)

    daily = _daily_frame(units, settings)
    series = [
        DailyProfitPoint(date=row.date, cumulative_profit=float(row.cumulative_profit))
        for row in daily.itertuples(index=False)
    ]

    priced = [u.odds for u in units if u.odds]

    metrics = PerformanceMetrics(
        total_bets=len(units),
        wins=wins,
        losses=losses,
        win_rate=wins / decided if decided > 0 else 0.0,
        total_staked=total_staked,
        total_profit=total_profit,
        roi=total_profit / total_staked * 100 if total_staked > 0 else 0.0,
        biggest_win=max(settled_profits + [0.0]),
        biggest_loss=abs(min(settled_profits + [0.0])),
        current_streak=streak,
        streak_type=streak_type,
        daily_profit=series,
        straight_bets_count=sum(1 for u in units if u.is_settled and not u.is_parlay),
        parlay_bets_count=sum(1 for u in units if u.is_settled and u.is_parlay),
        void_bets_count=sum(1 for u in units if u.status is GroupStatus.VOID),
        avg_stake=round(total_staked / len(units), 2) if units else 0.0,
        avg_odds=float(sum(priced) / len(priced)) if priced else 0.0,
        sport_breakdown=_breakdown_rows(units, "sport"),
        bet_type_breakdown=_breakdown_rows(units, "bet_type"),
    )
    logger.info(
        f"compute_metrics(): {metrics.total_bets} bets, win rate {metrics.win_rate:.3f}, "
        f"profit {metrics.total_profit:.2f}, ROI {metrics.roi:.2f}%"
    )
    return metrics
