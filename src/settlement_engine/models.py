from __future__ import annotations

# ============================================================
# Project: Settlement Engine
# Module: Bet Models
# File: src/settlement_engine/models.py
#
# Description:
#     Canonical bet record, settlement enums and the explicit
#     ParlayGroup aggregate built from flat leg rows.
# ============================================================

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import List, Optional, Tuple

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator


class Outcome(str, Enum):
    WIN = "win"
    LOSS = "loss"
    VOID = "void"
    PENDING = "pending"


class GroupStatus(str, Enum):
    WON = "won"
    LOST = "lost"
    VOID = "void"
    PENDING = "pending"

    @classmethod
    def from_outcome(cls, outcome: Outcome) -> "GroupStatus":
        return _OUTCOME_TO_STATUS[outcome]

    @property
    def is_settled(self) -> bool:
        return self is not GroupStatus.PENDING


_OUTCOME_TO_STATUS = {
    Outcome.WIN: GroupStatus.WON,
    Outcome.LOSS: GroupStatus.LOST,
    Outcome.VOID: GroupStatus.VOID,
    Outcome.PENDING: GroupStatus.PENDING,
}


def ensure_aware(value: Optional[datetime]) -> Optional[datetime]:
    """Naive timestamps are taken to be UTC."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def _parse_number(value, default):
    if value is None:
        return default
    if isinstance(value, str):
        value = value.strip().replace(",", "")
        if value == "":
            return default
        return float(value.lstrip("+"))
    return float(value)


class Bet(BaseModel):
    """
    One persisted bet row. A parlay of N legs arrives as N rows
    sharing parlay_id; only the designated leg carries stake/payout.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str
    parlay_id: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("parlay_id", "parlayGroupId", "parlay_group_id", "parlayId"),
    )
    is_parlay: bool = Field(default=False, validation_alias=AliasChoices("is_parlay", "isParlay"))
    status: str = "pending"
    outcome: Optional[str] = None
    stake: float = 0.0
    potential_payout: float = Field(
        default=0.0,
        validation_alias=AliasChoices("potential_payout", "potentialPayout"),
    )
    odds: float = 0.0
    profit: Optional[float] = None
    placed_at: Optional[datetime] = Field(
        default=None, validation_alias=AliasChoices("placed_at", "placedAt")
    )
    game_date: Optional[datetime] = Field(
        default=None, validation_alias=AliasChoices("game_date", "gameDate")
    )
    settled_at: Optional[datetime] = Field(
        default=None, validation_alias=AliasChoices("settled_at", "settledAt")
    )
    sport: Optional[str] = None
    bet_type: Optional[str] = Field(default=None, validation_alias=AliasChoices("bet_type", "betType"))

    @field_validator("id", mode="before")
    @classmethod
    def _id_to_str(cls, value):
        if value is None or str(value).strip() == "":
            raise ValueError("bet id is required")
        return str(value)

    @field_validator("parlay_id", "outcome", "sport", "bet_type", mode="before")
    @classmethod
    def _blank_to_none(cls, value):
        if value is None:
            return None
        value = str(value).strip()
        return value or None

    @field_validator("status", mode="before")
    @classmethod
    def _status_default(cls, value):
        if value is None:
            return "pending"
        return str(value).strip()

    @field_validator("is_parlay", mode="before")
    @classmethod
    def _to_bool(cls, value):
        if value is None:
            return False
        if isinstance(value, str):
            return value.strip().lower() in ("true", "t", "1", "yes")
        return bool(value)

    @field_validator("stake", "potential_payout", "odds", mode="before")
    @classmethod
    def _zero_if_blank(cls, value):
        return _parse_number(value, 0.0)

    @field_validator("profit", mode="before")
    @classmethod
    def _none_if_blank(cls, value):
        return _parse_number(value, None)

    @field_validator("placed_at", "game_date", "settled_at", mode="after")
    @classmethod
    def _utc_if_naive(cls, value):
        return ensure_aware(value)

    @property
    def is_parlay_leg(self) -> bool:
        return self.is_parlay and bool(self.parlay_id)

    @property
    def event_date(self) -> Optional[datetime]:
        return self.game_date or self.placed_at


@dataclass(frozen=True)
class ParlayGroup:
    group_id: str
    legs: Tuple[Bet, ...]
    status: GroupStatus
    stake: float
    potential_payout: float
    placed_at: Optional[datetime]
    designated_leg_id: str
    profit: Optional[float] = None
    settled_at: Optional[datetime] = None
    combined_odds: Optional[int] = None
    sport: Optional[str] = None

    @property
    def leg_count(self) -> int:
        return len(self.legs)


@dataclass
class GroupedBets:
    straight_bets: List[Bet] = field(default_factory=list)
    parlay_groups: List[ParlayGroup] = field(default_factory=list)
    diagnostics: List[str] = field(default_factory=list)
