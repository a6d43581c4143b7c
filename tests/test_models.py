# ============================================================
# Path: tests/test_models.py
# Purpose: Bet model coercion and enum helpers
# ============================================================

import pytest
from pydantic import ValidationError

from settlement_engine.models import Bet, GroupStatus, Outcome


def test_bet_is_immutable(make_bet):
    bet = make_bet(status="pending")
    with pytest.raises(ValidationError):
        bet.status = "won"


def test_parlay_flag_requires_group_id():
    assert not Bet(id="a", is_parlay=True).is_parlay_leg
    assert not Bet(id="a", parlay_id="p").is_parlay_leg
    assert Bet(id="a", parlay_id="p", is_parlay="true").is_parlay_leg


def test_event_date_prefers_game_date(make_bet):
    bet = make_bet(game_date="2026-10-20T01:00:00Z")
    assert bet.event_date == bet.game_date
    assert make_bet(game_date=None).event_date == make_bet().placed_at


def test_status_from_outcome():
    assert GroupStatus.from_outcome(Outcome.WIN) is GroupStatus.WON
    assert GroupStatus.from_outcome(Outcome.PENDING) is GroupStatus.PENDING
    assert GroupStatus.LOST.is_settled
    assert not GroupStatus.PENDING.is_settled
