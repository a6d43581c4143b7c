# ============================================================
# Path: tests/test_persistence.py
# Purpose: Batch profit recalculation and validation
# ============================================================

import pytest

from settlement_engine.config.settings import EngineSettings
from settlement_engine.persistence import (
    profit_changed,
    recalculate_and_persist,
    validate_profits,
)


class FakeStorage:
    def __init__(self, failing=()):
        self.failing = set(failing)
        self.updates = {}
        self.calls = []

    def update(self, bet_id, fields):
        self.calls.append(bet_id)
        if bet_id in self.failing:
            raise RuntimeError("connection reset")
        self.updates[bet_id] = fields


@pytest.fixture
def settings():
    return EngineSettings(batch_size=2, batch_pause_seconds=0)


def test_only_stale_rows_written(make_bet, make_parlay, settings):
    legs = make_parlay("p1", ["won", "lost"], [-110, 120], stake=100, payout=420)
    bets = [
        make_bet(id="ok", status="won", stake=10, potential_payout=30, profit=20),
        make_bet(id="stale", status="lost", stake=10, profit=None),
        *legs,
    ]
    storage = FakeStorage()
    result = recalculate_and_persist(bets, storage, settings)

    assert storage.updates == {
        "stale": {"profit": -10},
        "p1-leg1": {"profit": -100},
        "p1-leg2": {"profit": 0.0},
    }
    assert result.updated_count == 3
    assert result.needing_update == 3
    assert result.single_bets == 1
    assert result.parlays == 1
    assert result.errors == []
    assert result.success


def test_failures_isolated_per_id(make_bet, settings):
    bets = [make_bet(id=f"b{i}", status="lost", stake=5) for i in range(5)]
    storage = FakeStorage(failing={"b1", "b3"})

    result = recalculate_and_persist(bets, storage, settings)

    assert storage.calls == ["b0", "b1", "b2", "b3", "b4"]
    assert result.updated_count == 3
    assert len(result.errors) == 2
    assert result.errors[0].startswith("Bet b1")
    assert not result.success


def test_nothing_to_do(make_bet, settings):
    storage = FakeStorage()
    result = recalculate_and_persist([make_bet(status="pending")], storage, settings)
    assert result.updated_count == 0
    assert storage.calls == []


def test_profit_changed_tolerance():
    assert not profit_changed(None, None)
    assert profit_changed(None, 0.0)
    assert profit_changed(0.0, None)
    assert not profit_changed(320.0, 320.0000000001)
    assert profit_changed(320.0, 320.01)


def test_validate_profits_reports_double_counted_parlay(make_bet):
    legs = [
        make_bet(id="a", parlay_id="p", is_parlay=True, status="lost", odds=100,
                 stake=100, potential_payout=400, profit=-100),
        make_bet(id="b", parlay_id="p", is_parlay=True, status="won", odds=100, profit=-100),
    ]
    issues = validate_profits(legs)

    assert len(issues) == 1
    assert issues[0].startswith("Parlay p, Bet b")
