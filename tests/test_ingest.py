# ============================================================
# Path: tests/test_ingest.py
# Purpose: Raw records / DataFrames → Bet models
# ============================================================

from datetime import timezone

import numpy as np
import pandas as pd
import pytest

from settlement_engine.core.exceptions import IngestionError
from settlement_engine.ingest import bets_from_frame, bets_from_records


def test_camel_case_records():
    bets = bets_from_records(
        [
            {
                "id": 7,
                "parlayGroupId": "p1",
                "isParlay": True,
                "status": "won",
                "stake": "100",
                "potentialPayout": "420.00",
                "odds": "+120",
                "placedAt": "2026-10-18T12:00:00Z",
            }
        ]
    )
    bet = bets[0]
    assert bet.id == "7"
    assert bet.parlay_id == "p1"
    assert bet.is_parlay_leg
    assert bet.stake == 100.0
    assert bet.potential_payout == 420.0
    assert bet.odds == 120.0
    assert bet.placed_at.tzinfo is not None


def test_blank_values_follow_ingestion_defaults():
    bet = bets_from_records([{"id": "x", "stake": "", "potential_payout": None, "profit": "", "parlay_id": ""}])[0]
    assert bet.stake == 0.0
    assert bet.potential_payout == 0.0
    assert bet.profit is None
    assert bet.parlay_id is None
    assert bet.status == "pending"


def test_naive_timestamp_assumed_utc():
    bet = bets_from_records([{"id": "x", "placed_at": "2026-10-18 12:00:00"}])[0]
    assert bet.placed_at.tzinfo == timezone.utc


def test_bad_record_reports_index():
    with pytest.raises(IngestionError) as excinfo:
        bets_from_records([{"id": "ok"}, {"id": "bad", "stake": "lots"}])
    assert excinfo.value.index == 1


def test_missing_id_rejected():
    with pytest.raises(IngestionError):
        bets_from_records([{"status": "won"}])


def test_frame_ingestion_handles_nan():
    df = pd.DataFrame(
        {
            "id": ["a", "b"],
            "parlay_id": [None, "p1"],
            "is_parlay": [False, True],
            "status": ["won", "pending"],
            "stake": [10.0, np.nan],
            "potential_payout": [25.0, np.nan],
            "odds": [150, -110],
            "profit": [15.0, np.nan],
            "placed_at": ["2026-10-18 12:00", "not a date"],
        }
    )
    bets = bets_from_frame(df)

    assert [b.id for b in bets] == ["a", "b"]
    assert bets[0].profit == 15.0
    assert bets[0].placed_at.year == 2026
    assert bets[1].stake == 0.0
    assert bets[1].profit is None
    assert bets[1].placed_at is None
    assert bets[1].is_parlay_leg


def test_empty_frame():
    assert bets_from_frame(pd.DataFrame()) == []
