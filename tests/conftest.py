import itertools
import sys
from datetime import date, datetime, timedelta, timezone

import pytest
from loguru import logger

from settlement_engine.models import Bet

TODAY = date(2026, 10, 18)
NOON_TODAY = datetime(2026, 10, 18, 12, 0, tzinfo=timezone.utc)
NOON_YESTERDAY = NOON_TODAY - timedelta(days=1)

_ids = itertools.count(1)


@pytest.fixture
def make_bet():
    def _make(**fields):
        fields.setdefault("id", f"bet-{next(_ids)}")
        fields.setdefault("placed_at", NOON_TODAY)
        return Bet(**fields)

    return _make


@pytest.fixture
def make_parlay(make_bet):
    """
    Build flat leg rows for one parlay. Only the first leg carries the
    stake/payout unless designated_index says otherwise.
    """
    def _make(group_id, statuses, odds, stake=100.0, payout=None, designated_index=0, **common):
        legs = []
        for i, (status, price) in enumerate(zip(statuses, odds)):
            is_designated = i == designated_index
            legs.append(
                make_bet(
                    id=f"{group_id}-leg{i + 1}",
                    parlay_id=group_id,
                    is_parlay=True,
                    status=status,
                    odds=price,
                    stake=stake if is_designated else 0.0,
                    potential_payout=(payout or 0.0) if is_designated else 0.0,
                    **common,
                )
            )
        return legs

    return _make


@pytest.fixture(autouse=True)
def reset_logger():
    yield
    logger.remove()
    logger.add(sys.stderr, level="INFO")
