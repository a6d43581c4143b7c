from __future__ import annotations

# ============================================================
# Project: Settlement Engine
# Module: Profit Recalculation
# File: src/settlement_engine/persistence.py
#
# Description:
#     Recompute per-row profit and write back only the rows whose
#     stored value is stale. Updates go out in bounded batches and
#     one failing id never stops the rest.
# ============================================================

import math
import time
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Mapping, Optional, Protocol

from loguru import logger

from settlement_engine.config.settings import EngineSettings
from settlement_engine.engines.profit import compute_profits
from settlement_engine.models import Bet


class StorageClient(Protocol):
    def update(self, bet_id: str, fields: Mapping[str, Any]) -> Any:
        """Persist fields for one bet; raise on failure."""


@dataclass
class RecalculationResult:
    updated_count: int = 0
    errors: List[str] = field(default_factory=list)
    needing_update: int = 0
    single_bets: int = 0
    parlays: int = 0

    @property
    def success(self) -> bool:
        return not self.errors


def profit_changed(stored: Optional[float], expected: Optional[float], tolerance: float = 1e-6) -> bool:
    if stored is None or expected is None:
        return stored is not expected
    return not math.isclose(stored, expected, rel_tol=0.0, abs_tol=tolerance)


def stale_rows(
    bets: List[Bet],
    expected: Dict[str, Optional[float]],
    tolerance: float = 1e-6,
) -> List[Bet]:
    return [bet for bet in bets if profit_changed(bet.profit, expected.get(bet.id), tolerance)]


def recalculate_and_persist(
    bets: Iterable[Bet],
    storage_client: StorageClient,
    settings: Optional[EngineSettings] = None,
) -> RecalculationResult:
    """
    Recompute profits and persist the ones that changed.

    Parameters
    ----------
    bets : Iterable[Bet]
        Flat rows as fetched by the storage layer.
    storage_client : StorageClient
        Anything exposing update(bet_id, {"profit": value}).
    settings : EngineSettings | None
        batch_size, batch_pause_seconds and profit_tolerance.
    """
    settings = settings or EngineSettings()
    bets = list(bets)
    expected = compute_profits(bets)
    to_update = stale_rows(bets, expected, settings.profit_tolerance)

    result = RecalculationResult(
        needing_update=len(to_update),
        single_bets=sum(1 for b in to_update if not b.is_parlay_leg),
        parlays=len({b.parlay_id for b in to_update if b.is_parlay_leg}),
    )

    if not to_update:
        logger.info("recalculate_and_persist(): all profits already correct.")
        return result

    logger.info(
        f"recalculate_and_persist(): {len(to_update)} of {len(bets)} rows need updates "
        f"({result.single_bets} single bets, {result.parlays} parlays)"
    )

    batch_size = settings.batch_size
    n_batches = math.ceil(len(to_update) / batch_size)
    for batch_no, offset in enumerate(range(0, len(to_update), batch_size), start=1):
        batch = to_update[offset: offset + batch_size]
        logger.debug(f"recalculate_and_persist(): batch {batch_no}/{n_batches}")

        for bet in batch:
            try:
                storage_client.update(bet.id, {"profit": expected[bet.id]})
            except Exception as e:
                result.errors.append(f"Bet {bet.id}: {e}")
                logger.warning(f"recalculate_and_persist(): failed to update bet {bet.id}: {e}")
            else:
                result.updated_count += 1

        if batch_no < n_batches and settings.batch_pause_seconds > 0:
            time.sleep(settings.batch_pause_seconds)

    if result.errors:
        logger.warning(
            f"recalculate_and_persist(): {result.updated_count} updated, "
            f"{len(result.errors)} errors"
        )
    else:
        logger.success(f"recalculate_and_persist(): {result.updated_count} rows updated.")
    return result


def validate_profits(bets: Iterable[Bet], tolerance: float = 1e-6) -> List[str]:
    """Describe every row whose stored profit disagrees with the recomputed one."""
    bets = list(bets)
    expected = compute_profits(bets)

    issues = []
    for bet in stale_rows(bets, expected, tolerance):
        where = f"Parlay {bet.parlay_id}, Bet {bet.id}" if bet.is_parlay_leg else f"Bet {bet.id}"
        issues.append(f"{where}: expected profit {expected.get(bet.id)}, got {bet.profit}")

    if issues:
        logger.warning(f"validate_profits(): {len(issues)} profit mismatches")
    return issues
