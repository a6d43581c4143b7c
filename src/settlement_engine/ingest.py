from __future__ import annotations

# ============================================================
# Project: Settlement Engine
# Module: Bet Ingestion
# Purpose: Parse raw bet records or DataFrames into Bet models.
# ============================================================

from typing import Any, Iterable, List, Mapping

import pandas as pd
from loguru import logger
from pydantic import ValidationError

from settlement_engine.core.exceptions import IngestionError
from settlement_engine.models import Bet

DATE_COLUMNS = [
    "placed_at", "placedAt",
    "game_date", "gameDate",
    "settled_at", "settledAt",
]


def bets_from_records(records: Iterable[Mapping[str, Any]]) -> List[Bet]:
    bets = []
    for index, record in enumerate(records):
        try:
            bets.append(Bet.model_validate(dict(record)))
        except ValidationError as e:
            raise IngestionError(f"Record {index} is not a valid bet: {e}", index=index) from e
    return bets


def bets_from_frame(df: pd.DataFrame) -> List[Bet]:
    """
    Build Bet models from a DataFrame of bet rows.
    Date columns are parsed leniently; NaN/NaT become None.
    """
    if df is None or df.empty:
        return []

    df = df.copy()
    for col in DATE_COLUMNS:
        if col in df.columns:
            df[col] = pd.to_datetime(df[col], errors="coerce", utc=True)

    df = df.astype(object).where(pd.notna(df), None)
    bets = bets_from_records(df.to_dict(orient="records"))
    logger.debug(f"bets_from_frame(): parsed {len(bets)} bets")
    return bets
