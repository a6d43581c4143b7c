from __future__ import annotations

# ============================================================
# Project: Settlement Engine
# Module: Settlement Classifier
# File: src/settlement_engine/engines/settlement.py
#
# Description:
#     Collapses the two status vocabularies into one Outcome:
#       • status alone (pending/won/lost/void/cancelled)
#       • status="completed" + outcome (win/loss/push/void/cashout)
#     Unknown values degrade to PENDING so a single malformed row
#     never aborts an aggregate computation.
# ============================================================

from loguru import logger

from settlement_engine.models import Bet, Outcome

COMPLETED = "completed"

OUTCOME_VOCABULARY = {
    "win": Outcome.WIN,
    "won": Outcome.WIN,
    "cashout": Outcome.WIN,
    "loss": Outcome.LOSS,
    "lost": Outcome.LOSS,
    "lose": Outcome.LOSS,
    "push": Outcome.VOID,
    "void": Outcome.VOID,
}

STATUS_VOCABULARY = {
    "won": Outcome.WIN,
    "win": Outcome.WIN,
    "lost": Outcome.LOSS,
    "loss": Outcome.LOSS,
    "lose": Outcome.LOSS,
    "void": Outcome.VOID,
    "push": Outcome.VOID,
    "cancelled": Outcome.VOID,
    "canceled": Outcome.VOID,
    "pending": Outcome.PENDING,
}


def classify_status(status: str | None, outcome: str | None = None) -> Outcome:
    status_key = (status or "").strip().lower()

    if status_key == COMPLETED:
        outcome_key = (outcome or "").strip().lower()
        result = OUTCOME_VOCABULARY.get(outcome_key)
        if result is None:
            logger.debug(f"classify_status(): unrecognized outcome {outcome!r} → pending")
            return Outcome.PENDING
        return result

    result = STATUS_VOCABULARY.get(status_key)
    if result is None:
        logger.debug(f"classify_status(): unrecognized status {status!r} → pending")
        return Outcome.PENDING
    return result


def classify(bet: Bet) -> Outcome:
    """Settlement outcome of a single bet row."""
    return classify_status(bet.status, bet.outcome)
