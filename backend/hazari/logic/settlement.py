"""
Round settlement for Hazari.

Settling a round validates the proposed per-player deltas against the ledger's
fixed round pool, adds them to the cumulative scores, records a history entry
and advances the round counter. The first settlement that lifts any player to
the game's total-points threshold completes the game.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import TYPE_CHECKING

import structlog
from pydantic import BaseModel, ConfigDict

from hazari.logic.exceptions import (
    LedgerValidationError,
    RoundTotalMismatchError,
    ValidationErrorKind,
)
from hazari.logic.ledger import GameStatus, PlayerScore, RoundHistoryEntry, ScoreLedger
from hazari.logic.rules import is_whole_number
from hazari.logic.winner import resolve_winner

if TYPE_CHECKING:
    from collections.abc import Mapping

logger = structlog.get_logger()


class SettlementResult(BaseModel):
    """Outcome of a successful settlement.

    ``just_completed`` is True only for the settlement that moved the game to
    COMPLETED; viewing an already completed game never sets it. It is a
    session signal for the caller and is never stored in the ledger.
    """

    model_config = ConfigDict(frozen=True)

    ledger: ScoreLedger
    just_completed: bool = False
    winner: PlayerScore | None = None


def remaining_score(round_score: int, others_total: int) -> int:
    """Points left in the round pool after the other players' entries."""
    return round_score - others_total


def suggest_remaining_score(
    ledger: ScoreLedger,
    target_player: str,
    partial: Mapping[str, int | None],
) -> int:
    """
    Suggest a delta for ``target_player`` that makes the round add up.

    ``partial`` holds the in-progress entries for the round; blank entries
    (None) count as zero and the target's own entry is ignored. The
    suggestion is recomputed from scratch on every call and is still subject
    to the normal sum check when the round is settled.
    """
    others_total = sum(value or 0 for player, value in partial.items() if player != target_player)
    return remaining_score(ledger.round_score, others_total)


def _normalize_deltas(ledger: ScoreLedger, deltas: Mapping[str, int]) -> dict[str, int]:
    """Return deltas for every player in player order; absent players get 0."""
    unknown = [player for player in deltas if player not in ledger.players]
    if unknown:
        raise LedgerValidationError(
            ValidationErrorKind.UNKNOWN_PLAYER,
            f"Unknown players in round scores: {', '.join(unknown)}",
        )
    not_whole = [player for player, value in deltas.items() if not is_whole_number(value)]
    if not_whole:
        raise LedgerValidationError(
            ValidationErrorKind.NOT_AN_INTEGER,
            f"Round scores must be whole numbers: {', '.join(not_whole)}",
        )
    return {player: deltas.get(player, 0) for player in ledger.players}


def settle_round(
    ledger: ScoreLedger,
    deltas: Mapping[str, int],
    now: datetime | None = None,
) -> SettlementResult:
    """
    Commit one round of scores to an active ledger.

    Deltas may be negative; only their sum is constrained, and it must equal
    ``ledger.round_score``. All checks run before anything is built, so a
    rejected round leaves the caller's ledger exactly as it was.

    Raises:
        LedgerValidationError: If the game is already completed, or the deltas
            name a player who is not in the game or are not whole numbers.
        RoundTotalMismatchError: If the deltas do not sum to the round pool.

    """
    if not ledger.is_active:
        raise LedgerValidationError(
            ValidationErrorKind.GAME_COMPLETED,
            "Game is already completed; no more rounds can be added",
        )

    round_deltas = _normalize_deltas(ledger, deltas)
    total = sum(round_deltas.values())
    if total != ledger.round_score:
        raise RoundTotalMismatchError(expected=ledger.round_score, actual=total)

    new_scores = tuple(
        PlayerScore(player=s.player, score=s.score + round_deltas[s.player]) for s in ledger.scores
    )
    entry = RoundHistoryEntry(
        round=ledger.current_round,
        scores=round_deltas,
        timestamp=now or datetime.now(tz=UTC),
    )

    finished = max(s.score for s in new_scores) >= ledger.total_points
    updated = ledger.model_copy(
        update={
            "scores": new_scores,
            "history": (*ledger.history, entry),
            "current_round": ledger.current_round + 1,
            "status": GameStatus.COMPLETED if finished else GameStatus.ACTIVE,
        },
    )

    logger.debug(
        "round settled",
        game_id=ledger.id,
        round=entry.round,
        status=updated.status,
    )

    if not finished:
        return SettlementResult(ledger=updated)
    return SettlementResult(ledger=updated, just_completed=True, winner=resolve_winner(updated))
