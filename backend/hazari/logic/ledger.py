"""
Score ledger models for a Hazari game.

A ledger is the complete persisted state of one game: its players, their
cumulative scores, the round counter, completion status and the round-by-round
history. Ledgers are frozen; every engine operation returns a new ledger.

Field names serialize in camelCase so collections written by the mobile app
load unchanged.
"""

from __future__ import annotations

from datetime import UTC, datetime
from enum import Enum
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

from hazari.logic.rules import (
    MAX_PLAYERS,
    MIN_PLAYERS,
    check_total_points,
    clean_player_names,
    clean_title,
    round_pool_for,
)

if TYPE_CHECKING:
    from collections.abc import Sequence


class GameStatus(str, Enum):
    """Lifecycle status of a game. Moves from ACTIVE to COMPLETED once."""

    ACTIVE = "active"
    COMPLETED = "completed"


class PlayerScore(BaseModel):
    """Cumulative score of one player."""

    model_config = ConfigDict(frozen=True)

    player: str
    score: int = 0


class RoundHistoryEntry(BaseModel):
    """Deltas committed for a single round, keyed by player name.

    Entries are shared between a ledger and the ledgers derived from it, so
    ``scores`` must never be mutated in place; build a new entry with
    ``model_copy(update=...)`` instead.
    """

    model_config = ConfigDict(frozen=True)

    round: int = Field(ge=1)
    scores: dict[str, int]
    timestamp: datetime


class ScoreLedger(BaseModel):
    """Persisted state of one game."""

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    id: str = Field(min_length=1)
    title: str = Field(min_length=1)
    players: tuple[str, ...]
    total_points: int = Field(gt=0)
    round_score: int = Field(gt=0)
    current_round: int = Field(default=1, ge=1)
    status: GameStatus = GameStatus.ACTIVE
    scores: tuple[PlayerScore, ...]
    history: tuple[RoundHistoryEntry, ...] = ()  # oldest first
    created_at: datetime

    @model_validator(mode="after")
    def _check_scores_track_players(self) -> ScoreLedger:
        if not MIN_PLAYERS <= len(self.players) <= MAX_PLAYERS:
            raise ValueError(f"expected {MIN_PLAYERS}-{MAX_PLAYERS} players, got {len(self.players)}")
        if len(set(self.players)) != len(self.players):
            raise ValueError(f"duplicate player names in {self.players}")
        score_names = tuple(entry.player for entry in self.scores)
        if score_names != self.players:
            raise ValueError(f"scores {score_names} do not match players {self.players}")
        return self

    @property
    def is_active(self) -> bool:
        return self.status == GameStatus.ACTIVE

    def score_map(self) -> dict[str, int]:
        """Cumulative scores as an ordered name -> score mapping."""
        return {entry.player: entry.score for entry in self.scores}

    def score_of(self, player: str) -> int:
        for entry in self.scores:
            if entry.player == player:
                return entry.score
        raise KeyError(player)

    def to_record(self) -> dict[str, Any]:
        """Serialize to the JSON-compatible record stored in the collection."""
        return self.model_dump(mode="json", by_alias=True)


def create_ledger(
    game_id: str,
    title: str,
    players: Sequence[str],
    total_points: int | None,
    created_at: datetime | None = None,
) -> ScoreLedger:
    """
    Create a fresh active ledger.

    Title and player names are trimmed. The round pool is derived from the
    number of players and cannot be chosen by the caller. Raises
    LedgerValidationError if any input is blank, non-positive or the player
    count is outside 3-4.
    """
    clean = clean_title(title)
    points = check_total_points(total_points)
    names = clean_player_names(players)
    round_score = round_pool_for(len(names))

    return ScoreLedger(
        id=game_id,
        title=clean,
        players=names,
        total_points=points,
        round_score=round_score,
        current_round=1,
        status=GameStatus.ACTIVE,
        scores=tuple(PlayerScore(player=name, score=0) for name in names),
        history=(),
        created_at=created_at or datetime.now(tz=UTC),
    )
