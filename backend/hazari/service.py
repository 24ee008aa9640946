"""
Scorebook service: the transaction boundary between user actions and storage.

Each public method performs one read-modify-write cycle against the
collection store: load the whole collection, locate the ledger by id, run a
pure engine function on it, replace it at the same position and save the
collection back. Validation and not-found failures happen before the save,
so the stored collection is untouched when a call is rejected.

Precondition: only one writer works on a given collection at a time. The
service does not lock across the load/save pair; two interleaved calls for the
same game may lose an update.
"""

from __future__ import annotations

import uuid
from typing import TYPE_CHECKING

import structlog

from hazari.logic.exceptions import GameNotFoundError, LedgerValidationError
from hazari.logic.ledger import create_ledger
from hazari.logic.reconcile import reconcile_edit
from hazari.logic.settlement import settle_round
from hazari.logic.winner import resolve_winner
from hazari.settings import HazariSettings
from hazari.store.file_repository import FileGameCollectionStore
from shared.logging import setup_logging

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

    from hazari.logic.ledger import PlayerScore, ScoreLedger
    from hazari.logic.settlement import SettlementResult
    from hazari.store.repository import GameCollectionStore

logger = structlog.get_logger()


def _find_index(ledgers: list[ScoreLedger], game_id: str) -> int:
    for index, ledger in enumerate(ledgers):
        if ledger.id == game_id:
            return index
    raise GameNotFoundError(game_id)


class ScorebookService:
    """Create, score, edit and delete games held in a collection store."""

    def __init__(self, store: GameCollectionStore, *, default_total_points: int) -> None:
        self._store = store
        self._default_total_points = default_total_points

    async def create_game(
        self,
        title: str,
        players: Sequence[str],
        total_points: int | None = None,
    ) -> ScoreLedger:
        """Create a game and put it at the front of the collection (newest first)."""
        points = self._default_total_points if total_points is None else total_points
        try:
            ledger = create_ledger(uuid.uuid4().hex, title, players, points)
        except LedgerValidationError as exc:
            logger.info("game rejected", kind=exc.kind, reason=exc.reason)
            raise

        ledgers = await self._store.load_all()
        await self._store.save_all([ledger, *ledgers])
        logger.info(
            "game created",
            game_id=ledger.id,
            players=len(ledger.players),
            total_points=ledger.total_points,
            round_score=ledger.round_score,
        )
        return ledger

    async def list_games(self) -> list[ScoreLedger]:
        return await self._store.load_all()

    async def get_game(self, game_id: str) -> ScoreLedger:
        ledgers = await self._store.load_all()
        return ledgers[_find_index(ledgers, game_id)]

    async def get_winner(self, game_id: str) -> PlayerScore | None:
        """Winner of a completed game, or None while it is still active."""
        return resolve_winner(await self.get_game(game_id))

    async def settle_round(self, game_id: str, deltas: Mapping[str, int]) -> SettlementResult:
        """Commit one round's deltas to a game and persist the result."""
        ledgers = await self._store.load_all()
        index = _find_index(ledgers, game_id)
        try:
            result = settle_round(ledgers[index], deltas)
        except LedgerValidationError as exc:
            logger.info("round rejected", game_id=game_id, kind=exc.kind, reason=exc.reason)
            raise

        ledgers[index] = result.ledger
        await self._store.save_all(ledgers)
        logger.info(
            "round recorded",
            game_id=game_id,
            round=result.ledger.current_round - 1,
            status=result.ledger.status,
        )
        if result.just_completed and result.winner is not None:
            logger.info("game completed", game_id=game_id, winner=result.winner.player, score=result.winner.score)
        return result

    async def edit_game(
        self,
        game_id: str,
        title: str,
        total_points: int | None,
        players: Sequence[str],
    ) -> ScoreLedger:
        """Rename players and update title/threshold without touching any score."""
        ledgers = await self._store.load_all()
        index = _find_index(ledgers, game_id)
        try:
            updated = reconcile_edit(ledgers[index], title, total_points, players)
        except LedgerValidationError as exc:
            logger.info("edit rejected", game_id=game_id, kind=exc.kind, reason=exc.reason)
            raise

        ledgers[index] = updated
        await self._store.save_all(ledgers)
        logger.info("game edited", game_id=game_id)
        return updated

    async def delete_game(self, game_id: str) -> None:
        ledgers = await self._store.load_all()
        del ledgers[_find_index(ledgers, game_id)]
        await self._store.save_all(ledgers)
        logger.info("game deleted", game_id=game_id)

    async def clear_all(self) -> None:
        await self._store.clear_all()


def create_service(
    settings: HazariSettings | None = None,
    store: GameCollectionStore | None = None,
) -> ScorebookService:
    if settings is None:  # pragma: no cover
        settings = HazariSettings()

    if store is None:
        store = FileGameCollectionStore(settings.data_file)

    return ScorebookService(store, default_total_points=settings.default_total_points)


def get_service() -> ScorebookService:  # pragma: no cover
    """Service factory for production use: reads settings and configures logging."""
    settings = HazariSettings()
    setup_logging(log_dir=settings.log_dir)
    return create_service(settings=settings)
