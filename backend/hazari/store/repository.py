"""Abstract interface for game collection persistence."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Sequence

    from hazari.logic.ledger import ScoreLedger


class GameCollectionStore(ABC):
    """Ordered collection of ledgers persisted as a single blob.

    Implementations can use files, key-value storage, etc. Every method is a
    suspension point; nothing else in the engine awaits.
    """

    @abstractmethod
    async def load_all(self) -> list[ScoreLedger]:
        """Return every stored ledger in collection order. Missing data yields []."""

    @abstractmethod
    async def save_all(self, ledgers: Sequence[ScoreLedger]) -> None:
        """Replace the stored collection. Raises StoreError on failure."""

    @abstractmethod
    async def clear_all(self) -> None:
        """Delete the stored collection. Raises StoreError on failure."""
