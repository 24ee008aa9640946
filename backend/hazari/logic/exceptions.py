"""Typed domain exceptions for scorebook operations.

Every failure a caller can act on is a subclass of ScorebookError, so the
service boundary can log and re-raise with a single except clause while
callers still discriminate on the concrete type.
"""

from __future__ import annotations

from enum import Enum


class ValidationErrorKind(str, Enum):
    """Why a ledger operation was rejected."""

    ROUND_TOTAL_MISMATCH = "round_total_mismatch"
    BLANK_FIELD = "blank_field"
    NON_POSITIVE = "non_positive"
    PLAYER_COUNT = "player_count"
    DUPLICATE_PLAYER = "duplicate_player"
    UNKNOWN_PLAYER = "unknown_player"
    NOT_AN_INTEGER = "not_an_integer"
    GAME_COMPLETED = "game_completed"


class ScorebookError(Exception):
    """Base exception for scorebook failures."""


class LedgerValidationError(ScorebookError):
    """Input was rejected before any change was applied to the ledger.

    Attributes:
        kind: Machine-readable rejection category.
        reason: Human-readable explanation suitable for showing to the user.

    """

    def __init__(self, kind: ValidationErrorKind, reason: str) -> None:
        self.kind = kind
        self.reason = reason
        super().__init__(reason)


class RoundTotalMismatchError(LedgerValidationError):
    """Round deltas do not add up to the ledger's round pool."""

    def __init__(self, *, expected: int, actual: int) -> None:
        self.expected = expected
        self.actual = actual
        super().__init__(
            ValidationErrorKind.ROUND_TOTAL_MISMATCH,
            f"Total scores must equal {expected} (got {actual})",
        )


class GameNotFoundError(ScorebookError):
    """No ledger with the given id exists in the collection."""

    def __init__(self, game_id: str) -> None:
        self.game_id = game_id
        super().__init__(f"game '{game_id}' not found")


class StoreError(ScorebookError, OSError):
    """The collection store could not be read or written."""


class CorruptStoreError(StoreError):
    """Stored data exists but does not decode into valid ledgers."""
