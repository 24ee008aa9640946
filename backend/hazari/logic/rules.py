"""Game rules for Hazari: round pools, player limits and shared input checks."""

from __future__ import annotations

from typing import TYPE_CHECKING

from hazari.logic.exceptions import LedgerValidationError, ValidationErrorKind

if TYPE_CHECKING:
    from collections.abc import Sequence

MIN_PLAYERS = 3
MAX_PLAYERS = 4
DEFAULT_TOTAL_POINTS = 1000

# Every round distributes the whole pack's points among the players.
ROUND_POOL_BY_PLAYER_COUNT: dict[int, int] = {3: 270, 4: 360}


def round_pool_for(num_players: int) -> int:
    """Return the fixed round pool for a table of ``num_players``."""
    try:
        return ROUND_POOL_BY_PLAYER_COUNT[num_players]
    except KeyError:
        raise LedgerValidationError(
            ValidationErrorKind.PLAYER_COUNT,
            f"Hazari needs {MIN_PLAYERS} to {MAX_PLAYERS} players, got {num_players}",
        ) from None


def clean_title(title: str) -> str:
    stripped = title.strip()
    if not stripped:
        raise LedgerValidationError(ValidationErrorKind.BLANK_FIELD, "Please enter a game title")
    return stripped


def is_whole_number(value: object) -> bool:
    # bool is an int subclass but never a score
    return isinstance(value, int) and not isinstance(value, bool)


def check_total_points(total_points: int | None) -> int:
    if total_points is None:
        raise LedgerValidationError(ValidationErrorKind.BLANK_FIELD, "Please enter total points")
    if not is_whole_number(total_points):
        raise LedgerValidationError(
            ValidationErrorKind.NOT_AN_INTEGER,
            f"Total points must be a whole number, got {total_points!r}",
        )
    if total_points <= 0:
        raise LedgerValidationError(
            ValidationErrorKind.NON_POSITIVE,
            f"Total points must be a positive number, got {total_points}",
        )
    return total_points


def clean_player_names(players: Sequence[str]) -> tuple[str, ...]:
    """Trim player names and reject blank or duplicate entries.

    Duplicates are rejected because round history is keyed by name; two
    seats sharing a name would merge their deltas.
    """
    names = tuple(name.strip() for name in players)
    if any(not name for name in names):
        raise LedgerValidationError(ValidationErrorKind.BLANK_FIELD, "Please enter names for all players")
    seen: set[str] = set()
    for name in names:
        if name in seen:
            raise LedgerValidationError(
                ValidationErrorKind.DUPLICATE_PLAYER,
                f"Player name '{name}' is used more than once",
            )
        seen.add(name)
    return names
