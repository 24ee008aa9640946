"""
Edit reconciliation: apply a title/threshold/player-name edit to a ledger.

Player names are matched by position. The name at index i of the new list
replaces the name at index i of the current list, and every score recorded
under the old name (cumulative and per round) moves to the new name with its
value unchanged. Reordering players is not supported; callers must submit
renames in the original seat order.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from hazari.logic.exceptions import LedgerValidationError, ValidationErrorKind
from hazari.logic.ledger import PlayerScore, RoundHistoryEntry, ScoreLedger
from hazari.logic.rules import check_total_points, clean_player_names, clean_title

if TYPE_CHECKING:
    from collections.abc import Sequence


def _rekey_round(entry: RoundHistoryEntry, renames: list[tuple[str, str]]) -> RoundHistoryEntry:
    # old rounds may be sparse; a missing player is recorded as 0
    scores = {new: entry.scores.get(old, 0) for old, new in renames}
    return entry.model_copy(update={"scores": scores})


def reconcile_edit(
    ledger: ScoreLedger,
    title: str,
    total_points: int | None,
    players: Sequence[str],
) -> ScoreLedger:
    """
    Return a copy of ``ledger`` with the edited title, threshold and names.

    All inputs are validated before anything is rebuilt, so a rejected edit
    has no effect. Status, round counter, round pool, id and creation time
    are never changed, and no score value is altered.

    Raises:
        LedgerValidationError: If the title or a name is blank, a name is
            repeated, the threshold is missing or not positive, or the number
            of players differs from the ledger's.

    """
    clean = clean_title(title)
    points = check_total_points(total_points)
    if len(players) != len(ledger.players):
        raise LedgerValidationError(
            ValidationErrorKind.PLAYER_COUNT,
            f"Expected {len(ledger.players)} player names, got {len(players)}",
        )
    names = clean_player_names(players)

    renames = list(zip(ledger.players, names, strict=True))
    old_scores = ledger.score_map()

    return ledger.model_copy(
        update={
            "title": clean,
            "total_points": points,
            "players": names,
            "scores": tuple(PlayerScore(player=new, score=old_scores.get(old, 0)) for old, new in renames),
            "history": tuple(_rekey_round(entry, renames) for entry in ledger.history),
        },
    )
