"""
Winner resolution and standings for Hazari ledgers.

Both functions are pure reads over a ledger and can be called any number of
times, including on games that were completed in an earlier session.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from hazari.logic.ledger import PlayerScore, ScoreLedger


def resolve_winner(ledger: ScoreLedger) -> PlayerScore | None:
    """
    Return the leading player of a finished game.

    The player with the highest cumulative score wins. On a tie the player
    listed first in ``ledger.scores`` wins. Active games and ledgers without
    scores have no winner and return None.
    """
    if ledger.is_active or not ledger.scores:
        return None

    winner = ledger.scores[0]
    for entry in ledger.scores[1:]:
        # strict comparison keeps the earliest player on ties
        if entry.score > winner.score:
            winner = entry
    return winner


def standings(ledger: ScoreLedger) -> tuple[PlayerScore, ...]:
    """Cumulative scores ordered highest first, ties kept in player order."""
    return tuple(sorted(ledger.scores, key=lambda entry: entry.score, reverse=True))
