"""Ledger builders shared by hazari tests."""

from datetime import UTC, datetime, timedelta

from hazari.logic.ledger import ScoreLedger, create_ledger
from hazari.logic.settlement import settle_round

CREATED_AT = datetime(2025, 6, 1, 18, 0, tzinfo=UTC)
FOUR_PLAYERS = ("A", "B", "C", "D")
EVEN_ROUND = {"A": 90, "B": 90, "C": 90, "D": 90}


def make_ledger(
    players: tuple[str, ...] = FOUR_PLAYERS,
    *,
    total_points: int = 1000,
    game_id: str = "g1",
    title: str = "Friday night",
) -> ScoreLedger:
    return create_ledger(game_id, title, players, total_points, created_at=CREATED_AT)


def play_rounds(ledger: ScoreLedger, deltas: dict[str, int], count: int) -> ScoreLedger:
    """Settle ``count`` identical rounds with deterministic timestamps."""
    for i in range(count):
        ledger = settle_round(ledger, deltas, now=CREATED_AT + timedelta(minutes=i + 1)).ledger
    return ledger
