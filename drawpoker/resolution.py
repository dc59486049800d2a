from __future__ import annotations

import logging
from typing import Sequence

from .cards import Card
from .evaluator import best_hand, compare, describe_hand
from .models import RoundOutcome, Winner

LOGGER = logging.getLogger("drawpoker.resolution")


def resolve_round(player1_cards: Sequence[Card], player2_cards: Sequence[Card]) -> RoundOutcome:
    player1_hand = best_hand(player1_cards)
    player2_hand = best_hand(player2_cards)
    comparison = compare(player1_hand, player2_hand)

    if comparison > 0:
        winner = Winner.PLAYER1
    elif comparison < 0:
        winner = Winner.PLAYER2
    else:
        winner = None

    LOGGER.debug(
        "Round resolved: player1=%s player2=%s winner=%s",
        describe_hand(player1_hand),
        describe_hand(player2_hand),
        winner.value if winner else "tie",
    )
    return RoundOutcome(
        winner=winner,
        player1_hand=player1_hand,
        player2_hand=player2_hand,
        is_tie=winner is None,
    )


def points_awarded(winner_wins: int, loser_wins: int) -> int:
    """Points for the match winner: the margin of round wins."""
    if winner_wins < 0 or loser_wins < 0:
        raise ValueError("Win counts cannot be negative")
    if winner_wins < loser_wins:
        raise ValueError(f"Winner has fewer wins ({winner_wins}) than loser ({loser_wins})")
    return winner_wins - loser_wins
