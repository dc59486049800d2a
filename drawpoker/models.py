from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import Dict, Optional, Tuple

from .cards import Card

WINS_TO_WIN_GAME = 10
MAX_ROUNDS = 19
HAND_SIZE = 7
MAX_DISCARDS = 5


class HandCategory(IntEnum):
    HIGH_CARD = 1
    PAIR = 2
    TWO_PAIR = 3
    THREE_OF_A_KIND = 4
    STRAIGHT = 5
    FLUSH = 6
    FULL_HOUSE = 7
    FOUR_OF_A_KIND = 8
    STRAIGHT_FLUSH = 9
    ROYAL_FLUSH = 10


CATEGORY_NAMES: Dict[HandCategory, str] = {
    HandCategory.HIGH_CARD: "High Card",
    HandCategory.PAIR: "Pair",
    HandCategory.TWO_PAIR: "Two Pair",
    HandCategory.THREE_OF_A_KIND: "Three of a Kind",
    HandCategory.STRAIGHT: "Straight",
    HandCategory.FLUSH: "Flush",
    HandCategory.FULL_HOUSE: "Full House",
    HandCategory.FOUR_OF_A_KIND: "Four of a Kind",
    HandCategory.STRAIGHT_FLUSH: "Straight Flush",
    HandCategory.ROYAL_FLUSH: "Royal Flush",
}


class Winner(str, Enum):
    PLAYER1 = "player1"
    PLAYER2 = "player2"


@dataclass(frozen=True)
class HandResult:
    # cards: grouping first, then kickers descending. high_cards: tie-break key.
    category: HandCategory
    cards: Tuple[Card, ...]
    high_cards: Tuple[int, ...]

    @property
    def rank(self) -> int:
        return int(self.category)

    @property
    def name(self) -> str:
        return CATEGORY_NAMES[self.category]

    def strength(self) -> Tuple[int, Tuple[int, ...]]:
        return (self.rank, self.high_cards)


@dataclass(frozen=True)
class RoundOutcome:
    winner: Optional[Winner]
    player1_hand: HandResult
    player2_hand: HandResult
    is_tie: bool


@dataclass
class MatchRules:
    """Match limits handed to the session manager. The engine never enforces them."""

    wins_to_win_game: int = WINS_TO_WIN_GAME
    max_rounds: int = MAX_ROUNDS
    hand_size: int = HAND_SIZE
    max_discards: int = MAX_DISCARDS

    def __post_init__(self) -> None:
        if self.wins_to_win_game <= 0:
            raise ValueError(f"wins_to_win_game must be positive: {self.wins_to_win_game}")
        if self.max_rounds < self.wins_to_win_game:
            raise ValueError(
                f"max_rounds ({self.max_rounds}) cannot be below wins_to_win_game ({self.wins_to_win_game})"
            )
        if not 0 <= self.max_discards <= self.hand_size:
            raise ValueError(f"max_discards out of range: {self.max_discards}")
