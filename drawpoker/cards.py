from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Iterable, List, Sequence

from .errors import InvalidCardToken


class Rank(str, Enum):
    TWO = "2"
    THREE = "3"
    FOUR = "4"
    FIVE = "5"
    SIX = "6"
    SEVEN = "7"
    EIGHT = "8"
    NINE = "9"
    TEN = "10"
    JACK = "J"
    QUEEN = "Q"
    KING = "K"
    ACE = "A"


class Suit(str, Enum):
    HEARTS = "hearts"
    DIAMONDS = "diamonds"
    CLUBS = "clubs"
    SPADES = "spades"

    @property
    def letter(self) -> str:
        return self.value[0]


RANKS: List[Rank] = list(Rank)
SUITS: List[Suit] = list(Suit)
RANK_VALUE: Dict[Rank, int] = {rank: idx for idx, rank in enumerate(RANKS, start=2)}
SUIT_BY_LETTER: Dict[str, Suit] = {suit.letter: suit for suit in SUITS}


def rank_value(rank: Rank) -> int:
    """Ace-high numeric value of a rank, 2..14."""
    return RANK_VALUE[rank]


@dataclass(frozen=True)
class Card:
    rank: Rank
    suit: Suit

    def __post_init__(self) -> None:
        if not isinstance(self.rank, Rank):
            raise ValueError(f"Invalid rank: {self.rank}")
        if not isinstance(self.suit, Suit):
            raise ValueError(f"Invalid suit: {self.suit}")

    @property
    def value(self) -> int:
        return RANK_VALUE[self.rank]

    @property
    def token(self) -> str:
        return f"{self.rank.value}{self.suit.letter.upper()}"

    def __str__(self) -> str:
        return self.token


def build_standard_deck() -> List[Card]:
    """Return the 52 cards in canonical order: suit-major, rank-minor."""
    return [Card(rank, suit) for suit in SUITS for rank in RANKS]


def parse_token(token: str) -> Card:
    """Parse a token such as ``"10H"`` or ``"as"`` into a Card."""
    if not isinstance(token, str) or len(token) not in (2, 3):
        raise InvalidCardToken(token)
    suit = SUIT_BY_LETTER.get(token[-1].lower())
    if suit is None:
        raise InvalidCardToken(token)
    try:
        rank = Rank(token[:-1].upper())
    except ValueError:
        raise InvalidCardToken(token) from None
    return Card(rank, suit)


def parse_tokens(tokens: Iterable[str]) -> List[Card]:
    return [parse_token(token) for token in tokens]


def cards_to_tokens(cards: Sequence[Card]) -> List[str]:
    return [card.token for card in cards]
