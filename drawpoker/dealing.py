from __future__ import annotations

import random
import time
from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence

from .cards import Card, build_standard_deck
from .models import HAND_SIZE

# Shuffles are a pure function of the seed string. Keep the arithmetic below
# bit-for-bit stable.

HASH_MULTIPLIER = 31
LCG_MULTIPLIER = 1103515245
LCG_INCREMENT = 12345
MASK_32 = 0xFFFFFFFF
MASK_31 = 0x7FFFFFFF
LCG_MODULUS = MASK_31 + 1

RESERVE_SIZE = 52 - 2 * HAND_SIZE

_BASE36 = "0123456789abcdefghijklmnopqrstuvwxyz"


def seed_hash(seed: str) -> int:
    """Rolling ``h * 31 + code`` hash over the UTF-16 code units of ``seed``, kept to 32 bits."""
    data = seed.encode("utf-16-le", "surrogatepass")
    value = 0
    for idx in range(0, len(data), 2):
        code = int.from_bytes(data[idx : idx + 2], "little")
        value = (value * HASH_MULTIPLIER + code) & MASK_32
    return value


class SeededRandom:
    """Linear congruential generator seeded from a string."""

    def __init__(self, seed: str) -> None:
        self.state = seed_hash(seed)

    def random(self) -> float:
        self.state = (self.state * LCG_MULTIPLIER + LCG_INCREMENT) & MASK_31
        return self.state / LCG_MODULUS

    def randbelow(self, n: int) -> int:
        return int(self.random() * n)


def shuffle_deck(deck: Sequence[Card], seed: str) -> List[Card]:
    """Fisher-Yates shuffle driven by ``SeededRandom(seed)``. Returns a new list."""
    shuffled = list(deck)
    rng = SeededRandom(seed)
    for i in range(len(shuffled) - 1, 0, -1):
        j = rng.randbelow(i + 1)
        shuffled[i], shuffled[j] = shuffled[j], shuffled[i]
    return shuffled


@dataclass(frozen=True)
class DealtHands:
    player1: List[Card]
    player2: List[Card]
    reserve: List[Card]


def deal_hands(seed: str) -> DealtHands:
    deck = shuffle_deck(build_standard_deck(), seed)
    return DealtHands(
        player1=deck[:HAND_SIZE],
        player2=deck[HAND_SIZE : 2 * HAND_SIZE],
        reserve=deck[2 * HAND_SIZE :],
    )


def apply_draw(
    hand: Sequence[Card],
    discard_indices: Iterable[int],
    reserve: Sequence[Card],
    reserve_cursor: int = 0,
) -> List[Card]:
    """Replace discarded positions with reserve cards and return the new hand.

    The i-th listed discard takes ``reserve[reserve_cursor + i]``. A discard
    outside ``[0, 7)`` or a reserve position past the end is skipped without
    error; the skipped entry still uses up its reserve position.
    """
    new_hand = list(hand)
    for offset, idx in enumerate(discard_indices):
        position = reserve_cursor + offset
        if 0 <= idx < HAND_SIZE and 0 <= position < len(reserve):
            new_hand[idx] = reserve[position]
    return new_hand


def generate_round_seed(rng: Optional[random.Random] = None) -> str:
    """Fresh seed mixing the wall clock with random entropy."""
    rng = rng or random.SystemRandom()
    entropy = "".join(rng.choice(_BASE36) for _ in range(13))
    return f"poker-{int(time.time() * 1000)}-{entropy}"
