from __future__ import annotations

import itertools
from collections import Counter
from typing import Dict, Iterable, List, Optional, Sequence

from .cards import RANK_VALUE, SUITS, Card, Rank
from .errors import InsufficientCards
from .models import HandCategory, HandResult

HAND_CARDS = 5
ACE_HIGH = RANK_VALUE[Rank.ACE]
WHEEL_VALUES = (5, 4, 3, 2, ACE_HIGH)
SUIT_ORDER = {suit: idx for idx, suit in enumerate(SUITS)}


def evaluate(cards: Sequence[Card]) -> HandResult:
    """Classify five or more cards into their best category.

    The input order does not matter: cards are put in a canonical order
    (value descending, then suit) before any choice between equal ranks is
    made, so the same multiset always yields the same HandResult.
    """
    if len(cards) < HAND_CARDS:
        raise InsufficientCards(len(cards))
    ordered = _canonical(cards)

    straight_flush = _straight_flush(ordered)
    if straight_flush is not None:
        high = _straight_high(straight_flush)
        category = HandCategory.ROYAL_FLUSH if high == ACE_HIGH else HandCategory.STRAIGHT_FLUSH
        return HandResult(category, tuple(straight_flush), (high,))

    groups = _rank_groups(ordered)
    quads = [value for value, group in groups.items() if len(group) >= 4]
    trips = [value for value, group in groups.items() if len(group) >= 3]
    pairs = [value for value, group in groups.items() if len(group) >= 2]

    if quads:
        quad = quads[0]
        kickers = _kickers(ordered, {quad}, 1)
        return HandResult(
            HandCategory.FOUR_OF_A_KIND,
            tuple(groups[quad][:4] + kickers),
            (quad, kickers[0].value),
        )

    if trips:
        trip = trips[0]
        others = [value for value in pairs if value != trip]
        if others:
            pair = others[0]
            return HandResult(
                HandCategory.FULL_HOUSE,
                tuple(groups[trip][:3] + groups[pair][:2]),
                (trip, pair),
            )

    flush = _flush(ordered)
    if flush is not None:
        return HandResult(HandCategory.FLUSH, tuple(flush), tuple(card.value for card in flush))

    straight = _straight(ordered)
    if straight is not None:
        return HandResult(HandCategory.STRAIGHT, tuple(straight), (_straight_high(straight),))

    if trips:
        trip = trips[0]
        kickers = _kickers(ordered, {trip}, 2)
        return HandResult(
            HandCategory.THREE_OF_A_KIND,
            tuple(groups[trip][:3] + kickers),
            (trip,) + tuple(card.value for card in kickers),
        )

    if len(pairs) >= 2:
        high_pair, low_pair = pairs[:2]
        kickers = _kickers(ordered, {high_pair, low_pair}, 1)
        return HandResult(
            HandCategory.TWO_PAIR,
            tuple(groups[high_pair] + groups[low_pair] + kickers),
            (high_pair, low_pair, kickers[0].value),
        )

    if pairs:
        pair = pairs[0]
        kickers = _kickers(ordered, {pair}, 3)
        return HandResult(
            HandCategory.PAIR,
            tuple(groups[pair] + kickers),
            (pair,) + tuple(card.value for card in kickers),
        )

    top = ordered[:HAND_CARDS]
    return HandResult(HandCategory.HIGH_CARD, tuple(top), tuple(card.value for card in top))


def best_hand(cards: Sequence[Card]) -> HandResult:
    """Best five-card hand over every 5-card subset (21 subsets for 7 cards)."""
    if len(cards) < HAND_CARDS:
        raise InsufficientCards(len(cards))
    if len(cards) == HAND_CARDS:
        return evaluate(cards)
    best: Optional[HandResult] = None
    for combo in itertools.combinations(_canonical(cards), HAND_CARDS):
        result = evaluate(combo)
        # Strictly greater: the first maximal subset wins ties.
        if best is None or compare(result, best) > 0:
            best = result
    assert best is not None
    return best


def compare(a: HandResult, b: HandResult) -> int:
    """Positive if ``a`` beats ``b``, negative if it loses, 0 for a tie."""
    if a.rank != b.rank:
        return a.rank - b.rank
    for left, right in zip(a.high_cards, b.high_cards):
        if left != right:
            return left - right
    return 0


def describe_hand(result: HandResult) -> str:
    keys = result.high_cards
    category = result.category
    if category == HandCategory.ROYAL_FLUSH:
        return "Royal Flush"
    if category == HandCategory.STRAIGHT_FLUSH:
        return f"Straight Flush, {_value_name(keys[0])} high"
    if category == HandCategory.FOUR_OF_A_KIND:
        return f"Four of a Kind, {_value_plural(keys[0])}"
    if category == HandCategory.FULL_HOUSE:
        return f"Full House, {_value_plural(keys[0])} over {_value_plural(keys[1])}"
    if category == HandCategory.FLUSH:
        return f"Flush, {_value_name(keys[0])} high"
    if category == HandCategory.STRAIGHT:
        if keys[0] == 5:
            return "Straight, 5 high (Wheel)"
        return f"Straight, {_value_name(keys[0])} high"
    if category == HandCategory.THREE_OF_A_KIND:
        return f"Three of a Kind, {_value_plural(keys[0])}"
    if category == HandCategory.TWO_PAIR:
        return f"Two Pair, {_value_plural(keys[0])} and {_value_plural(keys[1])}"
    if category == HandCategory.PAIR:
        return f"Pair of {_value_plural(keys[0])}"
    return f"High Card, {_value_name(keys[0])}"


# Helpers -------------------------------------------------------------


def _canonical(cards: Iterable[Card]) -> List[Card]:
    return sorted(cards, key=lambda card: (-card.value, SUIT_ORDER[card.suit]))


def _rank_groups(ordered: Sequence[Card]) -> Dict[int, List[Card]]:
    # Keys come out in descending value because ``ordered`` is canonical.
    groups: Dict[int, List[Card]] = {}
    for card in ordered:
        groups.setdefault(card.value, []).append(card)
    return groups


def _kickers(ordered: Sequence[Card], used: set, count: int) -> List[Card]:
    return [card for card in ordered if card.value not in used][:count]


def _suited(ordered: Sequence[Card]) -> List[List[Card]]:
    counts = Counter(card.suit for card in ordered)
    return [
        [card for card in ordered if card.suit == suit]
        for suit in SUITS
        if counts[suit] >= HAND_CARDS
    ]


def _flush(ordered: Sequence[Card]) -> Optional[List[Card]]:
    candidates = [suited[:HAND_CARDS] for suited in _suited(ordered)]
    if not candidates:
        return None
    return max(candidates, key=lambda cards: [card.value for card in cards])


def _straight_flush(ordered: Sequence[Card]) -> Optional[List[Card]]:
    best: Optional[List[Card]] = None
    for suited in _suited(ordered):
        straight = _straight(suited)
        if straight is not None and (best is None or _straight_high(straight) > _straight_high(best)):
            best = straight
    return best


def _straight(ordered: Sequence[Card]) -> Optional[List[Card]]:
    """Highest five-card straight in ``ordered``, Ace-low wheel last."""
    by_value: Dict[int, Card] = {}
    for card in ordered:
        by_value.setdefault(card.value, card)
    values = list(by_value)  # distinct, descending

    top = _run_top(values)
    if top is not None:
        return [by_value[value] for value in range(top, top - HAND_CARDS, -1)]
    if _has_wheel(values):
        return [by_value[value] for value in WHEEL_VALUES]
    return None


def _run_top(values: Sequence[int]) -> Optional[int]:
    """Top value of the first five-long consecutive run in distinct descending values."""
    for idx in range(len(values) - HAND_CARDS + 1):
        if values[idx] - values[idx + HAND_CARDS - 1] == HAND_CARDS - 1:
            return values[idx]
    return None


def _has_wheel(values: Iterable[int]) -> bool:
    return set(WHEEL_VALUES).issubset(values)


def _straight_high(straight: Sequence[Card]) -> int:
    # A wheel is stored 5-4-3-2-A, so the first card is always the high one.
    return straight[0].value


_VALUE_NAMES = {11: "Jack", 12: "Queen", 13: "King", 14: "Ace"}
_VALUE_PLURALS = {6: "Sixes", 11: "Jacks", 12: "Queens", 13: "Kings", 14: "Aces"}
_NUMBER_NAMES = {
    2: "Two", 3: "Three", 4: "Four", 5: "Five", 6: "Six",
    7: "Seven", 8: "Eight", 9: "Nine", 10: "Ten",
}


def _value_name(value: int) -> str:
    return _VALUE_NAMES.get(value, str(value))


def _value_plural(value: int) -> str:
    if value in _VALUE_PLURALS:
        return _VALUE_PLURALS[value]
    return f"{_NUMBER_NAMES[value]}s"
