"""Deterministic 7-card draw poker engine: dealing, drawing and hand ranking."""

from .cards import Card, RANKS, SUITS, Rank, Suit, build_standard_deck, cards_to_tokens, parse_token, parse_tokens, rank_value
from .dealing import DealtHands, apply_draw, deal_hands, generate_round_seed, shuffle_deck
from .errors import EngineError, InsufficientCards, InvalidCardToken
from .evaluator import best_hand, compare, describe_hand, evaluate
from .models import (
    MAX_ROUNDS,
    WINS_TO_WIN_GAME,
    HandCategory,
    HandResult,
    MatchRules,
    RoundOutcome,
    Winner,
)
from .resolution import points_awarded, resolve_round

__all__ = [
    "Card",
    "RANKS",
    "SUITS",
    "Rank",
    "Suit",
    "build_standard_deck",
    "cards_to_tokens",
    "parse_token",
    "parse_tokens",
    "rank_value",
    "DealtHands",
    "apply_draw",
    "deal_hands",
    "generate_round_seed",
    "shuffle_deck",
    "EngineError",
    "InsufficientCards",
    "InvalidCardToken",
    "best_hand",
    "compare",
    "describe_hand",
    "evaluate",
    "MAX_ROUNDS",
    "WINS_TO_WIN_GAME",
    "HandCategory",
    "HandResult",
    "MatchRules",
    "RoundOutcome",
    "Winner",
    "points_awarded",
    "resolve_round",
]
