from __future__ import annotations

import asyncio
import json
import logging
from dataclasses import asdict
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional, Tuple

import websockets
from websockets.asyncio.server import ServerConnection

from drawpoker.cards import Card, cards_to_tokens, parse_tokens
from drawpoker.dealing import apply_draw, deal_hands, generate_round_seed
from drawpoker.errors import EngineError
from drawpoker.evaluator import best_hand, describe_hand
from drawpoker.models import HandResult, MatchRules, RoundOutcome
from drawpoker.resolution import points_awarded, resolve_round

LOGGER = logging.getLogger("drawpoker.host")

# EngineServer answers one request with one reply. It keeps no match state:
# the session manager on the other end owns rounds, scores and turn order.

Reply = Tuple[str, Dict[str, Any]]


class RequestError(Exception):
    def __init__(self, code: str, msg: str) -> None:
        super().__init__(msg)
        self.code = code
        self.msg = msg


def hand_payload(hand: HandResult) -> Dict[str, Any]:
    return {
        "rank": hand.rank,
        "name": hand.name,
        "description": describe_hand(hand),
        "cards": cards_to_tokens(hand.cards),
        "high_cards": list(hand.high_cards),
    }


def outcome_payload(outcome: RoundOutcome) -> Dict[str, Any]:
    return {
        "winner": outcome.winner.value if outcome.winner else None,
        "is_tie": outcome.is_tie,
        "player1_hand": hand_payload(outcome.player1_hand),
        "player2_hand": hand_payload(outcome.player2_hand),
    }


class EngineServer:
    def __init__(self, rules: Optional[MatchRules] = None) -> None:
        self.rules = rules or MatchRules()
        self.handlers: Dict[str, Callable[[Dict[str, Any]], Reply]] = {
            "hello": self._handle_hello,
            "rules": self._handle_rules,
            "deal": self._handle_deal,
            "draw": self._handle_draw,
            "evaluate": self._handle_evaluate,
            "resolve": self._handle_resolve,
            "points": self._handle_points,
        }

    async def start(self, host: str = "0.0.0.0", port: int = 8765) -> None:
        async with websockets.serve(self._handle_connection, host, port):
            LOGGER.info("Engine host listening on %s:%s", host, port)
            await asyncio.Future()

    async def _handle_connection(self, websocket: ServerConnection) -> None:
        LOGGER.info("Client connected: %s", getattr(websocket, "remote_address", None))
        try:
            async for raw in websocket:
                msg_type, payload = self.handle_raw(raw)
                await self._send_json(websocket, msg_type, payload)
        except websockets.ConnectionClosed:
            pass
        LOGGER.info("Client disconnected: %s", getattr(websocket, "remote_address", None))

    def handle_raw(self, raw: Any) -> Reply:
        try:
            message = json.loads(raw)
        except (TypeError, json.JSONDecodeError):
            return self._error("BAD_JSON", "Message is not valid JSON")
        if not isinstance(message, dict):
            return self._error("BAD_SCHEMA", "Message must be a JSON object")
        return self.handle_message(message)

    def handle_message(self, message: Dict[str, Any]) -> Reply:
        msg_type = message.get("type")
        handler = self.handlers.get(msg_type) if isinstance(msg_type, str) else None
        if handler is None:
            return self._error("UNKNOWN_TYPE", f"Unsupported message type: {msg_type!r}")
        try:
            return handler(message)
        except (RequestError, EngineError) as exc:
            return self._error(exc.code, exc.msg)

    # Handlers --------------------------------------------------------

    def _handle_hello(self, message: Dict[str, Any]) -> Reply:
        return "welcome", {"rules": asdict(self.rules)}

    def _handle_rules(self, message: Dict[str, Any]) -> Reply:
        return "rules", {"rules": asdict(self.rules)}

    def _handle_deal(self, message: Dict[str, Any]) -> Reply:
        seed = message.get("seed")
        if seed is None:
            seed = generate_round_seed()
        elif not isinstance(seed, str):
            raise RequestError("BAD_SCHEMA", "seed must be a string")
        dealt = deal_hands(seed)
        return "dealt", {
            "seed": seed,
            "player1": cards_to_tokens(dealt.player1),
            "player2": cards_to_tokens(dealt.player2),
            "reserve": cards_to_tokens(dealt.reserve),
        }

    def _handle_draw(self, message: Dict[str, Any]) -> Reply:
        seed = message.get("seed")
        if not isinstance(seed, str):
            raise RequestError("BAD_SCHEMA", "seed required")
        hand = self._cards(message, "hand")
        if len(hand) != self.rules.hand_size:
            raise RequestError("BAD_SCHEMA", f"hand must hold {self.rules.hand_size} cards")
        discard = self._int_list(message, "discard")
        cursor = message.get("cursor", 0)
        if not self._is_int(cursor) or cursor < 0:
            raise RequestError("BAD_SCHEMA", "cursor must be a non-negative integer")

        reserve = deal_hands(seed).reserve
        new_hand = apply_draw(hand, discard, reserve, cursor)
        return "drawn", {"hand": cards_to_tokens(new_hand), "cursor": cursor + len(discard)}

    def _handle_evaluate(self, message: Dict[str, Any]) -> Reply:
        cards = self._cards(message, "cards")
        return "evaluation", {"hand": hand_payload(best_hand(cards))}

    def _handle_resolve(self, message: Dict[str, Any]) -> Reply:
        player1 = self._cards(message, "player1")
        player2 = self._cards(message, "player2")
        return "round_result", outcome_payload(resolve_round(player1, player2))

    def _handle_points(self, message: Dict[str, Any]) -> Reply:
        winner_wins = message.get("winner_wins")
        loser_wins = message.get("loser_wins")
        if not (self._is_int(winner_wins) and self._is_int(loser_wins)):
            raise RequestError("BAD_SCHEMA", "winner_wins and loser_wins must be integers")
        try:
            points = points_awarded(winner_wins, loser_wins)
        except ValueError as exc:
            raise RequestError("BAD_SCHEMA", str(exc)) from exc
        return "points", {"points": points}

    # Helpers ---------------------------------------------------------

    @staticmethod
    def _is_int(value: Any) -> bool:
        return isinstance(value, int) and not isinstance(value, bool)

    def _token_list(self, message: Dict[str, Any], field: str) -> List[str]:
        value = message.get(field)
        if not isinstance(value, list):
            raise RequestError("BAD_SCHEMA", f"{field} must be a list of card tokens")
        return value

    def _cards(self, message: Dict[str, Any], field: str) -> List[Card]:
        # Fewer than five cards is left to the engine (INSUFFICIENT_CARDS).
        cards = parse_tokens(self._token_list(message, field))
        if len(cards) > self.rules.hand_size:
            raise RequestError("BAD_SCHEMA", f"{field} holds more than {self.rules.hand_size} cards")
        if len(set(cards)) != len(cards):
            raise RequestError("BAD_SCHEMA", f"{field} repeats a card")
        return cards

    def _int_list(self, message: Dict[str, Any], field: str) -> List[int]:
        value = message.get(field, [])
        if not isinstance(value, list) or not all(self._is_int(item) for item in value):
            raise RequestError("BAD_SCHEMA", f"{field} must be a list of integers")
        return value

    def _error(self, code: str, msg: str) -> Reply:
        LOGGER.warning("Rejected request: %s (%s)", code, msg)
        return "error", {"code": code, "msg": msg}

    async def _send_json(self, websocket: ServerConnection, msg_type: str, payload: Dict[str, Any]) -> None:
        try:
            await websocket.send(self._envelope(msg_type, payload))
        except websockets.ConnectionClosed:
            pass

    def _envelope(self, msg_type: str, payload: Dict[str, Any]) -> str:
        body: Dict[str, Any] = {"type": msg_type, "v": 1, "ts": datetime.now(timezone.utc).isoformat()}
        body.update(payload)
        return json.dumps(body)
