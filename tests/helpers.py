from __future__ import annotations

import json
from typing import Dict, Iterable, List

from drawpoker.cards import Card, parse_tokens


def cards(text: str) -> List[Card]:
    """Build cards from a space separated token string, e.g. ``"AH KH QH JH 10H"``."""
    return parse_tokens(text.split())


def tokens(hand_cards: Iterable[Card]) -> List[str]:
    return [card.token for card in hand_cards]


# Fake socket so the async connection loop runs without opening a port.
class DummyWebSocket:
    def __init__(self, incoming: Iterable[str]) -> None:
        self.incoming = list(incoming)
        self.sent: List[str] = []
        self.remote_address = ("127.0.0.1", 50000)

    def __aiter__(self):
        return self._iterate()

    async def _iterate(self):
        for raw in self.incoming:
            yield raw

    async def send(self, message: str) -> None:
        self.sent.append(message)

    def replies(self) -> List[Dict[str, object]]:
        return [json.loads(message) for message in self.sent]
