import asyncio
import json

import pytest

from drawpoker.cards import build_standard_deck
from drawpoker.dealing import apply_draw, deal_hands
from drawpoker.models import MatchRules
from host.server import EngineServer

from .helpers import DummyWebSocket, cards, tokens


SEVEN_CARDS = "AH KD QC JS 9H 3D 2C".split()


def make_server() -> EngineServer:
    return EngineServer(MatchRules(wins_to_win_game=3, max_rounds=5))


def test_hello_returns_rules():
    msg_type, payload = make_server().handle_message({"type": "hello"})
    assert msg_type == "welcome"
    assert payload["rules"] == {"wins_to_win_game": 3, "max_rounds": 5, "hand_size": 7, "max_discards": 5}


def test_deal_with_seed_matches_engine():
    msg_type, payload = make_server().handle_message({"type": "deal", "seed": "abc"})
    dealt = deal_hands("abc")
    assert msg_type == "dealt"
    assert payload["seed"] == "abc"
    assert payload["player1"] == tokens(dealt.player1)
    assert payload["player2"] == tokens(dealt.player2)
    assert payload["reserve"] == tokens(dealt.reserve)


def test_deal_without_seed_generates_one():
    _, payload = make_server().handle_message({"type": "deal"})
    assert payload["seed"].startswith("poker-")
    assert payload["player1"] == tokens(deal_hands(payload["seed"]).player1)


def test_draw_rederives_reserve_from_seed():
    dealt = deal_hands("draw-seed")
    request = {
        "type": "draw",
        "seed": "draw-seed",
        "hand": tokens(dealt.player2),
        "discard": [0, 9, 4],
        "cursor": 2,
    }
    msg_type, payload = make_server().handle_message(request)
    assert msg_type == "drawn"
    assert payload["hand"] == tokens(apply_draw(dealt.player2, [0, 9, 4], dealt.reserve, 2))
    assert payload["cursor"] == 5


def test_evaluate_reports_best_hand():
    msg_type, payload = make_server().handle_message(
        {"type": "evaluate", "cards": ["7H", "7D", "7C", "2S", "2D", "9C", "KH"]}
    )
    assert msg_type == "evaluation"
    hand = payload["hand"]
    assert hand["rank"] == 7
    assert hand["name"] == "Full House"
    assert hand["high_cards"] == [7, 2]
    assert hand["description"] == "Full House, Sevens over Twos"
    assert hand["cards"] == ["7H", "7D", "7C", "2D", "2S"]


def test_resolve_reports_winner_and_tie():
    server = make_server()
    _, payload = server.handle_message(
        {"type": "resolve", "player1": "AH KH QH JH 10H 2C 3D".split(), "player2": "9S 9D 9C 9H 2S 4C 5D".split()}
    )
    assert payload["winner"] == "player1"
    assert payload["is_tie"] is False
    assert payload["player1_hand"]["name"] == "Royal Flush"

    _, payload = server.handle_message(
        {"type": "resolve", "player1": "AH KD QC JS 9H 3D 2C".split(), "player2": "AS KC QD JH 9C 3H 2S".split()}
    )
    assert payload["winner"] is None
    assert payload["is_tie"] is True


def test_points_request():
    msg_type, payload = make_server().handle_message({"type": "points", "winner_wins": 10, "loser_wins": 4})
    assert msg_type == "points"
    assert payload["points"] == 6


@pytest.mark.parametrize(
    "message, code",
    [
        ({"type": "nope"}, "UNKNOWN_TYPE"),
        ({}, "UNKNOWN_TYPE"),
        ({"type": "deal", "seed": 12}, "BAD_SCHEMA"),
        ({"type": "evaluate", "cards": "AH KH"}, "BAD_SCHEMA"),
        ({"type": "evaluate", "cards": ["AH", "KH", "QH"]}, "INSUFFICIENT_CARDS"),
        ({"type": "evaluate", "cards": ["AH", "KH", "QH", "JH", "XX"]}, "INVALID_CARD_TOKEN"),
        ({"type": "draw", "hand": SEVEN_CARDS, "discard": []}, "BAD_SCHEMA"),
        ({"type": "draw", "seed": "s", "hand": ["AH", "KH"], "discard": []}, "BAD_SCHEMA"),
        ({"type": "draw", "seed": "s", "hand": SEVEN_CARDS, "discard": ["1"]}, "BAD_SCHEMA"),
        ({"type": "draw", "seed": "s", "hand": SEVEN_CARDS, "discard": [], "cursor": -1}, "BAD_SCHEMA"),
        ({"type": "points", "winner_wins": 1, "loser_wins": 5}, "BAD_SCHEMA"),
        ({"type": "points", "winner_wins": True, "loser_wins": 0}, "BAD_SCHEMA"),
        ({"type": "evaluate", "cards": ["AH"] * 5}, "BAD_SCHEMA"),
        ({"type": "evaluate", "cards": ["AH", "KD", "AH", "9C", "2S"]}, "BAD_SCHEMA"),
        ({"type": "resolve", "player1": ["AH"] * 7, "player2": SEVEN_CARDS}, "BAD_SCHEMA"),
        ({"type": "resolve", "player1": SEVEN_CARDS, "player2": ["2c", "2C", "3H", "4H", "5H"]}, "BAD_SCHEMA"),
        ({"type": "draw", "seed": "s", "hand": ["AH"] * 7, "discard": [0]}, "BAD_SCHEMA"),
        ({"type": "evaluate", "cards": SEVEN_CARDS + ["8S"]}, "BAD_SCHEMA"),
        ({"type": "resolve", "player1": SEVEN_CARDS, "player2": tokens(build_standard_deck())}, "BAD_SCHEMA"),
    ],
)
def test_bad_requests_return_error_codes(message, code):
    msg_type, payload = make_server().handle_message(message)
    assert msg_type == "error"
    assert payload["code"] == code


def test_handle_raw_rejects_bad_json():
    server = make_server()
    assert server.handle_raw("{not json")[1]["code"] == "BAD_JSON"
    assert server.handle_raw("[1, 2]")[1]["code"] == "BAD_SCHEMA"


def test_connection_loop_replies_to_every_message():
    server = make_server()
    websocket = DummyWebSocket(
        [
            json.dumps({"type": "hello"}),
            "garbage",
            json.dumps({"type": "evaluate", "cards": tokens(cards("5S 4D 3C 2H AS"))}),
        ]
    )

    asyncio.run(server._handle_connection(websocket))

    replies = websocket.replies()
    assert [reply["type"] for reply in replies] == ["welcome", "error", "evaluation"]
    assert all(reply["v"] == 1 and "ts" in reply for reply in replies)
    assert replies[2]["hand"]["description"] == "Straight, 5 high (Wheel)"


def test_rejected_hands_keep_the_connection_open():
    server = make_server()
    websocket = DummyWebSocket(
        [
            json.dumps({"type": "evaluate", "cards": ["AH"] * 5}),
            json.dumps({"type": "resolve", "player1": ["AH"] * 7, "player2": SEVEN_CARDS}),
            json.dumps({"type": "evaluate", "cards": tokens(build_standard_deck())}),
            json.dumps({"type": "hello"}),
        ]
    )

    asyncio.run(server._handle_connection(websocket))

    replies = websocket.replies()
    assert [reply["type"] for reply in replies] == ["error", "error", "error", "welcome"]
    assert [reply.get("code") for reply in replies[:3]] == ["BAD_SCHEMA"] * 3


def test_evaluate_accepts_five_to_seven_cards():
    server = make_server()
    for count in (5, 6, 7):
        msg_type, payload = server.handle_message({"type": "evaluate", "cards": SEVEN_CARDS[:count]})
        assert msg_type == "evaluation"
        assert payload["hand"]["high_cards"][0] == 14
