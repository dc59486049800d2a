import argparse
import asyncio
import logging

from drawpoker.models import MAX_ROUNDS, WINS_TO_WIN_GAME, MatchRules

from .server import EngineServer


def main() -> None:
    parser = argparse.ArgumentParser(description="Draw poker engine host")
    parser.add_argument("--host", default="0.0.0.0")
    parser.add_argument("--port", type=int, default=8765)
    parser.add_argument("--wins-to-win", type=int, default=WINS_TO_WIN_GAME, help="Round wins that end a match")
    parser.add_argument("--max-rounds", type=int, default=MAX_ROUNDS, help="Round cap reported to session managers")
    parser.add_argument("--log-level", default="INFO")
    args = parser.parse_args()

    logging.basicConfig(level=getattr(logging, args.log_level.upper(), logging.INFO))

    rules = MatchRules(wins_to_win_game=args.wins_to_win, max_rounds=args.max_rounds)
    server = EngineServer(rules)
    asyncio.run(server.start(host=args.host, port=args.port))


if __name__ == "__main__":
    main()
