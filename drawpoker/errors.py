from __future__ import annotations


class EngineError(ValueError):
    """Base class for errors raised by the draw poker engine."""

    code = "ENGINE_ERROR"

    def __init__(self, msg: str) -> None:
        super().__init__(msg)
        self.msg = msg


class InvalidCardToken(EngineError):
    code = "INVALID_CARD_TOKEN"

    def __init__(self, token: object) -> None:
        super().__init__(f"Invalid card token: {token!r}")
        self.token = token


class InsufficientCards(EngineError):
    code = "INSUFFICIENT_CARDS"

    def __init__(self, count: int, required: int = 5) -> None:
        super().__init__(f"Need at least {required} cards to evaluate a hand, got {count}")
        self.count = count
        self.required = required
