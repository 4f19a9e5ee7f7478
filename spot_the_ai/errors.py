from __future__ import annotations


class GameError(ValueError):
    """Recoverable game-rule violation.

    Subclasses ValueError so routes can keep mapping ValueError to 422 and the
    WebSocket dispatcher can surface the message to the caller.
    """


class InvalidState(GameError):
    pass


class NoActiveRound(GameError):
    def __init__(self, message: str = "No active round") -> None:
        super().__init__(message)


class NoAIPlayer(GameError):
    def __init__(self, message: str = "No AI player found") -> None:
        super().__init__(message)


class CapacityExceeded(GameError):
    def __init__(self, message: str = "Server is full") -> None:
        super().__init__(message)
