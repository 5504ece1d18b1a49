"""
Custom exceptions shared by all layers.

Validating a move never raises: the rules produce a verdict. Exceptions are only raised once a caller
insists on a rejected move, asks for an illegal status transition, or hands us a corrupted board.
"""

from typing import Optional


class GameError(Exception):
    """Top level exception. Services/API can catch this to handle any expected error of the application."""


class GameStateError(GameError):
    """Action not allowed in the current status of the game (joining a running game, moving in a finished one, ...)"""


class IllegalMoveError(GameError):
    """A move was attempted that the rules reject. Carries the rejection code so callers can render a message."""

    def __init__(self, error: str, reason: Optional[str] = None) -> None:
        self.error = error
        self.reason = reason or error
        super().__init__(f"{error}: {self.reason}")


class InvalidBoardError(GameError):
    """
    Board invariant violated: two pieces on one square, a missing king, ...

    NOTE: this signals a programming or storage error, not a bad move.
    """


class InvalidRequestError(GameError):
    """Request could not be interpreted (badly formatted square, etc.)"""


class RepositoryError(GameError):
    """Record could not be found / stored."""


class StaleGameError(RepositoryError):
    """The stored game changed since it was read. The move was validated against an outdated board and is not stored."""
