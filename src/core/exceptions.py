"""
Custom exceptions raised by the engine.

Everything derives from GameError, so the caller can catch a single type if it only cares that
a transition got rejected (the state it holds is never partially updated).

NOTE: GameError does NOT derive from ValueError. Pydantic would otherwise wrap the errors raised in
field validators into a ValidationError, and the caller should see the engine's own exception types.
"""


class GameError(Exception):
    """Top-level exception for everything the engine rejects."""


class IllegalMoveError(GameError):
    """Move not in the set of legal moves (out of turn, impossible, or exposing your own king)."""


class OutOfBoundsError(GameError):
    """A position outside of the board was dereferenced. Indicates a caller contract violation."""


class InvalidPromotionError(GameError):
    """Pawns can only promote into a knight, bishop, rook or queen."""


class GameStateError(GameError):
    """The request does not fit the current state of the game/session (game over, engine still thinking)."""


class InvalidRequestError(GameError):
    """Data sent across the boundary could not be interpreted."""


class ConfigurationError(GameError):
    """Engine configuration could not be loaded or did not validate."""
