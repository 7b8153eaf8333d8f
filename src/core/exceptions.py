"""
Custom exceptions.

Every rejection of an action is raised before the game state is touched, so catching a `GameError` always means the canonical state is unchanged.
"""


class GameError(Exception):
    """Top-level exception for anything the game (or the layers around it) rejects."""


# --- DOMAIN ---
class InvalidSquareError(GameError):
    """Square label is not <file a-h><rank 1-8>, or a board index is off the board."""


class ValidationError(GameError):
    """An action is missing required fields, or names a player that is not part of the match."""


class TurnViolation(GameError):
    """The acting player is not the color to move."""


class OwnershipViolation(GameError):
    """The acting player tries to move a piece they do not own (or an empty square)."""


class InvalidMoveError(GameError):
    """Destination is not among the generated legal moves."""


class StateError(GameError):
    """Missing or garbled game state."""


class GameFinishedError(StateError):
    """The game is over: moves and draw actions are no longer accepted."""


# --- SERVICE / API ---
class InvalidRequestError(GameError):
    """Request does not have the expected structure."""
