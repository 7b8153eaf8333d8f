"""
Turn & ownership gate.

Decides whether the acting player may perform the action at all. It never mutates the state:
the transition engine only starts changing things once `authorize()` returned.
"""

from src.chess.actions import Action
from src.chess.game_state import GameState
from src.chess.square import Square
from src.core.exceptions import OwnershipViolation, TurnViolation, ValidationError
from src.core.shared_types import ActionType, Color


def acting_color(state: GameState, player_id: str) -> Color:
    """Color the player is playing with. Players outside the match are rejected."""
    color = state.color_of(player_id)
    if color is None:
        raise ValidationError(f"Player {player_id!r} is not part of this match.")
    return color


def authorize(state: GameState, action: Action) -> Color:
    """
    Returns the acting color if the action may be applied, raises otherwise.
    ----

    * Every action: the player must be one of the two players of the match.
    * Moves only: it must be your turn, and the piece on the source square must be yours.

    Resigning and draw handling do not depend on whose turn it is.
    """
    color = acting_color(state, action.player_id)
    if action.action_type != ActionType.MOVE:
        return color

    if color != state.current_turn:
        raise TurnViolation(
            f"Not your turn. Waiting for {state.current_turn} to make a move first."
        )

    # for the type checker: Action validates that moves carry both squares
    assert action.from_square is not None
    piece = state.board.piece(Square.from_algebraic(action.from_square))
    if piece is None or piece.color != color:
        raise OwnershipViolation(f"Not your piece on {action.from_square}.")

    return color
