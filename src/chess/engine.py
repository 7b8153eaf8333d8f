"""
The transition engine is the entrypoint into the domain layer: both the server side service and the client side predictor call it.

`apply(state, action)` never changes the state it receives. It validates the action completely,
then applies it to a copy and returns that copy as the next state. Any rejection is raised before the copy is made,
so a rejected action can never leave a half-updated state behind.

States a match can be in:

* Active               (game_status=active, draw_offer=None)
* DrawOffered(by)      (game_status=active, draw_offer=<color>)
* Finished(winner, reason)
"""

import logging
from typing import Callable

from src.chess.actions import Action
from src.chess.game_state import GameState, LastMove
from src.chess.gate import acting_color, authorize
from src.chess.moves import Move, legal_moves
from src.core.exceptions import GameFinishedError, InvalidMoveError
from src.core.shared_types import ActionType, Color, EndReason, GameStatus, Winner

logger = logging.getLogger(__name__)

WINNER_BY_COLOR: dict[Color, Winner] = {
    Color.WHITE: Winner.WHITE,
    Color.BLACK: Winner.BLACK,
}


def apply(state: GameState, action: Action) -> GameState:
    """
    Validate the action and return the next state.
    ----

    1. Is the game still running? (resigning is always accepted)
    2. Turn / ownership gate
    3. Move generator (moves only)
    4. Apply the action to a copy of the state
    """
    if state.is_finished and action.action_type != ActionType.RESIGN:
        raise GameFinishedError(
            f"Game is finished ({state.end_reason}). Cannot {action.action_type}."
        )

    color = authorize(state, action)

    if action.action_type == ActionType.MOVE:
        _assert_legal_destination(state, action, color)

    next_state = state.copy()
    handler = TRANSITIONS[action.action_type]
    handler(next_state, action, color)
    return next_state


def legal_moves_for(state: GameState, player_id: str, square: str) -> set[str]:
    """
    Destinations to highlight when the player selects a square.

    Empty when the game is over, when it is not the player's turn, or when the square holds none of their pieces.
    """
    color = acting_color(state, player_id)
    if state.is_finished or color != state.current_turn:
        return set()
    return legal_moves(state.board, square, color)


# -- GUARDS --
def _assert_legal_destination(state: GameState, action: Action, color: Color) -> None:
    # for the type checker: Action validates that moves carry both squares
    assert action.from_square is not None and action.to_square is not None
    destinations = legal_moves(state.board, action.from_square, color)
    move = Move.from_algebraic(action.from_square, action.to_square)
    if move.to_square.to_algebraic() not in destinations:
        raise InvalidMoveError(
            f"Move not allowed: {action.from_square}-{action.to_square}"
        )


# -- TRANSITIONS (operate on the copy) ---
def _move(state: GameState, action: Action, color: Color) -> None:
    """
    Apply an approved move. No legality checks from here on.

    NOTE: a requested promotion is accepted but not applied: the pawn stays a pawn.
    """
    assert action.from_square is not None and action.to_square is not None
    move = Move.from_algebraic(action.from_square, action.to_square)
    piece_code = state.board.code(move.from_square)

    # Record the capture before the piece on the target square gets overwritten
    captured = state.board.code(move.to_square)
    if captured:
        state.players[color].captured_pieces.append(captured)
    state.board.move_piece(move.from_square, move.to_square)

    state.current_turn = color.opponent
    state.last_move = LastMove(
        from_square=move.from_square.to_algebraic(),
        to_square=move.to_square.to_algebraic(),
        captured=bool(captured),
    )
    state.move_history.append(move.to_notation(piece_code))
    logger.info("%s played %s", color, state.move_history[-1])


def _resign(state: GameState, action: Action, color: Color) -> None:
    """Always accepted, even when the game already finished (the result gets overwritten)."""
    _finish(state, WINNER_BY_COLOR[color.opponent], EndReason.RESIGNATION)
    logger.info("%s resigned", color)


def _draw_offer(state: GameState, action: Action, color: Color) -> None:
    state.draw_offer = color
    logger.info("%s offered a draw", color)


def _draw_accept(state: GameState, action: Action, color: Color) -> None:
    if not _can_answer_draw_offer(state, color):
        return
    _finish(state, Winner.DRAW, EndReason.DRAW_AGREEMENT)
    state.draw_offer = None
    logger.info("%s accepted the draw", color)


def _draw_decline(state: GameState, action: Action, color: Color) -> None:
    if not _can_answer_draw_offer(state, color):
        return
    state.draw_offer = None
    logger.info("%s declined the draw", color)


def _can_answer_draw_offer(state: GameState, color: Color) -> bool:
    """Only the opponent of the player who offered the draw can answer. Anything else is a no-op."""
    return state.draw_offer is not None and state.draw_offer != color


def _finish(state: GameState, winner: Winner, reason: EndReason) -> None:
    state.game_status = GameStatus.FINISHED
    state.winner = winner
    state.end_reason = reason


# -- STRATEGY PATTERN: TRANSITIONS ---
TransitionFn = Callable[[GameState, Action, Color], None]
TRANSITIONS: dict[ActionType, TransitionFn] = {
    ActionType.MOVE: _move,
    ActionType.RESIGN: _resign,
    ActionType.DRAW_OFFER: _draw_offer,
    ActionType.DRAW_ACCEPT: _draw_accept,
    ActionType.DRAW_DECLINE: _draw_decline,
}
