"""
Geometry/Base movement and capturing rules

Key idea: Use strategy pattern to define the pseudo-legal move sets for each piece type.

Pseudo-legal only: whether a move leaves your own king exposed is never checked.
"""

import logging
from dataclasses import dataclass
from typing import Callable, Optional, Protocol

from src.chess.pieces import Piece
from src.chess.square import BOARD_DIMENSIONS, Square
from src.core.shared_types import Color, PieceType

logger = logging.getLogger(__name__)


class Board(Protocol):
    """Just the parts the movement strategies need"""

    def piece(self, square: Square) -> Optional[Piece]: ...
    def is_empty(self, square: Square) -> bool: ...


Vector = tuple[int, int]


@dataclass(frozen=True)
class Move:
    """basic definition of a move to be made"""

    from_square: Square
    to_square: Square

    @classmethod
    def from_algebraic(cls, from_sq: str, to_sq: str) -> "Move":
        return cls(Square.from_algebraic(from_sq), Square.from_algebraic(to_sq))

    def to_notation(self, piece_code: str) -> str:
        """Human-readable move as recorded in the move history: <piece code><from>-<to>"""
        return f"{piece_code}{self.from_square.to_algebraic()}-{self.to_square.to_algebraic()}"


# --- DIRECTIONS ---
DIAGONALS: list[Vector] = [(1, 1), (-1, 1), (1, -1), (-1, -1)]
STRAIGHTS: list[Vector] = [(1, 0), (-1, 0), (0, 1), (0, -1)]
KNIGHT_DELTAS: list[Vector] = [
    (2, 1),
    (2, -1),
    (-2, 1),
    (-2, -1),
    (1, 2),
    (1, -2),
    (-1, 2),
    (-1, -2),
]
KING_DELTAS: list[Vector] = STRAIGHTS + DIAGONALS

# Pawns start on the 2nd (white) or 7th (black) rank and move towards the opponent.
PAWN_START_RANK: dict[Color, int] = {Color.WHITE: 2, Color.BLACK: BOARD_DIMENSIONS[1] - 1}
PAWN_DIRECTION: dict[Color, int] = {Color.WHITE: 1, Color.BLACK: -1}


# --- MOVEMENT RULES ---
def raycasting_move(
    square: Square, board: Board, directions: list[Vector]
) -> list[Move]:
    """
    Raycasting algorithm
    -----

    ---
    We define move directions and move along them until we hit another piece or
    the edge of the board. The first occupied square only counts if it holds an opponent's piece (capture).
    """
    player_color = _color_on(square, board)

    moves: list[Move] = []
    for df, dr in directions:
        target_square = square
        while True:
            target_square = target_square.offset(df, dr)
            if not target_square.is_within_bounds():
                break

            if not board.is_empty(target_square):
                # only need to add the first occupied square found if it is the opponent's: then it can be captured.
                if _is_opponent_on(target_square, player_color, board):
                    moves.append(Move(from_square=square, to_square=target_square))
                break

            moves.append(Move(from_square=square, to_square=target_square))
    return moves


def single_step_move(square: Square, board: Board, deltas: list[Vector]) -> list[Move]:
    """Raycasting is for sliding pieces. This is the equivalent for kings and knights that just can move a single step along a direction"""
    player_color = _color_on(square, board)

    moves: list[Move] = []
    for df, dr in deltas:
        target_square = square.offset(df, dr)
        if not target_square.is_within_bounds():
            continue

        square_available = board.is_empty(target_square) or _is_opponent_on(
            target_square, player_color, board
        )
        if square_available:
            moves.append(Move(from_square=square, to_square=target_square))

    return moves


def candidate_pawn_moves(square: Square, board: Board) -> list[Move]:
    """
    A pawn:
    - moves by a single square forward (never captures that way).
    - It can move by two in their first move (so when on their starting rank), if both squares are free.
    - takes diagonally

    NOTE: No en passant, and reaching the last rank does not promote here.
    """
    player_color = _color_on(square, board)
    direction = PAWN_DIRECTION[player_color]

    moves: list[Move] = []
    # Pawn pushes : Black moves down the board, White moves up the board
    one_step = square.offset(0, direction)
    if one_step.is_within_bounds() and board.is_empty(one_step):
        moves.append(Move(from_square=square, to_square=one_step))

        two_steps = square.offset(0, 2 * direction)
        on_start_rank = square.rank == PAWN_START_RANK[player_color]
        if on_start_rank and two_steps.is_within_bounds() and board.is_empty(two_steps):
            moves.append(Move(from_square=square, to_square=two_steps))

    # pawns take diagonally:
    for df in (-1, 1):
        target_square = square.offset(df, direction)
        if not target_square.is_within_bounds():
            continue
        if _is_opponent_on(target_square, player_color, board):
            moves.append(Move(from_square=square, to_square=target_square))
    return moves


def candidate_knight_moves(square: Square, board: Board) -> list[Move]:
    """Knights always move such that |delta_rank| + |delta_file| = 3"""
    return single_step_move(square, board, KNIGHT_DELTAS)


def candidate_bishop_moves(square: Square, board: Board) -> list[Move]:
    """Bishops move diagonally: |delta_rank| = |delta_file|"""
    return raycasting_move(square, board, DIAGONALS)


def candidate_rook_moves(square: Square, board: Board) -> list[Move]:
    """Rooks move either horizontally or vertically"""
    return raycasting_move(square, board, STRAIGHTS)


def candidate_queen_moves(square: Square, board: Board) -> list[Move]:
    """
    The Queen combines the rook moves (horizontal + vertical movements) and bishop moves (diagonal movement)
    """
    return candidate_bishop_moves(square, board) + candidate_rook_moves(square, board)


def candidate_king_moves(square: Square, board: Board) -> list[Move]:
    """
    The king can move by a single square at the time. No castling.
    """
    return single_step_move(square, board, KING_DELTAS)


# -- STRATEGY PATTERN: MOVEMENT RULES ---
CandidateMovesFn = Callable[[Square, Board], list[Move]]
MOVEMENT_RULES: dict[PieceType, CandidateMovesFn] = {
    PieceType.PAWN: candidate_pawn_moves,
    PieceType.KNIGHT: candidate_knight_moves,
    PieceType.BISHOP: candidate_bishop_moves,
    PieceType.ROOK: candidate_rook_moves,
    PieceType.QUEEN: candidate_queen_moves,
    PieceType.KING: candidate_king_moves,
}


def legal_moves(board: Board, square: str, acting_color: Color) -> set[str]:
    """
    Destination squares for the piece on `square`.
    ----

    Empty set (not an error) when the square is empty or holds a piece of the other color.
    A malformed square label does raise (InvalidSquareError).
    """
    start = Square.from_algebraic(square)
    piece = board.piece(start)
    if piece is None or piece.color != acting_color:
        return set()

    movement_rule = MOVEMENT_RULES[piece.type]
    destinations = {move.to_square.to_algebraic() for move in movement_rule(start, board)}
    logger.debug("legal moves for %s on %s: %s", piece.to_code(), square, sorted(destinations))
    return destinations


# -- HELPERS --
def _color_on(square: Square, board: Board) -> Color:
    piece = board.piece(square)
    # for the type checker: movement rules are only called for occupied squares
    assert piece is not None
    return piece.color


def _is_opponent_on(square: Square, player_color: Color, board: Board) -> bool:
    piece = board.piece(square)
    return piece is not None and piece.is_enemy_of(player_color)
