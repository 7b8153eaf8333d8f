"""The Game board: an 8x8 grid of piece codes (empty string for an empty square)."""

from copy import deepcopy
from dataclasses import dataclass
from typing import Optional, Self

from src.chess.pieces import Piece
from src.chess.square import BOARD_DIMENSIONS, Square
from src.core.exceptions import StateError

EMPTY = ""

# Row 0 is the 8th rank, so black's pieces come first.
STARTING_ROWS: tuple[str, ...] = (
    "rnbqkbnr",
    "pppppppp",
    "........",
    "........",
    "........",
    "........",
    "PPPPPPPP",
    "RNBQKBNR",
)


@dataclass
class Board:
    grid: list[list[str]]

    @classmethod
    def starting_position(cls) -> Self:
        return cls.from_rows(STARTING_ROWS)

    @classmethod
    def from_rows(cls, rows: list[str] | tuple[str, ...]) -> Self:
        """
        Convenience constructor (mostly for tests): one string per row, starting at the 8th rank.
        A '.' denotes an empty square.

        ex. "....k..." puts a black king on e8 if it is the first row.
        """
        grid = [
            [EMPTY if character == "." else character for character in row]
            for row in rows
        ]
        return cls.from_grid(grid)

    @classmethod
    def from_grid(cls, grid: object) -> Self:
        """Validate the grid as received over the wire"""
        if not isinstance(grid, list) or len(grid) != BOARD_DIMENSIONS[1]:
            raise StateError(f"Board must have {BOARD_DIMENSIONS[1]} rows.")

        cells: list[list[str]] = []
        for row in grid:
            if not isinstance(row, list) or len(row) != BOARD_DIMENSIONS[0]:
                raise StateError(
                    f"Every board row must have {BOARD_DIMENSIONS[0]} cells, got {row!r}."
                )
            for code in row:
                if not isinstance(code, str):
                    raise StateError(f"Board cell must hold a string, got {code!r}.")
                if code != EMPTY:
                    # raises StateError for unknown codes
                    Piece.from_code(code)
            cells.append(list(row))
        return cls(cells)

    def to_grid(self) -> list[list[str]]:
        return deepcopy(self.grid)

    def copy(self) -> Self:
        return type(self)(self.to_grid())

    def code(self, square: Square) -> str:
        row, col = square.to_index()
        return self.grid[row][col]

    def piece(self, square: Square) -> Optional[Piece]:
        code = self.code(square)
        return Piece.from_code(code) if code else None

    def is_empty(self, square: Square) -> bool:
        return self.code(square) == EMPTY

    def remove_piece(self, square: Square) -> None:
        row, col = square.to_index()
        self.grid[row][col] = EMPTY

    def move_piece(self, from_square: Square, to_square: Square) -> str:
        """
        Update the position on the board.

        Returns the code of the piece that was standing on the target square (empty string if nothing got captured).
        """
        moving = self.code(from_square)
        captured = self.code(to_square)
        self.remove_piece(from_square)
        row, col = to_square.to_index()
        self.grid[row][col] = moving
        return captured
