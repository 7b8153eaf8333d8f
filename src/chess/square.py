"""
A square on the board, and the conversion between square labels and board indices.

(placed in its own module as multiple other modules need to import it)

Board indices follow the layout of the grid that gets sent over the wire:
row 0 is the 8th rank (black's back rank), row 7 is the 1st rank (white's back rank).
So `row = 8 - rank` and `col = file - 1`.
"""

from __future__ import annotations

from dataclasses import dataclass

from src.core.exceptions import InvalidSquareError

# Chess board is always 8x8. Just in case we want to try some funky stuff, make it adjustable
BOARD_DIMENSIONS = (8, 8)

FILES = "abcdefgh"
RANKS = "12345678"


@dataclass(frozen=True)
class Square:
    file: int
    rank: int

    @classmethod
    def from_algebraic(cls, sq: str) -> Square:
        """Algebraic notation: 'a1' - 'h8' get converted to (1,1) - (8,8)"""
        if not isinstance(sq, str) or len(sq) != 2:
            raise InvalidSquareError(
                f"Square must be exactly two characters (file + rank), got {sq!r}."
            )

        file_char, rank_char = sq[0], sq[1]
        if file_char not in FILES[: BOARD_DIMENSIONS[0]]:
            raise InvalidSquareError(f"File {file_char!r} of square {sq!r} not in a-h.")
        if rank_char not in RANKS[: BOARD_DIMENSIONS[1]]:
            raise InvalidSquareError(f"Rank {rank_char!r} of square {sq!r} not in 1-8.")

        file = ord(file_char) - ord("a") + 1
        rank = RANKS.index(rank_char) + 1
        return cls(file, rank)

    def to_algebraic(self) -> str:
        return f"{chr(self.file + ord('a') - 1)}{self.rank}"

    @classmethod
    def from_index(cls, row: int, col: int) -> Square:
        """Inverse of `to_index`"""
        square = cls(file=col + 1, rank=BOARD_DIMENSIONS[1] - row)
        if not square.is_within_bounds():
            raise InvalidSquareError(f"Board index ({row}, {col}) is off the board.")
        return square

    def to_index(self) -> tuple[int, int]:
        """(row, col) of this square in the board grid"""
        return BOARD_DIMENSIONS[1] - self.rank, self.file - 1

    def is_within_bounds(self) -> bool:
        return (1 <= self.file <= BOARD_DIMENSIONS[0]) and (
            1 <= self.rank <= BOARD_DIMENSIONS[1]
        )

    def offset(self, df: int, dr: int) -> Square:
        """Square found by stepping along a direction. Can end up off the board: check `is_within_bounds()`"""
        return Square(self.file + df, self.rank + dr)


def square_to_index(square: str) -> tuple[int, int]:
    """'e2' -> (6, 4)"""
    return Square.from_algebraic(square).to_index()


def index_to_square(row: int, col: int) -> str:
    """(6, 4) -> 'e2'"""
    return Square.from_index(row, col).to_algebraic()
