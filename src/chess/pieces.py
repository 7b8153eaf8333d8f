"""Defines the chess pieces and their single-letter codes"""

from dataclasses import dataclass
from typing import Self

from src.core.exceptions import StateError
from src.core.shared_types import Color, PieceType

CODE_TO_PIECE: dict[str, PieceType] = {
    "p": PieceType.PAWN,
    "n": PieceType.KNIGHT,
    "b": PieceType.BISHOP,
    "r": PieceType.ROOK,
    "q": PieceType.QUEEN,
    "k": PieceType.KING,
}

PIECE_TO_CODE: dict[PieceType, str] = {value: key for key, value in CODE_TO_PIECE.items()}

# Pieces a pawn may ask to be promoted into (the request is accepted, but never applied to the board)
PROMOTION_CODES: tuple[str, ...] = ("q", "r", "b", "n")


@dataclass(frozen=True)
class Piece:
    type: PieceType
    color: Color

    @classmethod
    def from_code(cls, character: str) -> Self:
        # upper case: White pieces, lower case: Black pieces
        if len(character) != 1 or character.lower() not in CODE_TO_PIECE:
            raise StateError(f"Unknown piece code: {character!r}")
        color = Color.WHITE if character.isupper() else Color.BLACK
        piece_type = CODE_TO_PIECE[character.lower()]
        return cls(piece_type, color)

    def to_code(self) -> str:
        return (
            PIECE_TO_CODE[self.type].upper()
            if self.color == Color.WHITE
            else PIECE_TO_CODE[self.type]
        )

    def is_enemy_of(self, color: Color) -> bool:
        return self.color != color
