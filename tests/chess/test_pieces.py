"""Unit tests for /src/chess/pieces.py"""

import pytest

from src.chess.pieces import CODE_TO_PIECE, PIECE_TO_CODE, Piece
from src.core.exceptions import StateError
from src.core.shared_types import Color, PieceType


@pytest.mark.parametrize("char", [char.upper() for char in CODE_TO_PIECE.keys()])
def test_creating_white_piece_from_code(char: str) -> None:
    """Capital letters are used for white pieces"""
    piece = Piece.from_code(char)
    assert piece.type == CODE_TO_PIECE[char.lower()]
    assert piece.color == Color.WHITE


@pytest.mark.parametrize("char", [char.lower() for char in CODE_TO_PIECE.keys()])
def test_creating_black_piece_from_code(char: str) -> None:
    """Lower case letters are used for black pieces"""
    piece = Piece.from_code(char)
    assert piece.type == CODE_TO_PIECE[char.lower()]
    assert piece.color == Color.BLACK


@pytest.mark.parametrize("piece_type", list(PieceType))
def test_white_pieces_to_code(piece_type: PieceType) -> None:
    piece = Piece(piece_type, Color.WHITE)
    assert piece.to_code() == PIECE_TO_CODE[piece_type].upper()


@pytest.mark.parametrize("piece_type", list(PieceType))
def test_black_pieces_to_code(piece_type: PieceType) -> None:
    piece = Piece(piece_type, Color.BLACK)
    assert piece.to_code() == PIECE_TO_CODE[piece_type].lower()


@pytest.mark.parametrize("code", ["", "x", "X", "pp", "1"])
def test_unknown_code(code: str) -> None:
    with pytest.raises(StateError):
        Piece.from_code(code)


def test_enemy_of() -> None:
    white_knight = Piece.from_code("N")
    assert white_knight.is_enemy_of(Color.BLACK)
    assert not white_knight.is_enemy_of(Color.WHITE)
