"""
Type definitions used across layers
"""

from enum import StrEnum


class Color(StrEnum):
    WHITE = "white"
    BLACK = "black"

    @property
    def opponent(self) -> "Color":
        return Color.BLACK if self == Color.WHITE else Color.WHITE


class GameStatus(StrEnum):
    ACTIVE = "active"
    FINISHED = "finished"


class Winner(StrEnum):
    WHITE = "white"
    BLACK = "black"
    DRAW = "draw"


class EndReason(StrEnum):
    RESIGNATION = "resignation"
    DRAW_AGREEMENT = "draw_agreement"


class ActionType(StrEnum):
    MOVE = "move"
    RESIGN = "resign"
    DRAW_OFFER = "draw_offer"
    DRAW_ACCEPT = "draw_accept"
    DRAW_DECLINE = "draw_decline"


class PieceType(StrEnum):
    PAWN = "pawn"
    KNIGHT = "knight"
    BISHOP = "bishop"
    ROOK = "rook"
    QUEEN = "queen"
    KING = "king"
