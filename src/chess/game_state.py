"""
Canonical state of a single match, and how it is encoded for the wire / the database.

The wire format is a JSON object with camelCase keys (see `GameState.to_dict()`).
Anything that cannot be decoded into a consistent GameState raises a StateError.
"""

from copy import deepcopy
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any, Optional, Self

from src.chess.board import Board
from src.core.exceptions import StateError
from src.core.shared_types import Color, EndReason, GameStatus, Winner

DEFAULT_TIME_MS = 600_000
DEFAULT_TICK_RATE = 1
DEFAULT_GAME_MODE = "standard"


@dataclass
class PlayerSide:
    player_id: str
    username: str
    time_left: int
    captured_pieces: list[str] = field(default_factory=list)
    # Opaque profile blob: never inspected, passed through as is
    properties: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Any) -> Self:
        if not isinstance(data, dict):
            raise StateError(f"Player side must be an object, got {data!r}.")
        try:
            return cls(
                player_id=str(data["playerId"]),
                username=str(data.get("username", "")),
                time_left=int(data.get("timeLeft", DEFAULT_TIME_MS)),
                captured_pieces=list(data.get("capturedPieces", [])),
                properties=deepcopy(data.get("properties") or {}),
            )
        except (KeyError, TypeError, ValueError) as error:
            raise StateError(f"Garbled player side: {error}") from error

    def to_dict(self) -> dict[str, Any]:
        return {
            "playerId": self.player_id,
            "username": self.username,
            "timeLeft": self.time_left,
            "capturedPieces": list(self.captured_pieces),
            "properties": deepcopy(self.properties),
        }


@dataclass(frozen=True)
class LastMove:
    from_square: str
    to_square: str
    captured: bool

    def to_dict(self) -> dict[str, Any]:
        return {"from": self.from_square, "to": self.to_square, "captured": self.captured}


@dataclass(frozen=True)
class MatchRules:
    """Rules object handed over by the platform when a match gets created."""

    initial_time_ms: int = DEFAULT_TIME_MS
    increment_ms: int = 0
    tick_rate: int = DEFAULT_TICK_RATE
    game_mode: str = DEFAULT_GAME_MODE

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Self:
        time_control = data.get("timeControl") or {}
        return cls(
            initial_time_ms=int(time_control.get("initial", DEFAULT_TIME_MS)),
            increment_ms=int(time_control.get("increment", 0)),
            tick_rate=int(data.get("tickRate", DEFAULT_TICK_RATE)),
            game_mode=str(data.get("gameMode", DEFAULT_GAME_MODE)),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "timeControl": {"initial": self.initial_time_ms, "increment": self.increment_ms},
            "tickRate": self.tick_rate,
            "gameMode": self.game_mode,
        }


@dataclass
class GameState:
    board: Board
    players: dict[Color, PlayerSide]
    current_turn: Color = Color.WHITE
    last_move: Optional[LastMove] = None
    move_history: list[str] = field(default_factory=list)
    game_status: GameStatus = GameStatus.ACTIVE
    winner: Optional[Winner] = None
    end_reason: Optional[EndReason] = None
    draw_offer: Optional[Color] = None
    # kept with the match for the clients: the server does not run the clocks
    rules: MatchRules = field(default_factory=MatchRules)

    @classmethod
    def new_game(
        cls,
        white: PlayerSide,
        black: PlayerSide,
        rules: Optional[MatchRules] = None,
    ) -> Self:
        """Standard starting position, white to move, both clocks at the initial time."""
        rules = rules or MatchRules()
        for side in (white, black):
            side.time_left = rules.initial_time_ms
            side.captured_pieces = []
        return cls(
            board=Board.starting_position(),
            players={Color.WHITE: white, Color.BLACK: black},
            rules=rules,
        )

    # --- PLAYERS ---
    def color_of(self, player_id: str) -> Optional[Color]:
        """Which color the player is playing with (None if not part of this match)."""
        for color, side in self.players.items():
            if side.player_id == player_id:
                return color
        return None

    @property
    def is_finished(self) -> bool:
        return self.game_status == GameStatus.FINISHED

    def copy(self) -> Self:
        return deepcopy(self)

    # --- ENCODING / DECODING ---
    @classmethod
    def from_dict(cls, data: Any) -> Self:
        if not isinstance(data, dict):
            raise StateError("Invalid game state")

        try:
            raw_players = data["players"]
            board = Board.from_grid(data["board"])
            players = {
                color: PlayerSide.from_dict(raw_players[color.value]) for color in Color
            }
            raw_last_move = data.get("lastMove")
            last_move = (
                LastMove(
                    from_square=raw_last_move["from"],
                    to_square=raw_last_move["to"],
                    captured=bool(raw_last_move.get("captured", False)),
                )
                if raw_last_move
                else None
            )
            return cls(
                board=board,
                players=players,
                current_turn=Color(data.get("currentTurn", Color.WHITE)),
                last_move=last_move,
                move_history=list(data.get("moveHistory", [])),
                game_status=GameStatus(data.get("gameStatus", GameStatus.ACTIVE)),
                winner=_optional(Winner, data.get("winner")),
                end_reason=_optional(EndReason, data.get("endReason")),
                draw_offer=_optional(Color, data.get("drawOffer")),
                rules=MatchRules.from_dict(data.get("rules") or {}),
            )
        except (AttributeError, KeyError, TypeError, ValueError) as error:
            raise StateError(f"Invalid game state: {error}") from error

    def to_dict(self) -> dict[str, Any]:
        return {
            "board": self.board.to_grid(),
            "players": {color.value: side.to_dict() for color, side in self.players.items()},
            "currentTurn": self.current_turn.value,
            "lastMove": self.last_move.to_dict() if self.last_move else None,
            "moveHistory": list(self.move_history),
            "gameStatus": self.game_status.value,
            "winner": self.winner.value if self.winner else None,
            "endReason": self.end_reason.value if self.end_reason else None,
            "drawOffer": self.draw_offer.value if self.draw_offer else None,
            "rules": self.rules.to_dict(),
        }


def _optional(enum_cls: type[StrEnum], value: Any) -> Any:
    # clients send empty strings as well as nulls
    if value in (None, ""):
        return None
    return enum_cls(value)
