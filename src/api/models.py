"""Requests and Response models"""

from datetime import datetime
from typing import Any, Generic, Optional, Self, TypeVar

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from src.chess.game_state import DEFAULT_GAME_MODE, GameState, MatchRules, PlayerSide
from src.core.config import get_settings
from src.core.exceptions import InvalidRequestError
from src.core.shared_types import Color, EndReason, GameStatus, Winner

DataT = TypeVar("DataT")


class WireModel(BaseModel):
    """The clients speak camelCase. Python code keeps using snake_case field names."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# --- MATCH RULES ---
class TimeControl(WireModel):
    initial: int = Field(default_factory=lambda: get_settings().default_time_ms, gt=0)
    increment: int = Field(default=0, ge=0)


class RulesSchema(WireModel):
    time_control: TimeControl = Field(default_factory=TimeControl)
    tick_rate: int = Field(default_factory=lambda: get_settings().default_tick_rate, gt=0)
    game_mode: str = DEFAULT_GAME_MODE

    def to_domain(self) -> MatchRules:
        return MatchRules(
            initial_time_ms=self.time_control.initial,
            increment_ms=self.time_control.increment,
            tick_rate=self.tick_rate,
            game_mode=self.game_mode,
        )


# --- GAME STATE ---
class PlayerSideSchema(WireModel):
    player_id: str
    username: str = ""
    time_left: int
    captured_pieces: list[str] = []
    properties: dict[str, Any] = {}


class LastMoveSchema(WireModel):
    from_square: str = Field(alias="from")
    to_square: str = Field(alias="to")
    captured: bool


class GameStateSchema(WireModel):
    board: list[list[str]]
    players: dict[Color, PlayerSideSchema]
    current_turn: Color
    last_move: Optional[LastMoveSchema] = None
    move_history: list[str] = []
    game_status: GameStatus
    winner: Optional[Winner] = None
    end_reason: Optional[EndReason] = None
    draw_offer: Optional[Color] = None
    rules: RulesSchema = Field(default_factory=RulesSchema)

    @classmethod
    def from_domain(cls, state: GameState) -> Self:
        return cls.model_validate(state.to_dict())

    def to_domain(self) -> GameState:
        return GameState.from_dict(self.model_dump(mode="json", by_alias=True))


# --- REQUEST MODELS ---
class ActionBody(WireModel):
    """
    The action itself. `action_type` is kept as a plain string:
    an unknown type is a rejected action (in the response envelope), not a malformed request.
    """

    action_type: str
    from_square: Optional[str] = Field(default=None, alias="from")
    to_square: Optional[str] = Field(default=None, alias="to")
    promotion: Optional[str] = None

    def to_payload(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)


class ActionRequest(WireModel):
    match_id: str
    player_id: str
    action: ActionBody
    # Clients echo back the state they based their action on. The server never trusts it.
    state: Optional[dict[str, Any]] = None


class CreateMatchRequest(WireModel):
    """
    Two player profiles (first one plays white) and the rules.

    A profile needs an `Id` (or `playerId`). Everything in it is kept as the player's opaque `properties`.
    """

    players: list[dict[str, Any]]
    rules: RulesSchema = Field(default_factory=RulesSchema)

    @field_validator("players")
    @classmethod
    def validate_players(cls, value: list[dict[str, Any]]) -> list[dict[str, Any]]:
        if len(value) != 2:
            raise InvalidRequestError(
                f"A chess match needs exactly 2 players, got {len(value)}."
            )
        for profile in value:
            if not (profile.get("Id") or profile.get("playerId")):
                raise InvalidRequestError(f"Player profile without an Id: {profile!r}")

        ids = [profile.get("Id") or profile.get("playerId") for profile in value]
        if ids[0] == ids[1]:
            raise InvalidRequestError("A player cannot play against themselves.")
        return value

    def player_sides(self) -> tuple[PlayerSide, PlayerSide]:
        white, black = (
            PlayerSide(
                player_id=str(profile.get("Id") or profile.get("playerId")),
                username=str(profile.get("username") or profile.get("Username") or ""),
                time_left=self.rules.time_control.initial,
                properties=dict(profile),
            )
            for profile in self.players
        )
        return white, black


class TicketSchema(WireModel):
    id: str
    rating: float = 1500
    created_at: Optional[datetime] = None


class PairingRequest(WireModel):
    tickets: list[TicketSchema] = []


# --- RESPONSE MODELS ---
class Envelope(WireModel, Generic[DataT]):
    """`{isSuccess, data, messageText}`: every answer of the server is wrapped in one of these."""

    is_success: bool
    data: Optional[DataT] = None
    message_text: Optional[str] = None

    @classmethod
    def success(cls, data: DataT) -> Self:
        return cls(is_success=True, data=data, message_text=None)

    @classmethod
    def failure(cls, message: str) -> Self:
        return cls(is_success=False, data=None, message_text=message)


class MatchCreated(WireModel):
    match_id: str
    state: GameStateSchema


class LegalMoves(WireModel):
    match_id: str
    player_id: str
    square: str
    legal_moves: list[str]


ActionResponse = Envelope[GameStateSchema]
