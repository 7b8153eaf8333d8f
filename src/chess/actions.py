"""
Actions a player can take during a match.

A single tagged type: `action_type` decides which of the optional fields are required.
"""

from dataclasses import dataclass
from typing import Any, Optional, Self

from src.chess.pieces import PROMOTION_CODES
from src.core.exceptions import ValidationError
from src.core.shared_types import ActionType


@dataclass(frozen=True)
class Action:
    action_type: ActionType
    player_id: str
    from_square: Optional[str] = None
    to_square: Optional[str] = None
    promotion: Optional[str] = None

    def __post_init__(self) -> None:
        if not self.player_id:
            raise ValidationError("Missing required field: playerId")

        if self.action_type == ActionType.MOVE:
            if not self.from_square:
                raise ValidationError("Missing required field: from")
            if not self.to_square:
                raise ValidationError("Missing required field: to")

        if self.promotion is not None and self.promotion.lower() not in PROMOTION_CODES:
            raise ValidationError(
                f"Cannot promote into {self.promotion!r}. Pick one from {','.join(PROMOTION_CODES)}"
            )

    # -- CONSTRUCTORS --
    @classmethod
    def move(
        cls,
        player_id: str,
        from_square: str,
        to_square: str,
        promotion: Optional[str] = None,
    ) -> Self:
        return cls(ActionType.MOVE, player_id, from_square, to_square, promotion)

    @classmethod
    def resign(cls, player_id: str) -> Self:
        return cls(ActionType.RESIGN, player_id)

    @classmethod
    def draw_offer(cls, player_id: str) -> Self:
        return cls(ActionType.DRAW_OFFER, player_id)

    @classmethod
    def draw_accept(cls, player_id: str) -> Self:
        return cls(ActionType.DRAW_ACCEPT, player_id)

    @classmethod
    def draw_decline(cls, player_id: str) -> Self:
        return cls(ActionType.DRAW_DECLINE, player_id)

    # -- WIRE FORMAT --
    @classmethod
    def from_payload(cls, player_id: str, payload: dict[str, Any]) -> Self:
        """`{actionType, from?, to?, promotion?}` as the client submits it."""
        raw_type = payload.get("actionType")
        if raw_type is None:
            raise ValidationError("Missing required field: actionType")
        try:
            action_type = ActionType(raw_type)
        except ValueError:
            raise ValidationError(f"Invalid action type: {raw_type!r}") from None

        return cls(
            action_type=action_type,
            player_id=player_id,
            from_square=payload.get("from"),
            to_square=payload.get("to"),
            promotion=payload.get("promotion"),
        )

    def to_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"actionType": self.action_type.value}
        if self.from_square is not None:
            payload["from"] = self.from_square
        if self.to_square is not None:
            payload["to"] = self.to_square
        if self.promotion is not None:
            payload["promotion"] = self.promotion
        return payload
