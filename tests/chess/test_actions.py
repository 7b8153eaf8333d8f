"""Unit tests for /src/chess/actions.py"""

import pytest

from src.chess.actions import Action
from src.core.exceptions import ValidationError
from src.core.shared_types import ActionType


def test_move_from_payload() -> None:
    action = Action.from_payload(
        "player-white", {"actionType": "move", "from": "e2", "to": "e4"}
    )
    assert action == Action.move("player-white", "e2", "e4")
    assert action.promotion is None


@pytest.mark.parametrize(
    "action_type",
    [ActionType.RESIGN, ActionType.DRAW_OFFER, ActionType.DRAW_ACCEPT, ActionType.DRAW_DECLINE],
)
def test_non_move_actions_need_no_squares(action_type: ActionType) -> None:
    action = Action.from_payload("player-black", {"actionType": action_type.value})
    assert action.action_type == action_type
    assert action.from_square is None and action.to_square is None


@pytest.mark.parametrize(
    "payload",
    [
        {"actionType": "move", "to": "e4"},
        {"actionType": "move", "from": "e2"},
        {"actionType": "move", "from": "", "to": "e4"},
        {"from": "e2", "to": "e4"},
        {"actionType": "castle"},
        {"actionType": "move", "from": "e7", "to": "e8", "promotion": "k"},
    ],
)
def test_invalid_payloads(payload: dict) -> None:
    with pytest.raises(ValidationError):
        Action.from_payload("player-white", payload)


def test_missing_player() -> None:
    with pytest.raises(ValidationError):
        Action.resign("")


def test_payload_roundtrip_keeps_wire_names() -> None:
    action = Action.move("player-white", "e7", "e8", promotion="q")
    assert action.to_payload() == {
        "actionType": "move",
        "from": "e7",
        "to": "e8",
        "promotion": "q",
    }
    assert Action.resign("player-white").to_payload() == {"actionType": "resign"}
