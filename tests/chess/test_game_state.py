"""Unit tests for /src/chess/game_state.py"""

from copy import deepcopy

import pytest

from src.chess.board import Board
from src.chess.game_state import GameState, LastMove, MatchRules, PlayerSide
from src.core.exceptions import StateError
from src.core.shared_types import Color, EndReason, GameStatus, Winner


def test_new_game(new_state: GameState) -> None:
    """Starting position, white to move, empty history, both clocks at the initial time."""
    assert new_state.board == Board.starting_position()
    assert new_state.current_turn == Color.WHITE
    assert new_state.move_history == []
    assert new_state.last_move is None
    assert new_state.game_status == GameStatus.ACTIVE
    assert new_state.winner is None
    assert new_state.end_reason is None
    assert new_state.draw_offer is None
    assert new_state.players[Color.WHITE].time_left == 600_000
    assert new_state.players[Color.BLACK].captured_pieces == []


def test_new_game_uses_time_control() -> None:
    white = PlayerSide("w", "white player", time_left=1)
    black = PlayerSide("b", "black player", time_left=1)
    state = GameState.new_game(white, black, MatchRules(initial_time_ms=180_000))
    assert state.players[Color.WHITE].time_left == 180_000
    assert state.players[Color.BLACK].time_left == 180_000


def test_new_game_keeps_the_rules() -> None:
    """Increment, tick rate and game mode travel with the match state."""
    rules = MatchRules(initial_time_ms=180_000, increment_ms=2000, tick_rate=10, game_mode="blitz")
    white = PlayerSide("w", "white player", time_left=1)
    black = PlayerSide("b", "black player", time_left=1)
    state = GameState.new_game(white, black, rules)
    assert state.rules == rules
    assert state.to_dict()["rules"] == {
        "timeControl": {"initial": 180_000, "increment": 2000},
        "tickRate": 10,
        "gameMode": "blitz",
    }
    assert GameState.from_dict(state.to_dict()).rules == rules


def test_state_without_rules_gets_the_defaults(new_state: GameState) -> None:
    data = new_state.to_dict()
    del data["rules"]
    assert GameState.from_dict(data).rules == MatchRules()


def test_color_of(new_state: GameState) -> None:
    assert new_state.color_of("player-white") == Color.WHITE
    assert new_state.color_of("player-black") == Color.BLACK
    assert new_state.color_of("someone else") is None


def test_wire_format(new_state: GameState) -> None:
    data = new_state.to_dict()
    assert set(data) == {
        "board",
        "players",
        "currentTurn",
        "lastMove",
        "moveHistory",
        "gameStatus",
        "winner",
        "endReason",
        "drawOffer",
        "rules",
    }
    assert data["currentTurn"] == "white"
    assert data["gameStatus"] == "active"
    assert data["board"][7][4] == "K"
    assert data["board"][3][3] == ""
    assert data["players"]["white"]["playerId"] == "player-white"
    assert set(data["players"]["black"]) == {
        "playerId",
        "username",
        "timeLeft",
        "capturedPieces",
        "properties",
    }


def test_encode_decode_finished_game(new_state: GameState) -> None:
    state = new_state
    state.game_status = GameStatus.FINISHED
    state.winner = Winner.DRAW
    state.end_reason = EndReason.DRAW_AGREEMENT
    state.last_move = LastMove("e7", "e5", captured=True)
    state.move_history = ["Pe2-e4", "pe7-e5"]
    state.players[Color.WHITE].captured_pieces = ["p"]

    decoded = GameState.from_dict(state.to_dict())
    assert decoded == state


def test_profile_is_passed_through_untouched(new_state: GameState) -> None:
    """The profile blob is opaque: whatever is in it comes out again."""
    data = new_state.to_dict()
    data["players"]["white"]["properties"] = {
        "Id": "player-white",
        "User": None,
        "Attributes": {"nested": [1, 2, {"deep": True}]},
        "AuthProvider": 3,
    }
    expected = deepcopy(data["players"]["white"]["properties"])
    decoded = GameState.from_dict(data)
    assert decoded.players[Color.WHITE].properties == expected
    assert decoded.to_dict()["players"]["white"]["properties"] == expected


def test_empty_strings_decode_as_none(new_state: GameState) -> None:
    data = new_state.to_dict()
    data["drawOffer"] = ""
    data["winner"] = ""
    decoded = GameState.from_dict(data)
    assert decoded.draw_offer is None
    assert decoded.winner is None


def test_copy_is_independent(new_state: GameState) -> None:
    copied = new_state.copy()
    copied.move_history.append("Pe2-e4")
    copied.players[Color.WHITE].captured_pieces.append("p")
    assert new_state.move_history == []
    assert new_state.players[Color.WHITE].captured_pieces == []


def _without(key: str):
    def _mutate(data: dict) -> None:
        del data[key]

    return _mutate


def _set(key: str, value: object):
    def _mutate(data: dict) -> None:
        data[key] = value

    return _mutate


def _drop_black(data: dict) -> None:
    del data["players"]["black"]


def _drop_player_id(data: dict) -> None:
    del data["players"]["white"]["playerId"]


@pytest.mark.parametrize(
    "mutate",
    [
        _without("board"),
        _without("players"),
        _set("board", [["x"] * 8] * 8),
        _set("currentTurn", "green"),
        _set("gameStatus", "paused"),
        _set("winner", "nobody"),
        _set("lastMove", {"to": "e4"}),
        _set("rules", "blitz"),
        _set("rules", {"tickRate": "fast"}),
        _drop_black,
        _drop_player_id,
    ],
)
def test_garbled_state(new_state: GameState, mutate) -> None:
    data = new_state.to_dict()
    mutate(data)
    with pytest.raises(StateError):
        GameState.from_dict(data)


@pytest.mark.parametrize("data", [None, "state", [], 42])
def test_missing_state(data: object) -> None:
    with pytest.raises(StateError):
        GameState.from_dict(data)
