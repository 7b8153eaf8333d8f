"""
Pytest will auto-discover / import this file called 'conftest.py'.
This file defines fixtures/variables required for testing multiple layers.
"""

from typing import Callable, Generator

import pytest
from sqlalchemy import StaticPool, create_engine
from sqlalchemy.orm import Session, sessionmaker

from src.chess.board import Board
from src.chess.game_state import GameState, PlayerSide
from src.core.shared_types import Color
from src.db.schema import Base

WHITE_ID = "player-white"
BLACK_ID = "player-black"

# Setup an in-memory SQLite database for testing
DATABASE_URL = "sqlite:///:memory:"
engine = create_engine(
    DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)

TestingSessionLocal = sessionmaker(autoflush=False, bind=engine)


@pytest.fixture
def db_session_repo() -> Generator[Session, None, None]:
    """Connection to a test database. Tables are removed at teardown to make unit tests of repository independent of each other."""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


def make_players() -> tuple[PlayerSide, PlayerSide]:
    white = PlayerSide(
        player_id=WHITE_ID,
        username="Mocker M. Mockerson",
        time_left=600_000,
        properties={"Id": WHITE_ID, "Attributes": {"rating": 1500}},
    )
    black = PlayerSide(
        player_id=BLACK_ID,
        username="Mock McMock",
        time_left=600_000,
        properties={"Id": BLACK_ID, "Attributes": None},
    )
    return white, black


@pytest.fixture
def new_state() -> GameState:
    """Standard starting position, white to move."""
    white, black = make_players()
    return GameState.new_game(white, black)


@pytest.fixture
def state_with_rows() -> Callable[..., GameState]:
    """Call the inner function with the rows of the board (8th rank first, '.' for empty squares) and whose turn it is."""

    def _create_state(rows: list[str], current_turn: str = "white") -> GameState:
        white, black = make_players()
        state = GameState.new_game(white, black)
        state.board = Board.from_rows(rows)
        state.current_turn = Color(current_turn)
        return state

    return _create_state
