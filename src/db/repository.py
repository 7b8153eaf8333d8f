"""Protocol repository (implemented with SQLAlchemy, mocked with a dictionary in the tests)"""

from typing import Protocol

from src.chess.game_state import GameState


class MatchRepository(Protocol):
    """Persistence layer orchestration"""

    def get_match(self, match_id: str) -> GameState | None:
        """Get the match state by ID, if record exists."""
        ...

    def create_match(self, state: GameState) -> tuple[GameState, str]:
        """Store new match and return the stored state + newly created match ID."""
        ...

    def update_match(self, match_id: str, state: GameState) -> GameState | None:
        """Replace the state of an existing record."""
        ...

    def delete_match(self, match_id: str) -> GameState | None:
        """Remove a match's record."""
        ...
