"""Implementation of (Match)Repository using SQLAlchemy"""

from uuid import uuid4

from sqlalchemy import select
from sqlalchemy.orm import Session

from src.chess.game_state import GameState
from src.db.schema import DBMatch


class SQLMatchRepository:
    """Data stored using SQL / methods implemented using SQLAlchemy"""

    def __init__(self, db_session: Session) -> None:
        self.db = db_session

    def get_match(self, match_id: str) -> GameState | None:
        """Get the match state by ID, if record exists."""
        match_db = self._fetch_match(match_id)
        if match_db:
            return self._to_state(match_db)
        return None

    def create_match(self, state: GameState) -> tuple[GameState, str]:
        """Store new match and return the stored state + newly created match ID."""

        new_id = str(uuid4())
        match_db = DBMatch(
            id=new_id,
            state=state.to_dict(),
            game_status=state.game_status.value,
            winner=state.winner.value if state.winner else None,
        )
        self.db.add(match_db)
        self.db.commit()
        self.db.refresh(match_db)
        return self._to_state(match_db), new_id

    def update_match(self, match_id: str, state: GameState) -> GameState | None:
        """Replace the state of an existing record."""
        match_db = self._fetch_match(match_id)
        if not match_db:
            return None
        match_db.state = state.to_dict()
        match_db.game_status = state.game_status.value
        match_db.winner = state.winner.value if state.winner else None
        self.db.commit()
        self.db.refresh(match_db)
        return self._to_state(match_db)

    def delete_match(self, match_id: str) -> GameState | None:
        """Remove a match's record."""
        match_db = self._fetch_match(match_id)
        if not match_db:
            return None
        state = self._to_state(match_db)
        self.db.delete(match_db)
        self.db.commit()
        return state

    def _fetch_match(self, match_id: str) -> DBMatch | None:
        query = select(DBMatch).where(DBMatch.id == match_id)
        return self.db.scalar(query)

    def _to_state(self, match_db: DBMatch) -> GameState:
        """Convert SQLAlchemy model to the domain state (raises StateError if the stored JSON got garbled)."""
        return GameState.from_dict(match_db.state)
