"""Orchestration of communication from API router to business logic and persistence layers (and the reverse direction)."""

import logging

from src.api.models import (
    ActionRequest,
    ActionResponse,
    CreateMatchRequest,
    Envelope,
    GameStateSchema,
    LegalMoves,
    MatchCreated,
    PairingRequest,
)
from src.chess import engine
from src.chess.actions import Action
from src.chess.game_state import GameState
from src.core.exceptions import GameError, InvalidRequestError, StateError
from src.db.repository import MatchRepository
from src.services.locks import MatchLocks
from src.services.matchmaker import Ticket, pair_tickets

logger = logging.getLogger(__name__)


class MatchService:
    """
    Orchestration of layers for a chess match.

    The stored state is the only source of truth: every action is re-validated from scratch against it,
    while holding the match's lock.
    """

    def __init__(self, repository: MatchRepository, locks: MatchLocks) -> None:
        self.repo = repository
        self.locks = locks

    # -- API routes logic ---
    def create_match(self, request: CreateMatchRequest) -> Envelope[MatchCreated]:
        """Both players got paired: set up the board in the starting position."""
        white, black = request.player_sides()
        new_state = GameState.new_game(white, black, request.rules.to_domain())

        stored_state, match_id = self.repo.create_match(new_state)
        logger.info(
            "created match %s: %s (white) vs %s (black)",
            match_id,
            white.player_id,
            black.player_id,
        )
        return Envelope[MatchCreated].success(
            MatchCreated(match_id=match_id, state=GameStateSchema.from_domain(stored_state))
        )

    def get_match_state(self, match_id: str) -> ActionResponse:
        """
        Retrieve current game state.
        ----
        Used in "polling" loop by the clients.
        """
        try:
            state = self._fetch_match(match_id)
        except GameError as error:
            return ActionResponse.failure(str(error))
        return ActionResponse.success(GameStateSchema.from_domain(state))

    def submit_action(self, request: ActionRequest) -> ActionResponse:
        """
        Apply a player's action to the canonical state.

        Rejections come back in the envelope (isSuccess = false) and leave the stored state untouched.
        """
        with self.locks.hold(request.match_id):
            try:
                state = self._fetch_match(request.match_id)
                action = Action.from_payload(request.player_id, request.action.to_payload())
                next_state = engine.apply(state, action)
            except GameError as error:
                logger.warning(
                    "rejected %s by %s in match %s: %s",
                    request.action.action_type,
                    request.player_id,
                    request.match_id,
                    error,
                )
                return ActionResponse.failure(str(error))

            stored_state = self.repo.update_match(request.match_id, next_state)
            if stored_state is None:
                # deleted while we were validating
                return ActionResponse.failure(f"Match {request.match_id!r} not found.")

        return ActionResponse.success(GameStateSchema.from_domain(stored_state))

    def legal_moves(self, match_id: str, player_id: str, square: str) -> Envelope[LegalMoves]:
        """Destinations to highlight for the piece on the square (read-only)."""
        try:
            state = self._fetch_match(match_id)
            destinations = engine.legal_moves_for(state, player_id, square)
        except GameError as error:
            return Envelope[LegalMoves].failure(str(error))

        return Envelope[LegalMoves].success(
            LegalMoves(
                match_id=match_id,
                player_id=player_id,
                square=square,
                legal_moves=sorted(destinations),
            )
        )

    def delete_match(self, match_id: str) -> None:
        """Handle a request to delete a match record."""
        with self.locks.hold(match_id):
            self.repo.delete_match(match_id)
        self.locks.discard(match_id)

    def pair_players(self, request: PairingRequest) -> Envelope[list[tuple[str, str]]]:
        """Matchmaking: which of the waiting tickets should play each other."""
        tickets = [
            Ticket(id=ticket.id, rating=ticket.rating, created_at=ticket.created_at)
            for ticket in request.tickets
        ]
        return Envelope[list[tuple[str, str]]].success(pair_tickets(tickets))

    # -- Internal helpers --
    def _fetch_match(self, match_id: str) -> GameState:
        """Attempt to find the match in the repository and raise error if it fails."""
        if not match_id:
            raise InvalidRequestError("Missing required field: matchId")
        state = self.repo.get_match(match_id)
        if state is None:
            raise StateError(f"Match {match_id!r} not found.")
        return state
