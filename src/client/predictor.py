"""
Client side predictor.
----

Runs the very same rules engine as the server (src.chess.engine), but only to

* highlight the squares the selected piece can move to
* give immediate feedback on an action before the server answered

It never commits anything. Accepted actions are always submitted to the server, and the local state is replaced
(unconditionally) by every authoritative snapshot that comes back, either as the answer to an action or from the poll loop.
"""

import logging
import threading
from dataclasses import dataclass, field
from typing import Optional

from src.api.models import ActionResponse
from src.chess import engine
from src.chess.actions import Action
from src.chess.game_state import GameState
from src.client.transport import Transport, build_action_request
from src.core.exceptions import GameError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Selection:
    """Currently selected square and the destinations highlighted for it."""

    square: Optional[str] = None
    destinations: frozenset[str] = field(default_factory=frozenset)


@dataclass(frozen=True)
class Prediction:
    accepted: bool
    reason: Optional[str] = None


class ClientPredictor:
    def __init__(
        self,
        match_id: str,
        player_id: str,
        transport: Transport,
        state: Optional[GameState] = None,
    ) -> None:
        self.match_id = match_id
        self.player_id = player_id
        self.transport = transport
        self._state = state
        self._selection = Selection()
        # the poll loop syncs from its own thread
        self._lock = threading.RLock()

    @property
    def state(self) -> Optional[GameState]:
        return self._state

    @property
    def selection(self) -> Selection:
        return self._selection

    def is_my_turn(self) -> bool:
        state = self._state
        if state is None or state.is_finished:
            return False
        return state.color_of(self.player_id) == state.current_turn

    # --- AUTHORITATIVE STATE ---
    def sync(self, snapshot: GameState) -> None:
        """Replace the local state with the server's snapshot. Keeps the selection only if it is still a valid choice."""
        with self._lock:
            self._state = snapshot
            if self._selection.square is None:
                return
            destinations = self.highlights(self._selection.square)
            self._select(self._selection.square, destinations)

    # --- PREDICTION ---
    def highlights(self, square: str) -> set[str]:
        """Legal destinations for the piece on the square. Empty when there is nothing (of yours) to move."""
        if self._state is None:
            return set()
        try:
            return engine.legal_moves_for(self._state, self.player_id, square)
        except GameError as error:
            logger.debug("no highlights for %s: %s", square, error)
            return set()

    def predict(self, action: Action) -> Prediction:
        """Would the server accept this action (given the last known state)?"""
        if self._state is None:
            return Prediction(accepted=False, reason="No game state yet.")
        try:
            engine.apply(self._state, action)
        except GameError as error:
            return Prediction(accepted=False, reason=str(error))
        return Prediction(accepted=True)

    # --- ACTIONS ---
    def submit(self, action: Action) -> ActionResponse:
        """
        Predict, then submit to the server.

        Actions the predictor already rejects are not sent: the failure envelope is built locally.
        """
        with self._lock:
            prediction = self.predict(action)
            state = self._state
        if not prediction.accepted:
            logger.info("not submitting %s: %s", action.action_type, prediction.reason)
            return ActionResponse.failure(prediction.reason or "Rejected")

        response = self.transport.submit_action(
            build_action_request(self.match_id, action, state)
        )
        if response.is_success and response.data is not None:
            self.sync(response.data.to_domain())
        else:
            logger.warning("server rejected %s: %s", action.action_type, response.message_text)
        return response

    def click(self, square: str) -> Optional[ActionResponse]:
        """
        Square selection.
        ----

        * not your turn: ignored
        * same square twice: deselect
        * a highlighted destination: move there (selection resets once the server accepted it)
        * anywhere else: select that square if it has moves, otherwise reset

        Returns the server's response if the click resulted in a move.
        """
        with self._lock:
            if not self.is_my_turn():
                return None

            selected = self._selection.square
            if selected is not None and square == selected:
                self._reset()
                return None

            if selected is not None and square in self._selection.destinations:
                move = Action.move(self.player_id, selected, square)
            else:
                self._select(square, self.highlights(square))
                return None

        response = self.submit(move)
        if response.is_success:
            with self._lock:
                self._reset()
        return response

    def resign(self) -> ActionResponse:
        return self.submit(Action.resign(self.player_id))

    def offer_draw(self) -> ActionResponse:
        return self.submit(Action.draw_offer(self.player_id))

    def accept_draw(self) -> ActionResponse:
        return self.submit(Action.draw_accept(self.player_id))

    def decline_draw(self) -> ActionResponse:
        return self.submit(Action.draw_decline(self.player_id))

    # --- SELECTION HELPERS ---
    def _select(self, square: str, destinations: set[str]) -> None:
        if destinations:
            self._selection = Selection(square, frozenset(destinations))
        else:
            self._reset()

    def _reset(self) -> None:
        self._selection = Selection()
