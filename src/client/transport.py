"""
How the client talks to the server.

The predictor and the poll loop only need the two calls of the `Transport` protocol,
so tests can hand them an in-process implementation instead of HTTP.
"""

from typing import Protocol

import httpx

from src.api.models import ActionBody, ActionRequest, ActionResponse
from src.chess.actions import Action
from src.chess.game_state import GameState
from src.core.config import get_settings
from src.core.exceptions import StateError


class Transport(Protocol):
    def get_match_state(self, match_id: str) -> GameState: ...
    def submit_action(self, request: ActionRequest) -> ActionResponse: ...


def build_action_request(
    match_id: str, action: Action, state: GameState | None = None
) -> ActionRequest:
    """Action payload as the server expects it: `{matchId, playerId, action, state}`"""
    return ActionRequest(
        match_id=match_id,
        player_id=action.player_id,
        action=ActionBody.model_validate(action.to_payload()),
        state=state.to_dict() if state is not None else None,
    )


class HttpTransport:
    """Transport over HTTP. Every call carries a bounded timeout: nothing here blocks indefinitely."""

    def __init__(
        self,
        base_url: str,
        timeout: float | None = None,
        client: httpx.Client | None = None,
    ) -> None:
        timeout = timeout if timeout is not None else get_settings().http_timeout
        self.client = client or httpx.Client(base_url=base_url, timeout=timeout)

    def get_match_state(self, match_id: str) -> GameState:
        response = self.client.get(f"/matches/{match_id}/state")
        response.raise_for_status()
        envelope = ActionResponse.model_validate(response.json())
        if not envelope.is_success or envelope.data is None:
            raise StateError(envelope.message_text or f"No state for match {match_id!r}.")
        return envelope.data.to_domain()

    def submit_action(self, request: ActionRequest) -> ActionResponse:
        response = self.client.post(
            f"/matches/{request.match_id}/actions",
            json=request.model_dump(by_alias=True, exclude_none=True),
        )
        # rejected actions come back as an envelope, also on a 400
        if response.status_code not in (200, 400):
            response.raise_for_status()
        return ActionResponse.model_validate(response.json())

    def close(self) -> None:
        self.client.close()
