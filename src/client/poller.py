"""
Poll loop: keeps the predictor in sync with the authoritative state.

After every fetch the next one is scheduled after a delay:
back to the base delay after a success, doubled (up to a maximum) after a failure so a struggling server gets some air.
The loop checks its liveness flag before every reschedule, so once `stop()` is called no further fetch is started.
"""

import logging
import threading
from typing import Callable, Optional

import httpx

from src.chess.game_state import GameState
from src.client.predictor import ClientPredictor
from src.core.config import Settings, get_settings
from src.core.exceptions import GameError

logger = logging.getLogger(__name__)

DEFAULT_BASE_DELAY = 0.5
DEFAULT_MAX_DELAY = 5.0

# Failures the loop backs off on (anything else is a bug and ends the loop)
POLL_ERRORS: tuple[type[Exception], ...] = (httpx.HTTPError, GameError)


class MatchPoller:
    def __init__(
        self,
        fetch: Callable[[], GameState],
        on_state: Callable[[GameState], None],
        base_delay: float = DEFAULT_BASE_DELAY,
        max_delay: float = DEFAULT_MAX_DELAY,
    ) -> None:
        self.fetch = fetch
        self.on_state = on_state
        self.base_delay = base_delay
        self.max_delay = max_delay
        self.delay = base_delay
        self._stopped = threading.Event()
        self._thread: Optional[threading.Thread] = None

    @property
    def is_running(self) -> bool:
        return not self._stopped.is_set()

    def poll_once(self) -> float:
        """One fetch. Returns the delay until the next one."""
        try:
            state = self.fetch()
        except POLL_ERRORS as error:
            self.delay = min(self.delay * 2, self.max_delay)
            logger.warning("poll failed (%s), next attempt in %.1fs", error, self.delay)
            return self.delay

        # torn down while the request was in flight: do not touch the view anymore
        if self.is_running:
            self.on_state(state)
        self.delay = self.base_delay
        return self.delay

    def run(self) -> None:
        """Blocking loop, until `stop()` is called."""
        while self.is_running:
            delay = self.poll_once()
            # wait() returns early (True) as soon as the loop gets stopped
            if self._stopped.wait(delay):
                break

    def start(self) -> None:
        self._thread = threading.Thread(target=self.run, name="match-poller", daemon=True)
        self._thread.start()

    def stop(self, timeout: Optional[float] = None) -> None:
        self._stopped.set()
        if self._thread is not None and self._thread is not threading.current_thread():
            self._thread.join(timeout)


def poll_predictor(
    predictor: ClientPredictor, settings: Optional[Settings] = None
) -> MatchPoller:
    """Poll loop that feeds every authoritative snapshot of the predictor's match into the predictor (not started yet)."""
    settings = settings or get_settings()
    return MatchPoller(
        fetch=lambda: predictor.transport.get_match_state(predictor.match_id),
        on_state=predictor.sync,
        base_delay=settings.poll_base_delay,
        max_delay=settings.poll_max_delay,
    )
