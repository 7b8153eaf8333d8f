"""Unit tests for src/client/poller.py"""

import threading

import httpx
import pytest

from src.chess.game_state import GameState
from src.client.poller import MatchPoller, poll_predictor
from src.client.predictor import ClientPredictor
from src.core.config import Settings
from src.core.exceptions import StateError


class FlakyFetch:
    """Fails for the given rounds (True = fail), then keeps returning the state."""

    def __init__(self, state: GameState, failures: list[bool]) -> None:
        self.state = state
        self.failures = list(failures)
        self.calls = 0

    def __call__(self) -> GameState:
        self.calls += 1
        if self.failures and self.failures.pop(0):
            raise httpx.ConnectError("server unreachable")
        return self.state


def test_success_keeps_base_delay(new_state: GameState) -> None:
    received: list[GameState] = []
    poller = MatchPoller(FlakyFetch(new_state, []), received.append, base_delay=0.5, max_delay=5)
    assert poller.poll_once() == 0.5
    assert received == [new_state]


def test_failures_back_off_up_to_the_maximum(new_state: GameState) -> None:
    received: list[GameState] = []
    poller = MatchPoller(
        FlakyFetch(new_state, [True] * 6), received.append, base_delay=0.5, max_delay=5
    )
    delays = [poller.poll_once() for _ in range(6)]
    assert delays == [1.0, 2.0, 4.0, 5.0, 5.0, 5.0]
    assert received == []


def test_success_resets_the_delay(new_state: GameState) -> None:
    poller = MatchPoller(FlakyFetch(new_state, [True, True, False]), lambda state: None)
    assert poller.poll_once() == 1.0
    assert poller.poll_once() == 2.0
    assert poller.poll_once() == 0.5


def test_game_errors_also_back_off(new_state: GameState) -> None:
    def fetch() -> GameState:
        raise StateError("Match 'x' not found.")

    poller = MatchPoller(fetch, lambda state: None, base_delay=1, max_delay=3)
    assert poller.poll_once() == 2
    assert poller.poll_once() == 3


def test_unexpected_errors_propagate(new_state: GameState) -> None:
    def fetch() -> GameState:
        raise RuntimeError("bug")

    poller = MatchPoller(fetch, lambda state: None)
    with pytest.raises(RuntimeError):
        poller.poll_once()


def test_no_callback_after_stop(new_state: GameState) -> None:
    """Stopped while the request was in flight: the result is dropped."""
    received: list[GameState] = []
    poller: MatchPoller

    def fetch() -> GameState:
        poller.stop()
        return new_state

    poller = MatchPoller(fetch, received.append)
    poller.poll_once()
    assert received == []
    assert not poller.is_running


def test_run_stops_without_new_fetches(new_state: GameState) -> None:
    fetched = threading.Event()
    fetch = FlakyFetch(new_state, [])

    def on_state(state: GameState) -> None:
        fetched.set()

    poller = MatchPoller(fetch, on_state, base_delay=0.01, max_delay=0.05)
    poller.start()
    assert fetched.wait(2)
    poller.stop(timeout=2)
    calls = fetch.calls
    assert not poller.is_running
    assert poller._thread is not None and not poller._thread.is_alive()
    assert fetch.calls == calls


def test_poll_predictor(new_state: GameState) -> None:
    class StaticTransport:
        def get_match_state(self, match_id: str) -> GameState:
            assert match_id == "match-1"
            return new_state

        def submit_action(self, request):
            raise AssertionError("the poll loop never submits")

    predictor = ClientPredictor("match-1", "player-white", StaticTransport())
    poller = poll_predictor(predictor, Settings(poll_base_delay=0.25, poll_max_delay=2))
    assert poller.base_delay == 0.25
    assert poller.max_delay == 2
    poller.poll_once()
    assert predictor.state == new_state
    assert predictor.is_my_turn()
