"""One lock per match: all reads-modify-writes of a match's state are serialized, different matches run in parallel."""

import threading
import weakref
from contextlib import contextmanager
from typing import Iterator


class MatchLocks:
    def __init__(self) -> None:
        # a lock lives as long as someone holds or waits for it, finished matches do not pile up
        self._locks: weakref.WeakValueDictionary[str, threading.Lock] = (
            weakref.WeakValueDictionary()
        )
        # guards the dictionary itself, never held while a match is being updated
        self._registry_lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._locks)

    def lock_for(self, match_id: str) -> threading.Lock:
        with self._registry_lock:
            lock = self._locks.get(match_id)
            if lock is None:
                lock = threading.Lock()
                self._locks[match_id] = lock
            return lock

    @contextmanager
    def hold(self, match_id: str) -> Iterator[None]:
        with self.lock_for(match_id):
            yield

    def discard(self, match_id: str) -> None:
        """Forget the lock of a match that got deleted."""
        with self._registry_lock:
            self._locks.pop(match_id, None)
