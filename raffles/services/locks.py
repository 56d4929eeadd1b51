"""Per-raffle mutual exclusion.

Draw, redraw and confirm each read the eligible set, the redraw counter and
the draw log length before writing derived state, so at most one of them may
run per raffle at a time. Different raffles never block each other.
"""

import threading
import weakref
from collections.abc import Iterator
from contextlib import contextmanager

from raffles.domain import RaffleId


class RaffleBusyError(TimeoutError):
    """Another operation held the raffle for longer than the timeout."""

    def __init__(self, raffle_id: RaffleId, timeout: float) -> None:
        super().__init__(f"Raffle {raffle_id} is busy (waited {timeout}s)")
        self.raffle_id = raffle_id
        self.timeout = timeout


class RaffleLocks:
    def __init__(self) -> None:
        self._guard = threading.Lock()
        self._locks: weakref.WeakValueDictionary[RaffleId, threading.Lock] = (
            weakref.WeakValueDictionary()
        )

    def _lock_for(self, raffle_id: RaffleId) -> threading.Lock:
        with self._guard:
            lock = self._locks.get(raffle_id)
            if lock is None:
                lock = threading.Lock()
                self._locks[raffle_id] = lock
            return lock

    @contextmanager
    def hold(self, raffle_id: RaffleId, timeout: float | None = None) -> Iterator[None]:
        lock = self._lock_for(raffle_id)
        if not lock.acquire(timeout=-1 if timeout is None else timeout):
            raise RaffleBusyError(raffle_id, timeout)
        try:
            yield
        finally:
            lock.release()
