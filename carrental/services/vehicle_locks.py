"""Per-vehicle mutual exclusion."""

import threading
from contextlib import contextmanager
from typing import Dict, Iterator


class VehicleLocks:
    """
    Registry of one re-entrant lock per vehicle ID.

    Holding a vehicle's lock serializes every read-check-write sequence
    on that vehicle. Different vehicles never wait on each other.
    """

    def __init__(self):
        self._guard = threading.Lock()
        self._locks: Dict[str, threading.RLock] = {}

    def lock_for(self, vehicle_id: str) -> threading.RLock:
        with self._guard:
            lock = self._locks.get(vehicle_id)
            if lock is None:
                lock = threading.RLock()
                self._locks[vehicle_id] = lock
            return lock

    @contextmanager
    def hold(self, vehicle_id: str) -> Iterator[None]:
        with self.lock_for(vehicle_id):
            yield

    def discard(self, vehicle_id: str) -> None:
        """Forget a deleted vehicle's lock. Vehicle IDs are never reused."""
        with self._guard:
            self._locks.pop(vehicle_id, None)

    def __contains__(self, vehicle_id: str) -> bool:
        with self._guard:
            return vehicle_id in self._locks
