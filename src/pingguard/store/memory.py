"""
In-process last-known-ping store.

Keeps a bounded, per-(rider, device) event history in memory. Suitable for a single
API worker, tests and CLI replays; a multi-process deployment needs a shared store
with the same per-rider single-writer guarantee.
"""

from __future__ import annotations

import threading
from collections import deque
from contextlib import contextmanager
from typing import Iterator

from pingguard.domain.models import LocationEvent, LocationPing

Key = tuple[str, str]


class InMemoryPingStore:
    def __init__(self, *, history_limit: int = 100):
        if int(history_limit) < 1:
            raise ValueError("history_limit must be >= 1")
        self._history_limit = int(history_limit)
        self._events: dict[Key, deque[LocationEvent]] = {}
        self._locks: dict[Key, threading.Lock] = {}
        self._registry_lock = threading.Lock()

    def _key_lock(self, key: Key) -> threading.Lock:
        with self._registry_lock:
            lock = self._locks.get(key)
            if lock is None:
                lock = self._locks[key] = threading.Lock()
            return lock

    @contextmanager
    def lock(self, rider_id: str, device_id: str) -> Iterator[None]:
        """Hold the single-writer lock for one rider/device."""
        with self._key_lock((rider_id, device_id)):
            yield

    def last(self, rider_id: str, device_id: str) -> LocationPing | None:
        with self._registry_lock:
            events = self._events.get((rider_id, device_id))
            return events[-1].ping if events else None

    def record(self, event: LocationEvent) -> None:
        key = (event.rider_id, event.device_id)
        with self._registry_lock:
            events = self._events.get(key)
            if events is None:
                events = self._events[key] = deque(maxlen=self._history_limit)
            events.append(event)

    def history(self, rider_id: str, device_id: str) -> list[LocationEvent]:
        """Retained events for one rider/device, oldest first."""
        with self._registry_lock:
            return list(self._events.get((rider_id, device_id), ()))

    def devices(self, rider_id: str) -> list[str]:
        with self._registry_lock:
            return sorted(d for r, d in self._events if r == rider_id)
