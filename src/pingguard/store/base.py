from __future__ import annotations

from contextlib import AbstractContextManager
from typing import Protocol

from pingguard.domain.models import LocationEvent, LocationPing


class PingStore(Protocol):
    """Last-known-ping store used by the ingestion service.

    Implementations must serialize the read-prev / score / record cycle per
    `(rider_id, device_id)` via `lock()`, so two concurrent pings from one rider
    are never scored against the same previous ping.
    """

    def lock(self, rider_id: str, device_id: str) -> AbstractContextManager[None]: ...

    def last(self, rider_id: str, device_id: str) -> LocationPing | None: ...

    def record(self, event: LocationEvent) -> None: ...

    def history(self, rider_id: str, device_id: str) -> list[LocationEvent]: ...
