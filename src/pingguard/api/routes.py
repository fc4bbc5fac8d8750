"""
API routes.

Endpoints:
- POST `/api/rider/location/ping`: score and record one rider ping.
- GET  `/api/rider/location/history`: recent scored pings for the calling rider.
- GET  `/api/health`: liveness probe.

Authentication is handled by the gateway in front of this service; it forwards the
rider identity as `X-Rider-Id` and the device bound to the rider's credential as
`X-Device-Id`.
"""

from __future__ import annotations

from functools import lru_cache

from fastapi import APIRouter, Depends, Header, HTTPException

from pingguard.config.settings import get_settings
from pingguard.domain.models import PingResponse, RiderLocationPing
from pingguard.ingestion.service import ingest_ping
from pingguard.store.memory import InMemoryPingStore

router = APIRouter()


@lru_cache
def get_store() -> InMemoryPingStore:
    """Process-wide last-known-ping store (cached)."""
    return InMemoryPingStore(history_limit=get_settings().store.history_limit)


def _require_rider_id(x_rider_id: str | None) -> str:
    rider_id = (x_rider_id or "").strip()
    if not rider_id:
        raise HTTPException(status_code=400, detail="Missing X-Rider-Id header")
    return rider_id


@router.get("/api/health")
def health() -> dict:
    return {"status": "ok"}


@router.post("/api/rider/location/ping", response_model=PingResponse)
def post_location_ping(
    payload: RiderLocationPing,
    x_rider_id: str | None = Header(default=None),
    x_device_id: str | None = Header(default=None),
    store: InMemoryPingStore = Depends(get_store),
) -> PingResponse:
    """Score a ping against the rider's previous one and record it."""
    rider_id = _require_rider_id(x_rider_id)
    return ingest_ping(
        payload,
        rider_id=rider_id,
        token_device_id=x_device_id or None,
        store=store,
    )


@router.get("/api/rider/location/history")
def get_location_history(
    device_id: str | None = None,
    limit: int = 20,
    x_rider_id: str | None = Header(default=None),
    store: InMemoryPingStore = Depends(get_store),
) -> dict:
    """Return the most recent scored pings for the rider (newest first).

    Without `device_id`, every device the rider has pinged from is included. Pings are
    stored under the payload device id, which may differ from the credential device.
    """
    rider_id = _require_rider_id(x_rider_id)
    if limit < 1:
        raise HTTPException(status_code=400, detail="limit must be >= 1")

    devices = [device_id] if device_id else store.devices(rider_id)
    events = []
    for d in devices:
        events.extend(store.history(rider_id, d))
    events.sort(key=lambda e: (e.ping.ts_ms, e.created_at), reverse=True)

    return {
        "riderId": rider_id,
        "devices": devices,
        "events": [e.model_dump(mode="json", by_alias=True) for e in events[:limit]],
    }
