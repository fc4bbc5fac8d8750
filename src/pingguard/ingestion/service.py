"""
Ping ingestion service.

Glue between a validated rider payload and the pure scoring engine:
- resolve which device the ping belongs to,
- read the previous ping and record the scored one under the store's per-rider lock,
- return the response the rider app expects.

This layer never rejects a ping based on its score; acting on the score is up to
downstream policy consumers reading the recorded events.
"""

from __future__ import annotations

import logging
import time
import uuid
from datetime import datetime, timezone

from pingguard.config.settings import Settings, get_settings
from pingguard.domain.models import (
    LocationEvent,
    PingResponse,
    RiderLocationPing,
    ScoringContext,
)
from pingguard.scoring.engine import score_ping
from pingguard.store.base import PingStore

logger = logging.getLogger(__name__)

UNKNOWN_DEVICE = "unknown_device"


def resolve_device_id(payload: RiderLocationPing, token_device_id: str | None) -> str:
    """Device key for the store: body device, then token device, then a shared fallback."""
    return payload.device_id or token_device_id or UNKNOWN_DEVICE


def ingest_ping(
    payload: RiderLocationPing,
    *,
    rider_id: str,
    token_device_id: str | None,
    store: PingStore,
    settings: Settings | None = None,
) -> PingResponse:
    """Score a rider ping against the rider's last ping and record it."""
    settings = settings or get_settings()
    device_id = resolve_device_id(payload, token_device_id)
    curr = payload.to_ping()

    with store.lock(rider_id, device_id):
        prev = store.last(rider_id, device_id)
        context = ScoringContext(
            prev=prev,
            curr=curr,
            token_device_id=token_device_id,
            body_device_id=payload.device_id,
            gps_enabled=payload.gps_enabled,
        )
        result = score_ping(context, settings=settings)

        store.record(
            LocationEvent(
                id=f"rloc_{uuid.uuid4().hex}",
                rider_id=rider_id,
                device_id=device_id,
                ping=curr,
                altitude_m=payload.altitude_m,
                provider=payload.provider or "unknown",
                fraud_score=result.fraud_score,
                fraud_signals=result.fraud_signals,
                meta=result.meta,
                created_at=datetime.now(timezone.utc),
            )
        )

    if result.fraud_signals:
        logger.info(
            "Ping flagged rider=%s device=%s score=%s signals=%s",
            rider_id,
            device_id,
            result.fraud_score,
            ",".join(s.value for s in result.fraud_signals),
        )

    return PingResponse(
        accepted=True,
        server_ts_ms=int(time.time() * 1000),
        fraud_signals=result.fraud_signals,
        fraud_score=result.fraud_score,
    )
