"""
Domain models (Pydantic).

These types are the contract between the layers:
- engine input (`LocationPing`, `ScoringContext`)
- engine output (`ScoreResult`, `FraudSignal`)
- ingestion payloads and stored events (`RiderLocationPing`, `LocationEvent`, `PingResponse`)

Field names are snake_case in Python and camelCase on the wire (`tsMs`, `fraudScore`, ...),
so JSON produced by the API and CLI matches what rider apps already send and consume.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class _WireModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class FraudSignal(str, Enum):
    """Closed set of anomaly kinds a ping can trigger."""

    MOCK_LOCATION = "MOCK_LOCATION"
    GPS_DISABLED = "GPS_DISABLED"
    LOW_ACCURACY = "LOW_ACCURACY"
    TELEPORT = "TELEPORT"
    UNREALISTIC_SPEED = "UNREALISTIC_SPEED"
    HEADING_MISMATCH = "HEADING_MISMATCH"
    DEVICE_ID_MISMATCH = "DEVICE_ID_MISMATCH"


class GeoPoint(_WireModel):
    """A geographic point in decimal degrees."""

    model_config = ConfigDict(frozen=True)

    lat: float = Field(..., ge=-90, le=90)
    lng: float = Field(..., ge=-180, le=180)


class LocationPing(GeoPoint):
    """One GPS observation from a rider device.

    `speed_mps` is kept for the audit trail only; scoring relies on speed derived
    from position deltas because the device value is attacker-controllable.
    """

    ts_ms: int
    accuracy_m: float | None = None
    speed_mps: float | None = None
    heading_deg: float | None = None
    mocked: bool | None = None


class ScoringContext(_WireModel):
    """Everything the engine needs to score one ping."""

    model_config = ConfigDict(frozen=True)

    prev: LocationPing | None = None
    curr: LocationPing
    token_device_id: str | None = None
    body_device_id: str | None = None
    gps_enabled: bool | None = None


class ScoreResult(_WireModel):
    """Fired signals (detection order), clamped score and diagnostics."""

    fraud_signals: list[FraudSignal] = Field(default_factory=list)
    fraud_score: int = Field(0, ge=0, le=100)
    meta: dict[str, Any] = Field(default_factory=dict)


Provider = Literal["gps", "network", "fused", "unknown"]


class RiderLocationPing(_WireModel):
    """Ping payload as posted by the rider app.

    Validation here is the ingestion boundary: non-finite or out-of-range
    coordinates never reach the scoring engine.
    """

    model_config = ConfigDict(allow_inf_nan=False)

    ts_ms: int = Field(..., gt=0)
    lat: float = Field(..., ge=-90, le=90)
    lng: float = Field(..., ge=-180, le=180)
    accuracy_m: float | None = Field(default=None, ge=0)
    altitude_m: float | None = None
    speed_mps: float | None = Field(default=None, ge=0)
    heading_deg: float | None = Field(default=None, ge=0, le=360)
    mocked: bool | None = None
    provider: Provider | None = None
    device_id: str | None = Field(default=None, min_length=6)
    gps_enabled: bool | None = None

    def to_ping(self) -> LocationPing:
        return LocationPing(
            ts_ms=self.ts_ms,
            lat=self.lat,
            lng=self.lng,
            accuracy_m=self.accuracy_m,
            speed_mps=self.speed_mps,
            heading_deg=self.heading_deg,
            mocked=self.mocked,
        )


class LocationEvent(_WireModel):
    """A scored ping as retained by the last-known-ping store."""

    id: str
    rider_id: str
    device_id: str
    ping: LocationPing
    altitude_m: float | None = None
    provider: Provider = "unknown"
    fraud_score: int = Field(0, ge=0, le=100)
    fraud_signals: list[FraudSignal] = Field(default_factory=list)
    meta: dict[str, Any] = Field(default_factory=dict)
    created_at: datetime


class PingResponse(_WireModel):
    """Response returned to the rider app after a ping is scored."""

    accepted: bool
    server_ts_ms: int
    fraud_signals: list[FraudSignal]
    fraud_score: int = Field(..., ge=0, le=100)
