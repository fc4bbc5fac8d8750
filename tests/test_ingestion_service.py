import logging

from pingguard.domain.models import FraudSignal, RiderLocationPing
from pingguard.ingestion.service import UNKNOWN_DEVICE, ingest_ping, resolve_device_id
from pingguard.store.memory import InMemoryPingStore


def _payload(**kwargs) -> RiderLocationPing:
    data = {"ts_ms": 1000, "lat": 19.0760, "lng": 72.8777}
    data.update(kwargs)
    return RiderLocationPing(**data)


def test_resolve_device_id_prefers_body_then_token():
    assert resolve_device_id(_payload(device_id="body-device"), "token-device") == "body-device"
    assert resolve_device_id(_payload(), "token-device") == "token-device"
    assert resolve_device_id(_payload(), None) == UNKNOWN_DEVICE


def test_first_ping_is_clean_and_recorded():
    store = InMemoryPingStore()

    response = ingest_ping(_payload(accuracy_m=10), rider_id="r1", token_device_id="device-1", store=store)

    assert response.accepted is True
    assert response.fraud_signals == []
    assert response.fraud_score == 0
    assert response.server_ts_ms > 0

    [event] = store.history("r1", "device-1")
    assert event.id.startswith("rloc_")
    assert event.provider == "unknown"
    assert event.ping.accuracy_m == 10
    assert event.meta == {}


def test_second_ping_is_scored_against_the_first():
    store = InMemoryPingStore()
    ingest_ping(_payload(ts_ms=1000), rider_id="r1", token_device_id="device-1", store=store)

    response = ingest_ping(
        _payload(ts_ms=3000, lat=19.1760, provider="gps", altitude_m=12.5),
        rider_id="r1",
        token_device_id="device-1",
        store=store,
    )

    assert response.fraud_signals == [FraudSignal.TELEPORT, FraudSignal.UNREALISTIC_SPEED]
    assert response.fraud_score == 100

    latest = store.history("r1", "device-1")[-1]
    assert latest.provider == "gps"
    assert latest.altitude_m == 12.5
    assert latest.meta["dtSec"] == 2.0


def test_history_is_separate_per_rider():
    store = InMemoryPingStore()
    ingest_ping(_payload(ts_ms=1000), rider_id="r1", token_device_id="device-1", store=store)

    # A far-away first ping from another rider has no predecessor to teleport from.
    response = ingest_ping(_payload(ts_ms=2000, lat=28.6139, lng=77.2090), rider_id="r2", token_device_id="device-1", store=store)

    assert response.fraud_signals == []


def test_device_mismatch_and_gps_disabled_flow_through():
    store = InMemoryPingStore()

    response = ingest_ping(
        _payload(device_id="body-device", gps_enabled=False),
        rider_id="r1",
        token_device_id="token-device",
        store=store,
    )

    assert response.fraud_signals == [FraudSignal.GPS_DISABLED, FraudSignal.DEVICE_ID_MISMATCH]
    assert response.fraud_score == 70
    assert store.last("r1", "body-device") is not None
    assert store.last("r1", "token-device") is None


def test_flagged_pings_are_logged(caplog):
    caplog.set_level(logging.INFO, logger="pingguard.ingestion.service")
    store = InMemoryPingStore()

    ingest_ping(_payload(mocked=True), rider_id="r1", token_device_id=None, store=store)

    assert any("MOCK_LOCATION" in r.getMessage() for r in caplog.records)
