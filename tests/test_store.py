import threading
from datetime import datetime, timezone

import pytest

from pingguard.domain.models import LocationEvent, LocationPing, RiderLocationPing
from pingguard.ingestion.service import ingest_ping
from pingguard.store.memory import InMemoryPingStore


def _event(ts_ms: int, *, rider_id: str = "r1", device_id: str = "d1") -> LocationEvent:
    return LocationEvent(
        id=f"rloc_{ts_ms}",
        rider_id=rider_id,
        device_id=device_id,
        ping=LocationPing(lat=19.0760, lng=72.8777, ts_ms=ts_ms),
        created_at=datetime.now(timezone.utc),
    )


def test_last_is_none_for_unknown_rider():
    assert InMemoryPingStore().last("nobody", "d1") is None


def test_record_and_last_are_keyed_by_rider_and_device():
    store = InMemoryPingStore()
    store.record(_event(1000))
    store.record(_event(2000))
    store.record(_event(9000, device_id="d2"))

    assert store.last("r1", "d1").ts_ms == 2000
    assert store.last("r1", "d2").ts_ms == 9000
    assert store.last("r2", "d1") is None
    assert store.devices("r1") == ["d1", "d2"]


def test_history_is_trimmed_to_limit():
    store = InMemoryPingStore(history_limit=3)
    for ts in range(1, 6):
        store.record(_event(ts * 1000))

    assert [e.ping.ts_ms for e in store.history("r1", "d1")] == [3000, 4000, 5000]


def test_history_limit_must_be_positive():
    with pytest.raises(ValueError):
        InMemoryPingStore(history_limit=0)


def test_locks_are_per_rider_device():
    store = InMemoryPingStore()
    acquired = threading.Event()

    def other_rider():
        with store.lock("r2", "d1"):
            acquired.set()

    with store.lock("r1", "d1"):
        t = threading.Thread(target=other_rider)
        t.start()
        # Another rider is never blocked by r1's lock.
        assert acquired.wait(timeout=5)
        t.join(timeout=5)


def test_concurrent_pings_for_one_rider_are_serialized():
    store = InMemoryPingStore()
    barrier = threading.Barrier(16)

    def send(i: int):
        payload = RiderLocationPing(ts_ms=1000 + i, lat=19.0760, lng=72.8777, device_id="device-1")
        barrier.wait()
        ingest_ping(payload, rider_id="r1", token_device_id=None, store=store)

    threads = [threading.Thread(target=send, args=(i,)) for i in range(16)]
    for t in threads:
        t.start()
    for t in threads:
        t.join(timeout=10)

    events = store.history("r1", "device-1")
    assert len(events) == 16
    # Exactly one ping saw no previous ping; every other one was scored against a predecessor.
    assert sum(1 for e in events if "dtSec" not in e.meta) == 1
