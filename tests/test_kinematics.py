import pytest

from pingguard.core.geo import distance_meters
from pingguard.domain.models import LocationPing
from pingguard.scoring.kinematics import derive_kinematics


def test_derive_kinematics_simple_segment():
    prev = LocationPing(lat=19.0760, lng=72.8777, ts_ms=0)
    curr = LocationPing(lat=19.0770, lng=72.8777, ts_ms=30_000)

    k = derive_kinematics(prev, curr)

    expected = distance_meters(prev, curr)
    assert k.dt_sec == pytest.approx(30.0)
    assert k.dist_m == pytest.approx(expected)
    assert k.derived_speed_mps == pytest.approx(expected / 30.0)
    assert k.bearing_deg() == pytest.approx(0.0, abs=1e-6)


def test_identical_timestamps_floor_dt():
    prev = LocationPing(lat=19.0760, lng=72.8777, ts_ms=5_000)
    curr = LocationPing(lat=19.0761, lng=72.8777, ts_ms=5_000)

    k = derive_kinematics(prev, curr)

    assert k.dt_sec == 0.001
    assert k.derived_speed_mps == pytest.approx(k.dist_m / 0.001)


def test_reversed_timestamps_floor_dt():
    prev = LocationPing(lat=19.0760, lng=72.8777, ts_ms=10_000)
    curr = LocationPing(lat=19.0760, lng=72.8777, ts_ms=1_000)

    k = derive_kinematics(prev, curr)

    assert k.dt_sec == 0.001
    assert k.dist_m == 0
    assert k.derived_speed_mps == 0


def test_device_speed_is_ignored():
    prev = LocationPing(lat=19.0760, lng=72.8777, ts_ms=0, speed_mps=99.0)
    curr = LocationPing(lat=19.0760, lng=72.8777, ts_ms=10_000, speed_mps=99.0)

    assert derive_kinematics(prev, curr).derived_speed_mps == 0
