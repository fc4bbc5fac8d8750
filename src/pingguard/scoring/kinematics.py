"""
Kinematics derivation between two consecutive pings.

Speed here is derived purely from position and timestamp deltas; the device-reported
speed is never consulted.
"""

from __future__ import annotations

from dataclasses import dataclass

from pingguard.core.geo import bearing_deg, distance_meters
from pingguard.domain.models import LocationPing

MIN_DT_SEC = 0.001


@dataclass(frozen=True)
class Kinematics:
    prev: LocationPing
    curr: LocationPing
    dt_sec: float
    dist_m: float
    derived_speed_mps: float

    def bearing_deg(self) -> float:
        """Bearing of travel from `prev` to `curr` (computed on demand)."""
        return bearing_deg(self.prev, self.curr)


def derive_kinematics(
    prev: LocationPing, curr: LocationPing, *, min_dt_sec: float = MIN_DT_SEC
) -> Kinematics:
    """Derive elapsed time, distance and average speed between two pings.

    Identical or reversed timestamps are floored to `min_dt_sec`, which turns them into
    a very large derived speed rather than a division error.
    """
    dt_sec = max(float(min_dt_sec), (curr.ts_ms - prev.ts_ms) / 1000)
    dist_m = distance_meters(prev, curr)
    return Kinematics(
        prev=prev,
        curr=curr,
        dt_sec=dt_sec,
        dist_m=dist_m,
        derived_speed_mps=dist_m / dt_sec,
    )
