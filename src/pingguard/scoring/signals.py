"""
Fraud signal detection.

Each check is independent and fires at most once. They always run in the order of
`CHECKS`, which fixes both the order of `fraud_signals` and which `meta` keys appear.
Movement checks need kinematics and are skipped when there is no previous ping.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable

from pingguard.config.settings import FraudThresholds
from pingguard.core.geo import angular_diff_deg
from pingguard.domain.models import FraudSignal, ScoringContext
from pingguard.scoring.kinematics import Kinematics


@dataclass
class CheckInput:
    context: ScoringContext
    thresholds: FraudThresholds
    kinematics: Kinematics | None = None
    meta: dict[str, Any] = field(default_factory=dict)


Check = Callable[[CheckInput], bool]


def _gps_disabled(c: CheckInput) -> bool:
    # Unknown (None) is not evidence.
    return c.context.gps_enabled is False


def _mock_location(c: CheckInput) -> bool:
    return bool(c.context.curr.mocked)


def _low_accuracy(c: CheckInput) -> bool:
    acc = c.context.curr.accuracy_m
    if acc is None or acc <= c.thresholds.max_accuracy_m:
        return False
    c.meta["accuracyM"] = acc
    return True


def _device_id_mismatch(c: CheckInput) -> bool:
    token_id = c.context.token_device_id
    body_id = c.context.body_device_id
    return bool(token_id) and bool(body_id) and token_id != body_id


def _teleport(c: CheckInput) -> bool:
    k = c.kinematics
    if k is None:
        return False
    t = c.thresholds
    return k.dist_m > t.teleport_distance_m and k.dt_sec < t.teleport_window_sec


def _unrealistic_speed(c: CheckInput) -> bool:
    k = c.kinematics
    return k is not None and k.derived_speed_mps > c.thresholds.max_speed_mps


def _heading_mismatch(c: CheckInput) -> bool:
    k = c.kinematics
    heading = c.context.curr.heading_deg
    # Heading is noise when (nearly) stationary.
    if k is None or heading is None or k.derived_speed_mps <= c.thresholds.heading_min_speed_mps:
        return False

    brng = k.bearing_deg()
    diff = angular_diff_deg(heading, brng)
    c.meta["bearingDeg"] = brng
    c.meta["headingDiffDeg"] = diff
    return diff > c.thresholds.heading_tolerance_deg


CHECKS: tuple[tuple[FraudSignal, Check], ...] = (
    (FraudSignal.GPS_DISABLED, _gps_disabled),
    (FraudSignal.MOCK_LOCATION, _mock_location),
    (FraudSignal.LOW_ACCURACY, _low_accuracy),
    (FraudSignal.DEVICE_ID_MISMATCH, _device_id_mismatch),
    (FraudSignal.TELEPORT, _teleport),
    (FraudSignal.UNREALISTIC_SPEED, _unrealistic_speed),
    (FraudSignal.HEADING_MISMATCH, _heading_mismatch),
)


def detect_signals(
    context: ScoringContext,
    *,
    thresholds: FraudThresholds,
    kinematics: Kinematics | None = None,
) -> tuple[list[FraudSignal], dict[str, Any]]:
    """Run every check in order; return fired signals and diagnostics."""
    c = CheckInput(context=context, thresholds=thresholds, kinematics=kinematics)
    if kinematics is not None:
        c.meta["dtSec"] = kinematics.dt_sec
        c.meta["distM"] = kinematics.dist_m
        c.meta["derivedSpeedMps"] = kinematics.derived_speed_mps

    signals = [signal for signal, check in CHECKS if check(c)]
    return signals, c.meta
