"""
Score aggregation helpers.

- `total_weight`: additive sum of the weights of every fired signal (may exceed 100)
- `clamp_score`: bound the final sum once, after all checks ran
"""

from __future__ import annotations

from typing import Iterable

from pingguard.config.settings import FraudWeights
from pingguard.domain.models import FraudSignal


def total_weight(signals: Iterable[FraudSignal], weights: FraudWeights) -> int:
    """Sum the configured weights of the fired signals (unclamped)."""
    return sum(weights.for_signal(s) for s in signals)


def clamp_score(raw: float, lo: int = 0, hi: int = 100) -> int:
    """Clamp a raw severity sum into [lo, hi]."""
    return int(max(lo, min(hi, raw)))
