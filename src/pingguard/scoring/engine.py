"""
Ping scoring entrypoint.

`score_ping` is a pure function: it reads only its `ScoringContext` (and settings),
allocates only local values, and is safe to call concurrently without locking.
Serializing pings per rider is the job of the caller's last-known-ping store.
"""

from __future__ import annotations

import logging

from pingguard.config.settings import Settings, get_settings
from pingguard.domain.models import ScoreResult, ScoringContext
from pingguard.scoring.composite import clamp_score, total_weight
from pingguard.scoring.kinematics import derive_kinematics
from pingguard.scoring.signals import detect_signals

logger = logging.getLogger(__name__)


def score_ping(context: ScoringContext, *, settings: Settings | None = None) -> ScoreResult:
    """Score one ping against the rider's previous ping (if any)."""
    cfg = (settings or get_settings()).fraud

    kinematics = None
    if context.prev is not None:
        kinematics = derive_kinematics(
            context.prev, context.curr, min_dt_sec=cfg.thresholds.min_dt_sec
        )

    signals, meta = detect_signals(context, thresholds=cfg.thresholds, kinematics=kinematics)
    raw = total_weight(signals, cfg.weights)
    score = clamp_score(raw, lo=cfg.bounds.min_score, hi=cfg.bounds.max_score)

    logger.debug("Scored ping ts_ms=%s raw=%s score=%s signals=%s", context.curr.ts_ms, raw, score, signals)
    return ScoreResult(fraud_signals=signals, fraud_score=score, meta=meta)
