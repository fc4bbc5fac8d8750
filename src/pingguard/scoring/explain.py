"""
Small explainability formatting helpers.

Used by the CLI to print compact summaries of score results.
"""

from __future__ import annotations

from pingguard.domain.models import ScoreResult


def one_line_summary(result: ScoreResult) -> str:
    """Render a compact single-line summary for a score result."""
    signals = ",".join(s.value for s in result.fraud_signals) or "-"
    parts = [f"score={result.fraud_score}", f"signals={signals}"]
    for key in ("dtSec", "distM", "derivedSpeedMps", "headingDiffDeg", "accuracyM"):
        if key in result.meta:
            parts.append(f"{key}={float(result.meta[key]):.1f}")
    return " | ".join(parts)
