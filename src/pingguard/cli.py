"""
PingGuard CLI entrypoint.

Intended for local debugging of fraud scoring without running the API:
- `score`: score a single ping (optionally against a previous one)
- `replay`: feed a CSV track through the ingestion service, one line per ping
"""

from __future__ import annotations

import argparse
import csv
import json
import sys
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from pingguard.config.overrides import apply_settings_overrides, parse_override_pairs
from pingguard.config.settings import get_settings
from pingguard.core.logging import configure_logging
from pingguard.domain.models import LocationPing, RiderLocationPing, ScoringContext
from pingguard.ingestion.service import ingest_ping
from pingguard.scoring.engine import score_ping
from pingguard.scoring.explain import one_line_summary
from pingguard.store.memory import InMemoryPingStore

_BOOL_VALUES = {"true": True, "1": True, "yes": True, "false": False, "0": False, "no": False}


def _parse_bool(value: str | None) -> bool | None:
    if value is None or not value.strip():
        return None
    key = value.strip().lower()
    if key not in _BOOL_VALUES:
        raise ValueError(f"Invalid boolean '{value}'")
    return _BOOL_VALUES[key]


def _csv_row_to_payload(row: dict[str, str]) -> dict[str, Any]:
    """Map a CSV row onto payload fields; blank cells become None."""
    payload: dict[str, Any] = {}
    for key, raw in row.items():
        if key is None:
            continue
        value = (raw or "").strip()
        if not value:
            continue
        if key in {"mocked", "gps_enabled"}:
            payload[key] = _parse_bool(value)
        else:
            payload[key] = value
    return payload


def _cmd_score(args: argparse.Namespace) -> int:
    """Handle the `score` subcommand."""
    settings = apply_settings_overrides(get_settings(), parse_override_pairs(args.set))

    context = ScoringContext(
        prev=LocationPing.model_validate_json(args.prev) if args.prev else None,
        curr=LocationPing.model_validate_json(args.curr),
        token_device_id=args.token_device_id,
        body_device_id=args.body_device_id,
        gps_enabled=_parse_bool(args.gps_enabled),
    )
    result = score_ping(context, settings=settings)

    if args.json:
        print(json.dumps(result.model_dump(mode="json", by_alias=True), indent=2))
        return 0

    print(one_line_summary(result))
    for key, value in result.meta.items():
        print(f"    - {key}: {value}")
    return 0


def _cmd_replay(args: argparse.Namespace) -> int:
    """Handle the `replay` subcommand."""
    settings = get_settings()
    store = InMemoryPingStore(history_limit=settings.store.history_limit)

    rejected = 0
    with Path(args.path).open(newline="", encoding="utf-8") as f:
        for line_no, row in enumerate(csv.DictReader(f), start=2):
            try:
                payload = RiderLocationPing.model_validate(_csv_row_to_payload(row))
            except (ValidationError, ValueError) as e:
                rejected += 1
                print(f"line {line_no}: rejected ({e.__class__.__name__}: {str(e).splitlines()[0]})", file=sys.stderr)
                continue

            response = ingest_ping(
                payload,
                rider_id=args.rider_id,
                token_device_id=args.token_device_id,
                store=store,
                settings=settings,
            )
            if args.json:
                print(json.dumps({"line": line_no, **response.model_dump(mode="json", by_alias=True)}))
            else:
                signals = ",".join(s.value for s in response.fraud_signals) or "-"
                print(f"{line_no:>4}. ts_ms={payload.ts_ms} score={response.fraud_score:>3} signals={signals}")

    return 1 if rejected else 0


def build_parser() -> argparse.ArgumentParser:
    """Build the argparse parser for the PingGuard CLI."""
    parser = argparse.ArgumentParser(prog="pingguard")
    sub = parser.add_subparsers(dest="command", required=True)

    sc = sub.add_parser("score", help="Score a single ping against an optional previous ping.")
    sc.add_argument("--curr", required=True, help='Ping JSON, e.g. \'{"lat":19.07,"lng":72.87,"tsMs":1000}\'')
    sc.add_argument("--prev", default=None, help="Previous ping JSON (omit for a first ping)")
    sc.add_argument("--token-device-id", default=None)
    sc.add_argument("--body-device-id", default=None)
    sc.add_argument("--gps-enabled", default=None, help="true|false; omit when unknown")
    sc.add_argument(
        "--set",
        action="append",
        default=[],
        help="Override a fraud knob for this run: fraud.weights.teleport=60 (repeatable)",
    )
    sc.add_argument("--json", action="store_true", help="Output machine-readable JSON")
    sc.set_defaults(func=_cmd_score)

    rp = sub.add_parser("replay", help="Replay a CSV ping track through the ingestion service.")
    rp.add_argument("path", help="CSV with columns ts_ms,lat,lng[,accuracy_m,speed_mps,heading_deg,mocked,device_id]")
    rp.add_argument("--rider-id", default="cli_rider")
    rp.add_argument("--token-device-id", default=None)
    rp.add_argument("--json", action="store_true", help="Output one JSON object per ping")
    rp.set_defaults(func=_cmd_replay)
    return parser


def main(argv: list[str] | None = None) -> int:
    """CLI entrypoint callable used by `python -m pingguard.cli`."""
    configure_logging()
    parser = build_parser()
    args = parser.parse_args(argv)
    func: Any = getattr(args, "func")
    return int(func(args))


if __name__ == "__main__":
    raise SystemExit(main())
