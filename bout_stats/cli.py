#!/usr/bin/env python3
"""
Command-line reconstruction of bout statistics from an exported snapshot.

Usage:
    bout-stats snapshot.json
    bout-stats snapshot.json --focal-side B --pretty
    python -m bout_stats.cli snapshot.json --tolerance 3

Input format:
    {
        "match": {"matchId": "m1", "currentSlotALabel": "Alice", ...},
        "periods": [{"number": 1, "startTime": "...", "endTime": "..."}],
        "events": [{"id": "e1", "kind": "score", "scorerLabel": "Alice", ...}]
    }

Output:
    Statistics JSON on stdout. Logs and diagnostics go to stderr.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from pydantic import ValidationError

from .collaborators import InMemoryMatchStore, SnapshotFetchError
from .config import get_settings
from .logging_config import configure_logging
from .models import Side
from .schemas import MatchStatisticsResponse, SnapshotDocument
from .services.reconstruction import reconstruct_match

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="bout-stats",
        description="Rebuild score progression, touches by period and best runs.",
    )
    parser.add_argument("snapshot", type=Path, help="Path to a snapshot JSON file")
    parser.add_argument(
        "--focal-side",
        choices=[side.value for side in Side],
        default=Side.A.value,
        help="Side whose best run is reported as bestRun (default: A)",
    )
    parser.add_argument(
        "--tolerance",
        type=float,
        default=None,
        help="Override the period boundary tolerance in seconds",
    )
    parser.add_argument("--pretty", action="store_true", help="Indent the JSON output")
    return parser


def load_snapshot(path: Path) -> SnapshotDocument:
    with path.open(encoding="utf-8") as handle:
        return SnapshotDocument.model_validate(json.load(handle))


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    settings = get_settings()
    configure_logging("bout-stats", settings, stream=sys.stderr)

    if args.tolerance is not None and args.tolerance < 0:
        print("--tolerance must be >= 0", file=sys.stderr)
        return 1

    try:
        document = load_snapshot(args.snapshot)
    except (OSError, json.JSONDecodeError, ValidationError) as exc:
        logger.error("snapshot_unreadable", extra={"path": str(args.snapshot), "error": str(exc)})
        print(f"Could not read snapshot {args.snapshot}: {exc}", file=sys.stderr)
        return 1

    store = InMemoryMatchStore()
    snapshot = document.to_snapshot()
    store.put_snapshot(snapshot)

    try:
        stats = reconstruct_match(
            snapshot.match.match_id,
            store,
            store,
            tolerance_seconds=args.tolerance,
        )
    except SnapshotFetchError as exc:
        logger.exception("reconstruction_failed")
        print(str(exc), file=sys.stderr)
        return 1

    response = MatchStatisticsResponse.from_statistics(stats, Side(args.focal_side))
    print(response.model_dump_json(by_alias=True, indent=2 if args.pretty else None))
    return 0


if __name__ == "__main__":
    sys.exit(main())
