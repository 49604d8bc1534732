#!/usr/bin/env python3
"""Type-ahead artifact search over the TMF Reference Model.

Matches artifact names and numbers case-insensitively and returns
structured JSON results to stdout with summary messages to stderr.
Results follow dataset order (zone, section, artifact).

Usage:
    python3 scripts/tmf_search.py --query "protocol"
    python3 scripts/tmf_search.py --query "05.0" --suggest
    python3 scripts/tmf_search.py --query "plan" --limit 0 --data my_tmf.json
"""
from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Any

import orjson

from tmfref.dataset import DatasetIntegrityError, TMFDataset, default_dataset, load_dataset
from tmfref.io_utils import dump_json
from tmfref.models import Artifact
from tmfref.search import DEFAULT_RESULTS_LIMIT, DEFAULT_SUGGESTION_LIMIT, search_results, suggest

log = logging.getLogger("tmf_search")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Search TMF artifacts by name or number."
    )
    parser.add_argument("--query", required=True, help="Search text (substring match)")
    parser.add_argument(
        "--limit",
        type=int,
        default=None,
        help=(
            f"Maximum number of results (default: {DEFAULT_RESULTS_LIMIT}, "
            f"or {DEFAULT_SUGGESTION_LIMIT} with --suggest; 0 means no limit)"
        ),
    )
    parser.add_argument(
        "--suggest",
        action="store_true",
        help="Use the inline suggestion cap instead of the full results cap",
    )
    parser.add_argument(
        "--data", type=Path, default=None, help="Dataset JSON (default: packaged model)"
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Verbose logging")
    return parser


def artifact_row(dataset: TMFDataset, artifact: Artifact) -> dict[str, Any]:
    """Flat result row with the owning zone and section."""
    zone = dataset.zone_containing(artifact.number)
    section = dataset.section_containing(artifact.number)
    return {
        "number": artifact.number,
        "name": artifact.name,
        "core_recommended": artifact.core_recommended,
        "zone": zone.number if zone else None,
        "section": section.display_number if section else None,
    }


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(message)s",
        stream=sys.stderr,
    )

    if args.data is not None and not args.data.exists():
        print(f"Error: dataset not found: {args.data}", file=sys.stderr)
        return 1
    try:
        dataset = load_dataset(args.data) if args.data is not None else default_dataset()
    except (DatasetIntegrityError, orjson.JSONDecodeError) as exc:
        print(f"Error: invalid dataset: {exc}", file=sys.stderr)
        return 1
    log.debug("Loaded %r", dataset)

    if args.limit is None:
        limit: int | None = DEFAULT_SUGGESTION_LIMIT if args.suggest else DEFAULT_RESULTS_LIMIT
    elif args.limit <= 0:
        limit = None
    else:
        limit = args.limit

    if args.suggest:
        results = suggest(dataset, args.query, limit=limit)
    else:
        results = search_results(dataset, args.query, limit=limit)

    print(
        f"Found {len(results)} artifacts matching {args.query!r}"
        + (f" (limit {limit})" if limit is not None else ""),
        file=sys.stderr,
    )
    dump_json([artifact_row(dataset, a) for a in results])
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
