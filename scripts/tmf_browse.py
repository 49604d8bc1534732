#!/usr/bin/env python3
"""Browse the TMF Reference Model: zones, a zone's sections, an artifact.

Usage:
    python3 scripts/tmf_browse.py zones
    python3 scripts/tmf_browse.py zone 05 --search "curriculum"
    python3 scripts/tmf_browse.py artifact 02.01.02
"""
from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Any

import orjson

from tmfref.artifact_detail import artifact_summary
from tmfref.dataset import DatasetIntegrityError, TMFDataset, default_dataset, load_dataset
from tmfref.io_utils import dump_json
from tmfref.search import filter_zone_sections

log = logging.getLogger("tmf_browse")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Browse the TMF Reference Model.")
    parser.add_argument(
        "--data", type=Path, default=None, help="Dataset JSON (default: packaged model)"
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Verbose logging")
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("zones", help="List zones with section and artifact counts")

    zone = sub.add_parser("zone", help="Show one zone's sections and artifacts")
    zone.add_argument("number", help="Zone number, e.g. 01")
    zone.add_argument(
        "--search", default="",
        help="Only sections whose name, or any artifact name, contains this text",
    )

    artifact = sub.add_parser("artifact", help="Show one artifact in detail")
    artifact.add_argument("number", help="Artifact number, e.g. 01.01.01")
    return parser


def list_zones(dataset: TMFDataset) -> dict[str, Any]:
    return {
        "version": dataset.version,
        "release_date": dataset.release_date,
        "zones": [
            {
                "number": z.number,
                "name": z.name,
                "sections": len(z.sections),
                "artifacts": dataset.artifact_count(z),
            }
            for z in dataset.zones
        ],
    }


def show_zone(dataset: TMFDataset, number: str, search: str) -> dict[str, Any] | None:
    zone = dataset.zone_by_number(number)
    if zone is None:
        return None
    return {
        "number": zone.number,
        "name": zone.name,
        "artifact_count": dataset.artifact_count(zone),
        "sections": [
            {
                "number": s.display_number,
                "name": s.name,
                "artifacts": [
                    {
                        "number": a.number,
                        "name": a.name,
                        "core_recommended": a.core_recommended,
                    }
                    for a in s.artifacts
                ],
            }
            for s in filter_zone_sections(zone, search)
        ],
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

    if args.command == "zones":
        dump_json(list_zones(dataset))
        return 0

    if args.command == "zone":
        payload = show_zone(dataset, args.number, args.search)
        if payload is None:
            print(f"Error: zone not found: {args.number}", file=sys.stderr)
            return 1
        dump_json(payload)
        return 0

    artifact = dataset.artifact_by_number(args.number)
    if artifact is None:
        print(f"Error: artifact not found: {args.number}", file=sys.stderr)
        return 1
    dump_json(artifact_summary(artifact, dataset))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
