#!/usr/bin/env python3
"""Cascading artifact filters over the TMF Reference Model.

Builds a selection from flags (or a saved selection JSON), optionally
applies a sequence of field changes with cascade clearing, then prints the
resulting selection, the option lists for every level and the filtered
artifacts as JSON to stdout.

Usage:
    python3 scripts/tmf_filter.py --file-type Trial --zone 01
    python3 scripts/tmf_filter.py --zone 01 --set zone=02 --options
    python3 scripts/tmf_filter.py --selection saved.json --artifact-search protocol --options
"""
from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Any

import orjson

from tmfref.dataset import DatasetIntegrityError, default_dataset, load_dataset
from tmfref.filters import (
    DEFAULT_ARTIFACT_OPTION_LIMIT,
    FILTER_FIELDS,
    FilterOption,
    FilterSearchText,
    FilterSelection,
    FilterState,
    apply_filters,
    available_options,
    has_active_filters,
    selection_from_json,
    selection_to_json,
    transition,
)
from tmfref.io_utils import dump_json, load_json

log = logging.getLogger("tmf_filter")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Filter TMF artifacts by file type, zone, section and artifact."
    )
    parser.add_argument(
        "--selection", type=Path, default=None,
        help="JSON file with a starting selection (flags override its fields)",
    )
    parser.add_argument("--file-type", default=None, help="Trial, Country or Site")
    parser.add_argument("--zone", default=None, help="Zone number, e.g. 01")
    parser.add_argument("--section", default=None, help="Section number, e.g. 1.01")
    parser.add_argument("--artifact", default=None, help="Artifact number, e.g. 01.01.01")
    parser.add_argument(
        "--set",
        dest="changes",
        action="append",
        default=[],
        metavar="FIELD=VALUE",
        help="Apply a selection change with cascade clearing (repeatable; empty VALUE clears)",
    )
    parser.add_argument(
        "--options", action="store_true", help="Include option lists for every level"
    )
    parser.add_argument("--file-type-search", default="", help="Narrow file type options")
    parser.add_argument("--zone-search", default="", help="Narrow zone options")
    parser.add_argument("--section-search", default="", help="Narrow section options")
    parser.add_argument("--artifact-search", default="", help="Narrow artifact options")
    parser.add_argument(
        "--artifact-limit",
        type=int,
        default=DEFAULT_ARTIFACT_OPTION_LIMIT,
        help=f"Maximum artifact options (default: {DEFAULT_ARTIFACT_OPTION_LIMIT}; 0 means no limit)",
    )
    parser.add_argument(
        "--data", type=Path, default=None, help="Dataset JSON (default: packaged model)"
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Verbose logging")
    return parser


def parse_change(raw: str) -> tuple[str, str | None]:
    """Split ``FIELD=VALUE``; raises ValueError on an unknown field."""
    if "=" not in raw:
        raise ValueError(f"Expected FIELD=VALUE, got {raw!r}")
    name, _, value = raw.partition("=")
    name = name.strip().replace("-", "_")
    if name not in FILTER_FIELDS:
        raise ValueError(f"Unknown filter field: {name!r} (expected one of {FILTER_FIELDS})")
    return name, value.strip() or None


def _options_json(options: tuple[FilterOption, ...]) -> list[dict[str, str]]:
    return [{"id": o.id, "display_name": o.display_name} for o in options]


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

    base: dict[str, Any] = {}
    if args.selection is not None:
        if not args.selection.exists():
            print(f"Error: selection file not found: {args.selection}", file=sys.stderr)
            return 1
        try:
            base = selection_to_json(selection_from_json(load_json(args.selection)))
        except (ValueError, orjson.JSONDecodeError) as exc:
            print(f"Error: invalid selection file: {exc}", file=sys.stderr)
            return 1
    for name in FILTER_FIELDS:
        value = getattr(args, name)
        if value is not None:
            base[name] = value

    try:
        changes = [parse_change(raw) for raw in args.changes]
    except ValueError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    state = FilterState(
        selection=FilterSelection(**base),
        search=FilterSearchText(
            file_type=args.file_type_search,
            zone=args.zone_search,
            section=args.section_search,
            artifact=args.artifact_search,
        ),
    )
    for name, value in changes:
        state = transition(dataset, state, name, value)
        log.debug("After %s=%s: %s", name, value, selection_to_json(state.selection))

    results = apply_filters(dataset, state.selection)
    payload: dict[str, Any] = {
        "selection": selection_to_json(state.selection),
        "active": has_active_filters(state.selection),
        "count": len(results),
        "results": [{"number": a.number, "name": a.name} for a in results],
    }
    if args.options:
        limit = args.artifact_limit if args.artifact_limit > 0 else None
        options = available_options(dataset, state.selection, state.search, artifact_limit=limit)
        payload["options"] = {
            "file_types": _options_json(options.file_types),
            "zones": _options_json(options.zones),
            "sections": _options_json(options.sections),
            "artifacts": _options_json(options.artifacts),
        }

    print(f"Filter results: {len(results)} artifacts", file=sys.stderr)
    dump_json(payload)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
