#!/usr/bin/env python3
"""Show or change persisted appearance preferences.

Usage:
    python3 scripts/tmf_preferences.py show
    python3 scripts/tmf_preferences.py set --accent Teal --theme dark
    python3 scripts/tmf_preferences.py reset --prefs /tmp/prefs.json
"""
from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Any

from tmfref.io_utils import dump_json
from tmfref.preferences import (
    ACCENT_COLORS,
    THEME_MODES,
    AppearancePreferences,
    PreferenceStore,
)

log = logging.getLogger("tmf_preferences")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Manage appearance preferences.")
    parser.add_argument(
        "--prefs", type=Path, default=None,
        help="Preference file (default: $TMFREF_PREFERENCES_PATH or ~/.config/tmfref/preferences.json)",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Verbose logging")
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("show", help="Print current preferences and available choices")

    set_cmd = sub.add_parser("set", help="Change accent color and/or theme mode")
    set_cmd.add_argument("--accent", default=None, help="Accent color name or hex code")
    set_cmd.add_argument("--theme", default=None, choices=THEME_MODES, help="Theme mode")

    sub.add_parser("reset", help="Restore default preferences")
    return parser


def preferences_json(store: PreferenceStore, prefs: AppearancePreferences) -> dict[str, Any]:
    return {
        "path": str(store.path),
        "accent_color": prefs.accent_color,
        "accent_name": prefs.accent_name,
        "theme_mode": prefs.theme_mode,
        "available_accents": ACCENT_COLORS,
        "available_themes": list(THEME_MODES),
    }


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(message)s",
        stream=sys.stderr,
    )

    store = PreferenceStore(args.prefs)
    store.subscribe(
        lambda p: log.info("Preferences changed: accent=%s theme=%s", p.accent_color, p.theme_mode)
    )
    prefs = store.load()

    if args.command == "set":
        if args.accent is None and args.theme is None:
            print("Error: nothing to set (use --accent and/or --theme)", file=sys.stderr)
            return 1
        try:
            if args.accent is not None:
                prefs = store.set_accent_color(args.accent)
            if args.theme is not None:
                prefs = store.set_theme_mode(args.theme)
        except ValueError as exc:
            print(f"Error: {exc}", file=sys.stderr)
            return 1
        except OSError as exc:
            print(f"Error: cannot write preferences: {exc}", file=sys.stderr)
            return 1
    elif args.command == "reset":
        try:
            prefs = store.reset()
        except OSError as exc:
            print(f"Error: cannot write preferences: {exc}", file=sys.stderr)
            return 1

    dump_json(preferences_json(store, prefs))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
