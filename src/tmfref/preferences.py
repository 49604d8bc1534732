"""Appearance preferences persisted in a small JSON key-value file.

Two keys are stored:

* ``selectedColorScheme``: accent color hex code, one of ``ACCENT_COLORS``.
* ``selectedThemeMode``: ``"light"``, ``"dark"`` or ``"system"``.

Values are read once by :meth:`PreferenceStore.load`; absent, unreadable or
unrecognized values fall back to defaults. Setters validate, write the file
and notify subscribers with the new :class:`AppearancePreferences`.
"""
from __future__ import annotations

import os
from collections.abc import Callable
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any

import orjson

from tmfref.io_utils import load_json, save_json

COLOR_SCHEME_KEY = "selectedColorScheme"
THEME_MODE_KEY = "selectedThemeMode"

ENV_PREFERENCES_PATH = "TMFREF_PREFERENCES_PATH"

THEME_MODES: tuple[str, ...] = ("light", "dark", "system")
DEFAULT_THEME_MODE = "system"

# Display name -> hex code, in picker order.
ACCENT_COLORS: dict[str, str] = {
    "Blue": "#009CDF",
    "Teal": "#00A99D",
    "Green": "#4CAF50",
    "Orange": "#FF9500",
    "Purple": "#8E44AD",
    "Red": "#E53935",
}
DEFAULT_ACCENT_COLOR = "#009CDF"


@dataclass(frozen=True, slots=True)
class AppearancePreferences:
    """Immutable snapshot of appearance settings."""

    accent_color: str = DEFAULT_ACCENT_COLOR
    theme_mode: str = DEFAULT_THEME_MODE

    @property
    def accent_name(self) -> str:
        for name, hex_code in ACCENT_COLORS.items():
            if hex_code == self.accent_color:
                return name
        return self.accent_color


PreferencesListener = Callable[[AppearancePreferences], None]


def default_preferences_path() -> Path:
    """``$TMFREF_PREFERENCES_PATH`` if set, else ``~/.config/tmfref/preferences.json``."""
    override = os.environ.get(ENV_PREFERENCES_PATH, "").strip()
    if override:
        return Path(override).expanduser()
    return Path.home() / ".config" / "tmfref" / "preferences.json"


def normalize_accent_color(value: Any) -> str | None:
    """Canonical hex code for a known accent color (hex or name), else None."""
    if not isinstance(value, str):
        return None
    text = value.strip()
    for name, hex_code in ACCENT_COLORS.items():
        if text.upper() == hex_code.upper() or text.lower() == name.lower():
            return hex_code
    return None


def normalize_theme_mode(value: Any) -> str | None:
    if not isinstance(value, str):
        return None
    text = value.strip().lower()
    return text if text in THEME_MODES else None


def preferences_from_payload(payload: Any) -> AppearancePreferences:
    """Decode stored key-value data, substituting defaults for bad values."""
    if not isinstance(payload, dict):
        return AppearancePreferences()
    return AppearancePreferences(
        accent_color=normalize_accent_color(payload.get(COLOR_SCHEME_KEY)) or DEFAULT_ACCENT_COLOR,
        theme_mode=normalize_theme_mode(payload.get(THEME_MODE_KEY)) or DEFAULT_THEME_MODE,
    )


def preferences_to_payload(prefs: AppearancePreferences) -> dict[str, str]:
    return {
        COLOR_SCHEME_KEY: prefs.accent_color,
        THEME_MODE_KEY: prefs.theme_mode,
    }


class PreferenceStore:
    """JSON-file backed appearance preferences with change notification."""

    def __init__(self, path: Path | None = None) -> None:
        self._path = path if path is not None else default_preferences_path()
        self._current: AppearancePreferences | None = None
        self._listeners: list[PreferencesListener] = []

    @property
    def path(self) -> Path:
        return self._path

    @property
    def current(self) -> AppearancePreferences:
        """Current preferences, loading them on first access."""
        if self._current is None:
            return self.load()
        return self._current

    def load(self) -> AppearancePreferences:
        """Read the preference file, falling back to defaults."""
        payload: Any = None
        if self._path.exists():
            try:
                payload = load_json(self._path)
            except (OSError, orjson.JSONDecodeError):
                payload = None
        self._current = preferences_from_payload(payload)
        return self._current

    def subscribe(self, listener: PreferencesListener) -> Callable[[], None]:
        """Register *listener*; returns a callable that unregisters it."""
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def set_accent_color(self, value: str) -> AppearancePreferences:
        """Set the accent color by hex code or display name."""
        accent = normalize_accent_color(value)
        if accent is None:
            raise ValueError(
                f"Unknown accent color: {value!r} (expected one of {list(ACCENT_COLORS.values())})"
            )
        return self._update(replace(self.current, accent_color=accent))

    def set_theme_mode(self, value: str) -> AppearancePreferences:
        mode = normalize_theme_mode(value)
        if mode is None:
            raise ValueError(f"Unknown theme mode: {value!r} (expected one of {THEME_MODES})")
        return self._update(replace(self.current, theme_mode=mode))

    def reset(self) -> AppearancePreferences:
        """Restore and persist the default preferences."""
        return self._update(AppearancePreferences())

    def _update(self, prefs: AppearancePreferences) -> AppearancePreferences:
        previous = self.current
        save_json(preferences_to_payload(prefs), self._path)
        changed = prefs != previous
        self._current = prefs
        if changed:
            for listener in list(self._listeners):
                listener(prefs)
        return prefs
