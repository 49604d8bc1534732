"""Tests for tmfref.preferences: persisted appearance settings."""
from __future__ import annotations

from pathlib import Path

import orjson
import pytest

from tmfref.preferences import (
    ACCENT_COLORS,
    COLOR_SCHEME_KEY,
    DEFAULT_ACCENT_COLOR,
    DEFAULT_THEME_MODE,
    THEME_MODE_KEY,
    AppearancePreferences,
    PreferenceStore,
    default_preferences_path,
    normalize_accent_color,
    normalize_theme_mode,
    preferences_from_payload,
)


class TestVocabulary:
    def test_six_accent_colors_with_default(self) -> None:
        assert len(ACCENT_COLORS) == 6
        assert DEFAULT_ACCENT_COLOR == "#009CDF"
        assert DEFAULT_ACCENT_COLOR in ACCENT_COLORS.values()

    def test_normalize_accent(self) -> None:
        assert normalize_accent_color("#009cdf") == "#009CDF"
        assert normalize_accent_color("teal") == ACCENT_COLORS["Teal"]
        assert normalize_accent_color("#123456") is None
        assert normalize_accent_color(42) is None

    def test_normalize_theme(self) -> None:
        assert normalize_theme_mode("Dark") == "dark"
        assert normalize_theme_mode("sepia") is None
        assert normalize_theme_mode(None) is None

    def test_accent_name(self) -> None:
        assert AppearancePreferences().accent_name == "Blue"


class TestPayloadDecoding:
    def test_defaults_for_non_object(self) -> None:
        assert preferences_from_payload(None) == AppearancePreferences()
        assert preferences_from_payload(["dark"]) == AppearancePreferences()

    def test_unrecognized_values_fall_back(self) -> None:
        prefs = preferences_from_payload({COLOR_SCHEME_KEY: "#FFFFFF", THEME_MODE_KEY: "dark"})
        assert prefs == AppearancePreferences(accent_color=DEFAULT_ACCENT_COLOR, theme_mode="dark")


class TestPreferenceStore:
    def test_missing_file_uses_defaults(self, tmp_path: Path) -> None:
        store = PreferenceStore(tmp_path / "prefs.json")
        prefs = store.load()
        assert prefs.accent_color == DEFAULT_ACCENT_COLOR
        assert prefs.theme_mode == DEFAULT_THEME_MODE
        assert not store.path.exists()

    def test_corrupt_file_uses_defaults(self, tmp_path: Path) -> None:
        path = tmp_path / "prefs.json"
        path.write_text("{not json")
        assert PreferenceStore(path).load() == AppearancePreferences()

    def test_set_persists(self, tmp_path: Path) -> None:
        path = tmp_path / "nested" / "prefs.json"
        store = PreferenceStore(path)
        store.set_accent_color("Purple")
        store.set_theme_mode("light")
        stored = orjson.loads(path.read_bytes())
        assert stored == {
            COLOR_SCHEME_KEY: ACCENT_COLORS["Purple"],
            THEME_MODE_KEY: "light",
        }
        reloaded = PreferenceStore(path).load()
        assert reloaded == AppearancePreferences(
            accent_color=ACCENT_COLORS["Purple"], theme_mode="light",
        )

    def test_invalid_values_rejected(self, tmp_path: Path) -> None:
        store = PreferenceStore(tmp_path / "prefs.json")
        with pytest.raises(ValueError, match="Unknown accent color"):
            store.set_accent_color("#000000")
        with pytest.raises(ValueError, match="Unknown theme mode"):
            store.set_theme_mode("sepia")
        assert not store.path.exists()

    def test_subscribers_notified_on_change(self, tmp_path: Path) -> None:
        store = PreferenceStore(tmp_path / "prefs.json")
        seen: list[AppearancePreferences] = []
        unsubscribe = store.subscribe(seen.append)
        store.set_theme_mode("dark")
        store.set_theme_mode("dark")
        assert seen == [AppearancePreferences(theme_mode="dark")]
        unsubscribe()
        store.set_theme_mode("light")
        assert len(seen) == 1

    def test_reset(self, tmp_path: Path) -> None:
        store = PreferenceStore(tmp_path / "prefs.json")
        store.set_accent_color("Red")
        assert store.reset() == AppearancePreferences()
        assert PreferenceStore(store.path).load() == AppearancePreferences()

    def test_reset_before_load_with_defaults_is_silent(self, tmp_path: Path) -> None:
        store = PreferenceStore(tmp_path / "prefs.json")
        seen: list[AppearancePreferences] = []
        store.subscribe(seen.append)
        assert store.reset() == AppearancePreferences()
        assert seen == []
        assert store.path.exists()

    def test_reset_before_load_notifies_when_stored_differs(self, tmp_path: Path) -> None:
        path = tmp_path / "prefs.json"
        PreferenceStore(path).set_theme_mode("dark")
        store = PreferenceStore(path)
        seen: list[AppearancePreferences] = []
        store.subscribe(seen.append)
        store.reset()
        assert seen == [AppearancePreferences()]


class TestDefaultPath:
    def test_env_override(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("TMFREF_PREFERENCES_PATH", str(tmp_path / "p.json"))
        assert default_preferences_path() == tmp_path / "p.json"

    def test_home_default(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("TMFREF_PREFERENCES_PATH", raising=False)
        monkeypatch.setenv("HOME", str(tmp_path))
        assert default_preferences_path() == tmp_path / ".config" / "tmfref" / "preferences.json"
