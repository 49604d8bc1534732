"""Tests for tmfref.textmatch module."""
from tmfref.textmatch import matches, matches_name_or_number


class TestMatches:
    def test_empty_needle_always_matches(self) -> None:
        assert matches("Protocol", "") is True
        assert matches("", "") is True
        assert matches(None, "") is True

    def test_substring(self) -> None:
        assert matches("Protocol Synopsis", "Synop") is True

    def test_case_insensitive(self) -> None:
        assert matches("Protocol Synopsis", "protocol") is True
        assert matches("protocol synopsis", "SYNOPSIS") is True

    def test_casefold(self) -> None:
        assert matches("Straße", "STRASSE") is True

    def test_no_match(self) -> None:
        assert matches("Protocol", "brochure") is False

    def test_none_haystack(self) -> None:
        assert matches(None, "x") is False

    def test_number_fields(self) -> None:
        assert matches("02.01.02", "01.0") is True
        assert matches("02.01.02", "03") is False


class TestMatchesNameOrNumber:
    def test_name_hit(self) -> None:
        assert matches_name_or_number("Protocol", "02.01.02", "proto") is True

    def test_number_hit(self) -> None:
        assert matches_name_or_number("Protocol", "02.01.02", "02.01") is True

    def test_miss(self) -> None:
        assert matches_name_or_number("Protocol", "02.01.02", "diary") is False

    def test_empty_needle(self) -> None:
        assert matches_name_or_number("Protocol", "02.01.02", "") is True
