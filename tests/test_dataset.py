"""Tests for tmfref.dataset loading, integrity checks and lookups."""
from __future__ import annotations

from pathlib import Path

import orjson
import pytest

from tmfref.dataset import (
    DEFAULT_DATA_PATH,
    DatasetIntegrityError,
    TMFDataset,
    default_dataset,
    load_dataset,
)
from tmfref.models import Artifact, Section, Zone


def _zone(number: str, *sections: Section) -> Zone:
    return Zone(number=number, name=f"Zone {number}", sections=sections)


def _section(number: str, *artifact_numbers: str) -> Section:
    return Section(
        number=number,
        name=f"Section {number}",
        artifacts=tuple(Artifact(number=n, name=f"Artifact {n}") for n in artifact_numbers),
    )


class TestZoneOrdering:
    def test_numeric_not_lexicographic(self) -> None:
        ds = TMFDataset([_zone("2"), _zone("10"), _zone("1")])
        assert [z.number for z in ds.zones] == ["1", "2", "10"]

    def test_malformed_numbers_sort_first_and_stable(self) -> None:
        ds = TMFDataset([_zone("3"), _zone("b"), _zone("a")])
        assert [z.number for z in ds.zones] == ["b", "a", "3"]

    def test_underscored_number_is_malformed(self) -> None:
        ds = TMFDataset([_zone("2"), _zone("1_0"), _zone("1")])
        assert [z.number for z in ds.zones] == ["1_0", "1", "2"]


class TestFlattening:
    def test_traversal_order(self) -> None:
        ds = TMFDataset([
            _zone("2", _section("2.01", "c")),
            _zone("1", _section("1.01", "a"), _section("1.02", "b")),
        ])
        assert [a.number for a in ds.artifacts] == ["a", "b", "c"]
        assert [s.number for s in ds.sections] == ["1.01", "1.02", "2.01"]


class TestIntegrity:
    def test_duplicate_zone(self) -> None:
        with pytest.raises(DatasetIntegrityError, match="zone number '1'"):
            TMFDataset([_zone("1"), _zone("1")])

    def test_duplicate_section_across_zones(self) -> None:
        with pytest.raises(DatasetIntegrityError, match="section number '1.01'"):
            TMFDataset([_zone("1", _section("1.01")), _zone("2", _section("1.01"))])

    def test_artifact_in_two_sections(self) -> None:
        with pytest.raises(DatasetIntegrityError, match="'a' appears in more than one section"):
            TMFDataset([_zone("1", _section("1.01", "a"), _section("1.02", "a"))])

    def test_empty_numbers(self) -> None:
        with pytest.raises(DatasetIntegrityError):
            TMFDataset([_zone("")])
        with pytest.raises(DatasetIntegrityError):
            TMFDataset([_zone("1", _section("1.01", ""))])

    def test_integrity_error_is_value_error(self) -> None:
        assert issubclass(DatasetIntegrityError, ValueError)


class TestFromPayload:
    def test_parses_records(self) -> None:
        payload = {
            "metadata": {"version": "3.3.1", "release_date": "2023-06-15"},
            "zones": [
                {
                    "number": "01",
                    "name": "Trial Management",
                    "sections": [
                        {
                            "number": "1.01",
                            "name": "Trial Oversight",
                            "artifacts": [
                                {
                                    "number": "01.01.01",
                                    "name": "Trial Master File Plan",
                                    "definition": "Plan.",
                                    "unique_id": "7",
                                    "trial_level_document": "X",
                                    "site_level_document": "",
                                    "unexpected_key": "ignored",
                                }
                            ],
                        }
                    ],
                }
            ],
        }
        ds = TMFDataset.from_payload(payload)
        assert ds.version == "3.3.1"
        assert ds.release_date == "2023-06-15"
        artifact = ds.artifacts[0]
        assert artifact.unique_id == 7
        assert artifact.trial_level_document == "X"
        assert artifact.site_level_document is None
        assert artifact.country_level_document is None

    def test_missing_metadata(self) -> None:
        ds = TMFDataset.from_payload({"zones": []})
        assert ds.version == "unknown"
        assert ds.release_date is None
        assert ds.artifacts == ()

    @pytest.mark.parametrize("payload", [None, [], "zones", {"zones": "x"}])
    def test_bad_shapes(self, payload: object) -> None:
        with pytest.raises(DatasetIntegrityError):
            TMFDataset.from_payload(payload)

    def test_missing_name(self) -> None:
        with pytest.raises(DatasetIntegrityError, match="missing 'name'"):
            TMFDataset.from_payload({"zones": [{"number": "01"}]})


class TestLoadDataset:
    def test_load_from_file(self, tmp_path: Path) -> None:
        path = tmp_path / "tmf.json"
        path.write_bytes(orjson.dumps({
            "metadata": {"version": "9.9"},
            "zones": [{"number": "1", "name": "Z", "sections": []}],
        }))
        ds = load_dataset(path)
        assert ds.version == "9.9"
        assert [z.number for z in ds.zones] == ["1"]

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            load_dataset(tmp_path / "nope.json")


class TestPackagedDataset:
    def test_fixture_exists(self) -> None:
        assert DEFAULT_DATA_PATH.exists()

    def test_version_and_shape(self) -> None:
        ds = default_dataset()
        assert ds.version == "3.3.1"
        assert [z.number for z in ds.zones] == [f"{i:02d}" for i in range(1, 12)]
        assert len(ds.artifacts) == 42

    def test_cached(self) -> None:
        assert default_dataset() is default_dataset()

    def test_zone_containing_round_trip(self) -> None:
        ds = default_dataset()
        for zone in ds.zones:
            for section in zone.sections:
                for artifact in section.artifacts:
                    assert ds.zone_containing(artifact.number) is zone
                    assert ds.section_containing(artifact.number) is section


class TestLookups:
    def setup_method(self) -> None:
        self.ds = TMFDataset([
            _zone("1", _section("1.01", "a", "b")),
            _zone("2", _section("2.01", "c")),
        ])

    def test_zone_containing(self) -> None:
        zone = self.ds.zone_containing("c")
        assert zone is not None
        assert zone.number == "2"

    def test_zone_containing_not_found(self) -> None:
        assert self.ds.zone_containing("zzz") is None
        assert self.ds.section_containing("zzz") is None

    def test_zone_containing_is_case_sensitive(self) -> None:
        assert self.ds.zone_containing("A") is None

    def test_by_number(self) -> None:
        assert self.ds.zone_by_number("1") is not None
        assert self.ds.section_by_number("2.01") is not None
        assert self.ds.artifact_by_number("b") is not None
        assert self.ds.zone_by_number(None) is None
        assert self.ds.section_by_number("") is None
        assert self.ds.artifact_by_number("nope") is None

    def test_zone_of_section(self) -> None:
        zone = self.ds.zone_of_section("1.01")
        assert zone is not None and zone.number == "1"
        assert self.ds.zone_of_section("9.99") is None

    def test_artifact_count(self) -> None:
        zone = self.ds.zone_by_number("1")
        assert zone is not None
        assert TMFDataset.artifact_count(zone) == 2
