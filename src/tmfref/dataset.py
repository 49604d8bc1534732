"""In-memory TMF Reference Model dataset.

The dataset is loaded once from a JSON fixture and never mutated. Zones are
sorted numerically at construction and the flattened artifact list is
derived in traversal order (zone, then section, then artifact).

Fixture layout::

    {
      "metadata": {"version": "3.3.1", "release_date": "..."},
      "zones": [
        {"number": "01", "name": "...", "sections": [
          {"number": "1.01", "name": "...", "artifacts": [
            {"number": "01.01.01", "name": "...", "definition": "...", ...}
          ]}
        ]}
      ]
    }
"""
from __future__ import annotations

from pathlib import Path
from typing import Any

from tmfref.io_utils import load_json
from tmfref.models import (
    ARTIFACT_OPTIONAL_FIELDS,
    Artifact,
    Section,
    Zone,
    zone_sort_key,
)

DEFAULT_DATA_PATH = Path(__file__).resolve().parent / "data" / "tmf_reference_model.json"

# ---------- in-process cache for the packaged dataset ----------
_DEFAULT_DATASET: TMFDataset | None = None


class DatasetIntegrityError(ValueError):
    """Raised when fixture data violates the zone/section/artifact forest."""


class TMFDataset:
    """Read-only zone → section → artifact forest with lookup indexes."""

    def __init__(
        self,
        zones: list[Zone] | tuple[Zone, ...],
        *,
        version: str = "unknown",
        release_date: str | None = None,
    ) -> None:
        ordered = sorted(zones, key=lambda z: zone_sort_key(z.number))
        _check_integrity(ordered)
        self._zones: tuple[Zone, ...] = tuple(ordered)
        self._version = version
        self._release_date = release_date

        artifacts: list[Artifact] = []
        self._zone_by_number: dict[str, Zone] = {}
        self._section_by_number: dict[str, Section] = {}
        self._zone_of_section: dict[str, Zone] = {}
        self._section_of_artifact: dict[str, Section] = {}
        self._artifact_by_number: dict[str, Artifact] = {}
        for zone in self._zones:
            self._zone_by_number[zone.number] = zone
            for section in zone.sections:
                self._section_by_number[section.number] = section
                self._zone_of_section[section.number] = zone
                for artifact in section.artifacts:
                    self._section_of_artifact[artifact.number] = section
                    self._artifact_by_number[artifact.number] = artifact
                    artifacts.append(artifact)
        self._artifacts: tuple[Artifact, ...] = tuple(artifacts)

    def __repr__(self) -> str:
        return (
            f"TMFDataset(version={self._version!r}, zones={len(self._zones)}, "
            f"artifacts={len(self._artifacts)})"
        )

    @property
    def version(self) -> str:
        return self._version

    @property
    def release_date(self) -> str | None:
        return self._release_date

    @property
    def zones(self) -> tuple[Zone, ...]:
        """Zones sorted by the integer value of their number."""
        return self._zones

    @property
    def sections(self) -> tuple[Section, ...]:
        """Every section, in zone order."""
        return tuple(self._section_by_number.values())

    @property
    def artifacts(self) -> tuple[Artifact, ...]:
        """Flattened artifact list in traversal order."""
        return self._artifacts

    # ---------- lookups ----------

    def zone_by_number(self, number: str | None) -> Zone | None:
        if not number:
            return None
        return self._zone_by_number.get(number)

    def section_by_number(self, number: str | None) -> Section | None:
        if not number:
            return None
        return self._section_by_number.get(number)

    def artifact_by_number(self, number: str | None) -> Artifact | None:
        if not number:
            return None
        return self._artifact_by_number.get(number)

    def zone_containing(self, artifact_number: str) -> Zone | None:
        """Return the zone whose sections hold the artifact, or None."""
        section = self._section_of_artifact.get(artifact_number)
        if section is None:
            return None
        return self._zone_of_section[section.number]

    def section_containing(self, artifact_number: str) -> Section | None:
        """Return the section holding the artifact, or None."""
        return self._section_of_artifact.get(artifact_number)

    def zone_of_section(self, section_number: str) -> Zone | None:
        return self._zone_of_section.get(section_number)

    @staticmethod
    def artifact_count(zone: Zone) -> int:
        """Total artifacts across a zone's sections."""
        return sum(len(s.artifacts) for s in zone.sections)

    # ---------- construction ----------

    @classmethod
    def from_payload(cls, payload: Any) -> TMFDataset:
        """Build a dataset from a decoded fixture payload."""
        if not isinstance(payload, dict):
            raise DatasetIntegrityError("Dataset payload must be an object")
        metadata = payload.get("metadata")
        if not isinstance(metadata, dict):
            metadata = {}
        raw_zones = payload.get("zones")
        if not isinstance(raw_zones, list):
            raise DatasetIntegrityError("Dataset payload has no 'zones' list")
        version = str(metadata.get("version") or "").strip() or "unknown"
        release_date = str(metadata.get("release_date") or "").strip() or None
        return cls(
            [_parse_zone(z) for z in raw_zones],
            version=version,
            release_date=release_date,
        )


def load_dataset(path: Path) -> TMFDataset:
    """Load and validate a dataset fixture from disk."""
    if not path.exists():
        raise FileNotFoundError(f"Missing dataset at {path}")
    return TMFDataset.from_payload(load_json(path))


def default_dataset() -> TMFDataset:
    """Return the packaged dataset, loading it on first use."""
    global _DEFAULT_DATASET
    if _DEFAULT_DATASET is None:
        _DEFAULT_DATASET = load_dataset(DEFAULT_DATA_PATH)
    return _DEFAULT_DATASET


# ---------------------------------------------------------------------------
# Parsing
# ---------------------------------------------------------------------------

def _required_str(raw: dict[str, Any], key: str, kind: str) -> str:
    value = raw.get(key)
    if not isinstance(value, str | int) or isinstance(value, bool):
        raise DatasetIntegrityError(f"{kind} record is missing '{key}': {raw!r}")
    return str(value).strip()


def _optional_str(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value)
    return text if text.strip() else None


def _optional_int(value: Any) -> int | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def _parse_artifact(raw: Any) -> Artifact:
    if not isinstance(raw, dict):
        raise DatasetIntegrityError(f"Artifact record must be an object: {raw!r}")
    optional = {key: _optional_str(raw.get(key)) for key in ARTIFACT_OPTIONAL_FIELDS}
    return Artifact(
        number=_required_str(raw, "number", "Artifact"),
        name=_required_str(raw, "name", "Artifact"),
        definition=str(raw.get("definition") or ""),
        unique_id=_optional_int(raw.get("unique_id")),
        **optional,
    )


def _parse_section(raw: Any) -> Section:
    if not isinstance(raw, dict):
        raise DatasetIntegrityError(f"Section record must be an object: {raw!r}")
    artifacts = raw.get("artifacts") or []
    if not isinstance(artifacts, list):
        raise DatasetIntegrityError(f"Section 'artifacts' must be a list: {raw.get('number')!r}")
    return Section(
        number=_required_str(raw, "number", "Section"),
        name=_required_str(raw, "name", "Section"),
        artifacts=tuple(_parse_artifact(a) for a in artifacts),
    )


def _parse_zone(raw: Any) -> Zone:
    if not isinstance(raw, dict):
        raise DatasetIntegrityError(f"Zone record must be an object: {raw!r}")
    sections = raw.get("sections") or []
    if not isinstance(sections, list):
        raise DatasetIntegrityError(f"Zone 'sections' must be a list: {raw.get('number')!r}")
    return Zone(
        number=_required_str(raw, "number", "Zone"),
        name=_required_str(raw, "name", "Zone"),
        sections=tuple(_parse_section(s) for s in sections),
    )


def _check_integrity(zones: list[Zone]) -> None:
    """Fail fast on empty or repeated identity numbers anywhere in the forest."""
    seen_zones: set[str] = set()
    seen_sections: set[str] = set()
    seen_artifacts: set[str] = set()
    for zone in zones:
        if not zone.number:
            raise DatasetIntegrityError(f"Zone {zone.name!r} has an empty number")
        if zone.number in seen_zones:
            raise DatasetIntegrityError(f"Duplicate zone number {zone.number!r}")
        seen_zones.add(zone.number)
        for section in zone.sections:
            if not section.number:
                raise DatasetIntegrityError(
                    f"Section {section.name!r} in zone {zone.number!r} has an empty number"
                )
            if section.number in seen_sections:
                raise DatasetIntegrityError(f"Duplicate section number {section.number!r}")
            seen_sections.add(section.number)
            for artifact in section.artifacts:
                if not artifact.number:
                    raise DatasetIntegrityError(
                        f"Artifact {artifact.name!r} in section {section.number!r} "
                        "has an empty number"
                    )
                if artifact.number in seen_artifacts:
                    raise DatasetIntegrityError(
                        f"Artifact {artifact.number!r} appears in more than one section"
                    )
                seen_artifacts.add(artifact.number)
