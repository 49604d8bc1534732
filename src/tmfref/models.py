"""Record types for the TMF Reference Model: zones, sections and artifacts.

Records are immutable. Equality and hashing use the ``number`` identity
field only, so two records with the same number compare equal regardless
of their descriptive fields.
"""
from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Literal

# ---------------------------------------------------------------------------
# Vocabularies
# ---------------------------------------------------------------------------

FileType = Literal["Trial", "Country", "Site"]

# Fixed display order for document levels.
FILE_TYPES: tuple[FileType, ...] = ("Trial", "Country", "Site")

# Artifact attribute holding the "X" flag for each document level.
LEVEL_FLAG_FIELDS: dict[str, str] = {
    "Trial": "trial_level_document",
    "Country": "country_level_document",
    "Site": "site_level_document",
}

FLAG_SET = "X"

CORE = "Core"
RECOMMENDED = "Recommended"
CORE_RECOMMENDED_VALUES: frozenset[str] = frozenset({CORE, RECOMMENDED})

# Optional string attributes of an artifact, in dataset column order.
ARTIFACT_OPTIONAL_FIELDS: tuple[str, ...] = (
    "recommended_subartifacts",
    "core_recommended",
    "ich_code",
    "iso14155_reference",
    "artifact_name_v13",
    "sponsor_document",
    "investigator_document",
    "process_number",
    "process_name",
    "trial_level_document",
    "trial_level_milestone",
    "country_level_document",
    "country_level_milestone",
    "site_level_document",
    "site_level_milestone",
    "dating_convention",
    "artifact_owner",
    "artifact_location",
    "wet_ink_signature",
    "sop_reference",
    "translation_required",
    "current_artifact_name",
    "additional_metadata",
)


# ---------------------------------------------------------------------------
# Records
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class Artifact:
    """Leaf document-type record with descriptive metadata."""

    number: str
    name: str = field(compare=False)
    definition: str = field(default="", compare=False)
    recommended_subartifacts: str | None = field(default=None, compare=False)
    core_recommended: str | None = field(default=None, compare=False)
    ich_code: str | None = field(default=None, compare=False)
    iso14155_reference: str | None = field(default=None, compare=False)
    artifact_name_v13: str | None = field(default=None, compare=False)
    unique_id: int | None = field(default=None, compare=False)
    sponsor_document: str | None = field(default=None, compare=False)
    investigator_document: str | None = field(default=None, compare=False)
    process_number: str | None = field(default=None, compare=False)
    process_name: str | None = field(default=None, compare=False)
    trial_level_document: str | None = field(default=None, compare=False)
    trial_level_milestone: str | None = field(default=None, compare=False)
    country_level_document: str | None = field(default=None, compare=False)
    country_level_milestone: str | None = field(default=None, compare=False)
    site_level_document: str | None = field(default=None, compare=False)
    site_level_milestone: str | None = field(default=None, compare=False)
    dating_convention: str | None = field(default=None, compare=False)
    artifact_owner: str | None = field(default=None, compare=False)
    artifact_location: str | None = field(default=None, compare=False)
    wet_ink_signature: str | None = field(default=None, compare=False)
    sop_reference: str | None = field(default=None, compare=False)
    translation_required: str | None = field(default=None, compare=False)
    current_artifact_name: str | None = field(default=None, compare=False)
    additional_metadata: str | None = field(default=None, compare=False)

    def has_level(self, file_type: str) -> bool:
        """True when the artifact is flagged for the given document level."""
        attr = LEVEL_FLAG_FIELDS.get(file_type)
        if attr is None:
            return False
        return getattr(self, attr) == FLAG_SET

    @property
    def is_core(self) -> bool:
        return self.core_recommended == CORE


@dataclass(frozen=True, slots=True)
class Section:
    """Subdivision of a zone holding an ordered run of artifacts."""

    number: str
    name: str = field(compare=False)
    artifacts: tuple[Artifact, ...] = field(default=(), compare=False)

    @property
    def display_number(self) -> str:
        return format_section_number(self.number)


@dataclass(frozen=True, slots=True)
class Zone:
    """Top-level taxonomy category."""

    number: str
    name: str = field(compare=False)
    sections: tuple[Section, ...] = field(default=(), compare=False)

    def iter_artifacts(self) -> list[Artifact]:
        """Artifacts of every section, in section order."""
        return [a for s in self.sections for a in s.artifacts]


# ---------------------------------------------------------------------------
# Number helpers
# ---------------------------------------------------------------------------

# Plain ASCII integers; int() also accepts "1_0", " 2" and non-ASCII digits.
_INTEGER_RE = re.compile(r"[+-]?[0-9]+")


def format_section_number(number: str) -> str:
    """Pad the first component of a dotted section number to two digits.

    ``"1.01"`` becomes ``"01.01"``; ``"10.01"`` is unchanged. Values with
    fewer than two components, or whose first component is not an integer,
    are returned as-is.
    """
    parts = number.split(".")
    if len(parts) < 2:
        return number
    if not _INTEGER_RE.fullmatch(parts[0]):
        return number
    first = int(parts[0])
    return f"{first:02d}." + ".".join(parts[1:])


def zone_sort_key(number: str) -> int:
    """Integer sort key for a zone number; malformed values sort as 0."""
    if not _INTEGER_RE.fullmatch(number):
        return 0
    return int(number)
