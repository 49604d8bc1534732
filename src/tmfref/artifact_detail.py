"""Derived views of a single artifact for detail screens and exports."""
from __future__ import annotations

from typing import Any

from tmfref.dataset import TMFDataset
from tmfref.models import FILE_TYPES, FLAG_SET, Artifact

_ICH_FIELDS = ("ich_code", "iso14155_reference")
_DOCUMENT_FIELDS = ("sponsor_document", "investigator_document")
_PROCESS_FIELDS = ("process_number", "process_name")
_LEVEL_FIELDS = ("trial_level_document", "country_level_document", "site_level_document")
_ADDITIONAL_FIELDS = ("dating_convention", "translation_required", "wet_ink_signature")


def _any_present(artifact: Artifact, fields: tuple[str, ...]) -> bool:
    return any(getattr(artifact, name) for name in fields)


def has_ich_metadata(artifact: Artifact) -> bool:
    return _any_present(artifact, _ICH_FIELDS)


def has_document_metadata(artifact: Artifact) -> bool:
    return _any_present(artifact, _DOCUMENT_FIELDS)


def has_process_metadata(artifact: Artifact) -> bool:
    return _any_present(artifact, _PROCESS_FIELDS)


def has_level_metadata(artifact: Artifact) -> bool:
    return _any_present(artifact, _LEVEL_FIELDS)


def has_additional_metadata(artifact: Artifact) -> bool:
    return _any_present(artifact, _ADDITIONAL_FIELDS)


def subartifact_list(artifact: Artifact) -> list[str]:
    """Recommended sub-artifacts, one per non-blank line, trimmed."""
    raw = artifact.recommended_subartifacts or ""
    return [line.strip() for line in raw.split("\n") if line.strip()]


def applicable_levels(artifact: Artifact) -> list[str]:
    """Document levels flagged on the artifact, in fixed display order."""
    return [ft for ft in FILE_TYPES if artifact.has_level(ft)]


def is_sponsor_document(artifact: Artifact) -> bool:
    return artifact.sponsor_document == FLAG_SET


def is_investigator_document(artifact: Artifact) -> bool:
    return artifact.investigator_document == FLAG_SET


def formatted_unique_id(artifact: Artifact) -> str | None:
    """Zero-padded three-digit unique id, e.g. ``7`` -> ``"007"``."""
    if artifact.unique_id is None:
        return None
    return f"{artifact.unique_id:03d}"


def artifact_summary(artifact: Artifact, dataset: TMFDataset | None = None) -> dict[str, Any]:
    """JSON-ready description of an artifact.

    When *dataset* is given, the owning zone and section numbers are
    included; they are ``None`` if the artifact is not part of it.
    """
    summary: dict[str, Any] = {
        "number": artifact.number,
        "name": artifact.name,
        "definition": artifact.definition,
        "core_recommended": artifact.core_recommended,
        "unique_id": formatted_unique_id(artifact),
        "levels": applicable_levels(artifact),
        "sponsor_document": is_sponsor_document(artifact),
        "investigator_document": is_investigator_document(artifact),
        "subartifacts": subartifact_list(artifact),
    }
    if has_ich_metadata(artifact):
        summary["ich"] = {
            "ich_code": artifact.ich_code,
            "iso14155_reference": artifact.iso14155_reference,
        }
    if has_process_metadata(artifact):
        summary["process"] = {
            "number": artifact.process_number,
            "name": artifact.process_name,
        }
    if has_additional_metadata(artifact):
        summary["additional"] = {
            "dating_convention": artifact.dating_convention,
            "translation_required": artifact.translation_required == FLAG_SET,
            "wet_ink_signature": artifact.wet_ink_signature,
        }
    if dataset is not None:
        zone = dataset.zone_containing(artifact.number)
        section = dataset.section_containing(artifact.number)
        summary["zone"] = zone.number if zone else None
        summary["section"] = section.number if section else None
    return summary
