"""Cascading multi-field artifact filters.

A selection narrows the dataset on four levels: document level (file type),
zone, section and artifact. The engine is stateless; every function takes
the dataset and the current selection explicitly.

Functions:

* ``available_options``: option lists for every level given a selection.
* ``transition``: apply one field change and clear dependent selections.
* ``apply_filters``: conjunctive filter over all artifacts.
* ``selection_to_json`` / ``selection_from_json``: JSON round-trip.

Unresolvable selection values (unknown numbers, unknown file types) are
treated as "no filter" everywhere and never raise.
"""
from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any, Literal

from tmfref.dataset import TMFDataset
from tmfref.models import FILE_TYPES, Artifact, Section, Zone
from tmfref.textmatch import matches, matches_name_or_number

FilterField = Literal["file_type", "zone", "section", "artifact"]

FILTER_FIELDS: tuple[FilterField, ...] = ("file_type", "zone", "section", "artifact")

# Artifact picker cap used by the filter sheet.
DEFAULT_ARTIFACT_OPTION_LIMIT = 50


# ---------------------------------------------------------------------------
# State types
# ---------------------------------------------------------------------------

def _blank_to_none(value: str | None) -> str | None:
    return value if value else None


@dataclass(frozen=True, slots=True)
class FilterSelection:
    """Selected value per level; ``None`` means no constraint."""

    file_type: str | None = None
    zone: str | None = None
    section: str | None = None
    artifact: str | None = None

    def __post_init__(self) -> None:
        for name in FILTER_FIELDS:
            object.__setattr__(self, name, _blank_to_none(getattr(self, name)))


@dataclass(frozen=True, slots=True)
class FilterSearchText:
    """Per-level free text narrowing that level's option list."""

    file_type: str = ""
    zone: str = ""
    section: str = ""
    artifact: str = ""


@dataclass(frozen=True, slots=True)
class FilterState:
    """Selection plus search texts, owned by the caller."""

    selection: FilterSelection = FilterSelection()
    search: FilterSearchText = FilterSearchText()


@dataclass(frozen=True, slots=True)
class FilterOption:
    """A pickable value and its label."""

    id: str
    display_name: str


@dataclass(frozen=True, slots=True)
class FilterOptions:
    """Option lists for every filter level."""

    file_types: tuple[FilterOption, ...]
    zones: tuple[FilterOption, ...]
    sections: tuple[FilterOption, ...]
    artifacts: tuple[FilterOption, ...]


def _option(number: str, name: str) -> FilterOption:
    return FilterOption(id=number, display_name=f"{number} - {name}")


# ---------------------------------------------------------------------------
# Derivations
# ---------------------------------------------------------------------------

def normalize_selection(dataset: TMFDataset, selection: FilterSelection) -> FilterSelection:
    """Drop selection values that do not resolve against *dataset*."""
    return FilterSelection(
        file_type=selection.file_type if selection.file_type in FILE_TYPES else None,
        zone=selection.zone if dataset.zone_by_number(selection.zone) else None,
        section=selection.section if dataset.section_by_number(selection.section) else None,
        artifact=selection.artifact if dataset.artifact_by_number(selection.artifact) else None,
    )


def candidate_artifacts(dataset: TMFDataset, selection: FilterSelection) -> list[Artifact]:
    """Artifacts in scope of the most specific selection.

    Precedence is artifact > section > zone > none.
    """
    artifact = dataset.artifact_by_number(selection.artifact)
    if artifact is not None:
        return [artifact]
    section = dataset.section_by_number(selection.section)
    if section is not None:
        return list(section.artifacts)
    zone = dataset.zone_by_number(selection.zone)
    if zone is not None:
        return zone.iter_artifacts()
    return list(dataset.artifacts)


def available_file_types(dataset: TMFDataset, selection: FilterSelection) -> list[str]:
    """Document levels present in the candidate set, in fixed display order."""
    candidates = candidate_artifacts(dataset, selection)
    present = {ft for a in candidates for ft in FILE_TYPES if a.has_level(ft)}
    return [ft for ft in FILE_TYPES if ft in present]


def available_zones(dataset: TMFDataset) -> list[Zone]:
    """Zone choice is never narrowed by other selections."""
    return list(dataset.zones)


def available_sections(dataset: TMFDataset, selection: FilterSelection) -> list[Section]:
    zone = dataset.zone_by_number(selection.zone)
    if zone is None:
        return list(dataset.sections)
    return list(zone.sections)


def available_artifacts(
    dataset: TMFDataset,
    selection: FilterSelection,
    search_text: str = "",
) -> list[Artifact]:
    """Artifacts scoped by section, else zone, else all, narrowed by *search_text*."""
    section = dataset.section_by_number(selection.section)
    zone = dataset.zone_by_number(selection.zone)
    if section is not None:
        scoped = list(section.artifacts)
    elif zone is not None:
        scoped = zone.iter_artifacts()
    else:
        scoped = list(dataset.artifacts)
    if not search_text:
        return scoped
    return [a for a in scoped if matches_name_or_number(a.name, a.number, search_text)]


def available_options(
    dataset: TMFDataset,
    selection: FilterSelection,
    search: FilterSearchText | None = None,
    *,
    artifact_limit: int | None = None,
) -> FilterOptions:
    """Option lists for all four levels, each narrowed by its own search text."""
    search = search or FilterSearchText()
    file_types = [
        ft for ft in available_file_types(dataset, selection) if matches(ft, search.file_type)
    ]
    zones = [
        z for z in available_zones(dataset)
        if matches_name_or_number(z.name, z.number, search.zone)
    ]
    sections = [
        s for s in available_sections(dataset, selection)
        if matches_name_or_number(s.name, s.number, search.section)
    ]
    artifacts = available_artifacts(dataset, selection, search.artifact)
    if artifact_limit is not None:
        artifacts = artifacts[: max(0, artifact_limit)]
    return FilterOptions(
        file_types=tuple(FilterOption(id=ft, display_name=ft) for ft in file_types),
        zones=tuple(_option(z.number, z.name) for z in zones),
        sections=tuple(_option(s.number, s.name) for s in sections),
        artifacts=tuple(_option(a.number, a.name) for a in artifacts),
    )


def selected_display_name(options: tuple[FilterOption, ...], value: str | None) -> str | None:
    """Label of the selected option, falling back to the raw value."""
    if not value:
        return None
    for option in options:
        if option.id == value:
            return option.display_name
    return value


# ---------------------------------------------------------------------------
# Cascade
# ---------------------------------------------------------------------------

# Selections cleared when a field changes.
_DEPENDENTS: dict[str, tuple[FilterField, ...]] = {
    "file_type": (),
    "zone": ("section", "artifact"),
    "section": ("artifact",),
    "artifact": (),
}


def transition(
    dataset: TMFDataset,
    state: FilterState,
    field: str,
    value: str | None,
) -> FilterState:
    """Return the state after setting *field* to *value*.

    Changing a zone clears section and artifact; changing a section clears
    artifact. After a zone, section or artifact change the file type is
    cleared if it is no longer available for the new scope. Every cleared
    or changed level also has its search text reset.
    """
    if field not in _DEPENDENTS:
        raise ValueError(f"Unknown filter field: {field!r} (expected one of {FILTER_FIELDS})")

    value = _blank_to_none(value)
    if getattr(state.selection, field) == value:
        return state

    selection_changes: dict[str, str | None] = {field: value}
    search_changes: dict[str, str] = {field: ""}
    for dependent in _DEPENDENTS[field]:
        selection_changes[dependent] = None
        search_changes[dependent] = ""
    selection = replace(state.selection, **selection_changes)

    if field != "file_type" and selection.file_type is not None:
        if selection.file_type not in available_file_types(dataset, selection):
            selection = replace(selection, file_type=None)
            search_changes["file_type"] = ""

    return FilterState(selection=selection, search=replace(state.search, **search_changes))


def clear_field(dataset: TMFDataset, state: FilterState, field: str) -> FilterState:
    """Clear one level, cascading like any other change."""
    return transition(dataset, state, field, None)


def clear_all() -> FilterState:
    return FilterState()


def has_active_filters(selection: FilterSelection) -> bool:
    return any(getattr(selection, name) for name in FILTER_FIELDS)


# ---------------------------------------------------------------------------
# Apply
# ---------------------------------------------------------------------------

def apply_filters(dataset: TMFDataset, selection: FilterSelection) -> list[Artifact]:
    """Artifacts satisfying every active selection, in traversal order.

    Starts from all artifacts rather than the scoped candidate set; each
    active field is an independent predicate and they are ANDed together.
    """
    sel = normalize_selection(dataset, selection)
    results: list[Artifact] = []
    for artifact in dataset.artifacts:
        if sel.file_type is not None and not artifact.has_level(sel.file_type):
            continue
        if sel.zone is not None:
            zone = dataset.zone_containing(artifact.number)
            if zone is None or zone.number != sel.zone:
                continue
        if sel.section is not None:
            section = dataset.section_containing(artifact.number)
            if section is None or section.number != sel.section:
                continue
        if sel.artifact is not None and artifact.number != sel.artifact:
            continue
        results.append(artifact)
    return results


# ---------------------------------------------------------------------------
# JSON serialization
# ---------------------------------------------------------------------------

def selection_to_json(selection: FilterSelection) -> dict[str, str]:
    """Serialize only the active fields of a selection."""
    out: dict[str, str] = {}
    for name in FILTER_FIELDS:
        value = getattr(selection, name)
        if value:
            out[name] = value
    return out


def selection_from_json(data: Any) -> FilterSelection:
    """Deserialize a selection; unknown keys and non-string values are ignored.

    Raises ``ValueError`` when *data* is not an object.
    """
    if not isinstance(data, dict):
        raise ValueError("Filter selection payload must be an object")
    values: dict[str, str] = {}
    for name in FILTER_FIELDS:
        value = data.get(name)
        if isinstance(value, str):
            values[name] = value
    return FilterSelection(**values)
