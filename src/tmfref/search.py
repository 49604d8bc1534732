"""Type-ahead artifact search over the flattened dataset.

Results follow dataset traversal order (zone, section, artifact); there is
no relevance ranking. Result caps are caller parameters.
"""
from __future__ import annotations

from tmfref.dataset import TMFDataset
from tmfref.models import Artifact, Section, Zone
from tmfref.textmatch import matches, matches_name_or_number

# Inline suggestion list under the search field.
DEFAULT_SUGGESTION_LIMIT = 10
# Full results sheet shown on submit.
DEFAULT_RESULTS_LIMIT = 25


def _cap(limit: int | None) -> int | None:
    if limit is None:
        return None
    return max(0, limit)


def suggest(
    dataset: TMFDataset,
    text: str,
    limit: int | None = DEFAULT_SUGGESTION_LIMIT,
) -> list[Artifact]:
    """Artifacts whose name or number contains *text*, at most *limit* of them.

    Empty *text* suppresses suggestions and returns an empty list. Passing
    ``limit=None`` returns every match.
    """
    if not text:
        return []
    cap = _cap(limit)
    results: list[Artifact] = []
    if cap == 0:
        return results
    for artifact in dataset.artifacts:
        if matches_name_or_number(artifact.name, artifact.number, text):
            results.append(artifact)
            if cap is not None and len(results) >= cap:
                break
    return results


def search_results(
    dataset: TMFDataset,
    text: str,
    limit: int | None = DEFAULT_RESULTS_LIMIT,
) -> list[Artifact]:
    """Full-results view of a search; same matching as :func:`suggest`."""
    return suggest(dataset, text, limit=limit)


def filter_zone_sections(zone: Zone, text: str) -> list[Section]:
    """Sections of *zone* matching *text* by section name or any artifact name."""
    if not text:
        return list(zone.sections)
    return [
        section
        for section in zone.sections
        if matches(section.name, text)
        or any(matches(a.name, text) for a in section.artifacts)
    ]
