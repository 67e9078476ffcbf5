from __future__ import annotations

import re
from typing import Iterable, Sequence

from .model import Feature, Scenario

__all__ = ["format_locations", "levenshtein", "location", "normalize_tag", "tag_locations"]

_SEPARATORS = re.compile(r"[_\-.]")


def normalize_tag(tag: str) -> str:
    """Strip the ``@`` sigil, lowercase and drop ``_``, ``-`` and ``.`` separators."""
    return _SEPARATORS.sub("", tag.lstrip("@").lower())


def levenshtein(s1: str, s2: str) -> int:
    """Minimum number of single character insertions, deletions and substitutions."""
    if len(s1) < len(s2):
        s1, s2 = s2, s1
    previous = list(range(len(s2) + 1))
    for i, c1 in enumerate(s1, start=1):
        current = [i]
        for j, c2 in enumerate(s2, start=1):
            current.append(
                min(previous[j] + 1, current[j - 1] + 1, previous[j - 1] + (c1 != c2))
            )
        previous = current
    return previous[-1]


def location(feature: Feature, scenario: Scenario | None = None) -> str:
    if scenario is None:
        return feature.filename
    return f"{feature.filename} - {scenario.name}"


def tag_locations(features: Iterable[Feature], tag: str) -> list[str]:
    """Every feature and scenario carrying ``tag``, compared case-insensitively."""
    wanted = tag.lower()
    found: list[str] = []
    for feature in features:
        if any(t.lower() == wanted for t in feature.tags if t):
            found.append(location(feature))
        for scenario in feature.testable_scenarios():
            if any(t.lower() == wanted for t in scenario.tags if t):
                found.append(location(feature, scenario))
    return found


def format_locations(locations: Sequence[str], limit: int = 3) -> str:
    if len(locations) > limit:
        return f"{', '.join(locations[:limit])} and {len(locations) - limit} more"
    return ", ".join(locations)
