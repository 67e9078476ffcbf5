from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator, Sequence

__all__ = ["Example", "Feature", "Scenario", "ScenarioKind", "tag_concordance"]


class ScenarioKind(Enum):
    BACKGROUND = "Background"
    SCENARIO = "Scenario"
    SCENARIO_OUTLINE = "Scenario Outline"


@dataclass(frozen=True)
class Example:
    """An examples table of a scenario outline."""

    name: str | None = None
    headers: Sequence[str] = field(default_factory=tuple)
    rows: Sequence[Sequence[str]] = field(default_factory=tuple)


@dataclass(frozen=True)
class Scenario:
    """
    A scenario, scenario outline or background.

    Steps are the raw step lines including their keyword, e.g. ``"Given a user"``.
    """

    name: str
    kind: ScenarioKind = ScenarioKind.SCENARIO
    tags: Sequence[str] = field(default_factory=tuple)
    steps: Sequence[str] = field(default_factory=tuple)
    examples: Sequence[Example] = field(default_factory=tuple)

    @property
    def is_background(self) -> bool:
        return self.kind is ScenarioKind.BACKGROUND

    @property
    def is_outline(self) -> bool:
        return self.kind is ScenarioKind.SCENARIO_OUTLINE


@dataclass(frozen=True)
class Feature:
    """A parsed feature file."""

    name: str
    filename: str
    description: str = ""
    tags: Sequence[str] = field(default_factory=tuple)
    scenarios: Sequence[Scenario] = field(default_factory=tuple)

    def testable_scenarios(self) -> Iterator[Scenario]:
        """Iterate over every scenario except the background."""
        return (scenario for scenario in self.scenarios if not scenario.is_background)


def tag_concordance(features: Sequence[Feature]) -> dict[str, int]:
    """Count every tag occurrence on features and scenarios."""
    counts: Counter[str] = Counter()
    for feature in features:
        counts.update(tag for tag in feature.tags if tag)
        for scenario in feature.testable_scenarios():
            counts.update(tag for tag in scenario.tags if tag)
    return dict(counts)
