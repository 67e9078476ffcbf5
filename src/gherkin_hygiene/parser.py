"""Load feature files with behave's parser and convert them to the immutable model."""
from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Any, Iterable, Iterator, Pattern, Sequence

from behave.model import Examples, ScenarioOutline
from behave.parser import ParserError, parse_file

from .model import Example, Feature, Scenario, ScenarioKind

logger = logging.getLogger(__name__)

__all__ = [
    "DEFAULT_INCLUDE",
    "FeatureParseError",
    "load_feature",
    "load_features",
    "resolve_feature_files",
]

DEFAULT_INCLUDE = re.compile(r"\.feature$")


class FeatureParseError(Exception):
    """A feature file could not be parsed."""

    def __init__(self, path: Path, reason: str):
        super().__init__(f"{path}: {reason}")
        self.path = path.as_posix()
        self.reason = reason


def resolve_feature_files(
    paths: Iterable[Path], include: Pattern[str] = DEFAULT_INCLUDE
) -> list[Path]:
    """Recursively search directories for feature files; files are taken as given."""
    found = [
        file_
        for part in paths
        for file_ in (sorted(part.rglob("*")) if part.is_dir() else [part])
        if include.search(file_.as_posix()) and file_.is_file()
    ]
    return list(dict.fromkeys(found))


def _tags(tags: Iterable[Any] | None) -> tuple[str, ...]:
    # behave strips the sigil
    return tuple(f"@{tag}" for tag in tags or ())


def _steps(steps: Iterable[Any] | None) -> tuple[str, ...]:
    return tuple(f"{step.keyword} {step.name}".strip() for step in steps or ())


def _example(examples: Examples) -> Example:
    table = examples.table
    if table is None:
        return Example(name=examples.name or None)
    return Example(
        name=examples.name or None,
        headers=tuple(table.headings),
        rows=tuple(tuple(row.cells) for row in table.rows or ()),
    )


def _background(background: Any) -> Scenario:
    return Scenario(
        name=background.name or "Background",
        kind=ScenarioKind.BACKGROUND,
        steps=_steps(background.steps),
    )


def _scenario(scenario: Any) -> Scenario:
    if isinstance(scenario, ScenarioOutline):
        return Scenario(
            name=scenario.name,
            kind=ScenarioKind.SCENARIO_OUTLINE,
            tags=_tags(scenario.tags),
            steps=_steps(scenario.steps),
            examples=tuple(_example(examples) for examples in scenario.examples or ()),
        )
    return Scenario(name=scenario.name, tags=_tags(scenario.tags), steps=_steps(scenario.steps))


def _scenarios(container: Any) -> Iterator[Scenario]:
    if getattr(container, "background", None) is not None:
        yield _background(container.background)
    for scenario in container.scenarios or ():
        yield _scenario(scenario)
    # Rule blocks are flattened into the feature.
    for rule in getattr(container, "rules", None) or ():
        yield from _scenarios(rule)


def load_feature(path: Path) -> Feature | None:
    """Parse a single feature file. Files without a feature yield None."""
    try:
        parsed = parse_file(path.as_posix())
    except ParserError as e:
        raise FeatureParseError(path, str(e)) from e
    except UnicodeDecodeError as e:
        raise FeatureParseError(path, f"not a text file ({e.reason})") from e
    if parsed is None:
        logger.debug("%s contains no feature", path)
        return None
    return Feature(
        name=parsed.name,
        filename=path.as_posix(),
        description="\n".join(parsed.description or ()),
        tags=_tags(parsed.tags),
        scenarios=tuple(_scenarios(parsed)),
    )


def load_features(paths: Sequence[Path]) -> list[Feature]:
    features = [feature for feature in map(load_feature, paths) if feature is not None]
    logger.debug("Loaded %d features from %d files", len(features), len(paths))
    return features
