"""Fixtures for running gherkin-hygiene against throwaway projects."""
from __future__ import annotations

from pathlib import Path
from tempfile import TemporaryDirectory
from typing import Iterable

from behave import fixture, use_fixture
from behave.model import Examples, Feature, Row, Scenario, ScenarioOutline, Table

from features.steps.hygiene_env import HygieneContext, HygieneEnvironment
from gherkin_hygiene.warning import WarningKind


@fixture
def hygiene_environment(context: HygieneContext) -> Iterable[HygieneEnvironment]:
    with TemporaryDirectory() as tmp_dir:
        hygiene = HygieneEnvironment(_path=Path(tmp_dir), verbose=False, project_files={})
        context.hygiene = hygiene
        yield hygiene


def add_warning_kinds(feature: Feature):
    """Expand outlines tagged ``fixture.warning_kinds`` with one example row per warning kind."""
    headings = ["kind"]

    if feature.scenarios is None:
        return
    for scenario in feature.scenarios:
        if scenario.tags is None:
            continue
        if "fixture.warning_kinds" in scenario.tags and isinstance(scenario, ScenarioOutline):
            rows = [Row(headings=headings, cells=[kind.name]) for kind in WarningKind]
            table = Table(
                headings=headings,
                rows=rows,
            )
            example = Examples(
                filename=scenario.filename,
                line=scenario.line,
                keyword=scenario.keyword,
                name="Warning kinds",
                table=table,
            )
            if scenario.examples:
                scenario.examples.append(example)
            else:
                scenario.examples = [example]


def before_scenario(context: HygieneContext, _scenario: Scenario):
    use_fixture(hygiene_environment, context)


def before_feature(_context: HygieneContext, feature: Feature):
    add_warning_kinds(feature)
