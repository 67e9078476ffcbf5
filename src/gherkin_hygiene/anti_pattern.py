"""
Detect structural and linguistic anti-patterns in scenarios.

These rules look only at scenario structure and step text; tags play no part. Every rule skips
backgrounds, and a rule whose warning kinds are all disabled is never run.
"""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, ClassVar, Iterable, Iterator, Mapping, Pattern, Sequence

from .config import DetectorConfiguration
from .detector import Detector, run_detectors
from .model import Feature, Scenario
from .tags import location
from .warning import Warning, WarningKind

logger = logging.getLogger(__name__)

__all__ = [
    "DEFAULT_ANTI_PATTERN_DETECTORS",
    "AntiPatternAnalyzer",
    "StepType",
    "classify_steps",
]


class StepType(Enum):
    UNKNOWN = "Unknown"
    GIVEN = "Given"
    WHEN = "When"
    THEN = "Then"


_KEYWORD = re.compile(r"^\s*(given|when|then|and|but)\s+", re.IGNORECASE)
_KEYWORD_TYPES = {"given": StepType.GIVEN, "when": StepType.WHEN, "then": StepType.THEN}


def classify_steps(steps: Iterable[str]) -> Iterator[tuple[str, StepType]]:
    """
    Pair every step with its Given/When/Then type.

    And/But steps take the type of the closest preceding step. Steps without a recognized keyword
    keep the current type as well.
    """
    current = StepType.UNKNOWN
    for step in steps:
        match = _KEYWORD.match(step)
        if match:
            current = _KEYWORD_TYPES.get(match.group(1).lower(), current)
        yield step, current


def step_body(step: str) -> str:
    """The step text without its leading keyword."""
    return _KEYWORD.sub("", step, count=1)


class ScenarioDetector(Detector):
    """A detector that looks at one testable scenario at a time."""

    def detect(
        self,
        features: Sequence[Feature],
        concordance: Mapping[str, int],
        config: DetectorConfiguration,
    ) -> list[Warning]:
        warnings: list[Warning] = []
        for feature in features:
            for scenario in feature.testable_scenarios():
                steps = [step for step in scenario.steps if step]
                warnings += self.check(feature, scenario, steps, config)
        return warnings

    def check(
        self,
        feature: Feature,
        scenario: Scenario,
        steps: Sequence[str],
        config: DetectorConfiguration,
    ) -> Iterable[Warning]:
        raise NotImplementedError("Subclasses must implement check()")


class StepCountDetector(ScenarioDetector):
    kinds = (WarningKind.LONG_SCENARIO, WarningKind.TOO_FEW_STEPS)

    def check(
        self,
        feature: Feature,
        scenario: Scenario,
        steps: Sequence[str],
        config: DetectorConfiguration,
    ) -> Iterable[Warning]:
        count = len(steps)
        limits = config.thresholds
        if count > limits.max_steps and config.is_enabled(WarningKind.LONG_SCENARIO):
            yield self.warning(
                config,
                WarningKind.LONG_SCENARIO,
                f"Scenario has {count} steps (recommended maximum: {limits.max_steps})",
                location(feature, scenario),
                [
                    "Break the scenario into multiple smaller, focused scenarios",
                    "Consider using a Background for shared setup steps",
                    "Use higher-level steps that encapsulate multiple actions",
                    "Focus each scenario on testing a single behavior or rule",
                ],
            )
        if count < limits.min_steps and config.is_enabled(WarningKind.TOO_FEW_STEPS):
            yield self.warning(
                config,
                WarningKind.TOO_FEW_STEPS,
                f"Scenario has only {count} step(s) (recommended minimum: {limits.min_steps})",
                location(feature, scenario),
                [
                    "A complete scenario typically needs at least setup (Given) and "
                    "verification (Then) steps",
                    "Consider if this is a valid standalone scenario or should be combined with "
                    "another",
                ],
            )


class GivenWhenThenDetector(ScenarioDetector):
    """Scenarios lacking a Given, a When or a Then step."""

    kinds = (WarningKind.MISSING_GIVEN, WarningKind.MISSING_WHEN, WarningKind.MISSING_THEN)
    remediation: ClassVar[Mapping[StepType, Sequence[str]]] = {
        StepType.GIVEN: (
            "Add a Given step to establish the initial context/state",
            "Every scenario should describe the starting state with Given steps",
        ),
        StepType.WHEN: (
            "Add a When step to describe the action being tested",
            "When steps represent the action or event that triggers the scenario",
        ),
        StepType.THEN: (
            "Add a Then step to verify the expected outcome",
            "Then steps assert the expected results after the action",
        ),
    }

    def check(
        self,
        feature: Feature,
        scenario: Scenario,
        steps: Sequence[str],
        config: DetectorConfiguration,
    ) -> Iterable[Warning]:
        present = {step_type for _, step_type in classify_steps(steps)}
        for kind, step_type in zip(self.kinds, (StepType.GIVEN, StepType.WHEN, StepType.THEN)):
            if step_type in present or not config.is_enabled(kind):
                continue
            yield self.warning(
                config,
                kind,
                f"Scenario is missing a {step_type.value} step",
                location(feature, scenario),
                self.remediation[step_type],
            )


class StepOrderDetector(ScenarioDetector):
    """
    Walk the steps as a small state machine over Given, When and Then.

    The state starts as unknown for every scenario and follows the type of each step, And/But
    included. A transition listed in ``violations`` is reported with the offending step.
    """

    kinds = (WarningKind.INCORRECT_STEP_ORDER,)
    violations: ClassVar[frozenset[tuple[StepType, StepType]]] = frozenset(
        {
            (StepType.THEN, StepType.WHEN),
            (StepType.WHEN, StepType.GIVEN),
            (StepType.THEN, StepType.GIVEN),
        }
    )

    def check(
        self,
        feature: Feature,
        scenario: Scenario,
        steps: Sequence[str],
        config: DetectorConfiguration,
    ) -> Iterable[Warning]:
        state = StepType.UNKNOWN
        for step, step_type in classify_steps(steps):
            if (state, step_type) in self.violations:
                yield self.warning(
                    config,
                    WarningKind.INCORRECT_STEP_ORDER,
                    f'{step_type.value} step after {state.value} step: "{step}"',
                    location(feature, scenario),
                    [
                        "Follow the Given-When-Then sequence (setup, action, verification)",
                        "Given steps should come before When steps",
                        "When steps should come before Then steps",
                        "Consider restructuring the scenario if the current flow doesn't fit "
                        "the pattern",
                    ],
                )
            state = step_type


class PatternStepDetector(ScenarioDetector):
    """Steps matching any of ``patterns``; at most one warning per step."""

    patterns: ClassVar[Sequence[Pattern[str]]] = ()
    message: ClassVar[str] = ""
    remediation: ClassVar[Sequence[str]] = ()

    def check(
        self,
        feature: Feature,
        scenario: Scenario,
        steps: Sequence[str],
        config: DetectorConfiguration,
    ) -> Iterable[Warning]:
        (kind,) = self.kinds
        for step in steps:
            if any(pattern.search(step) for pattern in self.patterns):
                yield self.warning(
                    config,
                    kind,
                    f'{self.message}: "{step}"',
                    location(feature, scenario),
                    self.remediation,
                )


class UiFocusedStepDetector(PatternStepDetector):
    kinds = (WarningKind.UI_FOCUSED_STEP,)
    patterns = [
        re.compile(p, re.IGNORECASE)
        for p in (
            r"click(s|ed|ing)?\s+(on\s+)?the\s+",
            r"select(s|ed|ing)?\s+(from\s+)?the\s+",
            r"enter(s|ed|ing)?\s+.+\s+into\s+the\s+",
            r"typ(e|es|ed|ing)\s+.+\s+into\s+the\s+",
            r"navigat(e|es|ed|ing)\s+to\s+",
            r"scroll(s|ed|ing)?\s+(down|up|to)\s+",
            r"hover(s|ed|ing)?\s+over\s+the\s+",
            r"drag(s|ged|ging)?\s+.+\s+to\s+",
            r"check(s|ed|ing)?\s+the\s+checkbox",
            r"upload(s|ed|ing)?\s+file",
        )
    ]
    message = "Step contains UI-focused language"
    remediation = (
        "Focus on the business behavior rather than UI implementation",
        "Replace UI actions with higher-level business actions",
        'Example: Instead of "When I click the Submit button", use "When I submit the form"',
        "UI details belong in step definitions, not in the Gherkin",
    )


class ImplementationDetailDetector(PatternStepDetector):
    kinds = (WarningKind.IMPLEMENTATION_DETAIL,)
    patterns = [
        re.compile(p, re.IGNORECASE)
        for p in (
            r"\bjs\b|javascript",
            r"\bcss\b|stylesheet",
            r"\bapi\s+endpoint",
            r"\bhttp\b|\burl\b|\buri\b",
            r"\bdatabase\b|\bsql\b|\bquery\b",
            r"\belement\s+id\b|\bxpath\b|\bcss\s+selector\b",
            r"\bwait\s+for\b|\btimeout\b|\bdelay\b",
        )
    ]
    message = "Step contains technical implementation details"
    remediation = (
        "Remove technical implementation details from scenario steps",
        "Focus on business behavior and outcomes, not technical details",
        "Technical details belong in step definitions, not in the Gherkin",
        'Example: Instead of "When the API returns 200 OK", use "When the operation succeeds"',
    )


class ScenarioOutlineDetector(ScenarioDetector):
    """Scenario outlines without examples, or with too few example rows."""

    kinds = (WarningKind.MISSING_EXAMPLES, WarningKind.TOO_FEW_EXAMPLES)

    def check(
        self,
        feature: Feature,
        scenario: Scenario,
        steps: Sequence[str],
        config: DetectorConfiguration,
    ) -> Iterable[Warning]:
        if not scenario.is_outline:
            return
        if not scenario.examples:
            if config.is_enabled(WarningKind.MISSING_EXAMPLES):
                yield self.warning(
                    config,
                    WarningKind.MISSING_EXAMPLES,
                    "Scenario Outline has no Examples tables",
                    location(feature, scenario),
                    [
                        "Add at least one Examples table to the Scenario Outline",
                        "Scenario Outlines require examples to generate test cases",
                    ],
                )
            return
        if not config.is_enabled(WarningKind.TOO_FEW_EXAMPLES):
            return
        minimum = config.thresholds.min_examples
        for example in scenario.examples:
            rows = len(example.rows)
            if rows >= minimum:
                continue
            yield self.warning(
                config,
                WarningKind.TOO_FEW_EXAMPLES,
                f"Examples table '{example.name or 'unnamed'}' has only {rows} row(s) "
                f"(recommended minimum: {minimum})",
                location(feature, scenario),
                [
                    "Add more example rows to better test the scenario variations",
                    "Include both positive and negative test cases",
                    "Consider boundary values and edge cases",
                ],
            )


def truncate(text: str, width: int = 50) -> str:
    return text if len(text) <= width else text[: width - 3] + "..."


class NamingDetector(ScenarioDetector):
    """Overly long scenario names and step texts."""

    kinds = (WarningKind.LONG_SCENARIO_NAME, WarningKind.LONG_STEP_TEXT)

    def check(
        self,
        feature: Feature,
        scenario: Scenario,
        steps: Sequence[str],
        config: DetectorConfiguration,
    ) -> Iterable[Warning]:
        limits = config.thresholds
        name = scenario.name or ""
        if len(name) > limits.max_scenario_name_length and config.is_enabled(
            WarningKind.LONG_SCENARIO_NAME
        ):
            yield self.warning(
                config,
                WarningKind.LONG_SCENARIO_NAME,
                f"Scenario name is {len(name)} characters long "
                f"(recommended maximum: {limits.max_scenario_name_length})",
                location(feature, scenario),
                [
                    "Shorten the scenario name to be more concise",
                    "Focus on the key behavior being tested",
                    "Move details to the steps rather than the title",
                ],
            )
        if not config.is_enabled(WarningKind.LONG_STEP_TEXT):
            return
        for step in steps:
            if len(step) <= limits.max_step_length:
                continue
            yield self.warning(
                config,
                WarningKind.LONG_STEP_TEXT,
                f"Step text is {len(step)} characters long "
                f'(recommended maximum: {limits.max_step_length}): "{truncate(step)}"',
                location(feature, scenario),
                [
                    "Shorten the step text to be more concise",
                    "Break into multiple smaller steps if necessary",
                    "Move complex data to examples, DocString, or DataTable",
                ],
            )


class AmbiguousPronounDetector(ScenarioDetector):
    """Every pronoun that leaves the reader guessing what it refers to."""

    kinds = (WarningKind.AMBIGUOUS_PRONOUN,)
    pronoun = re.compile(r"\b(it|they|them|this|that|these|those)\b", re.IGNORECASE)

    def check(
        self,
        feature: Feature,
        scenario: Scenario,
        steps: Sequence[str],
        config: DetectorConfiguration,
    ) -> Iterable[Warning]:
        for step in steps:
            for match in self.pronoun.finditer(step):
                yield self.warning(
                    config,
                    WarningKind.AMBIGUOUS_PRONOUN,
                    f"Step contains ambiguous pronoun '{match.group()}': \"{step}\"",
                    location(feature, scenario),
                    [
                        "Use specific nouns instead of pronouns for clarity",
                        "Pronouns can be ambiguous, especially in complex scenarios",
                        'Example: Instead of "When I click it", use "When I click the button"',
                    ],
                )


class ConjunctionDetector(ScenarioDetector):
    """Steps joining several actions or assertions with and/or/but."""

    kinds = (WarningKind.CONJUNCTION_IN_STEP,)
    conjunction = re.compile(r"\b(and|or|but)\b", re.IGNORECASE)

    def check(
        self,
        feature: Feature,
        scenario: Scenario,
        steps: Sequence[str],
        config: DetectorConfiguration,
    ) -> Iterable[Warning]:
        for step in steps:
            match = self.conjunction.search(step_body(step))
            if not match:
                continue
            yield self.warning(
                config,
                WarningKind.CONJUNCTION_IN_STEP,
                f"Step contains conjunction '{match.group()}' suggesting it should be split: "
                f'"{step}"',
                location(feature, scenario),
                [
                    "Split steps with conjunctions into separate steps",
                    "Each step should test a single action or assertion",
                    'Example: Instead of "When I login and navigate to dashboard", use two '
                    "separate steps",
                ],
            )


class InconsistentTenseDetector(ScenarioDetector):
    """Scenarios mixing present and past tense actions; reported once per scenario."""

    kinds = (WarningKind.INCONSISTENT_TENSE,)
    present = re.compile(
        r"\b(I|user|we)\s+(am|is|are|do|does|have|has|click|select|enter|navigate|see|view)\b",
        re.IGNORECASE,
    )
    past = re.compile(
        r"\b(I|user|we)\s+(was|were|did|had|clicked|selected|entered|navigated|saw|viewed)\b",
        re.IGNORECASE,
    )

    def check(
        self,
        feature: Feature,
        scenario: Scenario,
        steps: Sequence[str],
        config: DetectorConfiguration,
    ) -> Iterable[Warning]:
        has_present = any(self.present.search(step) for step in steps)
        has_past = any(self.past.search(step) for step in steps)
        if has_present and has_past:
            yield self.warning(
                config,
                WarningKind.INCONSISTENT_TENSE,
                "Scenario uses a mix of present and past tense",
                location(feature, scenario),
                [
                    "Standardize on a single tense throughout the scenario",
                    'Present tense is generally preferred ("I click" rather than "I clicked")',
                    "Consistent tense makes scenarios easier to read and understand",
                ],
            )


DEFAULT_ANTI_PATTERN_DETECTORS: Sequence[Callable[[], Detector]] = (
    StepCountDetector,
    GivenWhenThenDetector,
    UiFocusedStepDetector,
    ImplementationDetailDetector,
    ScenarioOutlineDetector,
    NamingDetector,
    StepOrderDetector,
    AmbiguousPronounDetector,
    ConjunctionDetector,
    InconsistentTenseDetector,
)


@dataclass
class AntiPatternAnalyzer:
    """Run every anti-pattern detector over a feature corpus."""

    config: DetectorConfiguration = field(default_factory=DetectorConfiguration)
    detectors: Sequence[Detector] = field(
        default_factory=lambda: [factory() for factory in DEFAULT_ANTI_PATTERN_DETECTORS]
    )

    def analyze(self, features: Sequence[Feature]) -> list[Warning]:
        warnings = run_detectors(self.detectors, features, {}, self.config)
        logger.debug("Anti-pattern analysis found %d warnings", len(warnings))
        return warnings
