"""Tag quality analysis: missing categories plus the typo, low-value and frequency rules."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, Mapping, Sequence

from .config import DetectorConfiguration
from .detector import Detector, run_detectors
from .frequency import (
    DuplicateTagDetector,
    ExcessiveTagsDetector,
    InconsistentTaggingDetector,
    OrphanedTagDetector,
)
from .low_value import AmbiguousTagDetector, LowValueTagDetector, TooGenericTagDetector
from .model import Feature, tag_concordance
from .tags import location
from .typo import TagTypoDetector
from .warning import Warning, WarningKind

logger = logging.getLogger(__name__)

__all__ = [
    "DEFAULT_TAG_DETECTORS",
    "MissingPriorityTagDetector",
    "MissingTypeTagDetector",
    "TagQualityAnalyzer",
]


class _MissingTagDetector(Detector):
    """Scenarios where neither the scenario nor its feature carries a tag of a category."""

    message: str = ""
    remediation: Sequence[str] = ()

    def has_tag(self, tag: str, config: DetectorConfiguration) -> bool:
        raise NotImplementedError

    def detect(
        self,
        features: Sequence[Feature],
        concordance: Mapping[str, int],
        config: DetectorConfiguration,
    ) -> list[Warning]:
        (kind,) = self.kinds
        alternatives = config.settings(kind).standard_alternatives
        remediation = list(self.remediation)
        if alternatives:
            remediation.append(f"Use one of the standard tags: {', '.join(alternatives)}")
        warnings: list[Warning] = []
        for feature in features:
            feature_tagged = self._tagged(feature.tags, config)
            for scenario in feature.testable_scenarios():
                if feature_tagged or self._tagged(scenario.tags, config):
                    continue
                where = location(feature, scenario)
                warnings.append(self.warning(config, kind, self.message, where, remediation))
        return warnings

    def _tagged(self, tags: Sequence[str], config: DetectorConfiguration) -> bool:
        return any(self.has_tag(tag, config) for tag in tags if tag)


class MissingPriorityTagDetector(_MissingTagDetector):
    kinds = (WarningKind.MISSING_PRIORITY_TAG,)
    message = "Scenario is missing a priority tag"
    remediation = (
        "Add a priority tag like @P0 (highest), @P1, @P2, or @P3 (lowest)",
        "Alternatively, add a semantic priority tag like @Critical, @High, @Medium, or @Low",
        "Apply priority tags consistently across all scenarios",
    )

    def has_tag(self, tag: str, config: DetectorConfiguration) -> bool:
        return config.tags.is_priority(tag)


class MissingTypeTagDetector(_MissingTagDetector):
    kinds = (WarningKind.MISSING_TYPE_TAG,)
    message = "Scenario is missing a type tag"
    remediation = (
        "Add a type tag that describes the test type (e.g., @UI, @API, @Integration)",
        "Type tags help with test selection and organization",
        "Consider what layer of the application this test is targeting",
    )

    def has_tag(self, tag: str, config: DetectorConfiguration) -> bool:
        return config.tags.is_type(tag)


DEFAULT_TAG_DETECTORS: Sequence[Callable[[], Detector]] = (
    MissingPriorityTagDetector,
    MissingTypeTagDetector,
    LowValueTagDetector,
    TooGenericTagDetector,
    AmbiguousTagDetector,
    OrphanedTagDetector,
    ExcessiveTagsDetector,
    InconsistentTaggingDetector,
    TagTypoDetector,
    DuplicateTagDetector,
)


@dataclass
class TagQualityAnalyzer:
    """Run every tag quality detector over a feature corpus."""

    config: DetectorConfiguration = field(default_factory=DetectorConfiguration)
    detectors: Sequence[Detector] = field(
        default_factory=lambda: [factory() for factory in DEFAULT_TAG_DETECTORS]
    )

    def analyze(
        self, features: Sequence[Feature], concordance: Mapping[str, int] | None = None
    ) -> list[Warning]:
        if concordance is None:
            concordance = tag_concordance(features)
        warnings = run_detectors(self.detectors, features, concordance, self.config)
        logger.debug("Tag quality analysis found %d warnings", len(warnings))
        return warnings
