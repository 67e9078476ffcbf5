"""Detect tag frequency problems: orphans, excessive tags, mixed priority styles and duplicates."""
from __future__ import annotations

import logging
import re
from typing import Mapping, Sequence

from .config import DetectorConfiguration
from .detector import Detector
from .model import Feature
from .tags import levenshtein, location, normalize_tag, tag_locations
from .warning import Warning, WarningKind

logger = logging.getLogger(__name__)

__all__ = [
    "DuplicateTagDetector",
    "ExcessiveTagsDetector",
    "InconsistentTaggingDetector",
    "OrphanedTagDetector",
]


class OrphanedTagDetector(Detector):
    """
    Tags used exactly once.

    A single-use tag within ``max_distance`` edits of a more frequent tag is reported as a typo of
    that tag instead. This is deliberately looser than :class:`~.typo.TagTypoDetector`, since a
    tag nobody else uses is already suspicious.
    """

    kinds = (WarningKind.ORPHANED_TAG, WarningKind.TAG_TYPO)
    min_features = 2
    max_distance = 2

    def detect(
        self,
        features: Sequence[Feature],
        concordance: Mapping[str, int],
        config: DetectorConfiguration,
    ) -> list[Warning]:
        if len(features) <= self.min_features:
            return []
        warnings: list[Warning] = []
        for tag, count in concordance.items():
            if count != 1:
                continue
            locations = ", ".join(tag_locations(features, tag))
            correction = self.possible_correction(tag, concordance)
            if correction is not None:
                logger.debug("Orphaned tag %s looks like %s", tag, correction)
                if not config.is_enabled(WarningKind.TAG_TYPO):
                    continue
                warnings.append(
                    self.warning(
                        config,
                        WarningKind.TAG_TYPO,
                        f"{tag} is only used once and might be a typo",
                        locations,
                        [
                            f"This might be a typo of {correction}",
                            "Correct the tag if it's a typo",
                            "If intentional, consider using consistent naming conventions for "
                            "related tags",
                        ],
                    )
                )
            elif config.is_enabled(WarningKind.ORPHANED_TAG):
                warnings.append(
                    self.warning(
                        config,
                        WarningKind.ORPHANED_TAG,
                        f"{tag} is only used once across all features",
                        locations,
                        [
                            "Tags used only once don't help group related scenarios",
                            "Consider if this tag is valuable or if it should be removed",
                            "Check if it should be consistent with other similar tags",
                        ],
                    )
                )
        return warnings

    def possible_correction(self, tag: str, concordance: Mapping[str, int]) -> str | None:
        """The first more frequent tag within ``max_distance`` edits, if any."""
        normalized = normalize_tag(tag)
        for other, count in concordance.items():
            if other == tag or count <= concordance[tag]:
                continue
            if levenshtein(normalized, normalize_tag(other)) <= self.max_distance:
                return other
        return None


class ExcessiveTagsDetector(Detector):
    """Scenarios whose own and inherited tags exceed the ``max_tags`` threshold."""

    kinds = (WarningKind.EXCESSIVE_TAGS,)

    def detect(
        self,
        features: Sequence[Feature],
        concordance: Mapping[str, int],
        config: DetectorConfiguration,
    ) -> list[Warning]:
        limit = config.thresholds.max_tags
        warnings: list[Warning] = []
        for feature in features:
            for scenario in feature.testable_scenarios():
                all_tags = {tag.lower() for tag in (*feature.tags, *scenario.tags) if tag}
                if len(all_tags) <= limit:
                    continue
                warnings.append(
                    self.warning(
                        config,
                        WarningKind.EXCESSIVE_TAGS,
                        f"Scenario has {len(all_tags)} tags, which is excessive "
                        f"(recommended max: {limit})",
                        location(feature, scenario),
                        [
                            "Having too many tags makes it harder to understand the test's "
                            "purpose",
                            "Consider consolidating similar tags",
                            "Remove redundant tags",
                            "Ensure tags serve a clear purpose (selection, documentation, or "
                            "automation)",
                        ],
                    )
                )
        return warnings


PRIORITY_STYLES = (
    ("p-style", re.compile(r"^@p\d+$")),
    ("priority-style", re.compile(r"^@priority\d+$")),
    ("severity-style", re.compile(r"^@(critical|high|medium|low)$")),
)


def priority_style(tag: str) -> str | None:
    """Classify a priority tag as ``@p<N>``, ``@priority<N>`` or semantic."""
    lowered = tag.lower()
    for style, pattern in PRIORITY_STYLES:
        if pattern.match(lowered):
            return style
    return None


class InconsistentTaggingDetector(Detector):
    """More than one priority tag naming style anywhere in the corpus."""

    kinds = (WarningKind.INCONSISTENT_TAGGING,)

    def detect(
        self,
        features: Sequence[Feature],
        concordance: Mapping[str, int],
        config: DetectorConfiguration,
    ) -> list[Warning]:
        styles: list[str] = []
        for feature in features:
            tags = list(feature.tags)
            for scenario in feature.testable_scenarios():
                tags += scenario.tags
            for tag in tags:
                if not tag or not config.tags.is_priority(tag):
                    continue
                style = priority_style(tag)
                if style is not None and style not in styles:
                    styles.append(style)
        if len(styles) <= 1:
            return []
        styles.sort(key=[style for style, _ in PRIORITY_STYLES].index)
        return [
            self.warning(
                config,
                WarningKind.INCONSISTENT_TAGGING,
                f"Multiple priority tag styles used across features ({', '.join(styles)})",
                "Multiple features",
                [
                    "Standardize on a single priority tag style (e.g., @P0-@P3 or "
                    "@Critical/@High/@Medium/@Low)",
                    "Consistent tag formatting improves readability and maintainability",
                    "Document the preferred tag style in a team guideline",
                ],
            )
        ]


class DuplicateTagDetector(Detector):
    """Repeated tags on a feature, on a scenario, or on a scenario and its feature."""

    kinds = (WarningKind.DUPLICATE_TAG,)

    def detect(
        self,
        features: Sequence[Feature],
        concordance: Mapping[str, int],
        config: DetectorConfiguration,
    ) -> list[Warning]:
        warnings: list[Warning] = []
        for feature in features:
            feature_tags: set[str] = set()
            duplicates: list[str] = []
            for tag in filter(None, feature.tags):
                if tag.lower() in feature_tags:
                    duplicates.append(tag)
                feature_tags.add(tag.lower())
            if duplicates:
                warnings.append(
                    self.warning(
                        config,
                        WarningKind.DUPLICATE_TAG,
                        f"Feature has duplicate tags: {', '.join(duplicates)}",
                        location(feature),
                        ["Remove duplicate tags", "Duplicate tags add noise without value"],
                    )
                )

            for scenario in feature.testable_scenarios():
                seen = set(feature_tags)
                duplicates = []
                for tag in filter(None, scenario.tags):
                    lowered = tag.lower()
                    if lowered in feature_tags:
                        duplicates.append(f"{tag} (already on feature)")
                    elif lowered in seen:
                        duplicates.append(tag)
                    seen.add(lowered)
                if duplicates:
                    warnings.append(
                        self.warning(
                            config,
                            WarningKind.DUPLICATE_TAG,
                            f"Scenario has duplicate tags: {', '.join(duplicates)}",
                            location(feature, scenario),
                            [
                                "Remove duplicate tags",
                                "Avoid repeating feature-level tags on scenarios",
                                "Tags at the feature level apply to all scenarios",
                            ],
                        )
                    )
        return warnings
