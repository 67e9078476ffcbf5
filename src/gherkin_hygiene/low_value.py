"""Detect tags that carry no discriminating value."""
from __future__ import annotations

from typing import Mapping, Sequence

from .config import DetectorConfiguration
from .detector import Detector
from .model import Feature
from .warning import Warning, WarningKind

__all__ = ["AmbiguousTagDetector", "LowValueTagDetector", "TooGenericTagDetector"]


class LowValueTagDetector(Detector):
    """Tags found in the low-value vocabulary, e.g. ``@test`` or ``@temp``."""

    kinds = (WarningKind.LOW_VALUE_TAG,)

    def detect(
        self,
        features: Sequence[Feature],
        concordance: Mapping[str, int],
        config: DetectorConfiguration,
    ) -> list[Warning]:
        alternatives = config.settings(WarningKind.LOW_VALUE_TAG).standard_alternatives
        remediation = [
            "Replace with more specific, meaningful tags",
            "Consider what information the tag should convey",
            "Tags should help with test selection and documentation",
        ]
        if alternatives:
            remediation.append(f"Consider using standard alternatives: {', '.join(alternatives)}")
        return [
            self.warning(
                config,
                WarningKind.LOW_VALUE_TAG,
                f"{tag} is a known low-value tag that doesn't provide useful context",
                tag,
                remediation,
            )
            for tag in concordance
            if is_low_value(tag, config)
        ]


def is_low_value(tag: str, config: DetectorConfiguration) -> bool:
    """Compare against the low-value vocabulary, ignoring case and the ``@`` sigil."""
    bare = tag.lower().lstrip("@")
    return any(bare == known.lstrip("@") for known in config.tags.low_value)


class TooGenericTagDetector(Detector):
    """
    Tags present on nearly every feature.

    Only evaluated on corpora of more than ``min_features`` features; below that a percentage says
    nothing.
    """

    kinds = (WarningKind.TOO_GENERIC_TAG,)
    min_features = 5
    max_share = 0.9

    def detect(
        self,
        features: Sequence[Feature],
        concordance: Mapping[str, int],
        config: DetectorConfiguration,
    ) -> list[Warning]:
        total = len(features)
        if total <= self.min_features:
            return []
        warnings: list[Warning] = []
        for tag in concordance:
            used = sum(1 for feature in features if _feature_uses(feature, tag))
            if used >= total * self.max_share:
                warnings.append(
                    self.warning(
                        config,
                        WarningKind.TOO_GENERIC_TAG,
                        f"{tag} is used on nearly all features, making it too generic to be useful",
                        f"Used in {used} out of {total} features",
                        [
                            "Overly common tags don't help discriminate between tests",
                            "Consider if this tag is providing useful information",
                            "If this tag is needed on most features, consider making it a "
                            "convention rather than a tag",
                        ],
                    )
                )
        return warnings


def _feature_uses(feature: Feature, tag: str) -> bool:
    wanted = tag.lower()
    tags = list(feature.tags)
    for scenario in feature.testable_scenarios():
        tags += scenario.tags
    return any(t.lower() == wanted for t in tags if t)


class AmbiguousTagDetector(Detector):
    """Very short tags such as ``@ab`` that are not priority tags."""

    kinds = (WarningKind.AMBIGUOUS_TAG,)
    max_length = 3

    def detect(
        self,
        features: Sequence[Feature],
        concordance: Mapping[str, int],
        config: DetectorConfiguration,
    ) -> list[Warning]:
        return [
            self.warning(
                config,
                WarningKind.AMBIGUOUS_TAG,
                f"{tag} is too short and ambiguous",
                tag,
                [
                    "Use more descriptive tag names",
                    "Short tags are hard to understand and maintain",
                    "Consider what information the tag should convey",
                ],
            )
            for tag in concordance
            if len(tag) <= self.max_length and not config.tags.is_priority(tag)
        ]
