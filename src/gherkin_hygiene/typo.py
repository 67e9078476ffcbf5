"""Detect tags that are probably misspellings or format variants of another tag."""
from __future__ import annotations

import logging
from itertools import combinations
from typing import Mapping, Sequence

from .config import DetectorConfiguration
from .detector import Detector
from .model import Feature
from .tags import format_locations, levenshtein, normalize_tag, tag_locations
from .warning import Warning, WarningKind

logger = logging.getLogger(__name__)

__all__ = ["TagTypoDetector"]


class TagTypoDetector(Detector):
    """
    Compare every distinct tag with every other one.

    Tags sharing a normalized form (``@API``, ``@api``, ``@a-p-i``) are reported together as one
    format inconsistency. Every pair of tags from different groups is compared by edit distance;
    a pair one edit apart is a typo when one tag is used at least twice as often as the other. A
    pair used equally often is ambiguous and is not reported.
    """

    kinds = (WarningKind.TAG_TYPO,)
    max_distance = 1
    min_ratio = 2

    def detect(
        self,
        features: Sequence[Feature],
        concordance: Mapping[str, int],
        config: DetectorConfiguration,
    ) -> list[Warning]:
        groups: dict[str, list[str]] = {}
        for tag in concordance:
            groups.setdefault(normalize_tag(tag), []).append(tag)

        warnings = [
            self._format_warning(features, config, group)
            for group in groups.values()
            if len(group) > 1
        ]
        for tag1, tag2 in combinations(concordance, 2):
            normalized1, normalized2 = normalize_tag(tag1), normalize_tag(tag2)
            # same group, already reported as a format variant
            if normalized1 == normalized2:
                continue
            if levenshtein(normalized1, normalized2) > self.max_distance:
                continue
            rare, common = sorted((tag1, tag2), key=lambda tag: concordance[tag])
            if concordance[common] // max(1, concordance[rare]) < self.min_ratio:
                logger.debug("%s and %s are equally common, not reporting", rare, common)
                continue
            warnings.append(self._typo_warning(features, config, rare, common))
        return warnings

    def _format_warning(
        self, features: Sequence[Feature], config: DetectorConfiguration, group: Sequence[str]
    ) -> Warning:
        locations = [found for tag in group for found in tag_locations(features, tag)]
        return self.warning(
            config,
            WarningKind.TAG_TYPO,
            f"Similar tags found that might be typos or inconsistencies: {', '.join(group)}",
            format_locations(list(dict.fromkeys(locations))),
            [
                "Standardize on a single tag format",
                "Update all similar tags to use the same format",
                "Consider adding a tag glossary to documentation",
            ],
        )

    def _typo_warning(
        self, features: Sequence[Feature], config: DetectorConfiguration, rare: str, common: str
    ) -> Warning:
        return self.warning(
            config,
            WarningKind.TAG_TYPO,
            f"{rare} might be a typo of {common}",
            ", ".join(tag_locations(features, rare)),
            [
                f"This appears to be a typo of {common}",
                "Correct the tag spelling for consistency",
                f"Standardize on {common} which is more commonly used",
            ],
        )
