from __future__ import annotations

import logging
from typing import ClassVar, Mapping, Sequence

from .config import DetectorConfiguration
from .model import Feature
from .warning import Warning, WarningKind

logger = logging.getLogger(__name__)

__all__ = ["Detector", "run_detectors"]


class Detector:
    """
    A single quality rule.

    Detectors are stateless: ``detect`` is a pure function of the corpus, the tag concordance and
    the configuration, so any number of them may run side by side on the same inputs.
    """

    kinds: ClassVar[Sequence[WarningKind]] = ()

    def enabled(self, config: DetectorConfiguration) -> bool:
        return any(config.is_enabled(kind) for kind in self.kinds)

    def detect(
        self,
        features: Sequence[Feature],
        concordance: Mapping[str, int],
        config: DetectorConfiguration,
    ) -> list[Warning]:
        raise NotImplementedError("Subclasses must implement detect()")

    @staticmethod
    def warning(
        config: DetectorConfiguration,
        kind: WarningKind,
        message: str,
        location: str,
        remediation: Sequence[str],
    ) -> Warning:
        """Create a warning with the configured severity and standard alternatives."""
        settings = config.settings(kind)
        return Warning(
            kind=kind,
            message=message,
            location=location,
            remediation=remediation,
            severity=settings.severity,
            standard_alternatives=settings.standard_alternatives,
        )

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


def run_detectors(
    detectors: Sequence[Detector],
    features: Sequence[Feature],
    concordance: Mapping[str, int],
    config: DetectorConfiguration,
) -> list[Warning]:
    """
    Run every enabled detector and drop warnings of disabled kinds.

    Disabled detectors are never run. The final filter catches detectors that report a kind other
    than the one that enabled them.
    """
    warnings: list[Warning] = []
    for detector in detectors:
        if not detector.enabled(config):
            logger.debug("Skipping %r", detector)
            continue
        found = detector.detect(features, concordance, config)
        logger.debug("%r found %d warnings", detector, len(found))
        warnings += found
    return [warning for warning in warnings if config.is_enabled(warning.kind)]
