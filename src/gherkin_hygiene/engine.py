from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Callable, Iterable, Iterator, Mapping, Sequence, TypeVar

from .anti_pattern import AntiPatternAnalyzer
from .config import DetectorConfiguration
from .model import Feature, tag_concordance
from .tag_quality import TagQualityAnalyzer
from .warning import Severity, Warning

logger = logging.getLogger(__name__)

__all__ = ["Analysis", "MultipleExceptions", "analyze", "iter_returns"]


@dataclass(frozen=True)
class Analysis:
    """Result of analyzing a feature corpus."""

    warnings: Sequence[Warning] = field(default_factory=list)
    errors: Sequence[Exception] = field(default_factory=list)

    @property
    def has_error_warnings(self) -> bool:
        return any(warning.severity is Severity.ERROR for warning in self.warnings)


ReturnType = TypeVar("ReturnType")


class MultipleExceptions(Exception):
    """Multiple exceptions."""

    def __init__(self, exceptions: Sequence[Exception]):
        super().__init__(", ".join(repr(e) for e in exceptions))
        self.exceptions = exceptions


def iter_returns(items: Iterable[ReturnType | Exception | None]) -> Iterator[ReturnType]:
    """Handle asyncio.gather(return_exceptions=True) results."""
    exceptions: list[Exception] = []
    for item in items:
        if item is None:
            continue
        if isinstance(item, Exception):
            exceptions.append(item)
            continue
        yield item
    if exceptions:
        raise MultipleExceptions(exceptions)


async def _run_analyzers(
    analyzers: Sequence[Callable[[], list[Warning]]]
) -> Sequence[list[Warning] | Exception]:
    return await asyncio.gather(
        *[asyncio.to_thread(analyzer) for analyzer in analyzers], return_exceptions=True
    )


def analyze(
    features: Sequence[Feature],
    config: DetectorConfiguration | None = None,
    concordance: Mapping[str, int] | None = None,
) -> Analysis:
    """
    Run the tag quality and anti-pattern analyzers side by side.

    Both analyzers only read the corpus, so they share it without locking. Tag quality warnings
    come first in the merged list. An analyzer that raises loses only its own warnings; the
    exception is returned in :attr:`Analysis.errors`.
    """
    config = config or DetectorConfiguration()
    if concordance is None:
        concordance = tag_concordance(features)
    tag_analyzer = TagQualityAnalyzer(config)
    anti_pattern_analyzer = AntiPatternAnalyzer(config)
    results = asyncio.run(
        _run_analyzers(
            [
                lambda: tag_analyzer.analyze(features, concordance),
                lambda: anti_pattern_analyzer.analyze(features),
            ]
        )
    )
    warnings: list[Warning] = []
    errors: list[Exception] = []
    try:
        for found in iter_returns(results):
            warnings += found
    except MultipleExceptions as e:
        for error in e.exceptions:
            logger.error("Analysis failed: %r", error)
        errors += e.exceptions
    logger.debug("Analyzed %d features: %d warnings", len(features), len(warnings))
    return Analysis(warnings=warnings, errors=errors)
