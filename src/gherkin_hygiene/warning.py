from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, Mapping, Sequence

__all__ = ["Severity", "Warning", "WarningKind", "format_report", "group_warnings"]


class Severity(Enum):
    """Severity of a warning, in presentation order."""

    ERROR = "ERROR"
    WARNING = "WARNING"
    INFO = "INFO"

    @classmethod
    def parse(cls, value: str | None) -> Severity:
        try:
            return cls[(value or "").strip().upper()]
        except KeyError:
            return cls.WARNING


class WarningKind(Enum):
    """Every kind of warning a detector can report."""

    # Tag quality
    MISSING_PRIORITY_TAG = "Missing priority tag"
    MISSING_TYPE_TAG = "Missing type tag"
    LOW_VALUE_TAG = "Low-value tag"
    INCONSISTENT_TAGGING = "Inconsistent tagging"
    EXCESSIVE_TAGS = "Excessive tags"
    TAG_TYPO = "Possible tag typo"
    ORPHANED_TAG = "Orphaned tag (used only once)"
    AMBIGUOUS_TAG = "Ambiguous tag"
    TOO_GENERIC_TAG = "Too generic tag"
    DUPLICATE_TAG = "Duplicate tag"
    # Anti-patterns
    LONG_SCENARIO = "Long scenario"
    TOO_FEW_STEPS = "Too few steps"
    MISSING_GIVEN = "Missing Given step"
    MISSING_WHEN = "Missing When step"
    MISSING_THEN = "Missing Then step"
    UI_FOCUSED_STEP = "UI-focused step"
    IMPLEMENTATION_DETAIL = "Implementation detail in step"
    MISSING_EXAMPLES = "Missing examples in Scenario Outline"
    TOO_FEW_EXAMPLES = "Too few examples in Scenario Outline"
    LONG_SCENARIO_NAME = "Long scenario name"
    LONG_STEP_TEXT = "Long step text"
    INCORRECT_STEP_ORDER = "Incorrect step order"
    AMBIGUOUS_PRONOUN = "Ambiguous pronoun in step"
    INCONSISTENT_TENSE = "Inconsistent tense in steps"
    CONJUNCTION_IN_STEP = "Conjunction in step"

    @property
    def description(self) -> str:
        return self.value


@dataclass(frozen=True)
class Warning:
    """A single quality issue found in the feature corpus."""

    kind: WarningKind
    message: str
    location: str
    remediation: Sequence[str]
    severity: Severity = Severity.WARNING
    standard_alternatives: Sequence[str] = field(default_factory=tuple)

    def __post_init__(self):
        assert self.remediation, f"{self.kind.name} warning without remediation"
        object.__setattr__(self, "remediation", tuple(self.remediation))
        object.__setattr__(self, "standard_alternatives", tuple(self.standard_alternatives))

    def __str__(self) -> str:
        text = f"{self.severity.value}: {self.kind.description}: {self.message}"
        if self.location:
            text += f" (in {self.location})"
        return text


GroupedWarnings = Mapping[Severity, Mapping[WarningKind, Sequence[Warning]]]


def group_warnings(warnings: Iterable[Warning]) -> GroupedWarnings:
    """Group warnings by severity first, then by kind, both in enum order."""
    buckets: dict[Severity, dict[WarningKind, list[Warning]]] = {}
    for warning in warnings:
        buckets.setdefault(warning.severity, {}).setdefault(warning.kind, []).append(warning)
    return {
        severity: {
            kind: buckets[severity][kind] for kind in WarningKind if kind in buckets[severity]
        }
        for severity in Severity
        if severity in buckets
    }


def _underline(text: str, char: str) -> list[str]:
    return [text, char * len(text)]


def format_report(warnings: Sequence[Warning], title: str = "Gherkin quality warnings") -> str:
    """Render warnings as plain text: summaries first, then the details."""
    if not warnings:
        return "No issues found."

    grouped = group_warnings(warnings)
    lines = _underline(title.upper(), "=")
    lines += ["", f"Found {len(warnings)} potential issues.", ""]

    lines += _underline("SUMMARY BY SEVERITY", "-")
    for severity, by_kind in grouped.items():
        lines.append(f"{severity.value:<10}: {sum(len(items) for items in by_kind.values())}")
    lines.append("")

    lines += _underline("SUMMARY BY TYPE", "-")
    for kind in WarningKind:
        count = sum(len(by_kind.get(kind, ())) for by_kind in grouped.values())
        if count:
            lines.append(f"{kind.description:<37}: {count}")
    lines.append("")

    for severity, by_kind in grouped.items():
        lines += _underline(f"{severity.value} LEVEL WARNINGS", "=")
        lines.append("")
        for kind, items in by_kind.items():
            lines += _underline(kind.description.upper(), "-")
            lines.append("Remediation:")
            lines += [f"- {remedy}" for remedy in items[0].remediation]
            lines.append("")
            for warning in items:
                entry = f"- {warning.message}"
                if warning.location:
                    entry += f" (in {warning.location})"
                lines.append(entry)
                if warning.standard_alternatives:
                    alternatives = ", ".join(warning.standard_alternatives)
                    lines.append(f"  Suggested alternatives: {alternatives}")
            lines.append("")
    return "\n".join(lines).rstrip() + "\n"
