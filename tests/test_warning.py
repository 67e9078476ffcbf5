import pytest

from gherkin_hygiene.warning import Severity, Warning, WarningKind, format_report, group_warnings


def make(kind, severity=Severity.WARNING, message="message", location="a.feature", **kwargs):
    return Warning(kind, message, location, ["Fix it"], severity=severity, **kwargs)


def test_warning_requires_remediation():
    with pytest.raises(AssertionError):
        Warning(WarningKind.TAG_TYPO, "message", "a.feature", [])


def test_warning_is_immutable():
    warning = make(WarningKind.TAG_TYPO)
    assert warning.remediation == ("Fix it",)
    with pytest.raises(AttributeError):
        warning.message = "changed"  # type: ignore[misc]


def test_str():
    warning = make(WarningKind.DUPLICATE_TAG, Severity.ERROR, "Feature has duplicate tags: @a")
    assert str(warning) == "ERROR: Duplicate tag: Feature has duplicate tags: @a (in a.feature)"


def test_grouping_follows_severity_then_kind_order():
    warnings = [
        make(WarningKind.TAG_TYPO, Severity.INFO),
        make(WarningKind.DUPLICATE_TAG, Severity.ERROR),
        make(WarningKind.MISSING_PRIORITY_TAG, Severity.ERROR),
        make(WarningKind.LONG_SCENARIO),
    ]
    grouped = group_warnings(warnings)
    assert list(grouped) == [Severity.ERROR, Severity.WARNING, Severity.INFO]
    assert list(grouped[Severity.ERROR]) == [
        WarningKind.MISSING_PRIORITY_TAG,
        WarningKind.DUPLICATE_TAG,
    ]


def test_empty_report():
    assert format_report([]) == "No issues found."


def test_report():
    missing = "Scenario is missing a priority tag"
    warnings = [
        make(
            WarningKind.LOW_VALUE_TAG,
            Severity.INFO,
            "@test is low value",
            "@test",
            standard_alternatives=["@Smoke"],
        ),
        make(WarningKind.MISSING_PRIORITY_TAG, Severity.ERROR, missing, "a.feature - Log in"),
        make(WarningKind.MISSING_PRIORITY_TAG, Severity.ERROR, missing, "a.feature - Log out"),
    ]
    report = format_report(warnings)
    lines = report.splitlines()
    assert lines[0] == "GHERKIN QUALITY WARNINGS"
    assert "Found 3 potential issues." in lines
    assert "ERROR     : 2" in lines
    assert "INFO      : 1" in lines
    assert report.index("ERROR LEVEL WARNINGS") < report.index("INFO LEVEL WARNINGS")
    assert "- Scenario is missing a priority tag (in a.feature - Log out)" in lines
    assert "  Suggested alternatives: @Smoke" in lines
    assert lines.count("Remediation:") == 2
