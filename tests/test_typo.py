from builders import feature, scenario

from gherkin_hygiene.config import DetectorConfiguration
from gherkin_hygiene.typo import TagTypoDetector
from gherkin_hygiene.warning import WarningKind


def _detect(concordance, features=()):
    return TagTypoDetector().detect(list(features), concordance, DetectorConfiguration())


def test_format_variants_are_reported_once():
    """Tags with the same normalized form are grouped into a single warning."""
    features = [
        feature("a.feature", tags=["@API"]),
        feature("b.feature", scenarios=[scenario(name="Call", tags=["@api"])]),
    ]
    warnings = _detect({"@API": 5, "@api": 1}, features)
    assert len(warnings) == 1
    (warning,) = warnings
    assert warning.kind is WarningKind.TAG_TYPO
    assert "@API, @api" in warning.message
    assert "a.feature" in warning.location
    assert "b.feature - Call" in warning.location


def test_separators_are_ignored_when_grouping():
    warnings = _detect({"@smoke_test": 3, "@smoke-test": 2, "@Smoke.Test": 1})
    assert len(warnings) == 1
    assert "@smoke_test, @smoke-test, @Smoke.Test" in warnings[0].message


def test_rare_tag_one_edit_away_is_a_typo():
    warnings = _detect({"@Regression": 10, "@Regressionn": 1})
    assert [w.message for w in warnings] == ["@Regressionn might be a typo of @Regression"]
    assert "This appears to be a typo of @Regression" in warnings[0].remediation


def test_equal_frequency_is_not_reported():
    assert _detect({"@login": 3, "@logon": 3}) == []


def test_ratio_below_two_is_not_reported():
    assert _detect({"@login": 3, "@logon": 2}) == []


def test_two_edits_apart_is_not_a_typo():
    assert _detect({"@checkout": 10, "@chekcout": 1}) == []


def test_each_pair_is_reported_once():
    warnings = _detect({"@slow": 1, "@flow": 4})
    assert len(warnings) == 1
    assert warnings[0].message == "@slow might be a typo of @flow"


def test_grouped_tags_are_compared_with_other_tags():
    warnings = _detect({"@UI": 6, "@ui": 2, "@uix": 1})
    assert [w.message for w in warnings] == [
        "Similar tags found that might be typos or inconsistencies: @UI, @ui",
        "@uix might be a typo of @UI",
        "@uix might be a typo of @ui",
    ]


def test_typo_of_a_format_variant_is_reported():
    warnings = _detect({"@Regression": 10, "@regression": 2, "@Regresion": 1})
    messages = [w.message for w in warnings]
    assert len(messages) == 3
    assert "@Regresion might be a typo of @Regression" in messages
    assert "@Regresion might be a typo of @regression" in messages


def test_members_of_one_group_are_not_compared_by_distance():
    warnings = _detect({"@smoke": 9, "@Smoke": 1})
    assert [w.message for w in warnings] == [
        "Similar tags found that might be typos or inconsistencies: @smoke, @Smoke"
    ]


def test_no_tags_no_warnings():
    assert _detect({}) == []


def test_location_lists_first_three_and_a_count():
    features = [feature(f"f{i}.feature", tags=["@Web"]) for i in range(3)]
    features += [feature(f"g{i}.feature", tags=["@web"]) for i in range(2)]
    (warning,) = _detect({"@Web": 3, "@web": 2}, features)
    assert warning.location == "f0.feature, f1.feature, f2.feature and 2 more"
