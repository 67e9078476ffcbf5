from builders import feature, scenario, tagged_corpus

from gherkin_hygiene.config import DetectorConfiguration
from gherkin_hygiene.low_value import (
    AmbiguousTagDetector,
    LowValueTagDetector,
    TooGenericTagDetector,
    is_low_value,
)
from gherkin_hygiene.model import tag_concordance
from gherkin_hygiene.warning import WarningKind


def test_known_low_value_tags_ignore_case_and_sigil():
    config = DetectorConfiguration()
    assert is_low_value("@Test", config)
    assert is_low_value("TEMP", config)
    assert not is_low_value("@checkout", config)


def test_low_value_tag_warning():
    warnings = LowValueTagDetector().detect([], {"@WIP": 1, "@Temp": 2}, DetectorConfiguration())
    assert [w.location for w in warnings] == ["@Temp"]
    assert warnings[0].kind is WarningKind.LOW_VALUE_TAG


def test_low_value_remediation_names_alternatives():
    config = DetectorConfiguration().update(
        {"warnings": {"LOW_VALUE_TAG": {"standard-alternatives": ["@Smoke", "@Regression"]}}}
    )
    (warning,) = LowValueTagDetector().detect([], {"@test": 1}, config)
    assert "Consider using standard alternatives: @Smoke, @Regression" in warning.remediation
    assert warning.standard_alternatives == ("@Smoke", "@Regression")


def test_custom_low_value_vocabulary_replaces_defaults():
    config = DetectorConfiguration().update({"tags": {"low-value": ["@misc"]}})
    warnings = LowValueTagDetector().detect([], {"@misc": 1, "@test": 1}, config)
    assert [w.location for w in warnings] == ["@misc"]


def test_tag_on_every_feature_is_too_generic():
    features = tagged_corpus([["@Web"]] * 10)
    warnings = TooGenericTagDetector().detect(
        features, tag_concordance(features), DetectorConfiguration()
    )
    assert len(warnings) == 1
    assert warnings[0].kind is WarningKind.TOO_GENERIC_TAG
    assert warnings[0].location == "Used in 10 out of 10 features"


def test_small_corpus_is_never_too_generic():
    features = tagged_corpus([["@Web"]] * 3)
    detector = TooGenericTagDetector()
    assert detector.detect(features, tag_concordance(features), DetectorConfiguration()) == []


def test_tag_below_ninety_percent_is_not_too_generic():
    features = tagged_corpus([["@Web"]] * 8 + [[]] * 2)
    detector = TooGenericTagDetector()
    assert detector.detect(features, tag_concordance(features), DetectorConfiguration()) == []


def test_scenario_tags_count_towards_feature_presence():
    features = [
        feature(f"f{i}.feature", scenarios=[scenario(tags=["@Web"]), scenario(tags=["@Web"])])
        for i in range(6)
    ]
    warnings = TooGenericTagDetector().detect(
        features, tag_concordance(features), DetectorConfiguration()
    )
    assert [w.location for w in warnings] == ["Used in 6 out of 6 features"]


def test_short_tags_are_ambiguous_unless_priority():
    warnings = AmbiguousTagDetector().detect(
        [], {"@x": 1, "@ab": 2, "@P1": 4, "@abcd": 1}, DetectorConfiguration()
    )
    assert [w.location for w in warnings] == ["@x", "@ab"]
    assert all(w.kind is WarningKind.AMBIGUOUS_TAG for w in warnings)


def test_one_tag_can_trigger_several_kinds():
    features = tagged_corpus([["@wip"]] * 6)
    concordance = tag_concordance(features)
    config = DetectorConfiguration().update({"tags": {"low-value": ["@wip"]}})
    kinds = {
        warning.kind
        for detector in (LowValueTagDetector(), TooGenericTagDetector(), AmbiguousTagDetector())
        for warning in detector.detect(features, concordance, config)
    }
    assert kinds == {WarningKind.LOW_VALUE_TAG, WarningKind.TOO_GENERIC_TAG}
