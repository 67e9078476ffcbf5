from pathlib import Path

import pytest

from gherkin_hygiene.model import ScenarioKind
from gherkin_hygiene.parser import (
    FeatureParseError,
    load_feature,
    load_features,
    resolve_feature_files,
)

CHECKOUT = """\
@checkout @P1
Feature: Checkout
  Customers pay for the items in their cart.

  Background:
    Given a customer with a cart

  @UI
  Scenario: Pay by card
    Given the cart holds 2 items
    When the customer pays by card
    And the payment is accepted
    Then an order confirmation is shown

  Scenario Outline: Shipping costs
    Given a cart worth <amount>
    When the customer checks out
    Then shipping costs <shipping>

    Examples: Domestic
      | amount | shipping |
      | 10     | 5        |
      | 100    | 0        |
"""


def write(path: Path, text: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text)
    return path


def test_load_feature(tmp_path: Path):
    feature = load_feature(write(tmp_path / "checkout.feature", CHECKOUT))
    assert feature is not None
    assert feature.name == "Checkout"
    assert feature.filename.endswith("checkout.feature")
    assert feature.tags == ("@checkout", "@P1")
    assert "Customers pay" in feature.description
    assert [s.kind for s in feature.scenarios] == [
        ScenarioKind.BACKGROUND,
        ScenarioKind.SCENARIO,
        ScenarioKind.SCENARIO_OUTLINE,
    ]
    background, card, outline = feature.scenarios
    assert background.steps == ("Given a customer with a cart",)
    assert card.tags == ("@UI",)
    assert card.steps[2] == "And the payment is accepted"
    (examples,) = outline.examples
    assert examples.name == "Domestic"
    assert examples.headers == ("amount", "shipping")
    assert examples.rows == (("10", "5"), ("100", "0"))


def test_empty_file_has_no_feature(tmp_path: Path):
    assert load_feature(write(tmp_path / "empty.feature", "")) is None


def test_invalid_feature(tmp_path: Path):
    path = write(tmp_path / "broken.feature", "Scenario: without a feature\n  Given nothing\n")
    with pytest.raises(FeatureParseError) as excinfo:
        load_feature(path)
    assert excinfo.value.path == path.as_posix()


def test_binary_file(tmp_path: Path):
    path = tmp_path / "image.feature"
    path.write_bytes(b"\xff\xfe\x00\x81")
    with pytest.raises(FeatureParseError):
        load_feature(path)


def test_resolve_feature_files(tmp_path: Path):
    second = write(tmp_path / "b" / "second.feature", CHECKOUT)
    first = write(tmp_path / "a" / "first.feature", CHECKOUT)
    write(tmp_path / "a" / "notes.txt", "not a feature")
    assert resolve_feature_files([tmp_path]) == [first, second]
    assert resolve_feature_files([second, tmp_path / "b"]) == [second]


def test_load_features_skips_empty_files(tmp_path: Path):
    paths = [
        write(tmp_path / "checkout.feature", CHECKOUT),
        write(tmp_path / "empty.feature", ""),
    ]
    assert [feature.name for feature in load_features(paths)] == ["Checkout"]
