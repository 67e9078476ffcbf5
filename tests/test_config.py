import logging
from pathlib import Path

import pytest

from gherkin_hygiene.config import (
    DEFAULT_PRIORITY_TAGS,
    DetectorConfiguration,
    InvalidConfigFile,
    NoConfigFile,
    NoProjectFile,
    Thresholds,
    WarningSettings,
    normalize_vocabulary,
)
from gherkin_hygiene.warning import Severity, WarningKind

PYPROJECT = """
[project]
name = "shop"

[tool.gherkin-hygiene]
disabled = ["AMBIGUOUS_PRONOUN"]

[tool.gherkin-hygiene.thresholds]
max-steps = 15

[tool.gherkin-hygiene.tags]
priority = ["Blocker", "@minor"]

[tool.gherkin-hygiene.warnings.LOW_VALUE_TAG]
severity = "error"
standard-alternatives = ["@Smoke"]
"""


def test_defaults():
    config = DetectorConfiguration()
    assert all(config.is_enabled(kind) for kind in WarningKind)
    assert config.settings(WarningKind.MISSING_PRIORITY_TAG).severity is Severity.ERROR
    assert config.settings(WarningKind.TAG_TYPO).severity is Severity.WARNING
    assert config.settings(WarningKind.ORPHANED_TAG).severity is Severity.INFO
    assert config.thresholds == Thresholds()
    assert config.tags.priority == DEFAULT_PRIORITY_TAGS
    assert config.source is None


def test_update_does_not_modify_the_original():
    config = DetectorConfiguration()
    updated = config.update({"disabled": ["TAG_TYPO"]})
    assert config.is_enabled(WarningKind.TAG_TYPO)
    assert not updated.is_enabled(WarningKind.TAG_TYPO)


def test_warning_settings_update():
    settings = WarningSettings().update({"severity": "Info", "standard-alternatives": ["@a"]})
    assert settings == WarningSettings(severity=Severity.INFO, standard_alternatives=("@a",))
    assert not settings.update(False).enabled


def test_unknown_severity_falls_back_to_warning():
    assert Severity.parse("fatal") is Severity.WARNING
    assert Severity.parse(None) is Severity.WARNING


def test_unknown_keys_are_ignored(caplog):
    with caplog.at_level(logging.WARNING):
        config = DetectorConfiguration().update(
            {
                "warnings": {"NOT_A_KIND": {"enabled": False}},
                "disabled": ["ALSO_NOT_A_KIND"],
                "thresholds": {"max-steps": "many", "max-colour": 3},
            }
        )
    assert config.thresholds == Thresholds()
    assert "NOT_A_KIND" in caplog.text
    assert "ALSO_NOT_A_KIND" in caplog.text
    assert "max-colour" in caplog.text


def test_vocabulary_normalization():
    assert normalize_vocabulary(["Blocker", "@Minor", " ", ""]) == ("@blocker", "@minor")


def test_empty_custom_vocabulary_keeps_defaults():
    config = DetectorConfiguration().update({"tags": {"priority": []}})
    assert config.tags.priority == DEFAULT_PRIORITY_TAGS


def test_from_pyproject(tmp_path: Path):
    pyproject = tmp_path / "pyproject.toml"
    pyproject.write_text(PYPROJECT)
    config = DetectorConfiguration.from_file(pyproject)
    assert config.source == pyproject
    assert not config.is_enabled(WarningKind.AMBIGUOUS_PRONOUN)
    assert config.thresholds.max_steps == 15
    assert config.thresholds.min_steps == 2
    assert config.tags.is_priority("@BLOCKER")
    assert not config.tags.is_priority("@P1")
    low_value = config.settings(WarningKind.LOW_VALUE_TAG)
    assert low_value.severity is Severity.ERROR
    assert low_value.standard_alternatives == ("@Smoke",)


def test_from_standalone_file(tmp_path: Path):
    config_file = tmp_path / "hygiene.toml"
    config_file.write_text('disabled = ["TAG_TYPO"]\n\n[thresholds]\nmax-tags = 3\n')
    config = DetectorConfiguration.from_file(config_file)
    assert not config.is_enabled(WarningKind.TAG_TYPO)
    assert config.thresholds.max_tags == 3


def test_missing_config_file(tmp_path: Path):
    with pytest.raises(NoConfigFile) as excinfo:
        DetectorConfiguration.from_file(tmp_path / "missing.toml")
    assert excinfo.value.config_file.endswith("missing.toml")


def test_get_config_finds_parent_pyproject(tmp_path: Path, monkeypatch):
    (tmp_path / "pyproject.toml").write_text(PYPROJECT)
    nested = tmp_path / "features" / "checkout"
    nested.mkdir(parents=True)
    monkeypatch.chdir(nested)
    config = DetectorConfiguration.get_config()
    assert config.source == tmp_path.absolute() / "pyproject.toml"


def test_get_config_defaults_without_project(monkeypatch):
    def no_project(cls):
        raise NoProjectFile(Path("pyproject.toml"), [Path("/nowhere")])

    monkeypatch.setattr(DetectorConfiguration, "get_configfile", classmethod(no_project))
    assert DetectorConfiguration.get_config() == DetectorConfiguration()


def test_summary_lists_every_kind():
    summary = DetectorConfiguration().update({"disabled": ["TAG_TYPO"]}).summary()
    assert "Using defaults" in summary
    assert "  - TAG_TYPO: disabled (WARNING)" in summary
    assert "  - MISSING_PRIORITY_TAG: enabled (ERROR)" in summary
    assert "  - max_steps: 10" in summary


def test_boolean_thresholds_are_ignored(caplog):
    with caplog.at_level(logging.WARNING):
        config = DetectorConfiguration().update({"thresholds": {"max-steps": True}})
    assert config.thresholds.max_steps == 10
    assert "max-steps" in caplog.text


def test_malformed_config_file(tmp_path: Path):
    config_file = tmp_path / "hygiene.toml"
    config_file.write_text('disabled = ["TAG_TYPO"\n[thresholds\n')
    with pytest.raises(InvalidConfigFile) as excinfo:
        DetectorConfiguration.from_file(config_file)
    assert excinfo.value.config_file == config_file.as_posix()
    assert excinfo.value.reason
