from __future__ import annotations

import logging
from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from typing import Any, ClassVar, Mapping, Sequence

import toml

from .warning import Severity, WarningKind

logger = logging.getLogger(__name__)

__all__ = [
    "DetectorConfiguration",
    "InvalidConfigFile",
    "NoConfigFile",
    "NoProjectFile",
    "TagVocabulary",
    "Thresholds",
    "WarningSettings",
]

DEFAULT_PRIORITY_TAGS = (
    "@p0", "@p1", "@p2", "@p3", "@p4",
    "@critical", "@high", "@medium", "@low",
    "@priority0", "@priority1", "@priority2", "@priority3",
)

DEFAULT_TYPE_TAGS = (
    "@ui", "@api", "@backend", "@frontend", "@integration", "@unit",
    "@performance", "@security", "@regression", "@smoke", "@e2e",
    "@functional", "@acceptance", "@system", "@component",
)

DEFAULT_STATUS_TAGS = (
    "@wip", "@ready", "@review", "@flaky", "@deprecated", "@legacy",
    "@todo", "@debug", "@inprogress", "@completed", "@blocked",
)

DEFAULT_LOW_VALUE_TAGS = (
    "@test", "@tests", "@feature", "@cucumber", "@scenario", "@gherkin",
    "@temp", "@temporary", "@pending", "@fixme", "@workaround",
    "@ignore", "@skip", "@manual",
)

DEFAULT_SEVERITIES = {
    WarningKind.MISSING_PRIORITY_TAG: Severity.ERROR,
    WarningKind.LOW_VALUE_TAG: Severity.INFO,
    WarningKind.ORPHANED_TAG: Severity.INFO,
    WarningKind.TOO_GENERIC_TAG: Severity.INFO,
    WarningKind.DUPLICATE_TAG: Severity.ERROR,
    WarningKind.MISSING_GIVEN: Severity.ERROR,
    WarningKind.MISSING_WHEN: Severity.ERROR,
    WarningKind.MISSING_THEN: Severity.ERROR,
    WarningKind.MISSING_EXAMPLES: Severity.ERROR,
    WarningKind.LONG_SCENARIO_NAME: Severity.INFO,
    WarningKind.LONG_STEP_TEXT: Severity.INFO,
    WarningKind.INCORRECT_STEP_ORDER: Severity.ERROR,
}


def normalize_vocabulary(tags: Sequence[str]) -> tuple[str, ...]:
    """Lowercase every tag and make sure it carries the ``@`` sigil."""
    normalized = (tag.strip().lower() for tag in tags if tag and tag.strip())
    return tuple(tag if tag.startswith("@") else f"@{tag}" for tag in normalized)


@dataclass(frozen=True)
class WarningSettings:
    """How a single kind of warning is reported."""

    enabled: bool = True
    severity: Severity = Severity.WARNING
    standard_alternatives: Sequence[str] = field(default_factory=tuple)

    def update(self, config: Mapping[str, Any] | bool) -> WarningSettings:
        if isinstance(config, bool):
            return replace(self, enabled=config)
        updated = self
        if "enabled" in config:
            updated = replace(updated, enabled=bool(config["enabled"]))
        if "severity" in config:
            updated = replace(updated, severity=Severity.parse(config["severity"]))
        if "standard-alternatives" in config:
            updated = replace(
                updated, standard_alternatives=tuple(config["standard-alternatives"] or ())
            )
        return updated


@dataclass(frozen=True)
class Thresholds:
    """Numeric limits used by the detectors."""

    max_steps: int = 10
    min_steps: int = 2
    min_examples: int = 2
    max_scenario_name_length: int = 100
    max_step_length: int = 120
    max_tags: int = 6

    def update(self, config: Mapping[str, Any]) -> Thresholds:
        known = {f.name for f in fields(self)}
        values: dict[str, int] = {}
        for key, value in config.items():
            name = key.replace("-", "_")
            if name not in known or isinstance(value, bool) or not isinstance(value, int):
                logger.warning("Ignoring unknown threshold %s = %r", key, value)
                continue
            values[name] = value
        return replace(self, **values)


@dataclass(frozen=True)
class TagVocabulary:
    """
    The effective tag vocabularies.

    A non-empty custom vocabulary replaces the built-in default for its category.
    """

    priority: Sequence[str] = DEFAULT_PRIORITY_TAGS
    type: Sequence[str] = DEFAULT_TYPE_TAGS
    status: Sequence[str] = DEFAULT_STATUS_TAGS
    low_value: Sequence[str] = DEFAULT_LOW_VALUE_TAGS

    def update(self, config: Mapping[str, Sequence[str]]) -> TagVocabulary:
        known = {f.name for f in fields(self)}
        values: dict[str, tuple[str, ...]] = {}
        for key, tags in config.items():
            name = key.replace("-", "_")
            if name not in known:
                logger.warning("Ignoring unknown tag vocabulary %s", key)
                continue
            custom = normalize_vocabulary(tags or ())
            if custom:
                values[name] = custom
        return replace(self, **values)

    def is_priority(self, tag: str) -> bool:
        return tag.lower() in self.priority

    def is_type(self, tag: str) -> bool:
        return tag.lower() in self.type


def _default_warnings() -> dict[WarningKind, WarningSettings]:
    return {
        kind: WarningSettings(severity=DEFAULT_SEVERITIES.get(kind, Severity.WARNING))
        for kind in WarningKind
    }


@dataclass(frozen=True)
class DetectorConfiguration:
    """Configuration shared by every detector."""

    warnings: Mapping[WarningKind, WarningSettings] = field(default_factory=_default_warnings)
    thresholds: Thresholds = field(default_factory=Thresholds)
    tags: TagVocabulary = field(default_factory=TagVocabulary)
    source: Path | None = None
    _config_file: ClassVar[Path] = Path("pyproject.toml")
    _tool_name: ClassVar[str] = "gherkin-hygiene"

    def settings(self, kind: WarningKind) -> WarningSettings:
        return self.warnings.get(kind, WarningSettings())

    def is_enabled(self, kind: WarningKind) -> bool:
        return self.settings(kind).enabled

    def update(self, config: Mapping[str, Any]) -> DetectorConfiguration:
        """Apply a ``[tool.gherkin-hygiene]`` style mapping."""
        warnings = dict(self.warnings)
        for name, warning_config in config.get("warnings", {}).items():
            kind = WarningKind.__members__.get(name)
            if kind is None:
                logger.warning("Ignoring configuration for unknown warning %s", name)
                continue
            warnings[kind] = warnings[kind].update(warning_config)
        for name in config.get("disabled", []):
            kind = WarningKind.__members__.get(name)
            if kind is None:
                logger.warning("Ignoring unknown disabled warning %s", name)
                continue
            warnings[kind] = replace(warnings[kind], enabled=False)
        return replace(
            self,
            warnings=warnings,
            thresholds=self.thresholds.update(config.get("thresholds", {})),
            tags=self.tags.update(config.get("tags", {})),
        )

    @classmethod
    def from_file(cls, path: Path) -> DetectorConfiguration:
        """Load the configuration from an explicit TOML file."""
        if not path.is_file():
            raise NoConfigFile(path)
        try:
            data: Mapping[str, Any] = toml.load(path)
        except toml.TomlDecodeError as e:
            raise InvalidConfigFile(path, str(e)) from e
        if path.name == cls._config_file.name:
            data = data.get("tool", {}).get(cls._tool_name, {})
        else:
            data = data.get("tool", {}).get(cls._tool_name, data)
        logger.debug("Loaded configuration from %s", path)
        return replace(cls().update(data), source=path)

    @classmethod
    def get_config(cls) -> DetectorConfiguration:
        """Load the configuration of the nearest project, or the defaults."""
        try:
            pyproject = cls.get_configfile()
        except NoProjectFile as e:
            logger.info("No %s found in %s, using defaults", e.proj_filename, e.search_paths)
            return cls()
        return cls.from_file(pyproject)

    @classmethod
    def get_configfile(cls) -> Path:
        cwd = Path.cwd().absolute()
        paths = [cwd] + list(cwd.parents)
        for path in paths:
            pyproject = path / cls._config_file
            if pyproject.exists() and pyproject.is_file():
                break
        else:
            raise NoProjectFile(cls._config_file, search_paths=paths)
        return pyproject

    def summary(self) -> str:
        lines = ["Warning configuration:"]
        lines.append(f"Loaded from: {self.source}" if self.source else "Using defaults")
        lines.append("")
        lines.append("Warnings:")
        for kind, settings in self.warnings.items():
            state = "enabled" if settings.enabled else "disabled"
            lines.append(f"  - {kind.name}: {state} ({settings.severity.value})")
        lines.append("")
        lines.append("Thresholds:")
        for threshold in fields(self.thresholds):
            lines.append(f"  - {threshold.name}: {getattr(self.thresholds, threshold.name)}")
        lines.append("")
        lines.append("Tags:")
        for category in fields(self.tags):
            lines.append(f"  - {category.name}: {', '.join(getattr(self.tags, category.name))}")
        return "\n".join(lines)


class NoProjectFile(Exception):
    """No project file could be found."""

    def __init__(self, proj_filename: Path, search_paths: Sequence[Path]):
        self.proj_filename = proj_filename.as_posix()
        self.search_paths = [path.as_posix() for path in search_paths]


class NoConfigFile(Exception):
    """An explicitly requested configuration file does not exist."""

    def __init__(self, config_file: Path):
        self.config_file = config_file.as_posix()


class InvalidConfigFile(Exception):
    """A configuration file is not valid TOML."""

    def __init__(self, config_file: Path, reason: str):
        super().__init__(f"{config_file}: {reason}")
        self.config_file = config_file.as_posix()
        self.reason = reason
