#!/usr/bin/env python
"""
Check Gherkin feature files for tagging and scenario quality problems.

* missing, duplicate, low-value and inconsistent tags
* likely tag typos
* long, incomplete or badly ordered scenarios
* UI and implementation details in steps
* ambiguous language
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Sequence

import click

from . import __version__
from .config import DetectorConfiguration, InvalidConfigFile, NoConfigFile
from .engine import analyze
from .parser import FeatureParseError, load_features, resolve_feature_files
from .warning import format_report

logger = logging.getLogger(__name__)

__all__ = ["main"]


@click.command()
@click.option(
    "--config",
    "config_file",
    type=click.Path(dir_okay=False, path_type=Path),
    help="TOML configuration file. Defaults to [tool.gherkin-hygiene] in pyproject.toml.",
)
@click.option("--show-config", is_flag=True, default=False, help="Print the configuration used")
@click.option("--verbose", is_flag=True, default=False)
@click.argument("paths", nargs=-1, type=click.Path(exists=True, path_type=Path))
@click.version_option(version=__version__)
def main(verbose: bool, show_config: bool, config_file: Path | None, paths: Sequence[Path]):
    if verbose:
        logging.basicConfig()
        logging.getLogger("gherkin_hygiene").setLevel(logging.DEBUG)

    try:
        config = (
            DetectorConfiguration.from_file(config_file)
            if config_file
            else DetectorConfiguration.get_config()
        )
    except NoConfigFile as e:
        click.echo(f'"{e.config_file}" could not be found.')
        sys.exit(1)
    except InvalidConfigFile as e:
        click.echo(f'"{e.config_file}" is not valid TOML: {e.reason}')
        sys.exit(1)

    if show_config:
        click.echo(config.summary())
        click.echo()

    _check_features(config, paths)


def _resolve_files(paths: Sequence[Path]) -> Sequence[Path]:
    found_files = resolve_feature_files(paths or [Path(".")])
    if not found_files:
        click.echo("No feature files to check.")
        sys.exit(0)
    logger.debug("Checking the following files: %s", [f.as_posix() for f in found_files])
    return found_files


def _check_features(config: DetectorConfiguration, paths: Sequence[Path]):
    found_files = _resolve_files(paths)
    try:
        features = load_features(found_files)
    except FeatureParseError as e:
        click.echo(f"Could not parse {e.path}: {e.reason}")
        sys.exit(1)

    analysis = analyze(features, config)
    click.echo(format_report(analysis.warnings))
    if analysis.errors:
        for error in analysis.errors:
            click.echo(f"Analysis failed: {error!r}")
        sys.exit(2)
    if analysis.has_error_warnings:
        click.echo(f"Checked {len(features)} features: errors found.")
        sys.exit(1)
    click.echo(f"Checked {len(features)} features successfully.")
