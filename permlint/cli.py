"""
CLI entry point: ties together config -> walker/linter -> reporter.

Usage:
  # Lint every workflow in .github/workflows/:
  python3 -m permlint run

  # Lint specific files or directories, with an explicit mapping:
  python3 -m permlint run .github/workflows/ci.yml -c .permlint.yml

  # Output as JSON or SARIF:
  python3 -m permlint run --format json

  # Seed .permlint.yml with every action your workflows use:
  python3 -m permlint init

Exit codes:
  0: no findings
  1: findings detected
  2: error (bad config, unreadable or invalid workflow, etc.)
"""

import logging
import os
import sys

import click
import yaml

from permlint import __version__
from permlint.config import (
    DEFAULT_CONFIG_FILENAME,
    ConfigError,
    load_builtin_config,
    load_config,
    write_config,
)
from permlint.engine.collector import build_config
from permlint.engine.linter import lint_workflows
from permlint.parser import find_workflow_files
from permlint.reporter import report_json, report_sarif, report_text

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FINDINGS = 1
EXIT_ERROR = 2

GITHUB_WORKFLOWS_DIR = os.path.join(".github", "workflows")


def _setup_logging(verbose: bool) -> None:
    """Configure logging based on verbosity flag."""
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )


def _workflow_paths(args: tuple[str, ...]) -> list[str]:
    """Expand CLI arguments into workflow files; default to .github/workflows/."""
    if not args:
        if not os.path.isdir(GITHUB_WORKFLOWS_DIR):
            return []
        return find_workflow_files(GITHUB_WORKFLOWS_DIR)

    paths: list[str] = []
    for arg in args:
        if os.path.isdir(arg):
            paths.extend(find_workflow_files(arg))
        else:
            paths.append(arg)
    return paths


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Enable verbose logging.")
def cli(verbose: bool):
    """A linter for GitHub Actions' permissions."""
    _setup_logging(verbose)


@cli.command()
@click.argument("workflows", nargs=-1)
@click.option("-c", "--config-path", default=None, help="Load configuration from PATH.")
@click.option("-f", "--format", "output_format", type=click.Choice(["text", "json", "sarif"]), default="text", help="Output format.")
def run(workflows: tuple[str, ...], config_path: str, output_format: str):
    """Lint workflow permissions.

    Exits with code 0 if no issues found, 1 if issues found, 2 on error.
    """
    try:
        config = load_config(config_path)
    except (ConfigError, FileNotFoundError) as e:
        click.echo(f"Error loading config: {e}", err=True)
        sys.exit(EXIT_ERROR)
    logger.debug("Config: %d action mapping(s)", len(config.repositories))

    paths = _workflow_paths(workflows)
    for p in paths:
        logger.debug("Workflow path: %s", p)

    if not paths:
        click.echo("No workflow files found.")
        sys.exit(EXIT_OK)

    try:
        diagnostics = lint_workflows(paths, config)
    except (yaml.YAMLError, ValueError) as e:
        click.echo(f"Error parsing workflow: {e}", err=True)
        sys.exit(EXIT_ERROR)
    except OSError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(EXIT_ERROR)

    if output_format == "json":
        click.echo(report_json(diagnostics))
    elif output_format == "sarif":
        click.echo(report_sarif(diagnostics))
    elif diagnostics:
        click.echo(report_text(diagnostics), err=True)
    else:
        click.echo("No permission issues found.")

    sys.exit(EXIT_FINDINGS if diagnostics else EXIT_OK)


@cli.command()
@click.argument("workflows", nargs=-1)
@click.option("-o", "--output-path", default=None, help=f"Write configuration to PATH (default: {DEFAULT_CONFIG_FILENAME}).")
@click.option("--overwrite", is_flag=True, help="Overwrite existing configuration file.")
def init(workflows: tuple[str, ...], output_path: str, overwrite: bool):
    """Initialize a config file from the actions your workflows use."""
    path = output_path or DEFAULT_CONFIG_FILENAME
    if os.path.exists(path) and not overwrite:
        click.echo(f"Error: already exists: {path}", err=True)
        sys.exit(EXIT_ERROR)

    try:
        config = build_config(_workflow_paths(workflows))
        # Known mappings replace the empty placeholders collected above
        config.merge(load_builtin_config(), overwrite=True)
    except (yaml.YAMLError, ValueError) as e:
        click.echo(f"Error parsing workflow: {e}", err=True)
        sys.exit(EXIT_ERROR)
    except OSError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(EXIT_ERROR)

    config.repositories = dict(sorted(config.repositories.items()))
    with open(path, "w") as f:
        write_config(config, f)
    click.echo(f"Created {path}", err=True)


@cli.command()
def version():
    """Print the permlint version."""
    click.echo(__version__)


if __name__ == "__main__":
    cli()
