"""
Configuration file support for permlint.

The configuration maps actions to the permissions they need, and lists
findings to ignore. It is read from .permlint.yml in the working directory
(or an explicit path); without one, the built-in mapping is used.

Example .permlint.yml:

    # Permissions each action needs when invoked
    repositories:
      actions/checkout:
        contents: read
      github/codeql-action/upload-sarif:
        security-events: write

    # Findings to suppress: workflow path -> job id -> categories
    ignores:
      .github/workflows/release.yml:
        publish:
          - id-token
"""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional, TextIO

import yaml

from permlint.engine.scope import CATEGORIES, Scope

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILENAME = ".permlint.yml"
BUILTIN_CONFIG_PATH = Path(__file__).with_name("config.builtin.yml")


class ConfigError(ValueError):
    """Raised when a configuration document is malformed."""


@dataclass
class Config:
    """Parsed permlint configuration."""
    repositories: dict[str, dict[str, Scope]] = field(default_factory=dict)
    ignores: dict[str, dict[str, list[str]]] = field(default_factory=dict)

    def lookup(self, action: str) -> list[tuple[str, Scope]]:
        """Permissions configured for an action; empty when it is not configured."""
        return list(self.repositories.get(action, {}).items())

    def merge(self, other: "Config", overwrite: bool = False) -> None:
        """Copy other's action entries into this config."""
        for repository, permissions in other.repositories.items():
            if repository in self.repositories and not overwrite:
                continue
            self.repositories[repository] = dict(permissions)

    def ignore_enabled(self, path: str, job_id: str, category: str) -> bool:
        target = os.path.normpath(path)
        for ignore_path, jobs in self.ignores.items():
            if os.path.normpath(ignore_path) != target:
                continue
            if category in jobs.get(job_id, []):
                return True
        return False

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "repositories": {
                repository: {category: str(scope) for category, scope in permissions.items()}
                for repository, permissions in self.repositories.items()
            },
        }
        if self.ignores:
            data["ignores"] = self.ignores
        return data


def load_config(config_path: Optional[str] = None) -> Config:
    """
    Load the permission mapping.

    Search order:
      1. Explicit config_path if provided (must exist)
      2. .permlint.yml in the current working directory
      3. The built-in mapping shipped with permlint

    Raises:
        FileNotFoundError: If config_path is given but does not exist.
        ConfigError: If the document is invalid.
    """
    path = _find_config_file(config_path)

    if path is None:
        logger.debug("No config file found, using built-in mapping")
        return load_builtin_config()

    logger.info("Loading config from %s", path)
    with open(path, "r") as f:
        return parse_config(f.read(), source=str(path))


def load_builtin_config() -> Config:
    with open(BUILTIN_CONFIG_PATH, "r") as f:
        return parse_config(f.read(), source="built-in config")


def parse_config(text: str, source: str = "<string>") -> Config:
    """Parse and validate a configuration document."""
    try:
        raw = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise ConfigError(f"{source}: invalid YAML: {e}") from e

    if raw is None:
        return Config()
    if not isinstance(raw, dict):
        raise ConfigError(f"{source}: config is not a YAML mapping")

    config = Config(
        repositories=_parse_repositories(raw.get("repositories") or {}, source),
        ignores=_parse_ignores(raw.get("ignores") or {}, source),
    )
    logger.debug(
        "Loaded %d action mapping(s) and %d ignore path(s) from %s",
        len(config.repositories), len(config.ignores), source,
    )
    return config


def _parse_repositories(raw: Any, source: str) -> dict[str, dict[str, Scope]]:
    if not isinstance(raw, dict):
        raise ConfigError(f"{source}: 'repositories' must be a mapping")

    repositories: dict[str, dict[str, Scope]] = {}
    for repository, permissions in raw.items():
        repository = str(repository)
        if len(repository.split("/")) < 2:
            raise ConfigError(f"{source}: invalid repository name: {repository}")

        permissions = permissions or {}
        if not isinstance(permissions, dict):
            raise ConfigError(f"{source}: permissions of {repository} must be a mapping")

        parsed: dict[str, Scope] = {}
        for category, value in permissions.items():
            if category not in CATEGORIES:
                raise ConfigError(f"{source}: invalid permission scope: {category}")
            try:
                parsed[category] = Scope.parse(value)
            except ValueError as e:
                raise ConfigError(f"{source}: {e}") from e
        repositories[repository] = parsed
    return repositories


def _parse_ignores(raw: Any, source: str) -> dict[str, dict[str, list[str]]]:
    if not isinstance(raw, dict):
        raise ConfigError(f"{source}: 'ignores' must be a mapping")

    ignores: dict[str, dict[str, list[str]]] = {}
    for path, jobs in raw.items():
        if not isinstance(jobs, dict):
            raise ConfigError(f"{source}: ignores for {path} must map job ids to lists")
        ignores[str(path)] = {}
        for job_id, categories in jobs.items():
            if not isinstance(categories, list):
                raise ConfigError(f"{source}: ignores for {path}/{job_id} must be a list")
            ignores[str(path)][str(job_id)] = [str(c) for c in categories]
    return ignores


def write_config(config: Config, stream: TextIO) -> None:
    yaml.safe_dump(config.to_dict(), stream, indent=2, sort_keys=False, default_flow_style=False)


def _find_config_file(config_path: Optional[str] = None) -> Optional[str]:
    """Find the config file, returning its path or None."""
    # 1. Explicit path
    if config_path:
        p = Path(config_path)
        if not p.is_file():
            raise FileNotFoundError(f"Config file not found: {config_path}")
        return str(p)

    # 2. Current working directory
    cwd_candidate = Path.cwd() / DEFAULT_CONFIG_FILENAME
    if cwd_candidate.is_file():
        return str(cwd_candidate)

    return None
