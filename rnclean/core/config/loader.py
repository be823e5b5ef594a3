"""
Configuration loader — resolves a CleanConfig for one run.

Precedence, lowest to highest:
    model defaults  <  .rnclean.yml  <  environment  <  CLI flags

The YAML file is optional. It may hold the settings flat or wrapped
under an ``rnclean:`` key, using the CleanConfig field names.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from rnclean.core.models.config import CleanConfig

logger = logging.getLogger(__name__)

# Default config filename
CONFIG_FILE = ".rnclean.yml"

# Env vars for the run log path, first match wins.
LOG_FILE_ENV_VARS = ("RNCLEAN_LOG_FILE", "LOG_FILE")


class ConfigError(Exception):
    """Raised when configuration is invalid or unreadable."""


def find_config_file(project_root: Path) -> Path | None:
    """Return ``.rnclean.yml`` in the project root, if present."""
    candidate = project_root / CONFIG_FILE
    return candidate if candidate.is_file() else None


def load_config_file(path: Path) -> dict[str, Any]:
    """Read a config file into a plain mapping.

    Raises:
        ConfigError: If the file is unreadable or not a YAML mapping.
    """
    logger.debug("Loading config from %s", path)

    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Cannot read {path}: {e}") from e

    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"Expected a YAML mapping in {path}, got {type(data).__name__}")

    section = data.get("rnclean", data)
    if not isinstance(section, dict):
        raise ConfigError(f"Expected 'rnclean' to be a mapping in {path}")
    return dict(section)


def env_overrides(environ: Mapping[str, str] | None = None) -> dict[str, Any]:
    """Settings taken from environment variables."""
    environ = os.environ if environ is None else environ
    overrides: dict[str, Any] = {}
    for name in LOG_FILE_ENV_VARS:
        if environ.get(name):
            overrides["log_file"] = environ[name]
            break
    return overrides


def resolve_config(
    project_root: Path,
    cli_overrides: Mapping[str, Any] | None = None,
    config_path: Path | None = None,
    environ: Mapping[str, str] | None = None,
) -> CleanConfig:
    """Merge all configuration layers and validate the result.

    Args:
        project_root: Directory searched for ``.rnclean.yml``.
        cli_overrides: Values from CLI flags. ``None`` values are ignored,
            so unset flags never mask lower layers.
        config_path: Explicit config file; must exist when given.
        environ: Environment mapping (default: ``os.environ``).

    Raises:
        ConfigError: On unreadable files or invalid values.
    """
    merged: dict[str, Any] = {}

    if config_path is not None:
        if not config_path.is_file():
            raise ConfigError(f"Config file not found: {config_path}")
        merged.update(load_config_file(config_path))
    else:
        found = find_config_file(project_root)
        if found is not None:
            merged.update(load_config_file(found))

    merged.update(env_overrides(environ))
    merged.update({k: v for k, v in (cli_overrides or {}).items() if v is not None})

    try:
        config = CleanConfig.model_validate(merged)
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration: {e}") from e

    logger.info(
        "Resolved config: pm=%s dry_run=%s log=%s",
        config.package_manager or "auto",
        config.dry_run,
        config.log_file,
    )
    return config
