"""
Configuration loader — reads aurora.yml and application configs into models.

Two files are understood:

    aurora.yml                   tool settings (template source, toolchain,
                                 timeouts).  Optional: defaults apply.
    configs/config.<env>.yaml    a generated project's own config; only the
                                 ``data:`` connections are read.

Both are parsed with PyYAML and validated with Pydantic.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from aurora.core.models.database import AppConfig, DBConnection
from aurora.core.models.settings import Settings

logger = logging.getLogger(__name__)

SETTINGS_FILE = "aurora.yml"
SETTINGS_ENV_VAR = "AURORA_CONFIG"


class ConfigError(Exception):
    """Raised when configuration is invalid or missing."""


def find_settings_file(start_dir: Path | None = None) -> Path | None:
    """Search for aurora.yml starting from the given directory, walking up.

    Args:
        start_dir: Directory to start searching from (default: cwd).

    Returns:
        Path to aurora.yml, or None if not found.
    """
    current = (start_dir or Path.cwd()).resolve()

    for _ in range(20):  # safety limit
        candidate = current / SETTINGS_FILE
        if candidate.is_file():
            return candidate
        parent = current.parent
        if parent == current:
            break
        current = parent

    return None


def _read_yaml_mapping(path: Path) -> dict[str, Any]:
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
    return data


def load_settings(path: Path | None = None) -> Settings:
    """Load aurora's own settings.

    Lookup order: explicit ``path`` > ``AURORA_CONFIG`` env var >
    aurora.yml found upward from the CWD > built-in defaults.

    Raises:
        ConfigError: If an explicitly requested file is missing, or any
            file found is invalid.
    """
    explicit = path is not None
    if path is None and os.environ.get(SETTINGS_ENV_VAR):
        path = Path(os.environ[SETTINGS_ENV_VAR])
        explicit = True
    if path is None:
        path = find_settings_file()

    if path is None:
        logger.debug("No %s found, using built-in defaults", SETTINGS_FILE)
        return Settings()

    if not path.is_file():
        if explicit:
            raise ConfigError(f"Config file not found: {path}")
        return Settings()

    logger.debug("Loading settings from %s", path)
    data = _read_yaml_mapping(path)

    # Allow the whole file to sit under an "aurora:" key
    if "aurora" in data and isinstance(data["aurora"], dict):
        data = data["aurora"]

    try:
        return Settings.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid settings in {path}: {e}") from e


def app_config_path(working_dir: Path, env: str) -> Path:
    """Default location of a project's config for ``env``."""
    return working_dir / "configs" / f"config.{env}.yaml"


def load_app_config(path: Path) -> AppConfig:
    """Load a generated project's configuration file.

    Every mapping under ``data:`` that declares a ``driver`` becomes a
    :class:`DBConnection` keyed by its name under ``data:``.

    Raises:
        ConfigError: If the file is missing, unreadable or malformed.
    """
    if not path.is_file():
        raise ConfigError(f"Config file not found: {path}")

    logger.debug("Loading application config from %s", path)
    data = _read_yaml_mapping(path)

    section = data.get("data") or {}
    if not isinstance(section, dict):
        raise ConfigError(f"'data' in {path} must be a mapping")

    connections: list[DBConnection] = []
    for key, value in section.items():
        if not isinstance(value, dict) or "driver" not in value:
            continue
        try:
            connections.append(DBConnection.model_validate({**value, "key": str(key)}))
        except ValidationError as e:
            raise ConfigError(f"Invalid connection '{key}' in {path}: {e}") from e

    env = data.get("env", "")
    logger.info("Loaded %d database connection(s) from %s", len(connections), path)
    return AppConfig(env=str(env) if env else "", connections=connections)
