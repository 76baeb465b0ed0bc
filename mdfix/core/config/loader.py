"""
Configuration loader — reads mdfix.yml into a FixerConfig.

The config file is optional.  When none is found the defaults apply and
the working directory is the project root.
"""

from __future__ import annotations

import logging
from pathlib import Path

import yaml
from pydantic import ValidationError

from mdfix.core.models.config import FixerConfig

logger = logging.getLogger(__name__)

# Default config filename
CONFIG_FILE = "mdfix.yml"

# Optional wrapper key: the settings may live under "mdfix:"
CONFIG_KEY = "mdfix"


class ConfigError(Exception):
    """Raised when the configuration file is invalid or unreadable."""


def find_config_file(start_dir: Path | None = None) -> Path | None:
    """Search for mdfix.yml starting from the given directory, walking up.

    Args:
        start_dir: Directory to start searching from (default: cwd).

    Returns:
        Path to mdfix.yml, or None if not found.
    """
    current = (start_dir or Path.cwd()).resolve()

    for _ in range(20):  # safety limit
        candidate = current / CONFIG_FILE
        if candidate.is_file():
            return candidate
        parent = current.parent
        if parent == current:
            break  # filesystem root
        current = parent

    return None


def load_config(path: Path | None = None) -> FixerConfig:
    """Load and validate the fixer configuration.

    Args:
        path: Explicit path to mdfix.yml.  If None, searches upward and
            falls back to defaults when nothing is found.

    Returns:
        Validated FixerConfig.

    Raises:
        ConfigError: If an explicit file is missing, or any file is invalid.
    """
    if path is None:
        path = find_config_file()
        if path is None:
            logger.debug("No %s found, using defaults", CONFIG_FILE)
            return FixerConfig()

    if not path.is_file():
        raise ConfigError(f"Config file not found: {path}")

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
        data = {}
    if not isinstance(data, dict):
        raise ConfigError(f"Expected a YAML mapping in {path}, got {type(data).__name__}")

    if CONFIG_KEY in data:
        data = data[CONFIG_KEY] or {}
        if not isinstance(data, dict):
            raise ConfigError(f"Expected a mapping under '{CONFIG_KEY}:' in {path}")

    try:
        config = FixerConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration: {e}") from e

    logger.info("Loaded config with %d root(s) from %s", len(config.roots), path)
    return config


def project_root(config_path: Path | None) -> Path:
    """Project root: the config file's directory, else the working directory."""
    return config_path.parent.resolve() if config_path else Path.cwd()
