"""Configuration file loading and CLI overrides for runtime tunables.

Precedence, lowest to highest: Constants defaults, config file, CLI flags.
"""

from __future__ import annotations

import logging
import os
from typing import Any, Dict, Optional

import yaml

from constants import Constants

logger = logging.getLogger(__name__)

# config key -> (Constants attribute, expected type)
CONFIG_KEYS = {
    "manifest_file": ("PACKAGE_JSON_FILE", str),
    "lock_file": ("PACKAGE_LOCK_FILE", str),
    "default_ref": ("DEFAULT_REF", str),
    "indent": ("JSON_INDENT", int),
    "compare": ("COMPARE_ENABLED", bool),
    "git_timeout": ("GIT_TIMEOUT_SEC", int),
}


class ConfigError(ValueError):
    """The configuration file is unreadable or has invalid values."""


def load_config(config_path: Optional[str]) -> Dict[str, Any]:
    """Load a YAML (or JSON) configuration file.

    Args:
        config_path: Path to the file, or None for no configuration.

    Returns:
        The ``depsync`` section if present, otherwise the whole document.

    Raises:
        ConfigError: The file is missing, unparsable or not a mapping.
    """
    if not config_path:
        return {}
    if not os.path.isfile(config_path):
        raise ConfigError(f"Config file not found: {config_path}")

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        raise ConfigError(f"Failed to load config {config_path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"Config {config_path} must contain a mapping")
    section = data.get("depsync", data)
    if not isinstance(section, dict):
        raise ConfigError(f"Config {config_path}: 'depsync' must be a mapping")
    return section


def apply_config(config: Dict[str, Any]) -> None:
    """Apply configuration values onto Constants.

    Unknown keys are ignored with a warning.
    """
    for key, value in config.items():
        if key not in CONFIG_KEYS:
            logger.warning("Ignoring unknown config key: %s", key)
            continue
        attr, expected = CONFIG_KEYS[key]
        # bool is an int subclass; reject it where a number is expected
        if not isinstance(value, expected) or (expected is int and isinstance(value, bool)):
            raise ConfigError(f"Config key '{key}' must be of type {expected.__name__}")
        setattr(Constants, attr, value)


def apply_cli_overrides(args) -> None:
    """Apply CLI flags with highest precedence."""
    if getattr(args, "MANIFEST", None):
        Constants.PACKAGE_JSON_FILE = args.MANIFEST
    if getattr(args, "LOCKFILE", None):
        Constants.PACKAGE_LOCK_FILE = args.LOCKFILE
    if getattr(args, "NO_COMPARE", False):
        Constants.COMPARE_ENABLED = False
