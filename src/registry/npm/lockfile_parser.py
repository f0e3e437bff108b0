"""Resolved-version extraction from package-lock.json.

Produces the flat ``node_modules/<name>`` -> lock entry mapping used by the
reconciler, for every lockfileVersion npm has shipped.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Dict

from common.errors import LockfileError
from constants import Constants

logger = logging.getLogger(__name__)


def _flatten_v1(dependencies: Dict[str, Any]) -> Dict[str, Dict[str, Any]]:
    """Map top-level v1 dependencies to v2-style install paths.

    Nested dependencies are installed below their parent and never satisfy
    a top-level declaration, so they are not included.
    """
    packages: Dict[str, Dict[str, Any]] = {}
    for pkg_name, pkg_info in dependencies.items():
        if isinstance(pkg_info, dict):
            packages[f"{Constants.NODE_MODULES_PREFIX}{pkg_name}"] = pkg_info
    return packages


def extract_resolved_versions(data: Dict[str, Any]) -> Dict[str, Any]:
    """Return the install-path keyed lock entries of a parsed lockfile.

    Supports lockfileVersion 1, 2, and 3. Version 2 files carry both
    layouts; the flat ``packages`` map wins.

    Args:
        data: Parsed package-lock.json document.

    Returns:
        Mapping of install path to lock entry.
    """
    packages = data.get("packages")
    if isinstance(packages, dict) and packages:
        return dict(packages)

    dependencies = data.get("dependencies")
    if isinstance(dependencies, dict):
        logger.debug("Using lockfileVersion 1 dependency tree")
        return _flatten_v1(dependencies)

    return {}


def load_resolved_versions(lockfile_path: str) -> Dict[str, Any]:
    """Read package-lock.json and extract its resolved versions.

    Args:
        lockfile_path: Path to package-lock.json file

    Raises:
        LockfileError: The file is missing, unreadable or not a JSON object.
    """
    try:
        with open(lockfile_path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except FileNotFoundError as e:
        raise LockfileError(lockfile_path, "file not found") from e
    except json.JSONDecodeError as e:
        raise LockfileError(lockfile_path, f"invalid JSON ({e})") from e
    except (IOError, UnicodeDecodeError) as e:
        raise LockfileError(lockfile_path, str(e)) from e

    if not isinstance(data, dict):
        raise LockfileError(lockfile_path, "top-level value is not an object")

    return extract_resolved_versions(data)
