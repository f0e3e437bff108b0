"""package.json reading and writing."""

from __future__ import annotations

import json
import logging
import os
import tempfile
from typing import Any, Dict

from common.errors import ManifestError
from constants import Constants

logger = logging.getLogger(__name__)


def parse_manifest_text(text: str, source: str) -> Dict[str, Any]:
    """Parse package.json content.

    Args:
        text: JSON document.
        source: Path or ``ref:path`` used in error messages.

    Raises:
        ManifestError: The content is not a JSON object.
    """
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise ManifestError(source, f"invalid JSON ({e})") from e
    if not isinstance(data, dict):
        raise ManifestError(source, "top-level value is not an object")
    return data


def load_manifest(manifest_path: str) -> Dict[str, Any]:
    """Read and parse package.json from disk."""
    try:
        with open(manifest_path, "r", encoding="utf-8") as f:
            text = f.read()
    except FileNotFoundError as e:
        raise ManifestError(manifest_path, "file not found") from e
    except (IOError, UnicodeDecodeError) as e:
        raise ManifestError(manifest_path, str(e)) from e
    return parse_manifest_text(text, manifest_path)


def dump_manifest(manifest: Dict[str, Any], indent: int = Constants.JSON_INDENT) -> str:
    """Serialize a manifest the way npm writes it: indented, trailing newline."""
    return json.dumps(manifest, indent=indent, ensure_ascii=False) + "\n"


def write_manifest(manifest_path: str, manifest: Dict[str, Any], indent: int = Constants.JSON_INDENT) -> None:
    """Write package.json atomically.

    The document is serialized first and written to a sibling temporary
    file that replaces the target, so a failure leaves the old file intact.

    Raises:
        ManifestError: The file could not be written.
    """
    content = dump_manifest(manifest, indent)
    directory = os.path.dirname(os.path.abspath(manifest_path))
    tmp_path = None
    try:
        with tempfile.NamedTemporaryFile(
            "w", encoding="utf-8", dir=directory, prefix=".package.json.", delete=False
        ) as tmp:
            tmp_path = tmp.name
            tmp.write(content)
        mode = os.stat(manifest_path).st_mode & 0o777 if os.path.exists(manifest_path) else 0o644
        os.chmod(tmp_path, mode)
        os.replace(tmp_path, manifest_path)
        tmp_path = None
    except OSError as e:
        raise ManifestError(manifest_path, f"write failed ({e})") from e
    finally:
        if tmp_path is not None and os.path.exists(tmp_path):
            os.unlink(tmp_path)
    logger.debug("Wrote %s", manifest_path)
