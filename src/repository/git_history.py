"""Read earlier revisions of a file through the git command line."""

from __future__ import annotations

import logging
import subprocess
from typing import Any, Dict, Optional

from common.errors import ManifestError
from constants import Constants
from registry.npm.manifest import parse_manifest_text

logger = logging.getLogger(__name__)


class HistoryError(Exception):
    """A previous revision could not be retrieved."""


class NotARepositoryError(HistoryError):
    """The working directory is not inside a git repository."""


class FileNotTrackedError(HistoryError):
    """The file does not exist at the requested reference."""


class InvalidReferenceError(HistoryError):
    """The reference is empty or unknown to git."""


_NOT_A_REPOSITORY = ("not a git repository",)
_NOT_TRACKED = ("does not exist in", "exists on disk, but not in")
_BAD_REFERENCE = ("invalid object name", "unknown revision", "bad revision", "ambiguous argument")


def _classify_git_failure(stderr: str, ref: str, path: str) -> HistoryError:
    """Map git's stderr to the matching HistoryError subclass."""
    lowered = stderr.lower()
    message = stderr.strip().splitlines()[-1] if stderr.strip() else "git show failed"
    if any(marker in lowered for marker in _NOT_A_REPOSITORY):
        return NotARepositoryError(message)
    if any(marker in lowered for marker in _NOT_TRACKED):
        return FileNotTrackedError(f"{path} not tracked at {ref}")
    if any(marker in lowered for marker in _BAD_REFERENCE):
        return InvalidReferenceError(f"invalid reference '{ref}'")
    return HistoryError(message)


def show_file_at_ref(ref: str, relative_path: str, cwd: Optional[str] = None,
                     timeout: Optional[int] = None) -> str:
    """Return the content of a file at a git reference.

    Args:
        ref: Branch, tag or commit.
        relative_path: File path relative to ``cwd``.
        cwd: Working directory for git; defaults to the process directory.
        timeout: Seconds before git is abandoned.

    Raises:
        HistoryError: Or one of its subclasses, describing why.
    """
    if not ref or not ref.strip() or ref.startswith("-"):
        raise InvalidReferenceError("Invalid branch provided")

    spec = f"{ref}:./{relative_path}"
    try:
        result = subprocess.run(
            ["git", "show", spec],
            cwd=cwd,
            capture_output=True,
            timeout=timeout or Constants.GIT_TIMEOUT_SEC,
            check=False,
        )
    except FileNotFoundError as e:
        raise HistoryError("git executable not found") from e
    except subprocess.TimeoutExpired as e:
        raise HistoryError(f"git show {spec} timed out") from e

    if result.returncode != 0:
        stderr = (result.stderr or b"").decode("utf-8", errors="replace")
        raise _classify_git_failure(stderr, ref, relative_path)
    try:
        return result.stdout.decode("utf-8")
    except UnicodeDecodeError as e:
        raise HistoryError(f"{relative_path} at {ref} is not valid UTF-8 ({e.reason})") from e


def load_manifest_at_ref(ref: str, relative_path: str, cwd: Optional[str] = None,
                         timeout: Optional[int] = None) -> Dict[str, Any]:
    """Parse package.json as it was at a git reference.

    Raises:
        HistoryError: Retrieval failed or the old content is not a JSON object.
    """
    text = show_file_at_ref(ref, relative_path, cwd, timeout)
    try:
        return parse_manifest_text(text, f"{ref}:{relative_path}")
    except ManifestError as e:
        raise HistoryError(str(e)) from e
