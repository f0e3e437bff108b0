"""Version spec parsing for caret-style ranges.

Only the narrow "^<version>" convention is understood. Tokens are plain
dot-separated strings so malformed versions still compare as strings.
"""

from typing import Optional

import semantic_version

from constants import Constants
from .models import ParseStatus, VersionSpec


def strip_caret(raw: str) -> str:
    """Remove the first caret from a spec string."""
    return raw.replace(Constants.CARET, "", 1)


def _token(parts, index: int) -> Optional[str]:
    return parts[index] if len(parts) > index else None


def parse_version_spec(raw: str) -> VersionSpec:
    """Parse a declared or resolved version string.

    Never raises. A version that is not a strict semantic version is
    returned with ParseStatus.DEGRADED and whatever tokens the string
    splits into; a string without dots is its own major token.

    Args:
        raw: Spec string such as "^1.2.3" or "1.2.3".

    Returns:
        VersionSpec with major/minor/patch tokens and parse status.
    """
    version = strip_caret(raw)
    parts = version.split(".")
    try:
        semantic_version.Version(version)
        status = ParseStatus.OK
    except ValueError:
        status = ParseStatus.DEGRADED

    return VersionSpec(
        raw=raw,
        prefixed=raw.startswith(Constants.CARET),
        version=version,
        major=parts[0],
        minor=_token(parts, 1),
        patch=_token(parts, 2),
        status=status,
    )


def major_token(version: str) -> str:
    """First dot-separated token of a version string."""
    return version.split(".")[0]
