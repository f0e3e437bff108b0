"""Constants used in the project."""

from enum import Enum


class ExitCodes(Enum):
    """Exit codes for the program.

    Args:
        Enum (int): Exit codes for the program.
    """

    SUCCESS = 0
    FILE_ERROR = 1


class DependencyGroups(Enum):
    """Dependency groupings of a package.json manifest.

    Args:
        Enum (string): Manifest key of the grouping.
    """

    DIRECT = "dependencies"
    DEV = "devDependencies"
    PEER = "peerDependencies"
    OPTIONAL = "optionalDependencies"


# Report section labels, in report order.
GROUP_LABELS = {
    DependencyGroups.DIRECT: "Dependencies",
    DependencyGroups.DEV: "DevDependencies",
    DependencyGroups.PEER: "PeerDependencies",
    DependencyGroups.OPTIONAL: "OptionalDependencies",
}

# Groupings that are reconciled even when missing from the manifest.
ALWAYS_RECONCILED = (DependencyGroups.DIRECT, DependencyGroups.DEV)


class Constants:  # pylint: disable=too-few-public-methods
    """General constants used in the project.
    Data holder for configuration constants; not intended to provide behavior.
    """

    PACKAGE_JSON_FILE = "package.json"
    PACKAGE_LOCK_FILE = "package-lock.json"
    NODE_MODULES_PREFIX = "node_modules/"
    CARET = "^"
    DEFAULT_REF = "main"
    JSON_INDENT = 2
    COMPARE_ENABLED = True
    GIT_TIMEOUT_SEC = 30
    MARK_SUCCESS = "\u2705"
    MARK_COMPARE = "\U0001F4DC"
    MARK_WARNING = "\u26A0\uFE0F"
    MARK_ERROR = "\u274C"
    LOG_FORMAT = "[%(levelname)s] %(message)s"
    ENV_LOG_LEVEL = "DEPSYNC_LOG_LEVEL"
    LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
