"""Centralized logging setup and small helpers for structured debug output."""

from __future__ import annotations

import logging
import os
from typing import Any, Dict, Optional

from constants import Constants

_CONFIGURED = False


def configure_logging(log_file: Optional[str] = None, quiet: bool = False) -> None:
    """Configure the root logger once for the CLI.

    The level comes from the DEPSYNC_LOG_LEVEL environment variable and
    defaults to INFO.

    Args:
        log_file: Optional path of a file that receives all records.
        quiet: Only show errors on the console.
    """
    global _CONFIGURED  # pylint: disable=global-statement
    root = logging.getLogger()
    level_name = os.environ.get(Constants.ENV_LOG_LEVEL, "INFO").upper()
    level = getattr(logging, level_name, logging.INFO)

    if not _CONFIGURED:
        console = logging.StreamHandler()
        console.setFormatter(logging.Formatter(Constants.LOG_FORMAT))
        if quiet:
            console.setLevel(logging.ERROR)
        root.addHandler(console)
        if log_file:
            file_handler = logging.FileHandler(log_file, encoding="utf-8")
            file_handler.setFormatter(logging.Formatter(Constants.LOG_FORMAT))
            root.addHandler(file_handler)
        _CONFIGURED = True

    root.setLevel(level)


def is_debug_enabled(logger: logging.Logger) -> bool:
    """Return True if DEBUG records would be emitted by logger."""
    return logger.isEnabledFor(logging.DEBUG)


def extra_context(**fields: Any) -> Dict[str, Any]:
    """Build an ``extra`` mapping for structured debug records.

    None values are dropped so handlers never see empty attributes.
    """
    return {key: value for key, value in fields.items() if value is not None}
