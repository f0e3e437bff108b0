"""depsync - keep package.json caret ranges in step with package-lock.json

    Reconciles the declared dependency ranges with the installed versions,
    writes package.json back and reports what changed against a git
    reference.

    Returns:
        int: Exit code
"""
from __future__ import annotations

import logging
import os
import sys
from typing import Any, Dict, List, Optional

from args import parse_args
from cli_config import ConfigError, apply_cli_overrides, apply_config, load_config
from common.errors import DepsyncFileError
from common.logging_utils import configure_logging, extra_context, is_debug_enabled
from common.sink import ReportSink
from constants import Constants, ExitCodes
from registry.npm.lockfile_parser import load_resolved_versions
from registry.npm.manifest import load_manifest, write_manifest
from repository.git_history import (
    FileNotTrackedError,
    HistoryError,
    InvalidReferenceError,
    NotARepositoryError,
    load_manifest_at_ref,
)
from versioning.classify import classify_manifests, render_report
from versioning.models import GroupReport
from versioning.reconcile import reconcile_manifest

logger = logging.getLogger("depsync")


def sync_manifest(directory: str, sink: ReportSink) -> Dict[str, Any]:
    """Reconcile package.json with package-lock.json and write it back.

    Args:
        directory: Project directory.
        sink: Receives update notices and status lines.

    Raises:
        DepsyncFileError: Either file is missing or malformed, or the write failed.

    Returns:
        dict: The reconciled manifest as written.
    """
    manifest_path = os.path.join(directory, Constants.PACKAGE_JSON_FILE)
    lockfile_path = os.path.join(directory, Constants.PACKAGE_LOCK_FILE)

    manifest = load_manifest(manifest_path)
    resolved = load_resolved_versions(lockfile_path)
    if is_debug_enabled(logger):
        logger.debug(
            "Loaded %d lock entries",
            len(resolved),
            extra=extra_context(event="load", component="cli", action="sync_manifest"),
        )

    reconciled = reconcile_manifest(manifest, resolved, sink)
    write_manifest(manifest_path, reconciled, Constants.JSON_INDENT)
    sink.emit(f"{Constants.MARK_SUCCESS} Successfully updated {Constants.PACKAGE_JSON_FILE} "
              "with latest installed versions")
    return reconciled


def compare_with_ref(ref: str, directory: str, current: Dict[str, Any],
                     sink: ReportSink) -> Optional[List[GroupReport]]:
    """Report dependency changes between ``ref`` and the current manifest.

    History failures are advisory: they become a warning on the sink and
    None is returned.
    """
    name = Constants.PACKAGE_JSON_FILE
    sink.emit(f"{Constants.MARK_COMPARE} Comparing with previous git version...")
    try:
        previous = load_manifest_at_ref(ref, name, cwd=directory)
    except NotARepositoryError:
        sink.warning(f"{Constants.MARK_WARNING} Not a git repository, can't compare with previous version")
        return None
    except FileNotTrackedError:
        sink.warning(f"{Constants.MARK_WARNING} {name} not tracked in git at '{ref}', can't compare with previous version")
        return None
    except InvalidReferenceError:
        sink.warning(f"{Constants.MARK_WARNING} Invalid git reference '{ref}', can't compare with previous version")
        return None
    except HistoryError as e:
        sink.warning(f"{Constants.MARK_WARNING} Could not compare with git version: {e}")
        return None

    reports = classify_manifests(previous, current)
    if not reports:
        sink.emit(f"No dependency version changes since {ref}")
    for line in render_report(reports):
        sink.emit(line)
    return reports


def run(args, sink: ReportSink) -> ExitCodes:
    """Run both phases and return the exit code.

    Only the sync phase can fail the run; the comparison phase degrades to
    warnings.
    """
    try:
        apply_config(load_config(args.CONFIG))
    except ConfigError as e:
        sink.error(f"{Constants.MARK_ERROR} Error loading configuration: {e}")
        return ExitCodes.FILE_ERROR
    apply_cli_overrides(args)

    try:
        current = sync_manifest(args.DIRECTORY, sink)
    except DepsyncFileError as e:
        sink.error(f"{Constants.MARK_ERROR} Error updating package versions: {e}")
        return ExitCodes.FILE_ERROR

    if Constants.COMPARE_ENABLED:
        compare_with_ref(args.ref or Constants.DEFAULT_REF, args.DIRECTORY, current, sink)
    return ExitCodes.SUCCESS


def main(argv=None):
    """Main function of the program."""
    args = parse_args(argv)
    # Honor CLI --loglevel by passing it to centralized logger via env
    if getattr(args, "LOG_LEVEL", None):
        os.environ[Constants.ENV_LOG_LEVEL] = str(args.LOG_LEVEL).upper()
    configure_logging(log_file=args.LOG_FILE, quiet=args.QUIET)

    sink = ReportSink(logger)
    sys.exit(run(args, sink).value)


if __name__ == "__main__":
    main()
