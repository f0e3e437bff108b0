"""Reconcile declared caret ranges with the versions resolved in a lockfile."""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from common.logging_utils import extra_context, is_debug_enabled
from common.sink import ReportSink
from constants import ALWAYS_RECONCILED, Constants, DependencyGroups
from .models import DependencyMap, ParseStatus, ResolvedVersionMap, UpdateNotice
from .parser import major_token, parse_version_spec

logger = logging.getLogger(__name__)


def resolved_version_for(resolved: ResolvedVersionMap, name: str) -> Optional[str]:
    """Return the installed version of a package, or None when not installed.

    Entries may be lock entries ({"version": ...}) or bare version strings.
    """
    entry = resolved.get(f"{Constants.NODE_MODULES_PREFIX}{name}")
    if isinstance(entry, dict):
        entry = entry.get("version")
    if isinstance(entry, str) and entry:
        return entry
    return None


def reconcile(
    declared: DependencyMap,
    resolved: ResolvedVersionMap,
    sink: Optional[ReportSink] = None,
) -> Dict[str, str]:
    """Bump caret specs to the resolved version within the same major.

    Args:
        declared: Package name to declared spec.
        resolved: Install path to resolved lock entry.
        sink: Receives one UpdateNotice per rewritten entry.

    Returns:
        A new mapping in the same order; ``declared`` is left untouched.
    """
    updated: Dict[str, str] = {}
    for name, spec in declared.items():
        updated[name] = spec
        if not isinstance(spec, str) or not spec.startswith(Constants.CARET):
            continue

        installed = resolved_version_for(resolved, name)
        if installed is None:
            continue

        current = parse_version_spec(spec)
        if current.version == installed:
            continue

        if current.major != major_token(installed):
            if is_debug_enabled(logger):
                logger.debug(
                    "Skipping %s: resolved %s crosses major version",
                    name,
                    installed,
                    extra=extra_context(event="decision", component="reconcile", outcome="major_mismatch"),
                )
            continue

        if current.status is ParseStatus.DEGRADED and is_debug_enabled(logger):
            logger.debug("Non-semver spec %s for %s compared as text", spec, name)

        updated[name] = f"{Constants.CARET}{installed}"
        if sink is not None:
            sink.notify_update(UpdateNotice(name=name, old=spec, new=updated[name]))

    return updated


def reconcile_manifest(
    manifest: Dict[str, Any],
    resolved: ResolvedVersionMap,
    sink: Optional[ReportSink] = None,
) -> Dict[str, Any]:
    """Reconcile every dependency grouping of a package.json document.

    dependencies and devDependencies are always written (an absent grouping
    becomes an empty mapping); peer and optional groupings only when present.
    A grouping that is not an object is kept as is and reported to the sink.

    Returns:
        A shallow copy of ``manifest`` with reconciled groupings.
    """
    result = dict(manifest)
    for group in DependencyGroups:
        declared = manifest.get(group.value)
        if group not in ALWAYS_RECONCILED and not declared:
            continue
        if declared is None:
            declared = {}
        if not isinstance(declared, dict):
            if sink is not None:
                sink.warning(f"Skipping {group.value}: expected an object, found {type(declared).__name__}")
            continue
        result[group.value] = reconcile(declared, resolved, sink)
    return result
