"""Classify dependency spec changes between two manifests."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from constants import GROUP_LABELS
from .models import ChangeKind, DependencyMap, GroupReport, Upgrade
from .parser import parse_version_spec

BUCKET_TITLES = {
    ChangeKind.MAJOR: "Major changes",
    ChangeKind.MINOR: "Minor changes",
    ChangeKind.PATCH: "Patch changes",
}


def change_kind(from_spec: str, to_spec: str) -> ChangeKind:
    """Bucket a spec change by its first two dot-separated tokens.

    A missing minor token on both sides compares equal, so such a change
    lands in the patch bucket.
    """
    before = parse_version_spec(from_spec)
    after = parse_version_spec(to_spec)
    if before.major != after.major:
        return ChangeKind.MAJOR
    if before.minor != after.minor:
        return ChangeKind.MINOR
    return ChangeKind.PATCH


def classify(previous: DependencyMap, current: DependencyMap, label: str = "") -> GroupReport:
    """Compare one grouping of two manifests.

    Only packages present in both maps with a different spec are reported.
    Each bucket is sorted by package name.
    """
    report = GroupReport(label=label)
    for name, to_spec in current.items():
        from_spec = previous.get(name)
        if not from_spec or from_spec == to_spec:
            continue
        if not isinstance(from_spec, str) or not isinstance(to_spec, str):
            continue
        upgrade = Upgrade(name=name, from_spec=from_spec, to_spec=to_spec)
        report.buckets[change_kind(from_spec, to_spec)].append(upgrade)

    for kind in ChangeKind:
        report.buckets[kind].sort(key=lambda upgrade: upgrade.name)
    return report


def classify_manifests(previous: Dict[str, Any], current: Dict[str, Any]) -> List[GroupReport]:
    """Classify all four dependency groupings.

    A grouping missing or empty on either side is skipped, and groupings
    without changes are left out of the result.
    """
    reports = []
    for group, label in GROUP_LABELS.items():
        before: Optional[DependencyMap] = previous.get(group.value)
        after: Optional[DependencyMap] = current.get(group.value)
        if not isinstance(before, dict) or not isinstance(after, dict) or not before or not after:
            continue
        report = classify(before, after, label)
        if report.total:
            reports.append(report)
    return reports


def render_report(reports: List[GroupReport]) -> List[str]:
    """Render group reports as indented text lines."""
    lines: List[str] = []
    for report in reports:
        lines.append(f"{report.label}:")
        for kind in report.non_empty():
            entries = report.buckets[kind]
            lines.append(f"  {BUCKET_TITLES[kind]} ({len(entries)}):")
            for upgrade in entries:
                lines.append(f"    - {upgrade.name}: {upgrade.from_spec} → {upgrade.to_spec}")
    return lines
