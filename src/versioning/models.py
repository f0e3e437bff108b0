"""Data models for version specs, reconciliation and change reports."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Union


class ParseStatus(Enum):
    """Outcome of parsing a version string."""
    OK = "ok"
    DEGRADED = "degraded"


class ChangeKind(Enum):
    """Report bucket for a changed dependency, in report order."""
    MAJOR = "major"
    MINOR = "minor"
    PATCH = "patch"


@dataclass(frozen=True)
class VersionSpec:
    """Parsed view of an exact ("1.2.3") or caret ("^1.2.3") version spec."""
    raw: str
    prefixed: bool
    version: str  # raw with the caret removed
    major: str
    minor: Optional[str]
    patch: Optional[str]
    status: ParseStatus


@dataclass(frozen=True)
class UpdateNotice:
    """A declared spec rewritten by the reconciler."""
    name: str
    old: str
    new: str


@dataclass(frozen=True)
class Upgrade:
    """A changed dependency between two manifests."""
    name: str
    from_spec: str
    to_spec: str


@dataclass
class GroupReport:
    """Categorized changes for one dependency grouping."""
    label: str
    buckets: Dict[ChangeKind, List[Upgrade]] = field(
        default_factory=lambda: {kind: [] for kind in ChangeKind}
    )

    @property
    def total(self) -> int:
        """Number of changed dependencies across all buckets."""
        return sum(len(entries) for entries in self.buckets.values())

    def non_empty(self) -> List[ChangeKind]:
        """Buckets with at least one entry, in major/minor/patch order."""
        return [kind for kind in ChangeKind if self.buckets[kind]]


# Type aliases for the plain mappings handed over by the I/O layer.
DependencyMap = Dict[str, str]
ResolvedVersionMap = Dict[str, Union[str, Dict[str, object]]]
