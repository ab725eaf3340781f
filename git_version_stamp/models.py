"""
Value types shared by the version and tag resolution engine.

All of them are frozen dataclasses: they are built once per run from live
repository facts and never mutated afterwards.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Dict, FrozenSet, Optional


@dataclass(frozen=True)
class ProjectCoordinates:
    """Identity of the project being versioned."""
    group_id: str
    artifact_id: str
    declared_version: str
    descriptor_path: Optional[str] = None
    scm_connection: str = ''
    scm_developer_connection: str = ''
    # groupId:artifactId -> version of every reactor sub-module
    module_versions: Dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class TimestampPolicy:
    """Controls how the declared version is rewritten with a timestamp."""
    version_timestamp_releases: bool = False
    version_timestamp_snapshots: bool = True
    version_includes_commit_count: bool = False
    snapshot_suffix: str = '-SNAPSHOT'


@dataclass(frozen=True)
class TimestampIdentifier:
    """Formatted clock plus commit count, e.g. ``20190322.100407-39``."""
    formatted_clock: str
    commit_count: int

    def __str__(self) -> str:
        return f'{self.formatted_clock}-{self.commit_count}'


class VersionKind(Enum):
    """Classification of a declared version."""
    RELEASE = "release"
    SNAPSHOT = "snapshot"


@dataclass(frozen=True)
class SnapshotMatch:
    """Result of matching a version against the snapshot pattern."""
    kind: VersionKind
    prefix: str = ''

    @property
    def is_snapshot(self) -> bool:
        return self.kind is VersionKind.SNAPSHOT


@dataclass(frozen=True)
class RepositoryFacts:
    """Everything the engine needs to know about the repository, gathered eagerly."""
    commit_count: int
    tags: FrozenSet[str] = frozenset()
    changed_files: FrozenSet[str] = frozenset()
    latest_mod_time: Optional[datetime] = None

    @property
    def is_dirty(self) -> bool:
        return bool(self.changed_files)


@dataclass(frozen=True)
class ReleaseResolution:
    """Outcome of release preparation."""
    version: str
    tag_name: str
    development_version: str
    auto_version_submodules: Optional[bool] = None


@dataclass(frozen=True)
class TimestampResolution:
    """Outcome of snapshot timestamp composition."""
    timestamp: TimestampIdentifier
    version: str
