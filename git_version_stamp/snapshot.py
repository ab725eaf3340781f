"""
Snapshot version classification.

A declared version is a snapshot when it ends with the literal ``SNAPSHOT``
marker or with a timestamp left by a previous run (``yyyyMMdd.HHmmss-N``).
The part before the marker, up to and including the last ``-``, is the prefix
that a new timestamp replaces the marker with.
"""

import re

from .models import SnapshotMatch, VersionKind

SNAPSHOT_MARKER = 'SNAPSHOT'

SNAPSHOT_PATTERN = re.compile(
    r'^(.*-)?(SNAPSHOT|\d{4}[0-1]\d[0-3]\d\.[0-2]\d[0-6]\d[0-6]\d-\d+)$'
)


def classify_version(version: str) -> SnapshotMatch:
    """
    Classify a declared version as a release or a snapshot.

    Args:
        version: Declared project version, e.g. "1.0-SNAPSHOT"

    Returns:
        SnapshotMatch: RELEASE, or SNAPSHOT with the prefix preceding the marker
    """
    match = SNAPSHOT_PATTERN.match(version)
    if not match:
        return SnapshotMatch(VersionKind.RELEASE)
    return SnapshotMatch(VersionKind.SNAPSHOT, match.group(1) or '')
