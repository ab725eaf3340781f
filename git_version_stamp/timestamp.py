"""
Timestamp version composition.

Snapshot builds get a reproducible pre-release identifier made of the
newest modification time in the working tree and the commit count of HEAD,
for example ``1.0-SNAPSHOT`` becomes ``1.0-20190322.100407-39``.
"""

from datetime import datetime
from loguru import logger

from .errors import ConfigurationError
from .models import (
    ProjectCoordinates,
    RepositoryFacts,
    TimestampIdentifier,
    TimestampPolicy,
    TimestampResolution,
)
from .snapshot import SNAPSHOT_MARKER, classify_version
from .utils import ensure_trailing_separator, remove_suffix

TIMESTAMP_FORMAT = '%Y%m%d.%H%M%S'


def format_clock(clock: datetime) -> str:
    """Format a clock value as yyyyMMdd.HHmmss."""
    return clock.strftime(TIMESTAMP_FORMAT)


def build_timestamp(clock: datetime, commit_count: int) -> TimestampIdentifier:
    """Build the timestamp identifier for a clock value and commit count."""
    return TimestampIdentifier(format_clock(clock), commit_count)


def _snapshot_version(prefix: str, timestamp: TimestampIdentifier, facts: RepositoryFacts,
                      policy: TimestampPolicy) -> str:
    if not policy.version_includes_commit_count:
        return f'{prefix}{timestamp}'

    snapshot_version = prefix + SNAPSHOT_MARKER
    if not policy.snapshot_suffix or not snapshot_version.endswith(policy.snapshot_suffix):
        logger.warning(
            f"Cannot include commit count: '{snapshot_version}' does not end with "
            f"'{policy.snapshot_suffix}', using timestamp only"
        )
        return f'{prefix}{timestamp}'

    bare_version = ensure_trailing_separator(remove_suffix(snapshot_version, policy.snapshot_suffix))
    # A dirty working tree counts as one more commit than HEAD
    numeral = facts.commit_count + (1 if facts.is_dirty else 0)
    return f'{bare_version}{numeral}-{timestamp}'


def compose(facts: RepositoryFacts, coords: ProjectCoordinates, policy: TimestampPolicy) -> TimestampResolution:
    """
    Compose the timestamp and the rewritten project version.

    Args:
        facts: Repository facts; latest_mod_time must be set
        coords: Project coordinates holding the declared version
        policy: Release/snapshot timestamping policy

    Returns:
        TimestampResolution: The timestamp identifier and the new version

    Raises:
        ConfigurationError: If no modification time is available
    """
    if facts.latest_mod_time is None:
        raise ConfigurationError('Could not determine the latest modification time of the project')

    timestamp = build_timestamp(facts.latest_mod_time, facts.commit_count)
    version = coords.declared_version
    match = classify_version(version)

    if match.is_snapshot:
        if policy.version_timestamp_snapshots:
            version = _snapshot_version(match.prefix, timestamp, facts, policy)
    elif policy.version_timestamp_releases:
        version = f'{version}-{timestamp}'

    logger.info(f'Timestamp: {timestamp}')
    logger.info(f'Version:   {version}')
    return TimestampResolution(timestamp=timestamp, version=version)
