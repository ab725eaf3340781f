"""
Pytest configuration and shared fixtures for test suite.

Provides project coordinates, frozen repository facts, a loguru capture
sink and helpers for writing project descriptors.
"""

import os
import pytest
from datetime import datetime
from loguru import logger
from unittest.mock import MagicMock

from git_version_stamp.models import ProjectCoordinates, RepositoryFacts


@pytest.fixture
def coords():
    """Coordinates of a simple snapshot project."""
    return ProjectCoordinates(
        group_id="com.example",
        artifact_id="demo",
        declared_version="1-SNAPSHOT"
    )


@pytest.fixture
def frozen_clock():
    """Clock value used by the timestamp scenarios."""
    return datetime(2019, 3, 22, 10, 4, 7)


@pytest.fixture
def make_facts(frozen_clock):
    """Factory for RepositoryFacts with sensible defaults."""
    def _make(commit_count=57, tags=(), changed_files=(), latest_mod_time=frozen_clock):
        return RepositoryFacts(
            commit_count=commit_count,
            tags=frozenset(tags),
            changed_files=frozenset(changed_files),
            latest_mod_time=latest_mod_time
        )
    return _make


@pytest.fixture
def log_messages():
    """Capture loguru records as (level, message) tuples."""
    records = []
    handler_id = logger.add(
        lambda msg: records.append((msg.record["level"].name, msg.record["message"])),
        level="DEBUG"
    )
    yield records
    try:
        logger.remove(handler_id)
    except ValueError:
        pass


def write_pom(directory, artifact_id="demo", version="1-SNAPSHOT", group_id="com.example",
              scm_connection=None, scm_developer_connection=None, modules=(), parent=None,
              namespace=True):
    """
    Helper to write a minimal pom.xml into directory.

    Args:
        directory: Target directory (created if missing)
        parent: Optional (groupId, artifactId, version) tuple for a <parent> element
        namespace: Whether to declare the Maven POM namespace

    Returns:
        str: Path of the written descriptor
    """
    os.makedirs(directory, exist_ok=True)
    xmlns = ' xmlns="http://maven.apache.org/POM/4.0.0"' if namespace else ''
    parts = [f'<?xml version="1.0" encoding="UTF-8"?>\n<project{xmlns}>',
             '  <modelVersion>4.0.0</modelVersion>']
    if parent:
        parts.append('  <parent>')
        parts.append(f'    <groupId>{parent[0]}</groupId>')
        parts.append(f'    <artifactId>{parent[1]}</artifactId>')
        parts.append(f'    <version>{parent[2]}</version>')
        parts.append('  </parent>')
    if group_id:
        parts.append(f'  <groupId>{group_id}</groupId>')
    parts.append(f'  <artifactId>{artifact_id}</artifactId>')
    if version:
        parts.append(f'  <version>{version}</version>')
    if modules:
        parts.append('  <modules>')
        parts.extend(f'    <module>{module}</module>' for module in modules)
        parts.append('  </modules>')
    if scm_connection or scm_developer_connection:
        parts.append('  <scm>')
        if scm_connection:
            parts.append(f'    <connection>{scm_connection}</connection>')
        if scm_developer_connection:
            parts.append(f'    <developerConnection>{scm_developer_connection}</developerConnection>')
        parts.append('  </scm>')
    parts.append('</project>\n')
    path = os.path.join(str(directory), 'pom.xml')
    with open(path, 'w', encoding='utf-8') as f:
        f.write('\n'.join(parts))
    return path


def completed_process(stdout='', returncode=0, stderr=''):
    """Create a mock subprocess.CompletedProcess."""
    result = MagicMock()
    result.stdout = stdout
    result.stderr = stderr
    result.returncode = returncode
    return result


@pytest.fixture
def pom_writer():
    """Return the write_pom helper."""
    return write_pom


@pytest.fixture
def git_output():
    """Return the completed_process helper for mocking subprocess.run."""
    return completed_process
