"""
Project descriptor loading.

Reads the project coordinates and SCM connection from a Maven ``pom.xml``.
Explicit values (CLI or environment) override what the descriptor says, so
projects without a descriptor can still be versioned.
"""

import os
import xml.etree.ElementTree
from typing import Dict, Optional
from loguru import logger

from .errors import ConfigurationError, UnsupportedRepositoryError
from .models import ProjectCoordinates

DESCRIPTOR_FILE = 'pom.xml'
GIT_SCM_PREFIX = 'scm:git:'


def _local_name(tag: str) -> str:
    return tag.rsplit('}', 1)[-1]


def _child(element, name: str):
    if element is None:
        return None
    for child in element:
        if _local_name(child.tag) == name:
            return child
    return None


def _child_text(element, name: str) -> str:
    child = _child(element, name)
    if child is None or child.text is None:
        return ''
    return child.text.strip()


def _parse_descriptor(path: str):
    try:
        return xml.etree.ElementTree.parse(path).getroot()
    except (OSError, xml.etree.ElementTree.ParseError) as e:
        raise ConfigurationError(f'Could not read project descriptor {path}: {e}') from e


def _coordinates_of(root, inherited_group_id: str = '', inherited_version: str = ''):
    parent = _child(root, 'parent')
    group_id = _child_text(root, 'groupId') or _child_text(parent, 'groupId') or inherited_group_id
    version = _child_text(root, 'version') or _child_text(parent, 'version') or inherited_version
    return group_id, _child_text(root, 'artifactId'), version


def _collect_module_versions(root, directory: str, group_id: str, version: str,
                             module_versions: Dict[str, str]) -> None:
    modules = _child(root, 'modules')
    if modules is None:
        return
    for module in modules:
        if _local_name(module.tag) != 'module' or not (module.text or '').strip():
            continue
        module_dir = os.path.join(directory, module.text.strip())
        module_path = module_dir if module_dir.endswith('.xml') else os.path.join(module_dir, DESCRIPTOR_FILE)
        if not os.path.isfile(module_path):
            logger.warning(f'Module descriptor not found: {module_path}')
            continue
        module_root = _parse_descriptor(module_path)
        m_group_id, m_artifact_id, m_version = _coordinates_of(module_root, group_id, version)
        module_versions[f'{m_group_id}:{m_artifact_id}'] = m_version
        _collect_module_versions(module_root, os.path.dirname(module_path), m_group_id, m_version, module_versions)


def find_descriptor(basedir: str) -> Optional[str]:
    """Return the path of the project descriptor in basedir, if there is one."""
    path = os.path.join(basedir, DESCRIPTOR_FILE)
    return path if os.path.isfile(path) else None


def load_project(basedir: str, descriptor_path: Optional[str] = None, group_id: Optional[str] = None,
                 artifact_id: Optional[str] = None, version: Optional[str] = None) -> ProjectCoordinates:
    """
    Load project coordinates.

    Args:
        basedir: Project base directory
        descriptor_path: Explicit descriptor path (defaults to basedir/pom.xml if present)
        group_id: Override for the groupId
        artifact_id: Override for the artifactId
        version: Override for the declared version

    Returns:
        ProjectCoordinates: Coordinates, SCM URLs and module versions

    Raises:
        ConfigurationError: If the descriptor is unreadable or artifactId/version are missing
    """
    if descriptor_path is None:
        descriptor_path = find_descriptor(basedir)

    d_group_id = d_artifact_id = d_version = ''
    scm_connection = scm_developer_connection = ''
    module_versions: Dict[str, str] = {}

    if descriptor_path:
        logger.debug(f'Reading project descriptor {descriptor_path}')
        root = _parse_descriptor(descriptor_path)
        d_group_id, d_artifact_id, d_version = _coordinates_of(root)
        scm = _child(root, 'scm')
        scm_connection = _child_text(scm, 'connection')
        scm_developer_connection = _child_text(scm, 'developerConnection')
        _collect_module_versions(root, os.path.dirname(os.path.abspath(descriptor_path)),
                                 d_group_id, d_version, module_versions)

    coords = ProjectCoordinates(
        group_id=group_id or d_group_id,
        artifact_id=artifact_id or d_artifact_id,
        declared_version=version or d_version,
        descriptor_path=descriptor_path,
        scm_connection=scm_connection,
        scm_developer_connection=scm_developer_connection,
        module_versions=module_versions
    )

    missing = [name for name, value in (('artifactId', coords.artifact_id), ('version', coords.declared_version))
               if not value]
    if missing:
        raise ConfigurationError(
            f"Project {' and '.join(missing)} unknown: provide a {DESCRIPTOR_FILE} or set them explicitly"
        )
    return coords


def select_scm_url(coords: ProjectCoordinates, prefer_developer_connection: bool = True) -> str:
    """Pick the SCM URL to query, falling back to the other connection when blank."""
    if prefer_developer_connection:
        return coords.scm_developer_connection or coords.scm_connection
    return coords.scm_connection or coords.scm_developer_connection


def validate_git_scm(scm_url: str) -> None:
    """
    Reject SCM URLs of providers other than git.

    A blank URL is allowed: the project then relies on the local repository.

    Raises:
        UnsupportedRepositoryError: If scm_url names another provider
    """
    if scm_url and not scm_url.startswith(GIT_SCM_PREFIX):
        raise UnsupportedRepositoryError(f'Only Git SCM type is supported (got: {scm_url})')


def fetch_url(scm_url: str) -> Optional[str]:
    """Strip the scm:git: provider prefix from an SCM URL."""
    if not scm_url:
        return None
    if scm_url.startswith(GIT_SCM_PREFIX):
        return scm_url[len(GIT_SCM_PREFIX):]
    return scm_url
