"""
Release preparation: pick the next free release version and tag name.

The release version is the declared snapshot version with the snapshot text
replaced by the commit count of HEAD. If a tag for that version already
exists, a repeat count is appended (``1.57.1``, ``1.57.2``, ...) until the
rendered tag name is free.
"""

from typing import AbstractSet, Optional, Tuple
from loguru import logger

from .candidates import CandidateVersionGenerator
from .errors import ConfigurationError
from .interpolation import interpolate
from .models import ProjectCoordinates, ReleaseResolution, RepositoryFacts
from .utils import ensure_trailing_separator, remove_suffix

DEFAULT_TAG_NAME_FORMAT = '@{project.artifactId}-@{project.version}'


def require_snapshot(declared_version: str, snapshot_suffix: str) -> None:
    """
    Ensure the declared version carries the text a release replaces.

    Raises:
        ConfigurationError: If declared_version does not end with snapshot_suffix
    """
    if not declared_version.endswith(snapshot_suffix):
        raise ConfigurationError(
            f"The current project version is '{declared_version}' which does not end "
            f"with the expected text to be replaced: '{snapshot_suffix}'"
        )


def release_base_version(declared_version: str, snapshot_suffix: str, commit_count: int) -> str:
    """
    Build the first candidate release version.

    "1-SNAPSHOT" with suffix "-SNAPSHOT" and 57 commits becomes "1.57".
    """
    bare_version = ensure_trailing_separator(remove_suffix(declared_version, snapshot_suffix))
    return f'{bare_version}{commit_count}'


def resolve_tag_collision(generator: CandidateVersionGenerator, template: str,
                          coords: ProjectCoordinates, tags: AbstractSet[str]) -> Tuple[str, str]:
    """
    Draw candidates until one renders to a tag name absent from tags.

    Terminates after at most len(tags) + 1 draws since every candidate is
    distinct.

    Args:
        generator: Fresh candidate generator
        template: Tag name format
        coords: Project coordinates used for interpolation
        tags: Known tag names

    Returns:
        tuple: (version, tag_name)

    Raises:
        TemplateError: If the tag name format cannot be rendered
    """
    while True:
        version = generator.next()
        tag_name = interpolate(template, coords, version)
        if tag_name not in tags:
            logger.info(f'Could not find a tag called {tag_name} recommending version {version}')
            return version, tag_name
        logger.debug(f'Skipping {version} as there is already a tag named {tag_name}')


def detect_auto_version_submodules(coords: ProjectCoordinates) -> Optional[bool]:
    """
    Check whether every reactor module shares the declared version.

    Returns:
        bool or None: True if all modules match, False on the first mismatch,
        None when the project has no modules
    """
    if not coords.module_versions:
        logger.debug('Project has no modules, autoVersionSubmodules detection does not apply')
        return None

    for module, module_version in coords.module_versions.items():
        if module_version != coords.declared_version:
            logger.warning(
                f'Reactor project {module} has version {module_version} which is not the same as '
                f'{coords.declared_version} thus autoVersionSubmodules cannot be assumed true'
            )
            return False

    logger.info(f'All reactor projects share the same version: {coords.declared_version}')
    return True


def prepare_release(coords: ProjectCoordinates, facts: RepositoryFacts, snapshot_suffix: str = '-SNAPSHOT',
                    tag_name_format: str = DEFAULT_TAG_NAME_FORMAT, always_include_repeat_count: bool = False,
                    detect_submodules: bool = True) -> ReleaseResolution:
    """
    Resolve the release version, tag name and follow-on development version.

    Args:
        coords: Project coordinates
        facts: Repository facts gathered for this run
        snapshot_suffix: Text the release version replaces, e.g. "-SNAPSHOT"
        tag_name_format: Tag name template
        always_include_repeat_count: Always append the repeat count to the version
        detect_submodules: Whether to check reactor module versions

    Returns:
        ReleaseResolution: The chosen version and tag

    Raises:
        ConfigurationError: If the declared version is not a snapshot
        TemplateError: If the tag name format cannot be rendered
    """
    require_snapshot(coords.declared_version, snapshot_suffix)

    base_version = release_base_version(coords.declared_version, snapshot_suffix, facts.commit_count)
    generator = CandidateVersionGenerator(base_version, always_include_repeat_count)
    version, tag_name = resolve_tag_collision(generator, tag_name_format, coords, facts.tags)
    logger.debug(f'Known tags: {sorted(facts.tags)}')

    auto_version_submodules = None
    if detect_submodules:
        auto_version_submodules = detect_auto_version_submodules(coords)
    else:
        logger.debug('autoVersionSubmodules detection disabled')

    return ReleaseResolution(
        version=version,
        tag_name=tag_name,
        development_version=coords.declared_version,
        auto_version_submodules=auto_version_submodules
    )
