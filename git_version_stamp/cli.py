"""
Command-line interface for Git Version Stamp.

Main entry point that orchestrates all components: configuration,
project descriptor loading, git queries, version resolution and outputs.
"""

import sys
import argparse
from typing import List, Optional, Tuple
from loguru import logger
from rich.console import Console
from rich.table import Table

from . import __version__
from .config import Config, load_config
from .errors import (
    ConfigurationError,
    RepositoryAccessError,
    TemplateError,
    UnsupportedRepositoryError,
    VersionStampError,
)
from .git_client import GitRepository
from .logging_config import setup_logging
from .models import ReleaseResolution, TimestampResolution
from .outputs import PropertySink, write_file
from .project import fetch_url, load_project, select_scm_url, validate_git_scm
from .release import prepare_release
from .timestamp import compose

# Logs and summaries go to stderr so stdout only carries the resolved version
console = Console(stderr=True)

EXIT_SUCCESS = 0
EXIT_CONFIGURATION_ERROR = 1
EXIT_REPOSITORY_ERROR = 2
EXIT_INTERRUPTED = 130


def _add_common_arguments(parser: argparse.ArgumentParser) -> None:
    # Project
    parser.add_argument('--basedir', help='Project base directory (default: current directory)')
    parser.add_argument('--descriptor', help='Path to the project descriptor (default: <basedir>/pom.xml)')
    parser.add_argument('--group-id', help='Override the project groupId')
    parser.add_argument('--artifact-id', help='Override the project artifactId')
    parser.add_argument('--project-version', help='Override the declared project version')
    parser.add_argument('--snapshot-text', help='Text marking a snapshot version (default: -SNAPSHOT)')
    parser.add_argument('--no-prefer-developer-connection', dest='prefer_developer_connection',
                        action='store_const', const=False, default=None,
                        help='Prefer scm/connection over scm/developerConnection')
    
    # Outputs
    parser.add_argument('--properties-file', help='Write resolved properties to this key=value file')
    parser.add_argument('--github-output', action='store_true', default=None,
                        help='Append resolved properties to the file named by GITHUB_OUTPUT')
    parser.add_argument('--encoding', help='Encoding for written files (default: utf-8)')
    
    # Git
    parser.add_argument('--git-timeout', type=int, help='Timeout for each git command in seconds (default: 60)')
    
    # Logging
    parser.add_argument('--log-level', choices=['DEBUG', 'VERBOSE', 'INFO', 'WARNING', 'ERROR', 'debug', 'verbose', 'info', 'warning', 'error'], help='Logging level (default: INFO)')


def parse_arguments(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        prog='git-version-stamp',
        description='Compute collision-free release versions and timestamped snapshot versions from git history'
    )
    parser.add_argument('--version', action='version', version=f'%(prog)s {__version__}')
    subparsers = parser.add_subparsers(dest='command', required=True)
    
    release = subparsers.add_parser('setup-release', help='Pick the next free release version and tag name')
    _add_common_arguments(release)
    release.add_argument('--tag-name-format', help='Tag name template (default: @{project.artifactId}-@{project.version})')
    release.add_argument('--always-include-repeat-count', action='store_true', default=None,
                         help='Always append the repeat count, e.g. 1.57.0 instead of 1.57')
    release.add_argument('--local-tags', action='store_true', default=None,
                         help='Check local tags instead of the remote repository')
    release.add_argument('--skip-auto-version-submodules-detection', action='store_true', default=None,
                         help='Do not check whether all modules share the project version')
    release.add_argument('--release-property', help='Property name for the release version (default: releaseVersion)')
    release.add_argument('--development-property', help='Property name for the development version (default: developmentVersion)')
    release.add_argument('--tag-name-property', help='Property name for the tag name (default: tag)')
    release.add_argument('--release-version-file', help='File to write the release version to')
    release.add_argument('--tag-name-file', help='File to write the tag name to')
    
    timestamp = subparsers.add_parser('timestamp', help='Replace the snapshot marker with a modification timestamp')
    _add_common_arguments(timestamp)
    timestamp.add_argument('--version-timestamp-releases', action='store_true', default=None,
                           help='Also append a timestamp to release versions')
    timestamp.add_argument('--no-version-timestamp-snapshots', dest='version_timestamp_snapshots',
                           action='store_const', const=False, default=None,
                           help='Leave snapshot versions unchanged')
    timestamp.add_argument('--version-includes-commit-count', action='store_true', default=None,
                           help='Insert the commit count (plus one if the tree is dirty) before the timestamp')
    timestamp.add_argument('--timestamp-property', help='Property name for the timestamp')
    timestamp.add_argument('--version-property', help='Property name for the timestamped version')
    timestamp.add_argument('--timestamp-file', help='File to write the timestamp to')
    timestamp.add_argument('--version-file', help='File to write the timestamped version to')
    
    return parser.parse_args(argv)


def setup_application(argv: Optional[List[str]] = None) -> Tuple[argparse.Namespace, Optional[Config]]:
    """Set up logging, parse arguments, and load configuration."""
    setup_logging(console=console)
    
    args = parse_arguments(argv)
    
    if args.log_level:
        setup_logging(args.log_level.upper(), console=console)
    
    config = load_config(args, console=console)
    if config is None:
        return args, None
    
    # Reapply so the level sticks to the shared console
    setup_logging(config.log_level, console=console)
    return args, config


def _repository(config: Config) -> GitRepository:
    return GitRepository(config.basedir, timeout=config.git_timeout)


def run_setup_release(config: Config, sink: PropertySink) -> ReleaseResolution:
    """Resolve the release version and tag and publish them."""
    coords = load_project(config.basedir, config.descriptor, config.group_id, config.artifact_id, config.version)
    scm_url = select_scm_url(coords, config.prefer_developer_connection)
    validate_git_scm(scm_url)
    
    facts = _repository(config).gather_facts(
        include_tags=True,
        prefer_local_only=config.local_tags,
        remote_url=fetch_url(scm_url)
    )
    resolution = prepare_release(
        coords,
        facts,
        snapshot_suffix=config.snapshot_text,
        tag_name_format=config.tag_name_format,
        always_include_repeat_count=config.always_include_repeat_count,
        detect_submodules=not config.skip_auto_version_submodules_detection
    )
    
    sink.set_property(config.release_property, resolution.version)
    write_file(config.release_version_file, resolution.version, config.encoding)
    sink.set_property(config.development_property, resolution.development_version)
    sink.set_property(config.tag_name_property, resolution.tag_name)
    write_file(config.tag_name_file, resolution.tag_name, config.encoding)
    if resolution.auto_version_submodules:
        sink.set_property('autoVersionSubmodules', 'true')
    return resolution


def run_timestamp(config: Config, sink: PropertySink) -> TimestampResolution:
    """Compose the timestamped version and publish it."""
    coords = load_project(config.basedir, config.descriptor, config.group_id, config.artifact_id, config.version)
    validate_git_scm(select_scm_url(coords, config.prefer_developer_connection))
    
    facts = _repository(config).gather_facts(
        include_working_tree=True,
        descriptor_path=coords.descriptor_path
    )
    resolution = compose(facts, coords, config.timestamp_policy())
    
    timestamp = str(resolution.timestamp)
    sink.set_property(config.timestamp_property, timestamp)
    sink.set_property(config.version_property, resolution.version)
    write_file(config.timestamp_file, timestamp, config.encoding)
    write_file(config.version_file, resolution.version, config.encoding)
    return resolution


def print_summary(title: str, rows: List[Tuple[str, str]]) -> None:
    """Print a two-column summary table on the console."""
    table = Table(title=title, show_header=False)
    table.add_column('Name', style='bold cyan')
    table.add_column('Value', style='green')
    for name, value in rows:
        table.add_row(name, value)
    console.print(table)


def export_properties(config: Config, sink: PropertySink) -> None:
    """Write collected properties to the configured destinations."""
    sink.write_properties_file(config.properties_file, config.encoding)
    if config.github_output is not None:
        sink.append_github_output(config.github_output, config.encoding)


def run(config: Config) -> int:
    """Run the configured command and return the process exit code."""
    sink = PropertySink()
    try:
        if config.command == 'setup-release':
            resolution = run_setup_release(config, sink)
            rows = [('Release version', resolution.version),
                    ('Tag name', resolution.tag_name),
                    ('Development version', resolution.development_version)]
        else:
            resolution = run_timestamp(config, sink)
            rows = [('Timestamp', str(resolution.timestamp)),
                    ('Version', resolution.version)]
        export_properties(config, sink)
    except (ConfigurationError, TemplateError) as e:
        logger.error(f'❌ {e}')
        return EXIT_CONFIGURATION_ERROR
    except UnsupportedRepositoryError as e:
        logger.error(f'❌ {e}')
        return EXIT_REPOSITORY_ERROR
    except RepositoryAccessError as e:
        logger.error(f'❌ Git command failed: {e}')
        return EXIT_REPOSITORY_ERROR
    except VersionStampError as e:
        logger.error(f'❌ {e}')
        return EXIT_REPOSITORY_ERROR
    except OSError as e:
        logger.error(f'❌ Could not write output: {e}')
        return EXIT_CONFIGURATION_ERROR
    
    print_summary(config.command, rows)
    print(resolution.version)
    return EXIT_SUCCESS


def main(argv: Optional[List[str]] = None) -> None:
    """Main entry point for the application."""
    try:
        args, config = setup_application(argv)
        if config is None:
            sys.exit(EXIT_CONFIGURATION_ERROR)
        exit_code = run(config)
    except KeyboardInterrupt:
        logger.info("Received interrupt signal, shutting down...")
        sys.exit(EXIT_INTERRUPTED)
    
    if exit_code != EXIT_SUCCESS:
        sys.exit(exit_code)


if __name__ == '__main__':
    main()
