"""
Configuration management for Git Version Stamp.

Handles environment variable loading, validation, and provides the
immutable run context shared by the release and timestamp workflows.
"""

import os
from dataclasses import dataclass
from typing import Optional
from dotenv import load_dotenv
from loguru import logger

from .models import TimestampPolicy
from .release import DEFAULT_TAG_NAME_FORMAT

# Load environment variables from .env file
load_dotenv()

VALID_LOG_LEVELS = ['DEBUG', 'VERBOSE', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']


def get_config_value(cli_args, field_name: str, env_key: str, default, value_type: type = str):
    """
    Get configuration value with proper precedence: CLI args > env vars > defaults.
    
    Args:
        cli_args: CLI arguments object or None
        field_name: Name of the CLI argument field
        env_key: Environment variable key
        default: Default value if neither CLI nor env var is set
        value_type: Type to convert the value to (str, int, bool)
        
    Returns:
        The configuration value converted to the specified type
    """
    cli_value = getattr(cli_args, field_name, None) if cli_args else None
    if cli_value is not None:
        return cli_value
    
    env_value = os.environ.get(env_key, '')
    
    if value_type == bool:
        if env_value.strip().lower() in ('true', '1', 'yes'):
            return True
        elif env_value.strip().lower() in ('false', '0', 'no'):
            return False
        return default
    
    if not env_value:
        return default
    
    try:
        return value_type(env_value)
    except (ValueError, TypeError):
        return default


def get_config_value_str(cli_args, field_name: str, env_key: str, default: Optional[str] = '') -> Optional[str]:
    """Get string configuration value."""
    return get_config_value(cli_args, field_name, env_key, default, str)


def get_config_value_int(cli_args, field_name: str, env_key: str, default: int = 0) -> int:
    """Get integer configuration value."""
    return get_config_value(cli_args, field_name, env_key, default, int)


def get_config_value_bool(cli_args, field_name: str, env_key: str, default: bool = False) -> bool:
    """Get boolean configuration value."""
    return get_config_value(cli_args, field_name, env_key, default, bool)


@dataclass(frozen=True)
class Config:
    """Run context containing all settings for one invocation."""
    
    command: str
    
    # Project
    basedir: str
    descriptor: Optional[str]
    group_id: Optional[str]
    artifact_id: Optional[str]
    version: Optional[str]
    prefer_developer_connection: bool
    
    # Release preparation
    snapshot_text: str
    tag_name_format: str
    always_include_repeat_count: bool
    local_tags: bool
    skip_auto_version_submodules_detection: bool
    release_property: str
    development_property: str
    tag_name_property: str
    release_version_file: Optional[str]
    tag_name_file: Optional[str]
    
    # Timestamping
    version_timestamp_releases: bool
    version_timestamp_snapshots: bool
    version_includes_commit_count: bool
    timestamp_property: str
    version_property: str
    timestamp_file: Optional[str]
    version_file: Optional[str]
    
    # Outputs
    properties_file: Optional[str]
    github_output: Optional[str]
    encoding: str
    
    # Git
    git_timeout: int
    
    # Logging
    log_level: str

    def timestamp_policy(self) -> TimestampPolicy:
        """Build the timestamping policy from this configuration."""
        return TimestampPolicy(
            version_timestamp_releases=self.version_timestamp_releases,
            version_timestamp_snapshots=self.version_timestamp_snapshots,
            version_includes_commit_count=self.version_includes_commit_count,
            snapshot_suffix=self.snapshot_text
        )


def _validate_project_config(basedir: str, descriptor: Optional[str], validation_errors: list) -> None:
    """
    Validate project location parameters.
    
    Args:
        basedir: Project base directory
        descriptor: Explicit project descriptor path
        validation_errors: List to append validation errors
    """
    if not os.path.isdir(basedir):
        validation_errors.append(f'GVS_BASEDIR ({basedir}) does not exist or is not a directory')
    if descriptor and not os.path.isfile(descriptor):
        validation_errors.append(f'GVS_DESCRIPTOR ({descriptor}) does not exist')


def _validate_release_config(snapshot_text: str, tag_name_format: str, validation_errors: list) -> None:
    """
    Validate release preparation parameters.
    
    Args:
        snapshot_text: Text replaced by the release version
        tag_name_format: Tag name template
        validation_errors: List to append validation errors
    """
    if not snapshot_text:
        validation_errors.append('GVS_SNAPSHOT_TEXT must not be empty')
    if not tag_name_format or not tag_name_format.strip():
        validation_errors.append('GVS_TAG_NAME_FORMAT must not be empty')


def _validate_git_config(git_timeout: int, validation_errors: list) -> None:
    """Validate git invocation parameters."""
    if git_timeout < 1 or git_timeout > 3600:
        validation_errors.append(f'GVS_GIT_TIMEOUT must be between 1-3600 seconds (got: {git_timeout})')


def load_config(cli_args=None, console=None) -> Optional[Config]:
    """
    Load and validate configuration from CLI arguments and environment variables.
    CLI arguments take precedence over environment variables.
    
    Args:
        cli_args: Parsed CLI arguments or None
        console: Rich Console the early logging setup should keep writing to
        
    Returns:
        Config: Validated configuration object, or None if validation failed
    """
    command = getattr(cli_args, 'command', None) or 'timestamp'
    
    basedir = os.path.abspath(get_config_value_str(cli_args, 'basedir', 'GVS_BASEDIR', os.getcwd()))
    descriptor = get_config_value_str(cli_args, 'descriptor', 'GVS_DESCRIPTOR', None)
    group_id = get_config_value_str(cli_args, 'group_id', 'GVS_GROUP_ID', None)
    artifact_id = get_config_value_str(cli_args, 'artifact_id', 'GVS_ARTIFACT_ID', None)
    version = get_config_value_str(cli_args, 'project_version', 'GVS_VERSION', None)
    prefer_developer_connection = get_config_value_bool(cli_args, 'prefer_developer_connection', 'GVS_PREFER_DEVELOPER_CONNECTION', True)
    
    snapshot_text = get_config_value_str(cli_args, 'snapshot_text', 'GVS_SNAPSHOT_TEXT', '-SNAPSHOT')
    tag_name_format = get_config_value_str(cli_args, 'tag_name_format', 'GVS_TAG_NAME_FORMAT', DEFAULT_TAG_NAME_FORMAT)
    always_include_repeat_count = get_config_value_bool(cli_args, 'always_include_repeat_count', 'GVS_ALWAYS_INCLUDE_REPEAT_COUNT', False)
    local_tags = get_config_value_bool(cli_args, 'local_tags', 'GVS_LOCAL_TAGS', False)
    skip_submodules = get_config_value_bool(cli_args, 'skip_auto_version_submodules_detection', 'GVS_SKIP_AUTO_VERSION_SUBMODULES_DETECTION', False)
    release_property = get_config_value_str(cli_args, 'release_property', 'GVS_RELEASE_PROPERTY', 'releaseVersion')
    development_property = get_config_value_str(cli_args, 'development_property', 'GVS_DEVELOPMENT_PROPERTY', 'developmentVersion')
    tag_name_property = get_config_value_str(cli_args, 'tag_name_property', 'GVS_TAG_NAME_PROPERTY', 'tag')
    release_version_file = get_config_value_str(cli_args, 'release_version_file', 'GVS_RELEASE_VERSION_FILE', None)
    tag_name_file = get_config_value_str(cli_args, 'tag_name_file', 'GVS_TAG_NAME_FILE', None)
    
    version_timestamp_releases = get_config_value_bool(cli_args, 'version_timestamp_releases', 'GVS_VERSION_TIMESTAMP_RELEASES', False)
    version_timestamp_snapshots = get_config_value_bool(cli_args, 'version_timestamp_snapshots', 'GVS_VERSION_TIMESTAMP_SNAPSHOTS', True)
    version_includes_commit_count = get_config_value_bool(cli_args, 'version_includes_commit_count', 'GVS_VERSION_INCLUDES_COMMIT_COUNT', False)
    timestamp_property = get_config_value_str(cli_args, 'timestamp_property', 'GVS_TIMESTAMP_PROPERTY', '')
    version_property = get_config_value_str(cli_args, 'version_property', 'GVS_VERSION_PROPERTY', '')
    timestamp_file = get_config_value_str(cli_args, 'timestamp_file', 'GVS_TIMESTAMP_FILE', None)
    version_file = get_config_value_str(cli_args, 'version_file', 'GVS_VERSION_FILE', None)
    
    properties_file = get_config_value_str(cli_args, 'properties_file', 'GVS_PROPERTIES_FILE', None)
    github_output = os.environ.get('GITHUB_OUTPUT') if getattr(cli_args, 'github_output', False) else None
    encoding = get_config_value_str(cli_args, 'encoding', 'GVS_ENCODING', 'utf-8')
    
    git_timeout = get_config_value_int(cli_args, 'git_timeout', 'GVS_GIT_TIMEOUT', 60)
    
    # Handle log_level (case insensitive)
    log_level = get_config_value_str(cli_args, 'log_level', 'LOG_LEVEL', 'INFO').upper()
    
    validation_errors = []
    
    if log_level not in VALID_LOG_LEVELS:
        validation_errors.append(f'LOG_LEVEL must be one of {VALID_LOG_LEVELS} (got: {log_level})')
    
    # Update logging level early so debug statements work
    if log_level in VALID_LOG_LEVELS:
        from .logging_config import setup_logging
        setup_logging(log_level, console=console)
    
    _validate_project_config(basedir, descriptor, validation_errors)
    if command == 'setup-release':
        _validate_release_config(snapshot_text, tag_name_format, validation_errors)
    _validate_git_config(git_timeout, validation_errors)
    if getattr(cli_args, 'github_output', False) and not github_output:
        validation_errors.append('--github-output requires the GITHUB_OUTPUT environment variable')
    
    if validation_errors:
        logger.error('❌ Configuration Error:')
        for i, error_msg in enumerate(validation_errors, 1):
            logger.error(f'   {i}. {error_msg}')
        return None
    
    config = Config(
        command=command,
        basedir=basedir,
        descriptor=descriptor,
        group_id=group_id,
        artifact_id=artifact_id,
        version=version,
        prefer_developer_connection=prefer_developer_connection,
        snapshot_text=snapshot_text,
        tag_name_format=tag_name_format,
        always_include_repeat_count=always_include_repeat_count,
        local_tags=local_tags,
        skip_auto_version_submodules_detection=skip_submodules,
        release_property=release_property,
        development_property=development_property,
        tag_name_property=tag_name_property,
        release_version_file=release_version_file,
        tag_name_file=tag_name_file,
        version_timestamp_releases=version_timestamp_releases,
        version_timestamp_snapshots=version_timestamp_snapshots,
        version_includes_commit_count=version_includes_commit_count,
        timestamp_property=timestamp_property,
        version_property=version_property,
        timestamp_file=timestamp_file,
        version_file=version_file,
        properties_file=properties_file,
        github_output=github_output,
        encoding=encoding,
        git_timeout=git_timeout,
        log_level=log_level
    )
    
    logger.debug(f'COMMAND = {config.command}')
    logger.debug(f'GVS_BASEDIR = {config.basedir}')
    logger.debug(f'GVS_DESCRIPTOR = {config.descriptor}')
    logger.debug(f'GVS_SNAPSHOT_TEXT = {config.snapshot_text}')
    logger.debug(f'GVS_TAG_NAME_FORMAT = {config.tag_name_format}')
    logger.debug(f'GVS_ALWAYS_INCLUDE_REPEAT_COUNT = {config.always_include_repeat_count}')
    logger.debug(f'GVS_LOCAL_TAGS = {config.local_tags}')
    logger.debug(f'GVS_VERSION_TIMESTAMP_RELEASES = {config.version_timestamp_releases}')
    logger.debug(f'GVS_VERSION_TIMESTAMP_SNAPSHOTS = {config.version_timestamp_snapshots}')
    logger.debug(f'GVS_VERSION_INCLUDES_COMMIT_COUNT = {config.version_includes_commit_count}')
    logger.debug(f'GVS_GIT_TIMEOUT = {config.git_timeout}')
    
    return config
