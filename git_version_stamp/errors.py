"""
Exception hierarchy for Git Version Stamp.

Every failure the engine can raise derives from VersionStampError so the
CLI can map it to an exit code in one place.
"""

from typing import Optional, Sequence


class VersionStampError(Exception):
    """Base class for all errors raised by git_version_stamp."""


class ConfigurationError(VersionStampError):
    """Project coordinates or settings are unusable (e.g. version lacks the snapshot marker)."""


class UnsupportedRepositoryError(VersionStampError):
    """The project's SCM is not a git repository."""


class CommitCountParseError(VersionStampError):
    """Output of `git rev-list --count` was neither blank nor numeric."""

    def __init__(self, output: str):
        super().__init__(f"Could not parse revision count from 'rev-list --count' output: {output}")
        self.output = output


class TemplateError(VersionStampError):
    """A tag name template references an unknown or circular placeholder."""

    def __init__(self, message: str, template: str = ''):
        super().__init__(message)
        self.template = template


# Name used by the release workflow when a tag name cannot be rendered
InterpolationError = TemplateError


class RepositoryAccessError(VersionStampError):
    """A git command failed, timed out, or could not be started."""

    def __init__(self, message: str, command: Optional[Sequence[str]] = None, stderr: str = ''):
        super().__init__(message)
        self.command = list(command) if command else []
        self.stderr = stderr
