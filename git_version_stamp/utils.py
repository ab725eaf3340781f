"""
Utility functions for Git Version Stamp.

Contains small string and path helpers shared by the release and timestamp
workflows.
"""

import os
from datetime import datetime
from typing import Iterable, Optional

VERSION_SEPARATORS = ('.', '-')


def ensure_trailing_separator(version: str) -> str:
    """
    Append a '.' unless the version already ends with '.' or '-'.

    Args:
        version: Bare version such as "1" or "1.0-"

    Returns:
        str: Version ending with a separator
    """
    if version.endswith(VERSION_SEPARATORS):
        return version
    return version + '.'


def remove_suffix(value: str, suffix: str) -> str:
    """Remove suffix from value when present."""
    if suffix and value.endswith(suffix):
        return value[:-len(suffix)]
    return value


def latest(timestamps: Iterable[Optional[datetime]]) -> Optional[datetime]:
    """Return the newest of the given timestamps, ignoring missing ones."""
    present = [ts for ts in timestamps if ts is not None]
    return max(present) if present else None


def is_windows() -> bool:
    """Check if running on Windows operating system."""
    return os.name == 'nt'


def sanitize_path(path: str) -> str:
    """
    Sanitize file path for cross-platform compatibility.
    
    On Windows forward slashes (as printed by git) become backslashes;
    elsewhere the path is only normalized.
    
    Args:
        path: The file path to sanitize
        
    Returns:
        str: Sanitized file path
    """
    if is_windows():
        path = path.replace('/', '\\')
    return os.path.normpath(path)
