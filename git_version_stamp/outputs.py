"""
Output sinks for resolved values.

Resolved versions leave the tool in two ways: as named properties (printed,
written to a properties file, or appended to a GitHub Actions output file)
and as small text files holding a single value.
"""

import os
from typing import Dict, Optional
from loguru import logger


def write_file(path: Optional[str], value: str, encoding: str = 'utf-8') -> None:
    """
    Write value followed by a newline, creating parent directories.

    Args:
        path: Destination file, or None to skip
        value: Value to write
        encoding: File encoding
    """
    if not path:
        return
    parent = os.path.dirname(os.path.abspath(path))
    os.makedirs(parent, exist_ok=True)
    logger.info(f"Writing '{value}' to {path}")
    with open(path, 'w', encoding=encoding) as f:
        f.write(value + '\n')


class PropertySink:
    """Collects named properties in the order they were set."""

    def __init__(self):
        self.properties: Dict[str, str] = {}

    def set_property(self, name: Optional[str], value: str) -> None:
        """Record a property; blank names are ignored."""
        if not name or not name.strip():
            return
        logger.info(f"Setting property '{name}' to '{value}'")
        self.properties[name] = value

    def render(self) -> str:
        """Render properties as key=value lines."""
        return ''.join(f'{name}={value}\n' for name, value in self.properties.items())

    def write_properties_file(self, path: Optional[str], encoding: str = 'utf-8') -> None:
        """Write all properties to a key=value file, replacing it."""
        if not path:
            return
        os.makedirs(os.path.dirname(os.path.abspath(path)), exist_ok=True)
        logger.info(f'Writing {len(self.properties)} properties to {path}')
        with open(path, 'w', encoding=encoding) as f:
            f.write(self.render())

    def append_github_output(self, path: Optional[str], encoding: str = 'utf-8') -> None:
        """Append all properties to a GitHub Actions output file."""
        if not path:
            logger.warning('GITHUB_OUTPUT is not set, skipping GitHub output export')
            return
        logger.debug(f'Appending {len(self.properties)} properties to {path}')
        with open(path, 'a', encoding=encoding) as f:
            f.write(self.render())
