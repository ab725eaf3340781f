"""
Tag name interpolation.

Templates use ``@{...}`` placeholders. ``project.`` and ``pom.`` are
interchangeable prefixes and the bare key works too, so
``@{project.version}``, ``@{pom.version}`` and ``@{version}`` all render the
candidate version. Resolved values are interpolated again, which is where
circular references are caught.
"""

import re
from typing import Dict, List, Optional

from .errors import TemplateError
from .models import ProjectCoordinates

PLACEHOLDER_PATTERN = re.compile(r'@\{([^}]*)\}')
PLACEHOLDER_PREFIXES = ('project.', 'pom.')


def template_values(coords: ProjectCoordinates, version: str) -> Dict[str, str]:
    """Build the value set a tag name template can reference."""
    return {
        'artifactId': coords.artifact_id,
        'groupId': coords.group_id,
        'version': version,
    }


def _strip_prefix(expression: str) -> str:
    expression = expression.strip()
    for prefix in PLACEHOLDER_PREFIXES:
        if expression.startswith(prefix):
            return expression[len(prefix):]
    return expression


def _render(template: str, values: Dict[str, str], stack: List[str], original: str) -> str:
    def replace(match: 're.Match') -> str:
        key = _strip_prefix(match.group(1))
        if key in stack:
            cycle = ' -> '.join(stack + [key])
            raise TemplateError(f"Circular reference in tag name format '{original}': {cycle}", original)
        if key not in values:
            raise TemplateError(
                f"Could not interpolate specified tag name format: {original} "
                f"(unknown placeholder '{match.group(1)}')",
                original
            )
        return _render(values[key], values, stack + [key], original)

    return PLACEHOLDER_PATTERN.sub(replace, template)


def interpolate(template: str, coords: ProjectCoordinates, version: str,
                values: Optional[Dict[str, str]] = None) -> str:
    """
    Render a tag name template for a candidate version.

    Args:
        template: Tag name format, e.g. "@{project.artifactId}-@{project.version}"
        coords: Project coordinates supplying groupId and artifactId
        version: Candidate version
        values: Optional value set replacing the one derived from coords

    Returns:
        str: The rendered tag name

    Raises:
        TemplateError: If a placeholder is unknown or refers back to itself
    """
    if values is None:
        values = template_values(coords, version)
    return _render(template, values, [], template)
