"""
Git Version Stamp

Computes deterministic, collision-free release versions and tag names, and
timestamped snapshot versions, from a project's git history.
"""

from ._version import __version__

__author__ = "git-version-stamp contributors"
__description__ = "Collision-free release versions and timestamped snapshot versions from git"
