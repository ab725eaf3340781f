"""
Git command line access.

Collects the repository facts the version engine works from: commit count
of HEAD, known tags, working tree changes and file modification times.
Every call shells out to ``git`` in the project base directory.
"""

import os
import re
import subprocess
from datetime import datetime
from typing import Iterable, List, Optional, Set
from loguru import logger

from .errors import CommitCountParseError, RepositoryAccessError, UnsupportedRepositoryError
from .models import RepositoryFacts
from .utils import latest, sanitize_path

REFS_TAGS = 'refs/tags/'
LS_REMOTE_TAG_PATTERN = re.compile(r'^[0-9a-fA-F]{40}\s+refs/tags/.*$')
DEREFERENCE_MARKER = '^{}'


def parse_commit_count(output: str) -> int:
    """
    Parse `git rev-list --count` output.

    Blank output (a repository without commits) counts as 0.

    Raises:
        CommitCountParseError: If the output is not a number
    """
    text = output.strip()
    if not text:
        return 0
    try:
        return int(text)
    except ValueError:
        raise CommitCountParseError(output)


def parse_tag_list(output: str) -> Set[str]:
    """Parse `git tag --list` output into a set of tag names."""
    return {line.strip() for line in output.splitlines() if line.strip()}


def parse_ls_remote_tags(output: str) -> Set[str]:
    """
    Parse `git ls-remote --tags` output into a set of tag names.

    Only ``<40 hex sha> refs/tags/<name>`` lines are kept; the ``^{}`` suffix
    of peeled annotated tags is dropped so both lines yield the same name.
    """
    tags = set()
    for line in output.splitlines():
        line = line.strip()
        if not line or not LS_REMOTE_TAG_PATTERN.match(line):
            continue
        if line.endswith(DEREFERENCE_MARKER):
            line = line[:-len(DEREFERENCE_MARKER)]
        tags.add(line[line.index(REFS_TAGS) + len(REFS_TAGS):])
    return tags


def parse_status_porcelain(output: str) -> Set[str]:
    """
    Parse `git status --porcelain -z` output into the set of changed paths.

    Renamed and copied entries report their new path.
    """
    changed = set()
    entries = output.split('\0')
    i = 0
    while i < len(entries):
        entry = entries[i]
        i += 1
        if len(entry) < 4:
            continue
        status, path = entry[:2], entry[3:]
        changed.add(path)
        if 'R' in status or 'C' in status:
            # Next entry is the source path of the rename/copy
            i += 1
    return changed


def parse_null_separated(output: str) -> Set[str]:
    """Parse NUL separated git output such as `git ls-files -z`."""
    return {entry for entry in output.split('\0') if entry}


class GitRepository:
    """Runs git commands against a working tree."""

    def __init__(self, basedir: str, timeout: int = 60, git_executable: str = 'git'):
        self.basedir = basedir
        self.timeout = timeout
        self.git_executable = git_executable
        self._toplevel: Optional[str] = None

    def _run(self, *args: str) -> str:
        cmd = [self.git_executable, *args]
        logger.debug(f"Executing: {' '.join(cmd)} (in {self.basedir})")
        try:
            result = subprocess.run(
                cmd,
                capture_output=True,
                text=True,
                encoding='utf-8',
                errors='replace',
                timeout=self.timeout,
                cwd=self.basedir
            )
        except FileNotFoundError as e:
            raise RepositoryAccessError(f'git executable not found: {e}', cmd) from e
        except subprocess.TimeoutExpired as e:
            raise RepositoryAccessError(f"'{' '.join(cmd)}' timed out after {self.timeout}s", cmd) from e

        if result.returncode != 0:
            stderr = (result.stderr or '').strip()
            raise RepositoryAccessError(
                f"'{' '.join(cmd)}' failed with exit code {result.returncode}: {stderr}",
                cmd,
                stderr
            )

        for line in (result.stderr or '').splitlines():
            if line.strip():
                logger.warning(line)
        return result.stdout or ''

    def ensure_work_tree(self) -> None:
        """
        Check that basedir is inside a git working tree.

        Raises:
            UnsupportedRepositoryError: If it is not
        """
        try:
            output = self._run('rev-parse', '--is-inside-work-tree')
        except RepositoryAccessError as e:
            raise UnsupportedRepositoryError(f'{self.basedir} is not a git working tree: {e.stderr or e}') from e
        if output.strip() != 'true':
            raise UnsupportedRepositoryError(f'{self.basedir} is not a git working tree')

    def toplevel(self) -> str:
        """Absolute path of the working tree root, queried once."""
        if self._toplevel is None:
            self._toplevel = self._run('rev-parse', '--show-toplevel').strip()
            logger.debug(f'Working tree root: {self._toplevel}')
        return self._toplevel

    def commit_count(self) -> int:
        """Number of commits reachable from HEAD on the current branch."""
        return parse_commit_count(self._run('rev-list', '--count', 'HEAD'))

    def list_tags(self, prefer_local_only: bool = False, remote_url: Optional[str] = None) -> Set[str]:
        """
        List tag names, from the remote when a URL is given unless local tags are preferred.
        """
        if not prefer_local_only and remote_url:
            logger.debug(f'Listing tags of {remote_url}')
            return parse_ls_remote_tags(self._run('ls-remote', '--tags', '--quiet', remote_url))
        logger.debug('Listing local tags')
        return parse_tag_list(self._run('tag', '--list'))

    def changed_files(self) -> Set[str]:
        """
        Paths under basedir that are modified, added, removed or untracked.

        Paths are relative to the working tree root, as git status reports
        them. Untracked directories are expanded to the files inside them.
        """
        return parse_status_porcelain(
            self._run('status', '--porcelain', '-z', '--untracked-files=all', '--', '.')
        )

    def tracked_files(self) -> Set[str]:
        """Paths relative to basedir of every file known to git."""
        return parse_null_separated(self._run('ls-files', '-z'))

    def mod_time(self, path: str) -> Optional[datetime]:
        """Modification time of a file relative to basedir, or None if it does not exist."""
        full_path = path if os.path.isabs(path) else os.path.join(self.basedir, sanitize_path(path))
        try:
            return datetime.fromtimestamp(os.path.getmtime(full_path))
        except OSError:
            return None

    def last_modified(self, descriptor_path: Optional[str], changed: Iterable[str] = (),
                      tracked: Optional[Iterable[str]] = None) -> Optional[datetime]:
        """
        Newest modification time across the descriptor, tracked files and changed files.

        Tracked paths are relative to basedir, changed paths to the working tree root.
        """
        if tracked is None:
            tracked = self.tracked_files()
        changed = list(changed)
        candidates: List[Optional[datetime]] = []
        if descriptor_path:
            candidates.append(self.mod_time(descriptor_path))
        candidates.extend(self.mod_time(path) for path in tracked)
        if changed:
            root = self.toplevel()
            candidates.extend(self.mod_time(os.path.join(root, sanitize_path(path))) for path in changed)
        return latest(candidates)

    def gather_facts(self, include_tags: bool = False, prefer_local_only: bool = False,
                     remote_url: Optional[str] = None, include_working_tree: bool = False,
                     descriptor_path: Optional[str] = None) -> RepositoryFacts:
        """
        Query git once for everything a resolution needs.

        Args:
            include_tags: List tags (release preparation)
            prefer_local_only: Use local tags even if a remote URL is known
            remote_url: Fetch URL of the remote repository
            include_working_tree: Collect changed files and modification times (timestamping)
            descriptor_path: Project descriptor whose mtime also counts

        Returns:
            RepositoryFacts: Immutable snapshot of the repository state
        """
        self.ensure_work_tree()
        commit_count = self.commit_count()
        logger.debug(f'Commit count on HEAD: {commit_count}')

        tags = frozenset(self.list_tags(prefer_local_only, remote_url)) if include_tags else frozenset()

        changed = frozenset()
        latest_mod_time = None
        if include_working_tree:
            changed = frozenset(self.changed_files())
            logger.debug(f'Changed files: {len(changed)}')
            latest_mod_time = self.last_modified(descriptor_path, changed)
            logger.debug(f'Latest modification: {latest_mod_time}')

        return RepositoryFacts(
            commit_count=commit_count,
            tags=tags,
            changed_files=changed,
            latest_mod_time=latest_mod_time
        )
