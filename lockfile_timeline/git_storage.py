"""
Git-backed versioned storage.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional, Union

import git
from git.exc import BadName, BadObject, GitCommandError, InvalidGitRepositoryError, NoSuchPathError

from .errors import BackendIOError, LockfileTimelineError, RepositoryNotFound
from .interfaces import VersionedStorage
from .models import Revision
from .time_utils import from_epoch


logger = logging.getLogger(__name__)


def _summary(commit: git.Commit) -> str:
    summary = commit.summary
    if isinstance(summary, bytes):
        return summary.decode("utf-8", "replace")
    return summary


class GitStorage(VersionedStorage):
    """Read lock file history from a local git repository."""

    def __init__(self, repo: git.Repo) -> None:
        self.repo = repo

    @classmethod
    def open(cls, path: Union[str, Path] = ".") -> "GitStorage":
        """Open the repository containing ``path``.

        Raises:
            RepositoryNotFound: If ``path`` is not inside a git repository
        """
        try:
            repo = git.Repo(str(path), search_parent_directories=True)
        except (InvalidGitRepositoryError, NoSuchPathError) as e:
            logger.debug("Failed to open repository at %s: %r", path, e)
            raise RepositoryNotFound(f"No git repository found at {path}") from e
        if repo.bare:
            raise RepositoryNotFound(f"Repository at {path} is bare")
        logger.debug("Opened repository %s", repo.working_tree_dir)
        return cls(repo)

    @property
    def root(self) -> Path:
        return Path(self.repo.working_tree_dir)

    def relative_path(
        self, path: Union[str, Path], base: Optional[Union[str, Path]] = None
    ) -> str:
        """Convert a filesystem path to a repository-relative posix path.

        Relative paths are resolved against ``base``, or the current directory.
        """
        candidate = Path(path)
        if not candidate.is_absolute():
            candidate = Path(base or Path.cwd()) / candidate
        try:
            return candidate.resolve().relative_to(self.root.resolve()).as_posix()
        except ValueError as e:
            raise LockfileTimelineError(
                f"{path} is not inside the repository at {self.root}"
            ) from e

    def history(self, path: str, rev: str = "HEAD") -> List[Revision]:
        """Return commits reachable from ``rev`` that modified ``path``, oldest first."""
        try:
            commits = list(self.repo.iter_commits(rev, paths=path, full_history=True))
        except (GitCommandError, ValueError) as e:
            logger.debug("git rev-list failed for %s at %s: %r", path, rev, e)
            raise BackendIOError(f"Failed to read history of {path} at {rev}: {e}") from e

        revisions = [
            Revision(
                commit_id=commit.hexsha,
                committed_at=from_epoch(commit.committed_date),
                summary=_summary(commit),
            )
            for commit in commits
        ]
        revisions.reverse()
        logger.debug("Found %d commits touching %s", len(revisions), path)
        return revisions

    def read_blob(self, path: str, revision: Union[Revision, str]) -> Optional[bytes]:
        """Return the content of ``path`` at ``revision``, or None if it did not exist."""
        commit_id = revision.commit_id if isinstance(revision, Revision) else revision
        try:
            tree = self.repo.commit(commit_id).tree
        except (BadName, BadObject, GitCommandError, ValueError) as e:
            logger.debug("Failed to resolve %s: %r", commit_id, e)
            raise BackendIOError(f"Revision {commit_id} not found in repository") from e

        try:
            obj = tree / path
        except KeyError:
            return None
        if obj.type != "blob":
            return None

        try:
            return obj.data_stream.read()
        except (GitCommandError, ValueError, OSError) as e:
            logger.debug("Failed to read %s at %s: %r", path, commit_id, e)
            raise BackendIOError(f"Failed to read {path} at {commit_id}: {e}") from e
