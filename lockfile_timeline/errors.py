"""
Exceptions raised while building a lock file timeline.
"""

from __future__ import annotations

from typing import Optional

from .models import LockFormat


class LockfileTimelineError(Exception):
    """Base class for all errors surfaced to the caller."""


class RepositoryNotFound(LockfileTimelineError):
    """No repository could be opened at the given path."""


class LockFileNeverExisted(LockfileTimelineError):
    """The lock file has no history at the requested revision."""


class BackendIOError(LockfileTimelineError):
    """The versioned-storage backend failed to read history or content."""


class UnknownLockFormat(LockfileTimelineError):
    """The lock file format could not be inferred from its name."""


class LockFileNotDetected(LockfileTimelineError):
    """None of the conventional lock file names exist in the repository."""


class TimelineCancelled(LockfileTimelineError):
    """The walk was stopped by a cancellation check."""


class ParseError(LockfileTimelineError):
    """Lock file content is not valid for its declared format."""

    def __init__(
        self,
        message: str,
        fmt: Optional[LockFormat] = None,
        commit_id: Optional[str] = None,
    ) -> None:
        self.message = message
        self.fmt = fmt
        self.commit_id = commit_id
        super().__init__(str(self))

    def __str__(self) -> str:
        if self.commit_id:
            return f"{self.message} (at commit {self.commit_id[:12]})"
        return self.message

    def with_commit(self, commit_id: str) -> "ParseError":
        """Return a copy of this error attributed to a commit."""
        return ParseError(self.message, self.fmt, commit_id)
