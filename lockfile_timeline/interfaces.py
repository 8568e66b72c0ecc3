"""
Interfaces for versioned storage backends and lock file parsers.
"""

from __future__ import annotations

from typing import Iterable, Optional, Protocol

from .models import Revision


class VersionedStorage(Protocol):
    """Read-only access to the history of files in a repository."""

    def history(self, path: str, rev: str = "HEAD") -> Iterable[Revision]:
        ...

    def read_blob(self, path: str, revision: Revision) -> Optional[bytes]:
        ...


class LockParser(Protocol):
    """Extract the version of one dependency from lock file content."""

    def __call__(self, content: str, dependency: str) -> Optional[str]:
        ...
