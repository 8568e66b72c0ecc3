"""
Core data models for lock file timelines.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import List, Optional, Tuple


class LockFormat(Enum):
    """Supported lock file dialects."""

    CARGO = "cargo"
    COMPOSER = "composer"
    NPM = "npm"

    @property
    def filenames(self) -> Tuple[str, ...]:
        """Conventional lock file names for this ecosystem."""
        return _FILENAMES[self]


_FILENAMES = {
    LockFormat.CARGO: ("Cargo.lock",),
    LockFormat.COMPOSER: ("composer.lock",),
    LockFormat.NPM: ("package-lock.json", "npm-shrinkwrap.json"),
}


@dataclass(frozen=True)
class Revision:
    """A commit that touched the lock file."""

    commit_id: str
    committed_at: datetime
    summary: str = ""


@dataclass(frozen=True)
class VersionEntry:
    """The version of a dependency as of a point in time."""

    version: str
    observed_at: datetime
    commit_id: Optional[str] = None


Timeline = List[VersionEntry]
