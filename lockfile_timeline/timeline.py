"""
Assemble the version timeline of a dependency from lock file history.
"""

from __future__ import annotations

import logging
from datetime import datetime
from functools import reduce
from pathlib import Path
from typing import Callable, Iterable, Optional, Tuple, Union

from tqdm import tqdm

from .errors import ParseError, TimelineCancelled
from .git_storage import GitStorage
from .history import get_content_at, revisions_touching
from .interfaces import VersionedStorage
from .models import LockFormat, Timeline, VersionEntry
from .parsers import detect_format, parse_version


logger = logging.getLogger(__name__)

# (entries emitted so far, last emitted version)
FoldState = Tuple[Timeline, Optional[str]]


def _fold_entry(state: FoldState, entry: VersionEntry) -> FoldState:
    timeline, last_emitted_version = state
    if entry.version == last_emitted_version:
        return state
    timeline.append(entry)
    return timeline, entry.version


def collapse(entries: Iterable[VersionEntry]) -> Timeline:
    """Drop entries whose version equals the immediately preceding one."""
    timeline, _ = reduce(_fold_entry, entries, ([], None))
    return timeline


def build_timeline(
    storage: VersionedStorage,
    path: str,
    fmt: LockFormat,
    dependency: str,
    rev: str = "HEAD",
    since: Optional[datetime] = None,
    until: Optional[datetime] = None,
    should_cancel: Optional[Callable[[], bool]] = None,
    progress: bool = False,
) -> Timeline:
    """Build the chronological version timeline of ``dependency``.

    Revisions where the lock file is absent, or where it does not list the
    dependency, are skipped. The first backend or parse error aborts the walk.

    Args:
        storage: Versioned storage holding the lock file
        path: Repository-relative path of the lock file
        fmt: Lock file format
        dependency: Exact dependency name to track
        rev: Revision whose history is walked
        since: Ignore commits before this time
        until: Ignore commits after this time
        should_cancel: Checked before each revision; returning True stops the walk
        progress: Show a progress bar on stderr

    Returns:
        Version entries in chronological order without adjacent duplicates
    """
    revisions = revisions_touching(storage, path, rev, since, until)

    state: FoldState = ([], None)
    for revision in tqdm(revisions, desc=path, unit="rev", disable=not progress):
        if should_cancel is not None and should_cancel():
            raise TimelineCancelled(
                f"Cancelled before {revision.commit_id[:12]}"
            )

        content = get_content_at(storage, path, revision)
        if content is None:
            logger.debug("%s absent at %s", path, revision.commit_id[:12])
            continue

        try:
            version = parse_version(fmt, content, dependency)
        except ParseError as e:
            raise e.with_commit(revision.commit_id) from e

        if version is None:
            logger.debug("%s not listed at %s", dependency, revision.commit_id[:12])
            continue

        entry = VersionEntry(version, revision.committed_at, revision.commit_id)
        before = len(state[0])
        state = _fold_entry(state, entry)
        if len(state[0]) > before:
            logger.info("%s %s at %s", dependency, version, revision.commit_id[:12])

    return state[0]


class TimelineBuilder:
    """Build a dependency timeline for a lock file in a local git repository."""

    def __init__(
        self,
        dependency: str,
        lock_file: Union[str, Path],
        repo_path: Union[str, Path] = ".",
        fmt: Optional[LockFormat] = None,
        rev: str = "HEAD",
        since: Optional[datetime] = None,
        until: Optional[datetime] = None,
    ):
        """Initialize the builder.

        Args:
            dependency: Dependency name to track
            lock_file: Lock file path, absolute or relative to repo_path
            repo_path: Any path inside the repository
            fmt: Lock file format; inferred from the file name when omitted
            rev: Revision whose history is walked
            since: Ignore commits before this time
            until: Ignore commits after this time
        """
        self.dependency = dependency
        self.storage = GitStorage.open(repo_path)
        self.path = self.storage.relative_path(lock_file, base=repo_path)
        self.fmt = fmt or detect_format(self.path)
        self.rev = rev
        self.since = since
        self.until = until

    def build(
        self,
        should_cancel: Optional[Callable[[], bool]] = None,
        progress: bool = False,
    ) -> Timeline:
        logger.info(
            "Tracking %s in %s (%s) from %s", self.dependency, self.path, self.fmt.value, self.rev
        )
        return build_timeline(
            self.storage,
            self.path,
            self.fmt,
            self.dependency,
            rev=self.rev,
            since=self.since,
            until=self.until,
            should_cancel=should_cancel,
            progress=progress,
        )
