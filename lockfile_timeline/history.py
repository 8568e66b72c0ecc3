"""
Walk the commits that touched a lock file and read its historical content.
"""

from __future__ import annotations

import codecs
import logging
from datetime import datetime
from typing import List, Optional

from .errors import LockFileNeverExisted, ParseError
from .interfaces import VersionedStorage
from .models import Revision
from .time_utils import ensure_utc


logger = logging.getLogger(__name__)


def revisions_touching(
    storage: VersionedStorage,
    path: str,
    rev: str = "HEAD",
    since: Optional[datetime] = None,
    until: Optional[datetime] = None,
) -> List[Revision]:
    """List the revisions that modified ``path``, oldest first.

    Renames are not followed. ``since`` and ``until`` are inclusive bounds
    applied after the history is read.

    Raises:
        LockFileNeverExisted: If no commit reachable from ``rev`` touched ``path``
    """
    history = list(storage.history(path, rev))
    if not history:
        raise LockFileNeverExisted(f"{path} does not appear in the history of {rev}")

    # stable sort keeps the backend's order for commits sharing a timestamp
    revisions = sorted(history, key=lambda r: ensure_utc(r.committed_at))

    if since is not None:
        since = ensure_utc(since)
        revisions = [r for r in revisions if ensure_utc(r.committed_at) >= since]
    if until is not None:
        until = ensure_utc(until)
        revisions = [r for r in revisions if ensure_utc(r.committed_at) <= until]

    logger.info("%d revisions of %s to inspect", len(revisions), path)
    return revisions


def get_content_at(
    storage: VersionedStorage, path: str, revision: Revision
) -> Optional[str]:
    """Return the text of ``path`` at ``revision``, or None if the file did not exist."""
    data = storage.read_blob(path, revision)
    if data is None:
        return None
    if data.startswith(codecs.BOM_UTF8):
        data = data[len(codecs.BOM_UTF8):]
    try:
        return data.decode("utf-8")
    except UnicodeDecodeError as e:
        raise ParseError(
            f"{path} is not valid UTF-8: {e}", commit_id=revision.commit_id
        ) from e
