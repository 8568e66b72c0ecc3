import shutil
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, List, Optional, Tuple

import pytest

from lockfile_timeline.models import Revision


def cargo_lock(*packages: Tuple[str, str]) -> str:
    blocks = ["# This file is automatically @generated by Cargo.\nversion = 3\n"]
    for name, version in packages:
        blocks.append(
            f'[[package]]\nname = "{name}"\nversion = "{version}"\n'
            'source = "registry+https://github.com/rust-lang/crates.io-index"\n'
        )
    return "\n".join(blocks)


class FakeStorage:
    """In-memory storage; history is reported newest first like git."""

    def __init__(self, snapshots: List[Tuple[str, datetime, Optional[str]]]) -> None:
        self.snapshots = snapshots
        self.contents: Dict[str, Optional[str]] = {c: content for c, _, content in snapshots}
        self.reads: List[str] = []

    def history(self, path: str, rev: str = "HEAD") -> List[Revision]:
        return [Revision(commit_id, at) for commit_id, at, _ in reversed(self.snapshots)]

    def read_blob(self, path: str, revision: Revision) -> Optional[bytes]:
        self.reads.append(revision.commit_id)
        content = self.contents[revision.commit_id]
        return None if content is None else content.encode("utf-8")


class RepoBuilder:
    """Create commits with fixed timestamps in a throwaway git repository."""

    def __init__(self, path: Path) -> None:
        import git

        self.path = path
        self.repo = git.Repo.init(str(path))
        self.actor = git.Actor("Test User", "test@example.com")

    def commit(
        self,
        files: Dict[str, Optional[str]],
        when: datetime,
        message: str = "update",
        parents: Optional[List[str]] = None,
        head: bool = True,
    ) -> str:
        for name, content in files.items():
            target = self.path / name
            if content is None:
                self.repo.index.remove([name], working_tree=True)
                continue
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(content, encoding="utf-8")
            self.repo.index.add([name])
        stamp = f"{int(when.timestamp())} +0000"
        commit = self.repo.index.commit(
            message,
            author=self.actor,
            committer=self.actor,
            author_date=stamp,
            commit_date=stamp,
            parent_commits=[self.repo.commit(p) for p in parents] if parents else None,
            head=head,
        )
        return commit.hexsha


@pytest.fixture
def repo_builder(tmp_path: Path) -> RepoBuilder:
    if shutil.which("git") is None:
        pytest.skip("git executable not available")
    return RepoBuilder(tmp_path / "repo")


def utc(*args) -> datetime:
    return datetime(*args, tzinfo=timezone.utc)
