"""Shared fixtures: temporary Git repositories and commit record factories."""

import time
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, Optional, Sequence

import pytest
from git import Actor, Repo

from worklog.models.commit import CommitRecord

ALICE = Actor("Alice Smith", "alice@example.com")
BOB = Actor("Bob", "bob@example.com")


def utc(*args) -> datetime:
    return datetime(*args, tzinfo=timezone.utc)


def git_time(moment: datetime) -> str:
    """Raw git date format, understood by every GitPython version."""
    return f"{int(moment.timestamp())} {moment.strftime('%z')}"


def create_commit(
    repo: Repo,
    files: Dict[str, str],
    message: str,
    when: datetime,
    author: Actor = ALICE,
    committed: Optional[datetime] = None,
):
    """Write `files` (relative path -> content) and commit them.

    `when` is the author date; the committer date defaults to it.
    """
    paths = []
    for relative_path, content in files.items():
        file_path = Path(repo.working_dir) / relative_path
        file_path.parent.mkdir(parents=True, exist_ok=True)
        file_path.write_text(content)
        paths.append(str(file_path))
    repo.index.add(paths)
    return repo.index.commit(
        message,
        author=author,
        committer=author,
        author_date=git_time(when),
        commit_date=git_time(committed or when),
    )


@pytest.fixture(autouse=True)
def utc_local_time(monkeypatch):
    """Run every test with UTC as the local timezone."""
    monkeypatch.setenv("TZ", "UTC")
    time.tzset()
    yield
    monkeypatch.undo()
    time.tzset()


@pytest.fixture
def make_commit():
    """The create_commit helper, for tests building their own history."""
    return create_commit


@pytest.fixture
def temp_git_repo(tmp_path):
    """Create an empty temporary Git repository."""
    repo_path = tmp_path / "test_repo"
    repo_path.mkdir()
    return Repo.init(repo_path)


@pytest.fixture
def history_repo(temp_git_repo):
    """Three commits over two days by two authors.

    2024-01-01 09:00 UTC  Alice  root commit adding a.txt
    2024-01-01 15:00 UTC  Bob    adds b.txt
    2024-01-02 10:00 UTC  Alice  changes a.txt, adds c.txt
    """
    repo = temp_git_repo
    create_commit(repo, {"a.txt": "alpha\n"}, "Initial commit", utc(2024, 1, 1, 9, 0))
    create_commit(repo, {"b.txt": "beta\n"}, "Add b file\n\nLonger explanation.", utc(2024, 1, 1, 15, 0), BOB)
    create_commit(repo, {"a.txt": "alpha 2\n", "c.txt": "gamma\n"}, "feature: Update a and add c", utc(2024, 1, 2, 10, 0))
    return repo


@pytest.fixture
def commit_record_factory():
    """Factory fixture for creating CommitRecord instances."""

    def create_commit_record(
        message: str = "feature: Add thing",
        id: str = "abcd1234",
        author: str = "Test Author",
        date: Optional[datetime] = None,
        files: Optional[Sequence[str]] = None,
    ) -> CommitRecord:
        return CommitRecord(
            id=id,
            message=message,
            author=author,
            date=date or utc(2024, 1, 1, 12, 0),
            files=tuple(files) if files is not None else None,
        )

    return create_commit_record
