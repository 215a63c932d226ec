"""Tests for the Git provider."""

from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest
from git import Actor

from worklog.errors import VCSQueryError
from worklog.models.commit import DateRange, ReportQuery
from worklog.providers.git_provider import GitProvider

ALICE = Actor("Alice Smith", "alice@example.com")


def utc(*args) -> datetime:
    return datetime(*args, tzinfo=timezone.utc)


def query_for(start: datetime, end: datetime, **kwargs) -> ReportQuery:
    return ReportQuery(kind="custom", date_range=DateRange(start=start, end=end), **kwargs)


@pytest.fixture
def provider():
    return GitProvider()


def test_is_repository(provider, temp_git_repo, tmp_path):
    """Only directories holding a .git marker are Git repositories."""
    assert provider.is_repository(temp_git_repo.working_dir)
    assert not provider.is_repository(tmp_path)
    assert not provider.is_repository(tmp_path / "missing")


def test_get_commits_within_day(provider, history_repo):
    """Only the two commits of January 1st are returned, newest first."""
    query = query_for(utc(2024, 1, 1, 0, 0, 0), utc(2024, 1, 1, 23, 59, 59))
    commits = provider.get_commits(history_repo.working_dir, query)

    assert [c.message for c in commits] == ["Add b file\n\nLonger explanation.", "Initial commit"]
    assert [c.author for c in commits] == ["Bob", "Alice Smith"]
    assert commits[1].email == "alice@example.com"
    assert all(len(c.id) == 8 for c in commits)
    assert commits[1].date == utc(2024, 1, 1, 9, 0)


def test_get_commits_boundaries_are_inclusive(provider, history_repo):
    """A range that starts and ends exactly on a commit includes it."""
    moment = utc(2024, 1, 1, 15, 0)
    commits = provider.get_commits(history_repo.working_dir, query_for(moment, moment))

    assert [c.author for c in commits] == ["Bob"]


def test_get_commits_inverted_range_is_empty(provider, history_repo):
    """start > end finds nothing instead of failing."""
    query = query_for(utc(2024, 1, 3), utc(2023, 12, 31))

    assert provider.get_commits(history_repo.working_dir, query) == []


def test_get_commits_author_filter(provider, history_repo):
    """The author filter is a case-insensitive substring match."""
    query = query_for(utc(2024, 1, 1), utc(2024, 1, 3), author="alice")
    commits = provider.get_commits(history_repo.working_dir, query)

    assert len(commits) == 2
    assert {c.author for c in commits} == {"Alice Smith"}


def test_get_commits_files(provider, history_repo):
    """File lists are resolved per commit, including the root commit."""
    query = query_for(utc(2024, 1, 1), utc(2024, 1, 3))
    commits = provider.get_commits(history_repo.working_dir, query)

    files = {c.message.split("\n")[0]: c.files for c in commits}
    assert files["Initial commit"] == ("a.txt",)
    assert files["Add b file"] == ("b.txt",)
    assert sorted(files["feature: Update a and add c"]) == ["a.txt", "c.txt"]


def test_get_commits_without_files(provider, history_repo):
    query = query_for(utc(2024, 1, 1), utc(2024, 1, 3), include_files=False)
    commits = provider.get_commits(history_repo.working_dir, query)

    assert all(c.files is None for c in commits)


def test_single_root_commit_files(provider, temp_git_repo, make_commit):
    """A repository with only a root commit still reports its changed files."""
    make_commit(temp_git_repo, {"src/main.py": "print('hi')\n", "README.md": "# Demo\n"}, "Initial commit", utc(2024, 5, 1, 8))

    query = query_for(utc(2024, 5, 1), utc(2024, 5, 2))
    commits = provider.get_commits(temp_git_repo.working_dir, query)

    assert len(commits) == 1
    assert sorted(commits[0].files) == ["README.md", "src/main.py"]


def test_get_commits_diff_degrades_for_root_commit(provider, history_repo):
    """The root commit has no parent diff; the field is omitted, nothing fails."""
    query = query_for(utc(2024, 1, 1), utc(2024, 1, 3), include_diff=True)
    commits = provider.get_commits(history_repo.working_dir, query)

    by_message = {c.message.split("\n")[0]: c for c in commits}
    assert by_message["Initial commit"].diff is None
    assert "+gamma" in by_message["feature: Update a and add c"].diff
    assert "+beta" in by_message["Add b file"].diff


def test_get_commits_not_a_repository(provider, tmp_path):
    with pytest.raises(VCSQueryError) as exc_info:
        provider.get_commits(tmp_path, query_for(utc(2024, 1, 1), utc(2024, 1, 2)))

    assert exc_info.value.backend == "git"


def test_get_commits_empty_repository(provider, temp_git_repo):
    """A repository without any commit is a retrieval failure, not an empty result."""
    with pytest.raises(VCSQueryError):
        provider.get_commits(temp_git_repo.working_dir, query_for(utc(2024, 1, 1), utc(2024, 1, 2)))


def test_get_working_diff_scopes(provider, history_repo):
    """Staged, unstaged and combined working tree diffs."""
    repo_path = Path(history_repo.working_dir)
    (repo_path / "a.txt").write_text("staged change\n")
    history_repo.index.add([str(repo_path / "a.txt")])
    (repo_path / "b.txt").write_text("unstaged change\n")

    staged = provider.get_working_diff(repo_path, "staged")
    unstaged = provider.get_working_diff(repo_path, "unstaged")
    combined = provider.get_working_diff(repo_path, "all")

    assert "+staged change" in staged and "unstaged change" not in staged
    assert "+unstaged change" in unstaged and "+staged change" not in unstaged
    assert "+staged change" in combined and "+unstaged change" in combined
    assert combined.index("+staged change") < combined.index("+unstaged change")


def test_get_working_diff_clean_tree(provider, history_repo):
    assert provider.get_working_diff(history_repo.working_dir, "all") == ""


def test_get_working_diff_rejects_unknown_scope(provider, history_repo):
    with pytest.raises(ValueError):
        provider.get_working_diff(history_repo.working_dir, "everything")


def test_get_recent_and_range_diff(provider, history_repo):
    commits = list(history_repo.iter_commits("HEAD"))

    recent = provider.get_recent_diff(history_repo.working_dir, 1)
    assert "+gamma" in recent
    assert "+beta" not in recent

    spanning = provider.get_range_diff(history_repo.working_dir, commits[2].hexsha, commits[0].hexsha)
    assert "+beta" in spanning and "+gamma" in spanning


def test_get_recent_diff_beyond_history(provider, history_repo):
    with pytest.raises(VCSQueryError):
        provider.get_recent_diff(history_repo.working_dir, 10)


def test_get_recent_commit_list(provider, history_repo, make_commit):
    """Newest first, 8 character ids, first message line capped at 50 characters."""
    make_commit(history_repo, {"d.txt": "delta\n"}, "x" * 80 + "\n\nbody", utc(2024, 1, 3, 8))

    recent = provider.get_recent_commit_list(history_repo.working_dir, 3)

    assert len(recent) == 3
    assert recent[0].message == "x" * 50
    assert recent[0].date == "2024-01-03"
    assert recent[1].message == "feature: Update a and add c"
    assert recent[2].message == "Add b file"
    assert all(len(c.id) == 8 for c in recent)


def test_get_status(provider, history_repo):
    repo_path = Path(history_repo.working_dir)
    (repo_path / "a.txt").write_text("staged\n")
    history_repo.index.add([str(repo_path / "a.txt")])
    (repo_path / "b.txt").write_text("modified\n")
    (repo_path / "new.txt").write_text("untracked\n")

    staged, unstaged = provider.get_status(repo_path)

    assert staged == ["a.txt"]
    assert sorted(unstaged) == ["b.txt", "new.txt"]


def test_get_commits_uses_author_date_after_rebase(provider, temp_git_repo, make_commit):
    """A commit authored in one week and committed in the next belongs to its authoring week."""
    make_commit(temp_git_repo, {"base.txt": "base\n"}, "Base", utc(2023, 12, 20, 9))
    make_commit(temp_git_repo, {"late.txt": "late\n"}, "Rebased work", utc(2024, 1, 5, 9), committed=utc(2024, 1, 8, 9))

    first_week = provider.get_commits(temp_git_repo.working_dir, query_for(utc(2024, 1, 1), utc(2024, 1, 7, 23, 59, 59)))
    second_week = provider.get_commits(temp_git_repo.working_dir, query_for(utc(2024, 1, 8), utc(2024, 1, 14, 23, 59, 59)))

    assert [c.message for c in first_week] == ["Rebased work"]
    assert second_week == []


def test_commit_date_is_local_time(provider, temp_git_repo, make_commit):
    """Author offsets are converted to the local timezone (UTC under test)."""
    tokyo = timezone(timedelta(hours=9))
    make_commit(temp_git_repo, {"t.txt": "tokyo\n"}, "tokyo", datetime(2024, 1, 2, 1, 0, tzinfo=tokyo))

    commits = provider.get_commits(temp_git_repo.working_dir, query_for(utc(2024, 1, 1), utc(2024, 1, 1, 23, 59, 59)))

    assert len(commits) == 1
    assert commits[0].date.utcoffset() == timedelta(0)
    assert commits[0].date.strftime("%Y-%m-%d %H:%M") == "2024-01-01 16:00"


def test_renamed_file_listed_once(provider, history_repo):
    history_repo.index.move(["a.txt", "renamed.txt"])
    history_repo.index.commit(
        "Rename a",
        author=ALICE,
        committer=ALICE,
        author_date=f"{int(utc(2024, 1, 3, 9).timestamp())} +0000",
        commit_date=f"{int(utc(2024, 1, 3, 9).timestamp())} +0000",
    )

    commits = provider.get_commits(history_repo.working_dir, query_for(utc(2024, 1, 3), utc(2024, 1, 3, 23, 59, 59)))

    assert commits[0].files == ("renamed.txt",)


def test_get_commit_summary(provider, history_repo):
    by_ref = provider.get_commit_summary(history_repo.working_dir, "HEAD~1")
    head = provider.get_commit_summary(history_repo.working_dir, history_repo.active_branch.name)

    assert by_ref.message == "Add b file"
    assert head.message == "feature: Update a and add c"
    assert head.id == history_repo.head.commit.hexsha[:8]

    with pytest.raises(VCSQueryError):
        provider.get_commit_summary(history_repo.working_dir, "no-such-branch")
