"""Git provider built on GitPython."""

from typing import List, Optional, Tuple

from git import NULL_TREE, Repo
from git.exc import BadName, GitCommandError, GitError
from git.objects.commit import Commit
from loguru import logger

from worklog.dates import normalize_range
from worklog.errors import VCSQueryError
from worklog.models.commit import CommitRecord, RecentCommit, ReportQuery
from worklog.providers.base import PathLike, has_marker_dir, matches_author

DIFF_SCOPES = ("staged", "unstaged", "all")
SHORT_ID_LENGTH = 8
RECENT_MESSAGE_LENGTH = 50


def _open_repo(path: PathLike) -> Repo:
    try:
        return Repo(path)
    except GitError as e:
        raise VCSQueryError("git", e) from e


def _changed_files(commit: Commit) -> Tuple[str, ...]:
    """Paths touched by a commit; root commits are compared with the empty tree."""
    if commit.parents:
        diff_index = commit.parents[0].diff(commit)
    else:
        diff_index = commit.diff(NULL_TREE)

    files_changed = []
    for diff in diff_index:
        # renames count once, under their new path
        changed_path = diff.b_path or diff.a_path
        if changed_path and changed_path not in files_changed:
            files_changed.append(changed_path)
    return tuple(files_changed)


def _commit_diff(repo: Repo, commit: Commit) -> Optional[str]:
    """Parent-relative diff text, or None when it cannot be computed."""
    try:
        return repo.git.diff(f"{commit.hexsha}^", commit.hexsha)
    except GitCommandError as e:
        logger.debug(f"No diff for commit {commit.hexsha[:SHORT_ID_LENGTH]}: {e}")
        return None


def _recent_commit(commit: Commit) -> RecentCommit:
    return RecentCommit(
        id=commit.hexsha[:SHORT_ID_LENGTH],
        message=commit.message.split("\n")[0][:RECENT_MESSAGE_LENGTH],
        date=commit.committed_datetime.strftime("%Y-%m-%d"),
    )


class GitProvider:
    """Reads commit history and working-tree diffs from a Git repository."""

    vcs_type = "git"

    def is_repository(self, path: PathLike) -> bool:
        return has_marker_dir(path, ".git")

    def _create_commit_record(self, repo: Repo, commit: Commit, query: ReportQuery) -> CommitRecord:
        files = None
        if query.include_files:
            try:
                files = _changed_files(commit)
            except (GitError, ValueError) as e:
                logger.debug(f"No file list for commit {commit.hexsha[:SHORT_ID_LENGTH]}: {e}")

        diff = _commit_diff(repo, commit) if query.include_diff else None

        return CommitRecord(
            id=commit.hexsha[:SHORT_ID_LENGTH],
            message=commit.message.strip(),
            author=commit.author.name or "",
            email=commit.author.email or None,
            date=commit.authored_datetime.astimezone(),
            files=files,
            diff=diff,
        )

    def get_commits(self, path: PathLike, query: ReportQuery) -> List[CommitRecord]:
        """Commits authored within the query's range, newest first.

        Only the author date decides. --since/--until are not pushed down because
        git applies them to committer dates, which a rebase or amend moves.
        """
        repo = _open_repo(path)
        date_range = normalize_range(query.date_range)

        options = {}
        if query.author:
            options.update(author=query.author, regexp_ignore_case=True, fixed_strings=True)

        try:
            commits = list(repo.iter_commits("HEAD", **options))
        except (GitError, ValueError) as e:
            raise VCSQueryError("git", e) from e

        records = []
        for commit in commits:
            if not date_range.contains(commit.authored_datetime):
                continue
            if query.author and not matches_author(commit.author.name or "", query.author):
                continue
            records.append(self._create_commit_record(repo, commit, query))

        logger.debug(f"git log returned {len(commits)} commits, {len(records)} in range")
        return records

    def get_working_diff(self, path: PathLike, scope: str = "staged") -> str:
        """Uncommitted changes: staged, unstaged, or both concatenated."""
        if scope not in DIFF_SCOPES:
            raise ValueError(f"Unknown diff scope: {scope}")

        repo = _open_repo(path)
        parts = []
        try:
            if scope in ("staged", "all"):
                parts.append(repo.git.diff("--cached"))
            if scope in ("unstaged", "all"):
                parts.append(repo.git.diff())
        except GitCommandError as e:
            raise VCSQueryError("git", e) from e
        return "\n".join(part for part in parts if part)

    def get_recent_diff(self, path: PathLike, count: int) -> str:
        """Diff spanning the last `count` commits up to HEAD."""
        return self.get_range_diff(path, f"HEAD~{count}", "HEAD")

    def get_range_diff(self, path: PathLike, from_ref: str, to_ref: str) -> str:
        repo = _open_repo(path)
        try:
            return repo.git.diff(from_ref, to_ref)
        except GitCommandError as e:
            raise VCSQueryError("git", e) from e

    def get_recent_commit_list(self, path: PathLike, count: int = 20) -> List[RecentCommit]:
        """Newest-first commits for interactive selection."""
        repo = _open_repo(path)
        try:
            commits = list(repo.iter_commits("HEAD", max_count=count))
        except (GitError, ValueError) as e:
            raise VCSQueryError("git", e) from e

        return [_recent_commit(commit) for commit in commits]

    def get_commit_summary(self, path: PathLike, ref: str) -> RecentCommit:
        """Resolve any revision (sha, branch, tag, HEAD~3) to its id and subject."""
        repo = _open_repo(path)
        try:
            commit = repo.commit(ref)
        except (BadName, GitError, ValueError) as e:
            raise VCSQueryError("git", f"unknown revision {ref}: {e}") from e

        return _recent_commit(commit)

    def get_current_user(self, path: PathLike) -> Optional[Tuple[str, str]]:
        """Configured (user.name, user.email), or None when unavailable."""
        try:
            reader = _open_repo(path).config_reader()
            return reader.get_value("user", "name", ""), reader.get_value("user", "email", "")
        except (VCSQueryError, OSError, ValueError) as e:
            logger.debug(f"Could not read git user: {e}")
            return None

    def get_status(self, path: PathLike) -> Tuple[List[str], List[str]]:
        """Staged paths and unstaged paths (untracked files included)."""
        repo = _open_repo(path)
        try:
            if repo.head.is_valid():
                staged = [d.a_path or d.b_path for d in repo.index.diff("HEAD")]
            else:
                staged = [entry_path for entry_path, _stage in repo.index.entries]
            unstaged = [d.a_path or d.b_path for d in repo.index.diff(None)]
        except GitError as e:
            raise VCSQueryError("git", e) from e
        return staged, unstaged + [f for f in repo.untracked_files if f not in unstaged]
