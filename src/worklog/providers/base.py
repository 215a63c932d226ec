"""Contract shared by the Git and SVN providers."""

from pathlib import Path
from typing import List, Protocol, Union

from worklog.models.commit import CommitRecord, ReportQuery

PathLike = Union[str, Path]


class VCSProvider(Protocol):
    """A version-control backend able to list commits for a report."""

    vcs_type: str

    def is_repository(self, path: PathLike) -> bool: ...

    def get_commits(self, path: PathLike, query: ReportQuery) -> List[CommitRecord]: ...


def has_marker_dir(path: PathLike, marker: str) -> bool:
    """Check for a VCS marker directory such as .git; errors count as absent."""
    try:
        return Path(path, marker).is_dir()
    except (OSError, ValueError):
        return False


def matches_author(author: str, author_filter: str) -> bool:
    """Case-insensitive substring match used for author filtering."""
    return author_filter.lower() in author.lower()
