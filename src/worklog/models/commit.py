"""Commit model shared by the VCS providers, prompts and report nodes."""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Tuple

REPORT_KINDS = ("daily", "weekly", "custom")


@dataclass(frozen=True)
class CommitRecord:
    """Information about a single commit, normalized across VCS backends."""

    id: str
    message: str
    author: str
    date: datetime
    email: Optional[str] = None
    files: Optional[Tuple[str, ...]] = None
    diff: Optional[str] = None

    @property
    def subject(self) -> str:
        """First line of the commit message."""
        return self.message.split("\n")[0]


@dataclass(frozen=True)
class DateRange:
    """Inclusive range of commit dates."""

    start: datetime
    end: datetime

    def contains(self, moment: datetime) -> bool:
        return self.start <= moment <= self.end


@dataclass(frozen=True)
class ReportQuery:
    """What to report on: kind, period and which commit details to load."""

    kind: str
    date_range: DateRange
    author: Optional[str] = None
    include_files: bool = True
    include_diff: bool = False

    def __post_init__(self):
        if self.kind not in REPORT_KINDS:
            raise ValueError(f"Unknown report kind: {self.kind}")


@dataclass(frozen=True)
class RecentCommit:
    """Lightweight commit entry used when picking commits interactively."""

    id: str
    message: str
    date: str
