"""SVN provider driving the svn command line client."""

import subprocess
import xml.etree.ElementTree as ElementTree
from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional

from loguru import logger

from worklog.dates import normalize_range
from worklog.errors import VCSQueryError
from worklog.models.commit import CommitRecord, ReportQuery
from worklog.providers.base import PathLike, has_marker_dir, matches_author

SVN_DATE_FORMAT = "%Y-%m-%dT%H:%M:%S"
REVISION_PREFIX = "r"


@dataclass
class SvnLogEntry:
    """One <logentry> of `svn log --xml`."""

    revision: str
    author: str
    date: datetime
    message: str
    paths: List[str] = field(default_factory=list)


def _run_svn_command(args: List[str], cwd: PathLike) -> str:
    """Run svn and return stdout, raising VCSQueryError on any failure."""
    try:
        result = subprocess.run(["svn"] + args, cwd=cwd, capture_output=True, text=True, check=True)
    except subprocess.CalledProcessError as e:
        error_msg = (e.stderr or e.stdout or "").strip() or str(e)
        raise VCSQueryError("svn", f"svn {' '.join(args)}: {error_msg}") from e
    except FileNotFoundError as e:
        raise VCSQueryError("svn", "svn is not installed or not found in PATH") from e
    except OSError as e:
        raise VCSQueryError("svn", e) from e
    return result.stdout


def _parse_svn_date(value: Optional[str]) -> datetime:
    """svn dates are UTC, e.g. 2024-01-01T10:00:00.123456Z; returned in local time."""
    if not value:
        return datetime.now().astimezone()
    value = value.strip()
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    return datetime.fromisoformat(value).astimezone()


def parse_svn_log(xml_text: str) -> List[SvnLogEntry]:
    """Parse the output of `svn log --xml [-v]`."""
    try:
        root = ElementTree.fromstring(xml_text)
    except ElementTree.ParseError as e:
        raise VCSQueryError("svn", f"malformed log output: {e}") from e

    entries = []
    for node in root.iter("logentry"):
        author = node.findtext("author")
        message = node.findtext("msg")
        entries.append(
            SvnLogEntry(
                revision=f"{REVISION_PREFIX}{node.get('revision', '')}",
                author=author if author else "unknown",
                date=_parse_svn_date(node.findtext("date")),
                message=message.strip() if message else "",
                paths=[path.text for path in node.iter("path") if path.text],
            )
        )
    return entries


class SvnProvider:
    """Reads commit history from an SVN working copy."""

    vcs_type = "svn"

    def is_repository(self, path: PathLike) -> bool:
        return has_marker_dir(path, ".svn")

    def get_commits(self, path: PathLike, query: ReportQuery) -> List[CommitRecord]:
        """Revisions committed within the query's range.

        A date bracket resolves to the revision in effect at that moment, which
        can predate the range, so dates are filtered again after parsing. Author
        filtering also happens here because svn log cannot do it.
        """
        date_range = normalize_range(query.date_range)
        # svn reads bracketed dates as local time
        start = date_range.start.astimezone().strftime(SVN_DATE_FORMAT)
        end = date_range.end.astimezone().strftime(SVN_DATE_FORMAT)

        args = ["log", "-r", f"{{{start}}}:{{{end}}}", "--xml"]
        if query.include_files:
            args.append("-v")

        entries = parse_svn_log(_run_svn_command(args, cwd=path))

        records = []
        for entry in entries:
            if not date_range.contains(entry.date):
                continue
            if query.author and not matches_author(entry.author, query.author):
                continue
            records.append(
                CommitRecord(
                    id=entry.revision,
                    message=entry.message,
                    author=entry.author,
                    date=entry.date,
                    files=tuple(entry.paths) if query.include_files and entry.paths else None,
                )
            )

        logger.debug(f"svn log returned {len(entries)} entries, {len(records)} in range")
        return records

    def get_current_user(self, path: PathLike) -> Optional[str]:
        try:
            author = _run_svn_command(["info", "--show-item", "last-changed-author"], cwd=path).strip()
        except VCSQueryError as e:
            logger.debug(f"Could not read svn user: {e}")
            return None
        return author or None
