"""Digest node: the report body used when no AI backend is available."""

from typing import Dict, List

from loguru import logger

from worklog.models.commit import CommitRecord
from worklog.models.state import ReportState
from worklog.prompts import format_file_list, locale_of

DIGEST_FILE_LIMIT = 3


def group_commits_by_date(commits: List[CommitRecord]) -> Dict[str, List[CommitRecord]]:
    """Group commits under their YYYY-MM-DD commit day, keeping input order."""
    grouped: Dict[str, List[CommitRecord]] = {}
    for commit in commits:
        grouped.setdefault(commit.date.strftime("%Y-%m-%d"), []).append(commit)
    return grouped


def format_digest(commits: List[CommitRecord], language: str) -> str:
    files_label = "修改文件" if locale_of(language) == "zh-CN" else "Files"

    sections = []
    for day, day_commits in group_commits_by_date(commits).items():
        lines = [f"## {day}", ""]
        for commit in day_commits:
            lines.append(f"- **{commit.subject}** ({commit.id})")
            if commit.files:
                lines.append(f"  - {files_label}: {format_file_list(commit.files, DIGEST_FILE_LIMIT, language)}")
        sections.append("\n".join(lines))

    return "\n\n".join(sections)


def digest_node(state: ReportState) -> ReportState:
    """Build the day-by-day commit digest without any network call."""
    logger.info("Executing Digest Node")

    body = format_digest(state["commits"], state["config"].language)

    return {
        **state,
        "body": body,
        "commit_table": None,
    }
