"""Summary node: has the AI backend write the report narrative."""

from typing import List

from loguru import logger

from worklog.ai_client import AIClient
from worklog.models.commit import CommitRecord
from worklog.models.state import ReportState
from worklog.prompts import build_period_summary_prompt, locale_of

TABLE_MESSAGE_LENGTH = 50

TABLE_LABELS = {
    "zh-CN": {"title": "提交记录明细", "columns": ("时间", "ID", "作者", "提交信息")},
    "en": {"title": "Commit Details", "columns": ("Time", "ID", "Author", "Message")},
}


def _table_cell(text: str) -> str:
    return text.replace("|", "\\|")


def format_commit_table(commits: List[CommitRecord], language: str) -> str:
    """Markdown table of the commits: time, id, author and first message line."""
    labels = TABLE_LABELS[locale_of(language)]
    columns = labels["columns"]

    lines = [
        f"## {labels['title']}",
        "",
        "| " + " | ".join(columns) + " |",
        "|" + "|".join("------" for _ in columns) + "|",
    ]
    for commit in commits:
        time = commit.date.strftime("%m-%d %H:%M")
        message = _table_cell(commit.subject[:TABLE_MESSAGE_LENGTH])
        lines.append(f"| {time} | {commit.id} | {_table_cell(commit.author)} | {message} |")

    return "\n".join(lines)


def summary_node(state: ReportState) -> ReportState:
    """Generate the narrative body with the configured AI backend."""
    logger.info("Executing Summary Node")

    config = state["config"]
    commits = state["commits"]

    prompt = build_period_summary_prompt(commits, state["query"].kind, config.language)
    summary = AIClient.from_config(config).complete(prompt)

    logger.info(f"Received {len(summary)} character summary from {config.ai_provider}")

    return {
        **state,
        "body": summary.strip(),
        "commit_table": format_commit_table(commits, config.language),
    }
