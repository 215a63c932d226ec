"""Report Renderer Node for assembling the final Markdown report."""

from datetime import datetime
from typing import Optional

from loguru import logger

from worklog.dates import format_date, format_period, format_range_for_filename
from worklog.models.commit import DateRange
from worklog.models.state import ReportState
from worklog.prompts import locale_of

FILENAME_PREFIXES = {"daily": "daily", "weekly": "weekly", "custom": "report"}

METADATA_LABELS = {
    "zh-CN": {"generated_at": "生成时间", "period": "统计周期", "commit_count": "提交数量"},
    "en": {"generated_at": "Generated at", "period": "Period", "commit_count": "Commits"},
}


def report_title(kind: str, date_range: DateRange, language: str) -> str:
    """Report heading by kind and locale."""
    zh = locale_of(language) == "zh-CN"
    if kind == "daily":
        if zh:
            return f"工作日报 - {format_date(date_range.start, '%Y年%m月%d日')}"
        return f"Daily Report - {format_date(date_range.start)}"
    if kind == "weekly":
        if zh:
            return f"工作周报 - {format_date(date_range.start, '%m月%d日')}-{format_date(date_range.end, '%m月%d日')}"
        return f"Weekly Report - {format_date(date_range.start, '%m-%d')} to {format_date(date_range.end, '%m-%d')}"
    return "工作报告" if zh else "Work Report"


def report_filename(kind: str, date_range: DateRange) -> str:
    """File name stem, e.g. daily_2024-01-01 or weekly_2024-01-01_2024-01-07."""
    return f"{FILENAME_PREFIXES.get(kind, 'report')}_{format_range_for_filename(date_range)}"


def format_metadata(
    generated_at: datetime, date_range: DateRange, commit_count: int, language: str
) -> str:
    labels = METADATA_LABELS[locale_of(language)]
    return "\n".join(
        [
            f"> {labels['generated_at']}: {generated_at.strftime('%Y-%m-%d %H:%M:%S')}",
            f"> {labels['period']}: {format_period(date_range)}",
            f"> {labels['commit_count']}: {commit_count}",
        ]
    )


def render_report(
    kind: str,
    date_range: DateRange,
    commit_count: int,
    body: str,
    language: str,
    commit_table: Optional[str] = None,
    generated_at: Optional[datetime] = None,
) -> str:
    generated_at = generated_at or datetime.now()
    content_parts = [
        f"# {report_title(kind, date_range, language)}",
        format_metadata(generated_at, date_range, commit_count, language),
        "---",
        body,
    ]
    if commit_table:
        content_parts.extend(["---", commit_table])

    return "\n\n".join(content_parts) + "\n"


def report_renderer_node(state: ReportState) -> ReportState:
    """Convert the report body into the final Markdown document."""
    logger.info("Executing Report Renderer Node")

    query = state["query"]
    generated_at = state.get("generated_at") or datetime.now()

    markdown = render_report(
        kind=query.kind,
        date_range=query.date_range,
        commit_count=len(state["commits"]),
        body=state["body"],
        language=state["config"].language,
        commit_table=state.get("commit_table"),
        generated_at=generated_at,
    )

    return {
        **state,
        "generated_at": generated_at,
        "markdown": markdown,
    }
