"""Worklog workflows: LangGraph report generation plus commit message and change summary."""

from datetime import datetime
from pathlib import Path
from typing import Optional, Sequence, Tuple, Union

from langgraph.graph import END, StateGraph
from loguru import logger

from worklog.ai_client import AIClient
from worklog.errors import NoChangesError
from worklog.models.commit import ReportQuery
from worklog.models.config import PluginConfig
from worklog.models.state import ReportState
from worklog.nodes.commit_discovery_node import commit_discovery_node
from worklog.nodes.digest_node import digest_node
from worklog.nodes.report_renderer_node import report_renderer_node
from worklog.nodes.summary_node import summary_node
from worklog.prompts import build_change_summary_prompt, build_commit_message_prompt, locale_of

CHANGE_SUMMARY_TITLES = {"zh-CN": "代码变更摘要", "en": "Code Change Summary"}
CHANGE_SUMMARY_LABELS = {
    "zh-CN": {"generated_at": "生成时间", "range": "分析范围"},
    "en": {"generated_at": "Generated at", "range": "Range"},
}


def route_report_path(state: ReportState) -> str:
    """AI summary when a key is configured (unless disabled), digest otherwise."""
    use_ai = state.get("use_ai")
    if use_ai is None:
        use_ai = state["config"].has_api_key
    return "summary_node" if use_ai else "digest_node"


def create_workflow() -> StateGraph:
    """Create the report workflow graph."""
    workflow = StateGraph(ReportState)

    # Add nodes
    workflow.add_node("commit_discovery_node", commit_discovery_node)
    workflow.add_node("summary_node", summary_node)
    workflow.add_node("digest_node", digest_node)
    workflow.add_node("report_renderer_node", report_renderer_node)

    workflow.set_entry_point("commit_discovery_node")

    # Define edges
    workflow.add_conditional_edges(
        "commit_discovery_node",
        route_report_path,
        {"summary_node": "summary_node", "digest_node": "digest_node"},
    )
    workflow.add_edge("summary_node", "report_renderer_node")
    workflow.add_edge("digest_node", "report_renderer_node")
    workflow.add_edge("report_renderer_node", END)

    return workflow.compile()


def run_report_workflow(
    config: PluginConfig, query: ReportQuery, repo_path: Union[str, Path], use_ai: Optional[bool] = None
) -> ReportState:
    """Run the report workflow and return the final state."""
    initial_state: ReportState = {
        "repo_path": str(repo_path),
        "config": config,
        "query": query,
        "use_ai": use_ai,
    }

    app = create_workflow()
    return app.invoke(initial_state)


def produce_report(
    config: PluginConfig, query: ReportQuery, repo_path: Union[str, Path], use_ai: Optional[bool] = None
) -> str:
    """Markdown report for the query; `use_ai=False` forces the digest report."""
    final_state = run_report_workflow(config, query, repo_path, use_ai)
    return final_state["markdown"]


def produce_commit_message(config: PluginConfig, diff: str) -> str:
    """Draft a commit message describing `diff`."""
    if not diff.strip():
        raise NoChangesError("No code changes detected")

    logger.info("Generating commit message")
    prompt = build_commit_message_prompt(diff, config.language)
    return AIClient.from_config(config).complete(prompt).strip()


def produce_change_summary(
    config: PluginConfig,
    diff: str,
    commits: Sequence[Tuple[str, str]],
    generated_at: Optional[datetime] = None,
) -> str:
    """Markdown summary of `diff`, which spans the given (id, message) commits."""
    if not diff.strip():
        raise NoChangesError("No code changes in the selected range")

    logger.info(f"Generating change summary for {len(commits)} commits")
    prompt = build_change_summary_prompt(diff, commits, config.language)
    summary = AIClient.from_config(config).complete(prompt).strip()

    locale = locale_of(config.language)
    labels = CHANGE_SUMMARY_LABELS[locale]
    generated_at = generated_at or datetime.now()
    commit_range = " → ".join(commit_id for commit_id, _message in commits)

    return (
        f"# {CHANGE_SUMMARY_TITLES[locale]}\n\n"
        f"> {labels['generated_at']}: {generated_at.strftime('%Y-%m-%d %H:%M:%S')}\n"
        f"> {labels['range']}: {commit_range}\n\n"
        f"---\n\n"
        f"{summary}\n"
    )


def change_summary_filename(generated_at: Optional[datetime] = None) -> str:
    return f"change_summary_{(generated_at or datetime.now()).strftime('%Y%m%d_%H%M%S')}"
