"""
Commit discovery node: selects the VCS provider and loads the commits to report on.
"""

from dataclasses import replace

from loguru import logger

from worklog.errors import NoCommitsFoundError
from worklog.models.state import ReportState
from worklog.providers.registry import resolve_provider


def commit_discovery_node(state: ReportState) -> ReportState:
    """Fetch the commits matching the query and update state with them."""
    if "repo_path" not in state:
        raise ValueError("repo_path is required in ReportState")

    logger.info("Executing Commit Discovery Node")

    config = state["config"]
    query = state["query"]
    if query.author is None and config.author_filter:
        query = replace(query, author=config.author_filter)

    provider = resolve_provider(state["repo_path"], config.vcs_type)
    commits = provider.get_commits(state["repo_path"], query)

    logger.info(f"Discovered {len(commits)} {provider.vcs_type} commits")

    if not commits:
        raise NoCommitsFoundError("No commits found for the selected period and author")

    return {
        **state,
        "query": query,
        "vcs_type": provider.vcs_type,
        "commits": commits,
        "commit_count": len(commits),
    }
