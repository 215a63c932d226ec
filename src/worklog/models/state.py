"""
Report workflow state passed between the LangGraph nodes.
"""

from datetime import datetime
from typing import List, Optional, TypedDict

from worklog.models.commit import CommitRecord, ReportQuery
from worklog.models.config import PluginConfig


class ReportState(TypedDict, total=False):
    """State container for the report workflow.

    Using TypedDict for LangGraph compatibility. total=False means all fields
    are optional.
    """

    # Inputs
    repo_path: str
    config: PluginConfig
    query: ReportQuery
    use_ai: Optional[bool]  # None selects the AI path whenever an API key is set

    # Commit Discovery Node Output
    vcs_type: str
    commits: List[CommitRecord]
    commit_count: int

    # Summary / Digest Node Output
    body: str
    commit_table: Optional[str]  # only the AI path lists commits verbatim

    # Renderer Node Output
    generated_at: datetime
    markdown: str
