"""Tests for the digest node."""

from datetime import datetime, timezone

from worklog.models.config import PluginConfig
from worklog.nodes.digest_node import digest_node, format_digest, group_commits_by_date


def utc(*args) -> datetime:
    return datetime(*args, tzinfo=timezone.utc)


def test_group_commits_by_date(commit_record_factory):
    commits = [
        commit_record_factory("late", id="c3", date=utc(2024, 1, 2, 10)),
        commit_record_factory("afternoon", id="c2", date=utc(2024, 1, 1, 15)),
        commit_record_factory("morning", id="c1", date=utc(2024, 1, 1, 9)),
    ]

    grouped = group_commits_by_date(commits)

    assert list(grouped) == ["2024-01-02", "2024-01-01"]
    assert [c.id for c in grouped["2024-01-01"]] == ["c2", "c1"]


def test_format_digest(commit_record_factory):
    """One heading per day, one bullet per commit, every commit exactly once."""
    commits = [
        commit_record_factory("feature: Update a\n\nbody", id="c3", date=utc(2024, 1, 2, 10), files=["a.txt"]),
        commit_record_factory("Add b", id="c2", date=utc(2024, 1, 1, 15)),
        commit_record_factory("Initial", id="c1", date=utc(2024, 1, 1, 9), files=["a.txt"]),
    ]

    digest = format_digest(commits, "en")

    assert digest == (
        "## 2024-01-02\n\n"
        "- **feature: Update a** (c3)\n"
        "  - Files: a.txt\n\n"
        "## 2024-01-01\n\n"
        "- **Add b** (c2)\n"
        "- **Initial** (c1)\n"
        "  - Files: a.txt"
    )


def test_format_digest_caps_file_list(commit_record_factory):
    commit = commit_record_factory(files=["a.py", "b.py", "c.py", "d.py", "e.py"])

    assert "  - Files: a.py, b.py, c.py and 2 more" in format_digest([commit], "en")
    assert "  - 修改文件: a.py, b.py, c.py 等另外 2 个文件" in format_digest([commit], "zh-CN")


def test_digest_node(commit_record_factory):
    state = {
        "config": PluginConfig(language="en"),
        "commits": [commit_record_factory()],
        "commit_table": "stale",
    }

    result = digest_node(state)

    assert result["body"] == "## 2024-01-01\n\n- **feature: Add thing** (abcd1234)"
    assert result["commit_table"] is None
    assert result["commits"] == state["commits"]
