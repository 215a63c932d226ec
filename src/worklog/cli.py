"""Command line entry point for worklog."""

import argparse
import os
import sys
from typing import List, Optional, Tuple

from dotenv import load_dotenv
from loguru import logger

from worklog import dates
from worklog.errors import NothingToReportError, WorklogError
from worklog.models.commit import DateRange, ReportQuery
from worklog.models.config import PluginConfig
from worklog.nodes.report_renderer_node import report_filename
from worklog.providers.git_provider import DIFF_SCOPES, GitProvider
from worklog.workflow import change_summary_filename, produce_change_summary, produce_commit_message, produce_report


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Generate work reports and commit messages from VCS history")
    parser.add_argument("--repo-path", type=str, help="Path to the Git or SVN working copy", default=".")
    parser.add_argument("--output-dir", type=str, help="Output directory for generated files (default: ./reports)")
    parser.add_argument("--language", type=str, choices=["zh-CN", "en"], help="Report language")
    parser.add_argument("--verbose", action="store_true", help="Enable verbose logging")

    subparsers = parser.add_subparsers(dest="command", required=True)

    report_options = argparse.ArgumentParser(add_help=False)
    report_options.add_argument("--author", type=str, help="Only include commits whose author contains this text")
    report_options.add_argument("--simple", action="store_true", help="Skip the AI summary")
    report_options.add_argument("--include-diff", action="store_true", help="Load commit diffs as well")

    subparsers.add_parser("daily", parents=[report_options], help="Report on today's commits")
    weekly = subparsers.add_parser("weekly", parents=[report_options], help="Report on this week's commits")
    weekly.add_argument("--last", action="store_true", help="Report on last week instead")
    custom = subparsers.add_parser("custom", parents=[report_options], help="Report on a custom date range")
    custom.add_argument("start", type=str, help="Start date (YYYY-MM-DD)")
    custom.add_argument("end", type=str, nargs="?", help="End date (YYYY-MM-DD, default: start)")

    commit_message = subparsers.add_parser("commit-message", help="Draft a commit message for local changes")
    commit_message.add_argument("--scope", choices=DIFF_SCOPES, default="staged", help="Which changes to describe")

    change_summary = subparsers.add_parser("change-summary", help="Summarize the changes of a commit range")
    change_summary.add_argument("--recent", type=int, help="Summarize the last N commits")
    change_summary.add_argument("--from", dest="from_ref", type=str, help="Older commit of the range")
    change_summary.add_argument("--to", dest="to_ref", type=str, help="Newer commit of the range")

    return parser


def load_config(args: argparse.Namespace) -> PluginConfig:
    """Read configuration fresh from the environment, applying CLI overrides."""
    load_dotenv()
    config = PluginConfig.from_env()

    overrides = {}
    if args.output_dir:
        overrides["output_directory"] = args.output_dir
    if args.language:
        overrides["language"] = args.language
    return config.model_copy(update=overrides) if overrides else config


def report_range(args: argparse.Namespace) -> DateRange:
    if args.command == "daily":
        return dates.today_range()
    if args.command == "weekly":
        return dates.last_week_range() if args.last else dates.this_week_range()
    return dates.custom_range(args.start, args.end)


def write_output(config: PluginConfig, repo_path: str, stem: str, content: str) -> str:
    """Write `content` to <output_directory>/<stem>.md and return the path."""
    output_dir = config.output_directory
    if not os.path.isabs(output_dir):
        output_dir = os.path.join(repo_path, output_dir)
    os.makedirs(output_dir, exist_ok=True)

    filepath = os.path.join(output_dir, f"{stem}.md")
    with open(filepath, "w", encoding="utf-8") as f:
        f.write(content)
    return filepath


def run_report(args: argparse.Namespace, config: PluginConfig, repo_path: str) -> None:
    date_range = report_range(args)
    query = ReportQuery(
        kind="custom" if args.command == "custom" else args.command,
        date_range=date_range,
        author=args.author,
        include_files=True,
        include_diff=args.include_diff,
    )

    use_ai = not args.simple and config.has_api_key
    if not args.simple and not config.has_api_key:
        logger.warning("WORKLOG_AI_API_KEY is not set, generating a simple report")

    content = produce_report(config, query, repo_path, use_ai=use_ai)
    filepath = write_output(config, repo_path, report_filename(query.kind, date_range), content)
    logger.info(f"Report saved to: {filepath}")


def run_commit_message(args: argparse.Namespace, config: PluginConfig, repo_path: str) -> None:
    diff = GitProvider().get_working_diff(repo_path, args.scope)
    print(produce_commit_message(config, diff))


def change_summary_input(args: argparse.Namespace, repo_path: str) -> Tuple[str, List[Tuple[str, str]]]:
    """Diff and (id, message) commits for the requested range."""
    provider = GitProvider()
    if args.recent:
        recent = provider.get_recent_commit_list(repo_path, args.recent)
        return provider.get_recent_diff(repo_path, args.recent), [(c.id, c.message) for c in recent]

    if not (args.from_ref and args.to_ref):
        raise WorklogError("change-summary needs --recent N or both --from and --to")

    diff = provider.get_range_diff(repo_path, args.from_ref, args.to_ref)
    endpoints = [provider.get_commit_summary(repo_path, ref) for ref in (args.from_ref, args.to_ref)]
    return diff, [(c.id, c.message) for c in endpoints]


def run_change_summary(args: argparse.Namespace, config: PluginConfig, repo_path: str) -> None:
    diff, commits = change_summary_input(args, repo_path)
    content = produce_change_summary(config, diff, commits)
    filepath = write_output(config, repo_path, change_summary_filename(), content)
    logger.info(f"Change summary saved to: {filepath}")


COMMANDS = {
    "daily": run_report,
    "weekly": run_report,
    "custom": run_report,
    "commit-message": run_commit_message,
    "change-summary": run_change_summary,
}


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    if not args.verbose:
        logger.remove()
        logger.add(sys.stderr, level="INFO")

    repo_path = os.path.abspath(args.repo_path)
    config = load_config(args)
    logger.info(f"Using repository: {repo_path}")

    try:
        COMMANDS[args.command](args, config, repo_path)
    except NothingToReportError as e:
        logger.warning(str(e))
    except (WorklogError, ValueError) as e:
        logger.error(str(e))
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
