"""CLI entrypoint for the board sync."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from pydantic import ValidationError

from github_board_sync import __version__
from github_board_sync.config import BoardSyncSettings
from github_board_sync.errors import ProjectSyncError
from github_board_sync.event import load_event
from github_board_sync.github.client import GitHubProjectsClient, IssueRef
from github_board_sync.logging import configure_logging
from github_board_sync.project import DefaultStatus, Project

logger = logging.getLogger(__name__)


class UsageError(Exception):
    """Raised when the command line does not identify what to sync."""


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="board-sync",
        description="Add an issue or pull request to a GitHub project and set its status",
    )
    parser.add_argument("--version", action="version", version=f"github-board-sync {__version__}")

    subparsers = parser.add_subparsers(dest="command", required=True)

    sync_item = subparsers.add_parser(
        "sync-item",
        help="Make sure an issue or pull request is on the project with its default status",
    )
    sync_item.add_argument(
        "--project-url",
        default=None,
        help="Project URL, e.g. https://github.com/orgs/acme/projects/7 "
        "(defaults to BOARD_SYNC_PROJECT_URL)",
    )
    target = sync_item.add_mutually_exclusive_group()
    target.add_argument(
        "--item-id",
        default=None,
        help="GraphQL node id of the issue or pull request",
    )
    target.add_argument(
        "--number",
        type=int,
        default=None,
        help="Issue or pull request number (requires --repo)",
    )
    target.add_argument(
        "--event-path",
        default=None,
        help="GitHub Actions event payload (defaults to GITHUB_EVENT_PATH)",
    )
    sync_item.add_argument(
        "--pull-request",
        action="store_true",
        help="Treat --item-id as a pull request",
    )
    sync_item.add_argument(
        "--repo",
        "--repository",
        dest="repository",
        default=None,
        help="Repository in the form 'owner/repo', used with --number",
    )
    sync_item.add_argument(
        "--issue-status",
        default=None,
        help="Status for issues (defaults to BOARD_SYNC_DEFAULT_ISSUE_STATUS)",
    )
    sync_item.add_argument(
        "--pr-status",
        default=None,
        help="Status for pull requests (defaults to BOARD_SYNC_DEFAULT_PR_STATUS)",
    )

    show_project = subparsers.add_parser(
        "show-project",
        help="Print the project's id, title and single-select fields",
    )
    show_project.add_argument(
        "--project-url",
        default=None,
        help="Project URL (defaults to BOARD_SYNC_PROJECT_URL)",
    )

    return parser


def _project_url(args: argparse.Namespace, settings: BoardSyncSettings) -> str:
    url = args.project_url or settings.project_url
    if not url:
        raise UsageError("A project URL is required (--project-url or BOARD_SYNC_PROJECT_URL)")
    return url


def _resolve_item(
    args: argparse.Namespace,
    settings: BoardSyncSettings,
    github: GitHubProjectsClient,
) -> IssueRef:
    if args.item_id:
        return IssueRef(node_id=args.item_id, is_pull_request=args.pull_request)

    # Kind comes from GitHub for --number and event payloads.
    if args.pull_request:
        raise UsageError("--pull-request is only valid with --item-id")

    if args.number is not None:
        if not args.repository:
            raise UsageError("--number requires --repo")
        return github.resolve_issue(repository=args.repository, number=args.number)

    event_path = Path(args.event_path) if args.event_path else settings.event_path
    if event_path is None:
        raise UsageError("One of --item-id, --number or --event-path (GITHUB_EVENT_PATH) is required")
    return load_event(event_path, event_name=settings.event_name)


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        settings = BoardSyncSettings()
    except ValidationError as e:
        # Logging isn't configured yet.
        print("Configuration error (check your .env):", file=sys.stderr)
        print(e, file=sys.stderr)
        return 2

    configure_logging(settings.log_level, settings.log_format)

    github = GitHubProjectsClient(token=settings.github_token, base_url=settings.github_base_url)
    try:
        if args.command == "sync-item":
            default_status = DefaultStatus(
                issues=args.issue_status or settings.default_issue_status,
                prs=args.pr_status or settings.default_pr_status,
            )
            project = Project(
                github=github,
                url=_project_url(args, settings),
                default_status=default_status,
            )
            ref = _resolve_item(args, settings, github)
            identity = project.init()

            project_item_id = project.add_to_project(ref.node_id, ref.is_pull_request)
            print(f"Synced {ref.node_id} to project '{identity.title}' as item {project_item_id}")
            return 0

        if args.command == "show-project":
            project = Project(
                github=github,
                url=_project_url(args, settings),
                default_status=DefaultStatus(
                    issues=settings.default_issue_status,
                    prs=settings.default_pr_status,
                ),
            )
            identity = project.init()
            print(f"Project: {identity.title} ({identity.id})")
            for name, field in project.fields.items():
                options = ", ".join(option.name for option in field.options)
                print(f"  {name}: {options}")
            return 0

        logger.error("Unknown command", extra={"command": args.command})
        return 2

    except UsageError as e:
        print(str(e), file=sys.stderr)
        return 2

    except ProjectSyncError as e:
        logger.error("Project sync failed", extra={"kind": e.kind.value, "error": str(e)})
        print(str(e), file=sys.stderr)
        return 3

    except Exception:
        logger.exception("Command failed")
        return 1

    finally:
        github.close()


if __name__ == "__main__":
    raise SystemExit(main())
