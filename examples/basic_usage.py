#!/usr/bin/env python3
"""Programmatic board sync example.

This demonstrates using the components directly:

* load settings from `.env`
* load a project board and its fields
* add an issue or pull request to it and set its status
"""

from __future__ import annotations

import argparse
from typing import Sequence

from github_board_sync.config import BoardSyncSettings
from github_board_sync.errors import ProjectSyncError
from github_board_sync.github.client import GitHubProjectsClient
from github_board_sync.logging import configure_logging
from github_board_sync.project import DefaultStatus, Project


def _parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Sync one issue with a project (example).")
    parser.add_argument(
        "--project-url",
        required=True,
        help='Project URL, e.g. "https://github.com/orgs/acme/projects/7"',
    )
    parser.add_argument("--repo", required=True, help='Repository in the form "owner/repo"')
    parser.add_argument("--number", type=int, required=True, help="Issue or pull request number")
    return parser.parse_args(argv)


def main(argv: Sequence[str] | None = None) -> int:
    args = _parse_args(argv)

    settings = BoardSyncSettings()
    configure_logging(settings.log_level)

    github = GitHubProjectsClient(token=settings.github_token, base_url=settings.github_base_url)
    project = Project(
        github=github,
        url=args.project_url,
        default_status=DefaultStatus(
            issues=settings.default_issue_status,
            prs=settings.default_pr_status,
        ),
    )

    try:
        identity = project.init()
        ref = github.resolve_issue(repository=args.repo, number=args.number)
        project_item_id = project.add_to_project(ref.node_id, ref.is_pull_request)
    except ProjectSyncError as e:
        print(f"Sync failed ({e.kind.value}): {e}")
        return 1
    finally:
        github.close()

    print(f"#{args.number} is on '{identity.title}' as {project_item_id}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
