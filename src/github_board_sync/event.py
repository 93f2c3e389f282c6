"""Extract the issue or pull request from a GitHub Actions event payload.

Workflows triggered by `issues`, `pull_request`, `pull_request_target` or
`issue_comment` events expose the payload at `GITHUB_EVENT_PATH`.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from github_board_sync.errors import UnsupportedEvent
from github_board_sync.github.client import IssueRef

logger = logging.getLogger(__name__)


def _node_id(obj: object) -> str | None:
    if not isinstance(obj, dict):
        return None
    node_id = obj.get("node_id")
    if isinstance(node_id, str) and node_id.strip():
        return node_id
    return None


def item_from_event(payload: dict[str, Any], *, event_name: str | None = None) -> IssueRef:
    """Return the issue or pull request an event is about.

    An `issue` that carries a `pull_request` link (comments on PRs) is a pull request.

    Raises:
        UnsupportedEvent: If the payload has neither.
    """

    pr_id = _node_id(payload.get("pull_request"))
    if pr_id is not None:
        return IssueRef(node_id=pr_id, is_pull_request=True)

    issue = payload.get("issue")
    issue_id = _node_id(issue)
    if issue_id is not None:
        is_pr = isinstance(issue, dict) and issue.get("pull_request") is not None
        return IssueRef(node_id=issue_id, is_pull_request=is_pr)

    raise UnsupportedEvent(event_name)


def load_event(path: Path, *, event_name: str | None = None) -> IssueRef:
    """Read an event payload file and return its issue or pull request."""

    payload = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(payload, dict):
        raise UnsupportedEvent(event_name)
    ref = item_from_event(payload, event_name=event_name)
    logger.debug(
        "Loaded event payload",
        extra={"path": str(path), "node_id": ref.node_id, "is_pull_request": ref.is_pull_request},
    )
    return ref
