"""Test configuration and fixtures."""

from __future__ import annotations

from typing import Any
from unittest.mock import Mock

import pytest

from github_board_sync.github.client import GitHubProjectsClient
from github_board_sync.project import DefaultStatus


def _project_payload(
    *,
    fields: list[dict[str, Any]],
    is_org: bool = True,
    project_id: str = "PVT_1",
    title: str = "Roadmap",
) -> dict[str, Any]:
    """Build a `fetch_project` response as returned by GraphQL."""

    owner_key = "organization" if is_org else "user"
    return {
        owner_key: {
            "projectV2": {
                "id": project_id,
                "title": title,
                "fields": {"nodes": fields},
            }
        }
    }


_STATUS_FIELD: dict[str, Any] = {
    "id": "F_status",
    "name": "Status",
    "options": [
        {"id": "o1", "name": "📋 Backlog"},
        {"id": "o2", "name": "In Progress"},
        {"id": "o3", "name": "Done"},
    ],
}


@pytest.fixture
def default_status() -> DefaultStatus:
    return DefaultStatus(issues="Backlog", prs="In Progress")


@pytest.fixture
def mock_github() -> Mock:
    """A client mock serving an org project with a Status field."""

    github = Mock(spec=GitHubProjectsClient)
    github.fetch_project.return_value = _project_payload(fields=[_STATUS_FIELD, {}])
    return github


@pytest.fixture
def status_field() -> dict[str, Any]:
    return dict(_STATUS_FIELD)


@pytest.fixture
def project_payload() -> Any:
    """Factory for `fetch_project` responses."""

    return _project_payload
