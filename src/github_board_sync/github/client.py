"""GitHub API client wrapper for project board access.

Projects (v2) are only reachable over GraphQL, so board calls go through a small
`requests` session. PyGithub is used for the REST lookups that turn an issue or
pull request number into its node id.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any
from urllib.parse import urlparse, urlunparse

import requests
from github import Auth, Github

logger = logging.getLogger(__name__)

PROJECT_QUERY = """
fragment projectV2fields on ProjectV2 {
  id
  title
  fields(first: 20) {
    nodes {
      ... on ProjectV2SingleSelectField {
        id
        name
        options {
          id
          name
        }
      }
    }
  }
}

query getProject($owner: String!, $projectNumber: Int!, $isOrg: Boolean!) {
  organization(login: $owner) @include(if: $isOrg) {
    projectV2(number: $projectNumber) {
      ...projectV2fields
    }
  }
  user(login: $owner) @skip(if: $isOrg) {
    projectV2(number: $projectNumber) {
      ...projectV2fields
    }
  }
}
"""

PROJECT_ITEMS_QUERY = """
query getProjectItems($itemId: ID!) {
  node(id: $itemId) {
    __typename
    ... on Issue {
      projectItems(first: 100) {
        nodes {
          id
          project {
            id
          }
        }
      }
    }
    ... on PullRequest {
      projectItems(first: 100) {
        nodes {
          id
          project {
            id
          }
        }
      }
    }
  }
}
"""

ADD_PROJECT_ITEM_MUTATION = """
mutation addProjectItem($projectId: ID!, $contentId: ID!) {
  addProjectV2ItemById(input: {projectId: $projectId, contentId: $contentId}) {
    item {
      id
    }
  }
}
"""

UPDATE_ITEM_STATUS_MUTATION = """
mutation updateItemStatus($projectId: ID!, $itemId: ID!, $fieldId: ID!, $optionId: String!) {
  updateProjectV2ItemFieldValue(
    input: {
      projectId: $projectId
      itemId: $itemId
      fieldId: $fieldId
      value: {singleSelectOptionId: $optionId}
    }
  ) {
    projectV2Item {
      id
    }
  }
}
"""


class GitHubGraphQLError(RuntimeError):
    """Raised when a GraphQL response carries errors."""

    def __init__(self, messages: list[str]) -> None:
        message = "; ".join(messages) if messages else "Unknown GraphQL error"
        super().__init__(f"GitHub GraphQL error: {message}")
        self.messages = messages


@dataclass(frozen=True, slots=True)
class ProjectItem:
    """A membership record of an issue or pull request on a project."""

    id: str
    project_id: str


@dataclass(frozen=True, slots=True)
class IssueRef:
    """Node id of an issue or pull request, plus which of the two it is."""

    node_id: str
    is_pull_request: bool


class GitHubProjectsClient:
    """Small wrapper around the GitHub GraphQL API for project board operations."""

    def __init__(
        self,
        *,
        token: str,
        base_url: str = "https://api.github.com",
        session: requests.Session | None = None,
        github_api: Github | None = None,
    ) -> None:
        if not token:
            raise ValueError("GitHub token is required")

        self._token = token
        self._rest_base_url = base_url.rstrip("/")
        self._github = github_api
        self._session = session or requests.Session()
        self._session.headers.update(
            {
                "Authorization": f"Bearer {token}",
                "Accept": "application/vnd.github+json",
                "X-GitHub-Api-Version": "2022-11-28",
                "User-Agent": "github-board-sync",
            }
        )

    def _graphql_url(self) -> str:
        """Derive the GitHub GraphQL endpoint from the configured REST base URL.

        GitHub.com:
            REST: https://api.github.com
            GQL:  https://api.github.com/graphql

        GitHub Enterprise typically exposes REST as:
            https://github.example.com/api/v3
        and GraphQL as:
            https://github.example.com/api/graphql
        """

        parsed = urlparse(self._rest_base_url)
        path = parsed.path.rstrip("/")

        if path.endswith("/api/v3"):
            path = path[: -len("/api/v3")] + "/api/graphql"
        elif path.endswith("/api"):
            path = path[: -len("/api")] + "/api/graphql"
        elif path == "":
            path = "/graphql"
        else:
            path = path + "/graphql"

        return urlunparse(parsed._replace(path=path))

    def graphql(self, *, query: str, variables: dict[str, Any]) -> dict[str, Any]:
        """Run a GraphQL query or mutation and return its `data` object."""

        url = self._graphql_url()
        resp = self._session.post(url, json={"query": query, "variables": variables}, timeout=30)
        resp.raise_for_status()
        payload: dict[str, Any] = resp.json()
        errors = payload.get("errors")
        if errors:
            # Keep only the messages; full error objects are noisy.
            messages: list[str] = []
            if isinstance(errors, list):
                for item in errors:
                    if isinstance(item, dict):
                        msg = item.get("message")
                        if isinstance(msg, str):
                            messages.append(msg)
            raise GitHubGraphQLError(messages)
        data = payload.get("data")
        if not isinstance(data, dict):
            return {}
        return data

    def fetch_project(self, *, owner: str, number: int, is_org: bool) -> dict[str, Any]:
        """Fetch a project's id, title and single-select fields.

        Returns the raw `data` object, holding either an `organization` or a `user`
        key depending on `is_org`.
        """

        logger.debug(
            "Fetching project",
            extra={"owner": owner, "project_number": number, "is_org": is_org},
        )
        return self.graphql(
            query=PROJECT_QUERY,
            variables={"owner": owner, "projectNumber": number, "isOrg": is_org},
        )

    def get_project_item(self, *, item_id: str, project_id: str) -> ProjectItem | None:
        """Return the item's membership record on the given project, if any."""

        data = self.graphql(query=PROJECT_ITEMS_QUERY, variables={"itemId": item_id})
        node = data.get("node")
        if not isinstance(node, dict):
            return None
        items = node.get("projectItems")
        if not isinstance(items, dict):
            return None
        nodes = items.get("nodes")
        if not isinstance(nodes, list):
            return None

        for entry in nodes:
            if not isinstance(entry, dict):
                continue
            project = entry.get("project")
            if not isinstance(project, dict) or project.get("id") != project_id:
                continue
            prj_item_id = entry.get("id")
            if isinstance(prj_item_id, str) and prj_item_id:
                return ProjectItem(id=prj_item_id, project_id=project_id)
        return None

    def add_project_item(self, *, item_id: str, project_id: str) -> str | None:
        """Add an issue or pull request to a project; returns the new project item id."""

        data = self.graphql(
            query=ADD_PROJECT_ITEM_MUTATION,
            variables={"projectId": project_id, "contentId": item_id},
        )
        result = data.get("addProjectV2ItemById")
        if not isinstance(result, dict):
            return None
        item = result.get("item")
        if not isinstance(item, dict):
            return None
        prj_item_id = item.get("id")
        if not isinstance(prj_item_id, str) or not prj_item_id:
            return None
        logger.debug("Project item added", extra={"project_item_id": prj_item_id})
        return prj_item_id

    def update_item_status(
        self,
        *,
        project_id: str,
        item_id: str,
        field_id: str,
        option_id: str,
    ) -> None:
        """Set a single-select field on a project item."""

        self.graphql(
            query=UPDATE_ITEM_STATUS_MUTATION,
            variables={
                "projectId": project_id,
                "itemId": item_id,
                "fieldId": field_id,
                "optionId": option_id,
            },
        )

    def _github_api(self) -> Github:
        if self._github is None:
            auth = Auth.Token(self._token)
            self._github = Github(auth=auth, base_url=self._rest_base_url)
        return self._github

    def resolve_issue(self, *, repository: str, number: int) -> IssueRef:
        """Resolve an issue or pull request number to its GraphQL node id."""

        if number <= 0:
            raise ValueError("number must be a positive integer")

        repo = self._github_api().get_repo(repository.strip().strip("/"))
        issue = repo.get_issue(number)
        if issue.pull_request is not None:
            pr = repo.get_pull(number)
            logger.debug("Resolved pull request", extra={"repo": repository, "number": number})
            return IssueRef(node_id=pr.node_id, is_pull_request=True)

        logger.debug("Resolved issue", extra={"repo": repository, "number": number})
        return IssueRef(node_id=issue.node_id, is_pull_request=False)

    def close(self) -> None:
        self._session.close()
        if self._github is not None:
            self._github.close()
