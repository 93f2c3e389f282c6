"""Project board membership and status sync.

A `Project` is built from a board URL such as
`https://github.com/orgs/acme/projects/7`. After `init()` has fetched the board's
id and single-select fields, `add_to_project()` makes sure an issue or pull request
is on the board and sets its "Status" field to the configured default.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any

import requests
from pydantic import BaseModel, Field, ValidationError, field_validator

from github_board_sync.errors import (
    AddItemFailed,
    AddItemReturnedNoID,
    InvalidProjectURL,
    ItemNotFoundAfterAdd,
    MissingStatusField,
    ProjectItemIDMismatch,
    ProjectNotFound,
    ProjectNotInitialized,
    StatusUpdateFailed,
    StatusValueNotFound,
)
from github_board_sync.github.client import GitHubGraphQLError, GitHubProjectsClient

logger = logging.getLogger(__name__)

STATUS_FIELD_NAME = "Status"

_PROJECT_URL_RE = re.compile(r"/(?P<kind>orgs|users)/(?P<owner>[^/]+)/projects/(?P<number>\d+)")

# Transport and GraphQL failures raised by the client.
_REMOTE_ERRORS = (requests.RequestException, GitHubGraphQLError)


@dataclass(frozen=True, slots=True)
class ProjectDescriptor:
    owner: str
    number: int
    is_org: bool


@dataclass(frozen=True, slots=True)
class ProjectIdentity:
    id: str
    title: str


@dataclass(frozen=True, slots=True)
class DefaultStatus:
    """Status labels applied to newly synced issues and pull requests."""

    issues: str
    prs: str


@dataclass(frozen=True, slots=True)
class StatusOption:
    field_id: str
    option_id: str
    name: str


class FieldOption(BaseModel):
    id: str
    name: str


class ProjectField(BaseModel):
    """A single-select project field as returned by GraphQL.

    Fields of other kinds come back as empty objects, which decode with `id=None`.
    Options without a string id and name are dropped individually.
    """

    id: str | None = None
    name: str | None = None
    options: list[FieldOption] = Field(default_factory=list)

    @field_validator("options", mode="before")
    @classmethod
    def _drop_malformed_options(cls, value: Any) -> list[dict[str, Any]]:
        if not isinstance(value, list):
            return []
        return [
            option
            for option in value
            if isinstance(option, dict)
            and isinstance(option.get("id"), str)
            and isinstance(option.get("name"), str)
        ]


def parse_project_url(url: str) -> ProjectDescriptor:
    """Parse a project URL into its owner, number and owner kind.

    Raises:
        InvalidProjectURL: If the URL has no `/(orgs|users)/<owner>/projects/<n>` part.
    """

    match = _PROJECT_URL_RE.search(url)
    if match is None:
        logger.error("Invalid project URL", extra={"url": url})
        raise InvalidProjectURL(url)

    return ProjectDescriptor(
        owner=match.group("owner"),
        number=int(match.group("number")),
        is_org=match.group("kind") == "orgs",
    )


def build_field_index(entries: Iterable[Any]) -> dict[str, ProjectField]:
    """Index project fields by name.

    Entries without an id or a name are skipped. On duplicate names the later
    entry wins.
    """

    fields: dict[str, ProjectField] = {}
    for entry in entries:
        if isinstance(entry, ProjectField):
            field = entry
        else:
            try:
                field = ProjectField.model_validate(entry)
            except ValidationError:
                logger.debug("Skipping malformed project field entry", extra={"entry": entry})
                continue
        if field.id is None or field.name is None:
            continue
        fields[field.name] = field

    logger.debug("Available project fields", extra={"fields": list(fields)})
    return fields


def resolve_status_option(fields: dict[str, ProjectField], wanted: str) -> StatusOption | None:
    """Find the first "Status" option whose name contains `wanted`, ignoring case.

    Returns None when no option matches.

    Raises:
        MissingStatusField: If the project has no "Status" field.
    """

    status_field = fields.get(STATUS_FIELD_NAME)
    if status_field is None or status_field.id is None:
        raise MissingStatusField()

    needle = wanted.lower()
    for option in status_field.options:
        if needle in option.name.lower():
            return StatusOption(field_id=status_field.id, option_id=option.id, name=option.name)
    return None


class Project:
    """A GitHub Projects (v2) board that items can be added to."""

    def __init__(
        self,
        *,
        github: GitHubProjectsClient,
        url: str,
        default_status: DefaultStatus,
    ) -> None:
        self._github = github
        self._url = url
        self._default_status = default_status
        self._desc: ProjectDescriptor | None = None
        self._identity: ProjectIdentity | None = None
        self._fields: dict[str, ProjectField] = {}

    @property
    def descriptor(self) -> ProjectDescriptor | None:
        return self._desc

    @property
    def identity(self) -> ProjectIdentity | None:
        return self._identity

    @property
    def fields(self) -> dict[str, ProjectField]:
        return dict(self._fields)

    def init(self) -> ProjectIdentity:
        """Resolve the project from its owner and number, loading its id and fields.

        Raises:
            InvalidProjectURL: If the project URL cannot be parsed.
            ProjectNotFound: If the response lacks the expected owner or project.
        """

        desc = parse_project_url(self._url)
        logger.debug(
            "Project init",
            extra={"owner": desc.owner, "project_number": desc.number, "is_org": desc.is_org},
        )

        data = self._github.fetch_project(owner=desc.owner, number=desc.number, is_org=desc.is_org)
        owner_node = data.get("organization" if desc.is_org else "user")
        if not isinstance(owner_node, dict):
            raise ProjectNotFound(desc.owner, desc.number, is_org=desc.is_org)
        prjv2 = owner_node.get("projectV2")
        if not isinstance(prjv2, dict) or not isinstance(prjv2.get("id"), str):
            raise ProjectNotFound(desc.owner, desc.number, is_org=desc.is_org)

        identity = ProjectIdentity(id=prjv2["id"], title=str(prjv2.get("title") or ""))

        raw_fields = prjv2.get("fields")
        nodes = raw_fields.get("nodes") if isinstance(raw_fields, dict) else None
        fields = build_field_index(nodes if isinstance(nodes, list) else [])

        self._desc = desc
        self._identity = identity
        self._fields = fields
        logger.info("Project loaded", extra={"project_id": identity.id, "title": identity.title})
        return identity

    def add_to_project(self, item_id: str, is_pull_request: bool) -> str:
        """Add an issue or pull request to the project and set its status.

        If the item is already on the project only its status is updated, so the
        call is safe to repeat. An item added here stays on the project even if
        the status update fails afterwards.

        Args:
            item_id: Node id of the issue or pull request (not of its project item).
            is_pull_request: Selects the pull request default status.

        Returns:
            The project item id.
        """

        logger.debug("add_to_project", extra={"item_id": item_id})

        if self._identity is None:
            raise ProjectNotInitialized()
        project_id = self._identity.id

        # No Status field means nothing can be synced; fail before touching the board.
        if STATUS_FIELD_NAME not in self._fields:
            raise MissingStatusField()

        item = self._github.get_project_item(item_id=item_id, project_id=project_id)
        if item is None:
            logger.info(
                "Adding item to project",
                extra={"item_id": item_id, "project_id": project_id},
            )
            try:
                prj_item_id = self._github.add_project_item(item_id=item_id, project_id=project_id)
            except _REMOTE_ERRORS as e:
                logger.error("Unable to add item to project", extra={"error": str(e)})
                raise AddItemFailed(item_id, e) from e

            if prj_item_id is None:
                raise AddItemReturnedNoID(item_id)

            item = self._github.get_project_item(item_id=item_id, project_id=project_id)
            if item is None:
                raise ItemNotFoundAfterAdd(item_id)
            if item.id != prj_item_id:
                raise ProjectItemIDMismatch(added=prj_item_id, found=item.id)
        else:
            logger.info("Item already associated with project", extra={"project_id": project_id})

        wanted = self._default_status.prs if is_pull_request else self._default_status.issues
        logger.info("Set status", extra={"status": wanted})

        status = resolve_status_option(self._fields, wanted)
        if status is None:
            logger.error("Unable to find status value", extra={"status": wanted})
            raise StatusValueNotFound(wanted)

        try:
            self._github.update_item_status(
                project_id=project_id,
                item_id=item.id,
                field_id=status.field_id,
                option_id=status.option_id,
            )
        except _REMOTE_ERRORS as e:
            raise StatusUpdateFailed(item.id, e) from e

        logger.info("Item status set", extra={"project_item_id": item.id, "status": status.name})
        return item.id
