"""Errors raised while syncing an item with a project board.

Every failure has its own class and a matching `ProjectErrorKind`, so callers can
branch either with `except` clauses or on `error.kind`.
"""

from __future__ import annotations

from enum import Enum


class ProjectErrorKind(str, Enum):
    INVALID_URL = "invalid_url"
    PROJECT_NOT_FOUND = "project_not_found"
    NOT_INITIALIZED = "not_initialized"
    MISSING_STATUS_FIELD = "missing_status_field"
    STATUS_VALUE_NOT_FOUND = "status_value_not_found"
    ADD_FAILED = "add_failed"
    ADD_RETURNED_NO_ID = "add_returned_no_id"
    ITEM_NOT_FOUND_AFTER_ADD = "item_not_found_after_add"
    ITEM_ID_MISMATCH = "item_id_mismatch"
    STATUS_UPDATE_FAILED = "status_update_failed"
    UNSUPPORTED_EVENT = "unsupported_event"


class ProjectSyncError(Exception):
    """Base class for all project sync failures."""

    kind: ProjectErrorKind


class InvalidProjectURL(ProjectSyncError):
    kind = ProjectErrorKind.INVALID_URL

    def __init__(self, url: str) -> None:
        super().__init__(f"Invalid project URL: {url}")
        self.url = url


class ProjectNotFound(ProjectSyncError):
    """Raised when the owner or its project is missing from the query response."""

    kind = ProjectErrorKind.PROJECT_NOT_FOUND

    def __init__(self, owner: str, number: int, *, is_org: bool) -> None:
        owner_kind = "organization" if is_org else "user"
        super().__init__(f"Expected {owner_kind} project {owner}#{number}, found none")
        self.owner = owner
        self.number = number
        self.is_org = is_org


class ProjectNotInitialized(ProjectSyncError):
    kind = ProjectErrorKind.NOT_INITIALIZED

    def __init__(self) -> None:
        super().__init__("Project has not been initialized; call init() first")


class MissingStatusField(ProjectSyncError):
    """Raised when the board has no single-select field named 'Status'."""

    kind = ProjectErrorKind.MISSING_STATUS_FIELD

    def __init__(self) -> None:
        super().__init__("Project has no 'Status' field")


class StatusValueNotFound(ProjectSyncError):
    kind = ProjectErrorKind.STATUS_VALUE_NOT_FOUND

    def __init__(self, wanted: str) -> None:
        super().__init__(f"Unable to find status value for {wanted!r}")
        self.wanted = wanted


class AddItemFailed(ProjectSyncError):
    kind = ProjectErrorKind.ADD_FAILED

    def __init__(self, item_id: str, reason: object) -> None:
        super().__init__(f"Unable to add item {item_id} to project: {reason}")
        self.item_id = item_id


class AddItemReturnedNoID(ProjectSyncError):
    kind = ProjectErrorKind.ADD_RETURNED_NO_ID

    def __init__(self, item_id: str) -> None:
        super().__init__(f"No project item id returned when adding item {item_id}")
        self.item_id = item_id


class ItemNotFoundAfterAdd(ProjectSyncError):
    kind = ProjectErrorKind.ITEM_NOT_FOUND_AFTER_ADD

    def __init__(self, item_id: str) -> None:
        super().__init__(f"Item {item_id} not found on project after adding it")
        self.item_id = item_id


class ProjectItemIDMismatch(ProjectSyncError):
    kind = ProjectErrorKind.ITEM_ID_MISMATCH

    def __init__(self, *, added: str, found: str) -> None:
        super().__init__(f"Project item id mismatch: added {added}, found {found}")
        self.added = added
        self.found = found


class StatusUpdateFailed(ProjectSyncError):
    kind = ProjectErrorKind.STATUS_UPDATE_FAILED

    def __init__(self, project_item_id: str, reason: object) -> None:
        super().__init__(f"Unable to update status of project item {project_item_id}: {reason}")
        self.project_item_id = project_item_id


class UnsupportedEvent(ProjectSyncError):
    """Raised when an event payload carries neither an issue nor a pull request."""

    kind = ProjectErrorKind.UNSUPPORTED_EVENT

    def __init__(self, event_name: str | None = None) -> None:
        detail = f" ({event_name})" if event_name else ""
        super().__init__(f"Event payload has no issue or pull request{detail}")
        self.event_name = event_name
