"""Configuration for the board sync.

Configuration is loaded from:
- environment variables
- and a local `.env` file (if present)

To avoid collisions with other tools that may also use `GITHUB_TOKEN`, this
project uses a dedicated token variable: `BOARD_SYNC_GITHUB_TOKEN`.
"""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class BoardSyncSettings(BaseSettings):
    """Settings for the board sync.

    Environment variables:
    - BOARD_SYNC_GITHUB_TOKEN
    - GITHUB_BASE_URL                  (optional)
    - LOG_LEVEL                        (optional)
    - LOG_FORMAT                       (optional, json | text)
    - BOARD_SYNC_PROJECT_URL           (optional)
    - BOARD_SYNC_DEFAULT_ISSUE_STATUS  (optional)
    - BOARD_SYNC_DEFAULT_PR_STATUS     (optional)
    - GITHUB_EVENT_PATH, GITHUB_EVENT_NAME (set by GitHub Actions)

    Notes:
        Pydantic-settings supports overriding the env file in tests via:
        `BoardSyncSettings(_env_file=path_to_env)`.
    """

    github_token: str = Field(
        default="",
        validation_alias="BOARD_SYNC_GITHUB_TOKEN",
        description="GitHub token used for API authentication (needs project scope)",
    )
    github_base_url: str = Field(
        default="https://api.github.com",
        validation_alias="GITHUB_BASE_URL",
        description="GitHub API base URL (useful for GitHub Enterprise)",
    )

    log_level: str = Field(
        default="INFO",
        validation_alias="LOG_LEVEL",
        description="Root logging level",
    )
    log_format: Literal["json", "text"] = Field(
        default="json",
        validation_alias="LOG_FORMAT",
        description="Log line format: json (for CI) or text",
    )

    project_url: str | None = Field(
        default=None,
        validation_alias="BOARD_SYNC_PROJECT_URL",
        description="Project board URL, e.g. https://github.com/orgs/acme/projects/7",
    )
    default_issue_status: str = Field(
        default="Todo",
        validation_alias="BOARD_SYNC_DEFAULT_ISSUE_STATUS",
        description="Status applied to issues (case-insensitive substring of an option)",
    )
    default_pr_status: str = Field(
        default="In Progress",
        validation_alias="BOARD_SYNC_DEFAULT_PR_STATUS",
        description="Status applied to pull requests (case-insensitive substring of an option)",
    )

    event_path: Path | None = Field(
        default=None,
        validation_alias="GITHUB_EVENT_PATH",
        description="Event payload file, set by GitHub Actions",
    )
    event_name: str | None = Field(
        default=None,
        validation_alias="GITHUB_EVENT_NAME",
        description="Name of the triggering event, set by GitHub Actions",
    )

    model_config = SettingsConfigDict(
        env_prefix="",
        env_file=".env",
        extra="ignore",
    )

    @model_validator(mode="after")
    def _require_github_auth(self) -> BoardSyncSettings:
        if not self.github_token.strip():
            raise ValueError("BOARD_SYNC_GITHUB_TOKEN is required")
        return self
