"""Unit tests for settings loading."""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from github_board_sync.config import BoardSyncSettings

_ENV_VARS = (
    "BOARD_SYNC_GITHUB_TOKEN",
    "GITHUB_BASE_URL",
    "LOG_LEVEL",
    "LOG_FORMAT",
    "BOARD_SYNC_PROJECT_URL",
    "BOARD_SYNC_DEFAULT_ISSUE_STATUS",
    "BOARD_SYNC_DEFAULT_PR_STATUS",
    "GITHUB_EVENT_PATH",
    "GITHUB_EVENT_NAME",
)


@pytest.fixture(autouse=True)
def _clean_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)


def test_settings_loads_from_dotenv(tmp_path: Path) -> None:
    (tmp_path / ".env").write_text(
        "\n".join(
            [
                "BOARD_SYNC_GITHUB_TOKEN=test-token",
                "LOG_LEVEL=DEBUG",
                "BOARD_SYNC_PROJECT_URL=https://github.com/orgs/acme/projects/7",
                "",
            ]
        ),
        encoding="utf-8",
    )

    settings = BoardSyncSettings()

    assert settings.github_token == "test-token"
    assert settings.log_level == "DEBUG"
    assert settings.project_url == "https://github.com/orgs/acme/projects/7"


def test_settings_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("BOARD_SYNC_GITHUB_TOKEN", "test-token")

    settings = BoardSyncSettings()

    assert settings.github_base_url == "https://api.github.com"
    assert settings.log_format == "json"
    assert settings.project_url is None
    assert settings.default_issue_status == "Todo"
    assert settings.default_pr_status == "In Progress"
    assert settings.event_path is None


def test_settings_reads_actions_environment(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setenv("BOARD_SYNC_GITHUB_TOKEN", "test-token")
    monkeypatch.setenv("GITHUB_EVENT_PATH", str(tmp_path / "event.json"))
    monkeypatch.setenv("GITHUB_EVENT_NAME", "issues")

    settings = BoardSyncSettings()

    assert settings.event_path == tmp_path / "event.json"
    assert settings.event_name == "issues"


def test_settings_requires_token(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("BOARD_SYNC_GITHUB_TOKEN", "   ")

    with pytest.raises(ValidationError):
        BoardSyncSettings()


def test_settings_rejects_unknown_log_format(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("BOARD_SYNC_GITHUB_TOKEN", "test-token")
    monkeypatch.setenv("LOG_FORMAT", "xml")

    with pytest.raises(ValidationError):
        BoardSyncSettings()
