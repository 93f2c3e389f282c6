"""Unit tests for field indexing and status option resolution."""

from __future__ import annotations

from typing import Any

import pytest

from github_board_sync.errors import MissingStatusField
from github_board_sync.project import (
    ProjectField,
    StatusOption,
    build_field_index,
    resolve_status_option,
)


def test_field_index_skips_entries_without_id() -> None:
    fields = build_field_index(
        [
            {},
            {"name": "Iteration"},
            {"id": "F1", "name": "Status", "options": []},
        ]
    )

    assert list(fields) == ["Status"]
    assert fields["Status"].id == "F1"


def test_field_index_last_entry_wins_on_duplicate_names() -> None:
    fields = build_field_index(
        [
            {"id": "F1", "name": "Priority", "options": [{"id": "p1", "name": "High"}]},
            {"id": "F2", "name": "Status", "options": []},
            {"id": "F3", "name": "Priority", "options": [{"id": "p9", "name": "Low"}]},
        ]
    )

    assert set(fields) == {"Priority", "Status"}
    assert fields["Priority"].id == "F3"
    assert [o.name for o in fields["Priority"].options] == ["Low"]


def test_field_index_names_are_case_sensitive() -> None:
    fields = build_field_index(
        [
            {"id": "F1", "name": "status", "options": []},
            {"id": "F2", "name": "Status", "options": []},
        ]
    )

    assert set(fields) == {"status", "Status"}


def test_field_index_skips_malformed_entries() -> None:
    fields = build_field_index(
        [
            "not-a-field",
            {"id": 42, "name": "Numeric id", "options": []},
            {"id": "F2", "name": "Status", "options": []},
        ]
    )

    assert list(fields) == ["Status"]


def test_field_index_drops_only_malformed_options() -> None:
    fields = build_field_index(
        [
            {
                "id": "F_status",
                "name": "Status",
                "options": [
                    {"id": "o1", "name": "Todo"},
                    {"id": "o2", "name": None},
                    {"name": "no id"},
                    "junk",
                    {"id": "o3", "name": "Done"},
                ],
            },
            {"id": "F_size", "name": "Size", "options": None},
        ]
    )

    assert list(fields) == ["Status", "Size"]
    assert [o.id for o in fields["Status"].options] == ["o1", "o3"]
    assert fields["Size"].options == []


def test_field_index_skips_entries_without_name() -> None:
    fields = build_field_index(
        [
            {"id": "F1", "options": []},
            {"id": "F2", "name": "Status", "options": []},
        ]
    )

    assert list(fields) == ["Status"]


def test_field_index_empty_input() -> None:
    assert build_field_index([]) == {}


def _status_index(option_names: list[str]) -> dict[str, ProjectField]:
    options: list[dict[str, Any]] = [
        {"id": f"o{i}", "name": name} for i, name in enumerate(option_names, start=1)
    ]
    return build_field_index([{"id": "F_status", "name": "Status", "options": options}])


def test_resolve_status_is_case_insensitive_substring() -> None:
    fields = _status_index(["Todo", "In Progress", "✅ Done"])

    assert resolve_status_option(fields, "done") == StatusOption(
        field_id="F_status", option_id="o3", name="✅ Done"
    )


def test_resolve_status_not_found_returns_none() -> None:
    fields = _status_index(["Todo", "In Progress", "✅ Done"])

    assert resolve_status_option(fields, "missing") is None


def test_resolve_status_first_match_wins() -> None:
    fields = _status_index(["In Review", "Review Done", "Done"])

    status = resolve_status_option(fields, "review")

    assert status is not None
    assert status.option_id == "o1"


def test_resolve_status_requires_status_field() -> None:
    fields = build_field_index([{"id": "F1", "name": "Priority", "options": []}])

    with pytest.raises(MissingStatusField):
        resolve_status_option(fields, "Todo")
