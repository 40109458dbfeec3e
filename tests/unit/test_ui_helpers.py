"""Unit tests for UI helper functions."""

import json

import httpx
import pytest

from ui.helpers import (
    ApiError,
    can_change_status,
    can_delete,
    create_task,
    fetch_audit_logs,
    fetch_tasks,
    format_audit_entry,
    format_user,
    group_tasks_by_status,
    login,
    update_task,
)

BACKEND = "http://backend.test"


def _client(handler) -> httpx.Client:  # type: ignore[no-untyped-def]
    return httpx.Client(transport=httpx.MockTransport(handler))


def test_group_tasks_by_status_empty() -> None:
    """Test every column exists even without tasks."""
    result = group_tasks_by_status([])
    assert result == {"todo": [], "in_progress": [], "done": []}


def test_group_tasks_by_status_preserves_order() -> None:
    tasks = [
        {"id": "3", "status": "done"},
        {"id": "2", "status": "todo"},
        {"id": "1", "status": "todo"},
    ]

    result = group_tasks_by_status(tasks)

    assert [t["id"] for t in result["todo"]] == ["2", "1"]
    assert [t["id"] for t in result["done"]] == ["3"]
    assert result["in_progress"] == []


def test_can_delete_admins_only() -> None:
    assert can_delete("owner")
    assert can_delete("org_admin")
    assert not can_delete("member")


def test_can_change_status() -> None:
    member = {"id": "u1", "role": "member"}

    assert can_change_status(member, {"assigned_to_id": "u1"})
    assert not can_change_status(member, {"assigned_to_id": "u2"})
    assert not can_change_status(member, {"assigned_to_id": None})
    assert can_change_status({"id": "a", "role": "org_admin"}, {"assigned_to_id": None})


def test_format_user() -> None:
    assert format_user(None) == "Unassigned"
    assert format_user({"first_name": "Ada", "last_name": "Lovelace"}) == "Ada Lovelace"
    assert format_user({"first_name": "", "last_name": "", "email": "a@x.io"}) == "a@x.io"


def test_format_audit_entry_update() -> None:
    entry = {
        "action": "UPDATE",
        "entity_type": "Task",
        "entity_id": "12345678-aaaa",
        "changes": {"old": {"status": "todo"}, "new": {"status": "done"}},
    }

    assert format_audit_entry(entry) == "UPDATE Task 12345678: status=done"


def test_format_audit_entry_create_and_delete() -> None:
    created = {"action": "CREATE", "entity_type": "Task", "entity_id": "abcdefgh-1", "changes": {"title": "T"}}
    deleted = {"action": "DELETE", "entity_type": "Task", "entity_id": "abcdefgh-1", "changes": None}

    assert format_audit_entry(created) == "CREATE Task abcdefgh: T"
    assert format_audit_entry(deleted) == "DELETE Task abcdefgh"


def test_login_posts_credentials() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path == "/api/auth/login"
        assert json.loads(request.content) == {"email": "a@x.io", "password": "pw"}
        return httpx.Response(200, json={"access_token": "tok", "user": {"id": "u1"}})

    result = login(BACKEND, "a@x.io", "pw", client=_client(handler))

    assert result["access_token"] == "tok"


def test_fetch_tasks_sends_bearer_token() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.headers["Authorization"] == "Bearer tok"
        return httpx.Response(200, json=[{"id": "t1"}])

    assert fetch_tasks(BACKEND, "tok", client=_client(handler)) == [{"id": "t1"}]


def test_create_task_omits_empty_assignee() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content)
        assert "assigned_to_id" not in body
        assert body["priority"] == "high"
        return httpx.Response(201, json={"id": "t1", **body})

    result = create_task(BACKEND, "tok", "Title", "Desc", priority="high", client=_client(handler))

    assert result["id"] == "t1"


def test_update_task_sends_only_changes() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.method == "PATCH"
        assert request.url.path == "/api/tasks/t1"
        assert json.loads(request.content) == {"status": "done"}
        return httpx.Response(200, json={"id": "t1", "status": "done"})

    result = update_task(BACKEND, "tok", "t1", {"status": "done"}, client=_client(handler))

    assert result["status"] == "done"


def test_error_detail_raised_as_api_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(403, json={"detail": "You can only update task status"})

    with pytest.raises(ApiError) as exc_info:
        update_task(BACKEND, "tok", "t1", {"title": "x"}, client=_client(handler))

    assert exc_info.value.status_code == 403
    assert exc_info.value.detail == "You can only update task status"


def test_fetch_audit_logs_unwraps_entries() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"entries": [{"action": "CREATE"}]})

    assert fetch_audit_logs(BACKEND, "tok", client=_client(handler)) == [{"action": "CREATE"}]
