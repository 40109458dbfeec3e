"""Helper functions for UI - task board API client + view helpers."""

from typing import Any

import httpx

STATUS_ORDER = ["todo", "in_progress", "done"]
STATUS_LABELS = {"todo": "To do", "in_progress": "In progress", "done": "Done"}
ADMIN_ROLES = {"owner", "org_admin"}


class ApiError(Exception):
    """Backend returned an error response."""

    def __init__(self, status_code: int, detail: str) -> None:
        super().__init__(f"{status_code}: {detail}")
        self.status_code = status_code
        self.detail = detail


def get_auth_header(token: str) -> dict[str, str]:
    """Get auth header for API calls."""
    return {"Authorization": f"Bearer {token}"}


def _request(
    method: str,
    url: str,
    client: httpx.Client | None = None,
    **kwargs: Any,
) -> Any:
    """Send a request and return decoded JSON.

    Raises:
        ApiError: If the backend answers with a 4xx/5xx status
    """
    if client is None:
        response = httpx.request(method, url, timeout=10.0, **kwargs)
    else:
        response = client.request(method, url, **kwargs)

    if response.is_error:
        try:
            detail = response.json().get("detail", response.text)
        except ValueError:
            detail = response.text
        raise ApiError(response.status_code, str(detail))

    if response.status_code == 204 or not response.content:
        return None
    return response.json()


def login(
    backend_url: str, email: str, password: str, client: httpx.Client | None = None
) -> dict[str, Any]:
    """Log in and return the token response (access_token + user)."""
    result: dict[str, Any] = _request(
        "POST",
        f"{backend_url}/api/auth/login",
        client,
        json={"email": email, "password": password},
    )
    return result


def register(
    backend_url: str,
    email: str,
    password: str,
    first_name: str,
    last_name: str,
    organization_name: str,
    role: str = "member",
    client: httpx.Client | None = None,
) -> dict[str, Any]:
    """Register a new account and return the token response."""
    result: dict[str, Any] = _request(
        "POST",
        f"{backend_url}/api/auth/register",
        client,
        json={
            "email": email,
            "password": password,
            "first_name": first_name,
            "last_name": last_name,
            "organization_name": organization_name,
            "role": role,
        },
    )
    return result


def fetch_tasks(
    backend_url: str, token: str, client: httpx.Client | None = None
) -> list[dict[str, Any]]:
    """List tasks visible to the logged-in user."""
    result: list[dict[str, Any]] = _request(
        "GET", f"{backend_url}/api/tasks", client, headers=get_auth_header(token)
    )
    return result


def create_task(
    backend_url: str,
    token: str,
    title: str,
    description: str,
    status: str = "todo",
    priority: str = "medium",
    assigned_to_id: str | None = None,
    client: httpx.Client | None = None,
) -> dict[str, Any]:
    """Create a task."""
    payload: dict[str, Any] = {
        "title": title,
        "description": description,
        "status": status,
        "priority": priority,
    }
    if assigned_to_id:
        payload["assigned_to_id"] = assigned_to_id

    result: dict[str, Any] = _request(
        "POST", f"{backend_url}/api/tasks", client, json=payload, headers=get_auth_header(token)
    )
    return result


def update_task(
    backend_url: str,
    token: str,
    task_id: str,
    changes: dict[str, Any],
    client: httpx.Client | None = None,
) -> dict[str, Any]:
    """Patch a task with the given fields only."""
    result: dict[str, Any] = _request(
        "PATCH",
        f"{backend_url}/api/tasks/{task_id}",
        client,
        json=changes,
        headers=get_auth_header(token),
    )
    return result


def delete_task(
    backend_url: str, token: str, task_id: str, client: httpx.Client | None = None
) -> dict[str, Any]:
    """Delete a task."""
    result: dict[str, Any] = _request(
        "DELETE", f"{backend_url}/api/tasks/{task_id}", client, headers=get_auth_header(token)
    )
    return result


def fetch_audit_logs(
    backend_url: str, token: str, client: httpx.Client | None = None
) -> list[dict[str, Any]]:
    """Latest audit entries of the user's organization (admins only)."""
    result = _request(
        "GET", f"{backend_url}/api/audit-logs", client, headers=get_auth_header(token)
    )
    entries: list[dict[str, Any]] = result["entries"]
    return entries


# --- View helpers ---


def group_tasks_by_status(tasks: list[dict[str, Any]]) -> dict[str, list[dict[str, Any]]]:
    """Group tasks into board columns, preserving incoming (newest first) order."""
    columns: dict[str, list[dict[str, Any]]] = {status: [] for status in STATUS_ORDER}
    for task in tasks:
        columns.setdefault(task.get("status", "todo"), []).append(task)
    return columns


def can_delete(role: str) -> bool:
    """Only owners and org admins may delete tasks."""
    return role in ADMIN_ROLES


def can_change_status(user: dict[str, Any], task: dict[str, Any]) -> bool:
    """Admins change any status; members only on tasks assigned to them."""
    if user.get("role") in ADMIN_ROLES:
        return True
    return task.get("assigned_to_id") == user.get("id")


def format_user(summary: dict[str, Any] | None) -> str:
    """Display name for a creator/assignee summary."""
    if not summary:
        return "Unassigned"
    name = f"{summary.get('first_name', '')} {summary.get('last_name', '')}".strip()
    return name or summary.get("email", "Unknown")


def format_audit_entry(entry: dict[str, Any]) -> str:
    """One-line description of an audit entry."""
    action = entry.get("action", "?")
    entity = f"{entry.get('entity_type', '?')} {str(entry.get('entity_id', ''))[:8]}"
    changes = entry.get("changes") or {}

    if action == "UPDATE" and "new" in changes:
        fields = ", ".join(f"{k}={v}" for k, v in changes["new"].items())
        return f"{action} {entity}: {fields}" if fields else f"{action} {entity}"
    if "title" in changes:
        return f"{action} {entity}: {changes['title']}"
    return f"{action} {entity}"
