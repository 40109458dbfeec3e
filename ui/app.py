"""Streamlit UI for the task board.

Run with: streamlit run ui/app.py
"""

# Add project root to sys.path for imports to work when run via streamlit
import sys
from pathlib import Path

_ROOT = Path(__file__).resolve().parents[1]
if str(_ROOT) not in sys.path:
    sys.path.insert(0, str(_ROOT))

import os  # noqa: E402

import streamlit as st  # noqa: E402

from ui.helpers import (  # noqa: E402
    STATUS_LABELS,
    STATUS_ORDER,
    ApiError,
    can_change_status,
    can_delete,
    create_task,
    delete_task,
    fetch_audit_logs,
    fetch_tasks,
    format_audit_entry,
    format_user,
    group_tasks_by_status,
    login,
    register,
    update_task,
)

# Configuration
BACKEND_URL = os.environ.get("BACKEND_URL", "http://localhost:8000")

# Page config
st.set_page_config(page_title="Task Board", page_icon="✅", layout="wide")

# Initialize session state
if "token" not in st.session_state:
    st.session_state.token = None
if "user" not in st.session_state:
    st.session_state.user = None
if "error" not in st.session_state:
    st.session_state.error = None


def _store_session(result: dict) -> None:
    st.session_state.token = result["access_token"]
    st.session_state.user = result["user"]
    st.session_state.error = None


def _run(action, *args, **kwargs) -> None:  # type: ignore[no-untyped-def]
    """Call the API, surface errors, and refresh."""
    try:
        action(*args, **kwargs)
        st.session_state.error = None
    except ApiError as e:
        st.session_state.error = e.detail
    st.rerun()


# =============================================================================
# LOGIN / REGISTER
# =============================================================================
if st.session_state.token is None:
    st.title("✅ Task Board")
    tab_login, tab_register = st.tabs(["Log in", "Register"])

    with tab_login:
        with st.form("login_form"):
            email = st.text_input("Email")
            password = st.text_input("Password", type="password")
            if st.form_submit_button("Log in", type="primary"):
                try:
                    _store_session(login(BACKEND_URL, email.strip(), password))
                    st.rerun()
                except ApiError as e:
                    st.error(f"❌ {e.detail}")

    with tab_register:
        with st.form("register_form"):
            reg_email = st.text_input("Email")
            reg_password = st.text_input("Password (min 6 characters)", type="password")
            first_name = st.text_input("First name")
            last_name = st.text_input("Last name")
            org_name = st.text_input("Organization")
            role = st.selectbox("Role (new organizations only)", ["owner", "org_admin", "member"])
            if st.form_submit_button("Register", type="primary"):
                try:
                    _store_session(
                        register(
                            BACKEND_URL,
                            reg_email.strip(),
                            reg_password,
                            first_name.strip(),
                            last_name.strip(),
                            org_name.strip(),
                            role,
                        )
                    )
                    st.rerun()
                except ApiError as e:
                    st.error(f"❌ {e.detail}")
    st.stop()

# =============================================================================
# TASK BOARD
# =============================================================================
user = st.session_state.user
token = st.session_state.token

col_title, col_logout = st.columns([4, 1])
with col_title:
    st.title("✅ Task Board")
    st.caption(f"{format_user(user)} · {user['role']}")
with col_logout:
    if st.button("Log out"):
        st.session_state.token = None
        st.session_state.user = None
        st.rerun()

if st.session_state.error:
    st.error(f"❌ {st.session_state.error}")

with st.expander("➕ New task"):
    with st.form("create_task_form", clear_on_submit=True):
        title = st.text_input("Title *")
        description = st.text_area("Description *")
        priority = st.selectbox("Priority", ["low", "medium", "high"], index=1)
        assignee = st.text_input("Assignee user ID (optional)")
        if st.form_submit_button("Create", type="primary"):
            if not title.strip() or not description.strip():
                st.session_state.error = "Title and description are required"
                st.rerun()
            _run(
                create_task,
                BACKEND_URL,
                token,
                title.strip(),
                description.strip(),
                priority=priority,
                assigned_to_id=assignee.strip() or None,
            )

try:
    tasks = fetch_tasks(BACKEND_URL, token)
except ApiError as e:
    st.error(f"❌ Could not load tasks: {e.detail}")
    tasks = []

columns = group_tasks_by_status(tasks)
for status, column in zip(STATUS_ORDER, st.columns(len(STATUS_ORDER))):
    with column:
        st.subheader(f"{STATUS_LABELS[status]} ({len(columns[status])})")
        for task in columns[status]:
            with st.container(border=True):
                st.markdown(f"**{task['title']}**  \n_{task['priority']} priority_")
                st.caption(task["description"])
                st.caption(
                    f"By {format_user(task.get('created_by'))} · "
                    f"Assigned to {format_user(task.get('assigned_to'))}"
                )
                if can_change_status(user, task):
                    others = [s for s in STATUS_ORDER if s != status]
                    for target in others:
                        if st.button(f"→ {STATUS_LABELS[target]}", key=f"{task['id']}-{target}"):
                            _run(update_task, BACKEND_URL, token, task["id"], {"status": target})
                if can_delete(user["role"]):
                    if st.button("🗑 Delete", key=f"{task['id']}-delete"):
                        _run(delete_task, BACKEND_URL, token, task["id"])

# =============================================================================
# AUDIT LOG (admins)
# =============================================================================
if can_delete(user["role"]):
    st.divider()
    st.subheader("📜 Audit log")
    try:
        for entry in fetch_audit_logs(BACKEND_URL, token):
            st.text(f"{entry['timestamp'][:19]}  {format_audit_entry(entry)}")
    except ApiError as e:
        st.error(f"❌ Could not load audit log: {e.detail}")
