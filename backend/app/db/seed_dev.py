"""Dev seeding helper - demo organization tree and one user per role."""

import asyncio
import uuid
from datetime import datetime, timezone

from backend.app.auth.passwords import hash_password
from backend.app.db.engine import get_session_factory
from backend.app.db.repositories import IdentityStore, OrganizationRecord, UserRecord
from backend.app.db.sql_repositories import SqlIdentityStore
from backend.app.models.common import Role

# Fixed IDs so the dev UI and manual API calls can rely on them
DEV_ORG_ID = uuid.UUID("00000000-0000-0000-0000-000000000001")
DEV_CHILD_ORG_ID = uuid.UUID("00000000-0000-0000-0000-000000000011")
DEV_PASSWORD = "password123"

DEV_USERS: list[tuple[uuid.UUID, str, Role, uuid.UUID]] = [
    (uuid.UUID("00000000-0000-0000-0000-000000000002"), "owner@example.com", Role.owner, DEV_ORG_ID),
    (uuid.UUID("00000000-0000-0000-0000-000000000003"), "admin@example.com", Role.org_admin, DEV_ORG_ID),
    (uuid.UUID("00000000-0000-0000-0000-000000000004"), "member@example.com", Role.member, DEV_ORG_ID),
    (
        uuid.UUID("00000000-0000-0000-0000-000000000005"),
        "eng.member@example.com",
        Role.member,
        DEV_CHILD_ORG_ID,
    ),
]


async def seed_identity_store(identity: IdentityStore) -> None:
    """Seed the dev organizations and users into any identity store.

    This function is idempotent - safe to run multiple times.
    """
    now = datetime.now(timezone.utc)

    for org_id, name, parent_id in (
        (DEV_ORG_ID, "Acme", None),
        (DEV_CHILD_ORG_ID, "Acme Engineering", DEV_ORG_ID),
    ):
        if await identity.find_organization(org_id) is None:
            print(f"Creating dev org {name} with id {org_id}...")
            await identity.save_organization(
                OrganizationRecord(id=org_id, name=name, parent_id=parent_id, created_at=now)
            )
        else:
            print(f"Dev org already exists: {name}")

    for user_id, email, role, org_id in DEV_USERS:
        if await identity.find_user_by_id(user_id) is not None:
            print(f"Dev user already exists: {email}")
            continue
        print(f"Creating dev user {email} ({role.value})...")
        first_name, _, _ = email.partition("@")
        await identity.save_user(
            UserRecord(
                id=user_id,
                email=email,
                password_hash=hash_password(DEV_PASSWORD),
                first_name=first_name.title(),
                last_name="Dev",
                role=role,
                organization_id=org_id,
                created_at=now,
                updated_at=now,
            )
        )


async def seed_dev_org_and_user() -> None:
    """Seed the dev database through the SQL identity store."""
    async with get_session_factory()() as session:
        await seed_identity_store(SqlIdentityStore(session))
    print("✅ Dev seeding complete")


if __name__ == "__main__":
    asyncio.run(seed_dev_org_and_user())
