"""Request context for tenancy enforcement."""

from dataclasses import dataclass
from uuid import UUID

from backend.app.models.common import Role


@dataclass(frozen=True)
class RequestContext:
    """Request context containing the acting user's identity.

    Used as the actor for every authorization decision and to enforce
    tenancy boundaries in all database operations.
    """

    org_id: UUID
    user_id: UUID
    role: Role

    @property
    def is_member(self) -> bool:
        return self.role == Role.member
