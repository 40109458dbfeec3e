"""Organization hierarchy service.

The hierarchy lives in the store as parent_id references. Traversals walk ids
and keep a visited set, so a corrupted parent chain can never loop forever.
"""

import logging
import uuid
from datetime import datetime, timezone

from backend.app.db.context import RequestContext
from backend.app.db.repositories import IdentityStore, OrganizationRecord
from backend.app.errors import ForbiddenError, NotFoundError
from backend.app.models.common import Role
from backend.app.models.organizations import OrganizationNode

logger = logging.getLogger(__name__)


class OrganizationService:
    """Read and extend the organization tree."""

    def __init__(self, identity: IdentityStore) -> None:
        self._identity = identity

    async def get_tree(self, org_id: uuid.UUID) -> OrganizationNode:
        """Organization with its full subtree.

        Raises:
            NotFoundError: If the organization does not exist
        """
        root = await self._identity.find_organization(org_id)
        if root is None:
            raise NotFoundError("Organization not found")

        visited: set[uuid.UUID] = set()

        async def build(org: OrganizationRecord) -> OrganizationNode:
            visited.add(org.id)
            node = OrganizationNode(id=org.id, name=org.name, parent_id=org.parent_id)
            for child in await self._identity.list_child_organizations(org.id):
                if child.id not in visited:
                    node.children.append(await build(child))
            return node

        return await build(root)

    async def ancestors(self, org_id: uuid.UUID) -> list[OrganizationRecord]:
        """Parent chain from the direct parent up to the root."""
        chain: list[OrganizationRecord] = []
        seen = {org_id}

        current = await self._identity.find_organization(org_id)
        while current is not None and current.parent_id is not None:
            if current.parent_id in seen:
                logger.error("Cycle detected in organization tree at %s", current.parent_id)
                break
            seen.add(current.parent_id)
            current = await self._identity.find_organization(current.parent_id)
            if current is not None:
                chain.append(current)

        return chain

    async def is_descendant(self, org_id: uuid.UUID, ancestor_id: uuid.UUID) -> bool:
        """True if ancestor_id is a strict ancestor of org_id."""
        return any(org.id == ancestor_id for org in await self.ancestors(org_id))

    async def create_child(self, name: str, actor: RequestContext) -> OrganizationNode:
        """Create a sub-organization under the actor's organization (owners only).

        Raises:
            ForbiddenError: If the actor is not an owner
        """
        if actor.role != Role.owner:
            raise ForbiddenError("Only owners can create organizations", reason="not_owner")

        org = await self._identity.save_organization(
            OrganizationRecord(
                id=uuid.uuid4(),
                name=name,
                parent_id=actor.org_id,
                created_at=datetime.now(timezone.utc),
            )
        )
        logger.info("Created organization %s under %s", org.id, actor.org_id)
        return OrganizationNode(id=org.id, name=org.name, parent_id=org.parent_id)

    async def delete_subtree(self, org_id: uuid.UUID, actor: RequestContext) -> None:
        """Delete a descendant organization together with its children (owners only).

        Raises:
            NotFoundError: If the organization does not exist
            ForbiddenError: If the actor is not an owner or the organization is
                not strictly below the actor's organization
        """
        if actor.role != Role.owner:
            raise ForbiddenError("Only owners can delete organizations", reason="not_owner")
        if await self._identity.find_organization(org_id) is None:
            raise NotFoundError("Organization not found")
        if not await self.is_descendant(org_id, actor.org_id):
            raise ForbiddenError("Access denied", reason="cross_organization")

        await self._identity.delete_organization(org_id)
        logger.info("Deleted organization subtree %s", org_id)
