"""Organization endpoints - hierarchy view and sub-organization management."""

import uuid
from typing import Annotated

from fastapi import APIRouter, Depends, Response, status

from backend.app.api.auth import get_current_context
from backend.app.api.deps import get_organization_service
from backend.app.db.context import RequestContext
from backend.app.models.organizations import CreateOrganizationRequest, OrganizationNode
from backend.app.services.organizations import OrganizationService

router = APIRouter(prefix="/organizations", tags=["organizations"])


@router.get("/me", response_model=OrganizationNode)
async def my_organization(
    ctx: Annotated[RequestContext, Depends(get_current_context)],
    service: Annotated[OrganizationService, Depends(get_organization_service)],
) -> OrganizationNode:
    """The caller's organization with its subtree."""
    return await service.get_tree(ctx.org_id)


@router.post("", response_model=OrganizationNode, status_code=status.HTTP_201_CREATED)
async def create_organization(
    request: CreateOrganizationRequest,
    ctx: Annotated[RequestContext, Depends(get_current_context)],
    service: Annotated[OrganizationService, Depends(get_organization_service)],
) -> OrganizationNode:
    """Create a child organization under the caller's organization."""
    return await service.create_child(request.name, ctx)


@router.delete("/{org_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_organization(
    org_id: uuid.UUID,
    ctx: Annotated[RequestContext, Depends(get_current_context)],
    service: Annotated[OrganizationService, Depends(get_organization_service)],
) -> Response:
    """Delete a descendant organization and everything below it."""
    await service.delete_subtree(org_id, ctx)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
