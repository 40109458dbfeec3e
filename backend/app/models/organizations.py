"""Organization hierarchy models."""

from uuid import UUID

from pydantic import BaseModel, Field


class OrganizationNode(BaseModel):
    """Organization with its nested children."""

    id: UUID
    name: str
    parent_id: UUID | None
    children: list["OrganizationNode"] = Field(default_factory=list)


class CreateOrganizationRequest(BaseModel):
    """Request body for POST /organizations."""

    name: str = Field(..., min_length=1, max_length=200)
