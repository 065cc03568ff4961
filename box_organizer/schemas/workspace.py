"""Workspace schemas for request/response validation."""
from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field, model_validator

from box_organizer.schemas.common import (
    MAX_WORKSPACE_DESCRIPTION_LENGTH,
    WorkspaceName,
    require_fields,
)


class WorkspaceCreate(BaseModel):
    """Schema for creating a workspace."""
    name: WorkspaceName
    description: Optional[str] = Field(None, max_length=MAX_WORKSPACE_DESCRIPTION_LENGTH)


class WorkspaceUpdate(BaseModel):
    """Schema for renaming a workspace or changing its description."""
    name: Optional[WorkspaceName] = None
    description: Optional[str] = Field(None, max_length=MAX_WORKSPACE_DESCRIPTION_LENGTH)

    @model_validator(mode="after")
    def check_fields(self):
        require_fields(self)
        if "name" in self.model_fields_set and self.name is None:
            raise ValueError("name cannot be null")
        return self


class WorkspaceResponse(BaseModel):
    """Schema for workspace response."""
    id: UUID
    name: str
    description: Optional[str] = None
    created_at: datetime
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True
