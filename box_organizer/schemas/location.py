"""Location schemas for request/response validation."""
from datetime import datetime
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, Field, model_validator

from box_organizer.schemas.common import (
    LocationName,
    MAX_LOCATION_DESCRIPTION_LENGTH,
    require_fields,
)


class LocationBase(BaseModel):
    """Base location schema."""
    name: LocationName
    description: Optional[str] = Field(None, max_length=MAX_LOCATION_DESCRIPTION_LENGTH)


class LocationCreate(LocationBase):
    """Schema for creating a location. Roots have no parent."""
    workspace_id: UUID
    parent_id: Optional[UUID] = None


class LocationUpdate(BaseModel):
    """Schema for updating a location."""
    name: Optional[LocationName] = None
    description: Optional[str] = Field(None, max_length=MAX_LOCATION_DESCRIPTION_LENGTH)

    @model_validator(mode="after")
    def check_fields(self):
        require_fields(self)
        if "name" in self.model_fields_set and self.name is None:
            raise ValueError("name cannot be null")
        return self


class LocationResponse(BaseModel):
    """Schema for location response."""
    id: UUID
    workspace_id: UUID
    parent_id: Optional[UUID] = None
    name: str
    description: Optional[str] = None
    path: str
    depth: int
    is_deleted: bool
    created_at: datetime
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class LocationSummary(BaseModel):
    """Short location info embedded in box responses."""
    id: UUID
    name: str
    path: str

    class Config:
        from_attributes = True


class LocationDeleteResult(BaseModel):
    """Outcome of a soft delete."""
    id: UUID
    unassigned_boxes: int


class LocationDetail(LocationResponse):
    """Location with its breadcrumb chain, root first."""
    ancestors: List[LocationSummary] = []
