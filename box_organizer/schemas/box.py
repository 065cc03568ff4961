"""Box schemas for request/response validation."""
from datetime import datetime
from typing import Optional, List
from uuid import UUID

from pydantic import BaseModel, Field, model_validator

from box_organizer.schemas.common import (
    BoxName,
    SearchText,
    DEFAULT_PAGE_SIZE,
    MAX_BOX_DESCRIPTION_LENGTH,
    MAX_PAGE_SIZE,
    require_fields,
)
from box_organizer.schemas.location import LocationSummary


class BoxBase(BaseModel):
    """Base box schema."""
    name: BoxName
    description: Optional[str] = Field(None, max_length=MAX_BOX_DESCRIPTION_LENGTH)
    tags: Optional[List[str]] = None


class BoxCreate(BoxBase):
    """Schema for creating a box."""
    workspace_id: UUID
    location_id: Optional[UUID] = None
    qr_code_id: Optional[UUID] = None


class BoxUpdate(BaseModel):
    """Schema for updating a box.

    Only fields present in the payload are applied. ``location_id: null``
    unassigns the box, ``qr_code_id: null`` releases its QR code.
    """
    name: Optional[BoxName] = None
    description: Optional[str] = Field(None, max_length=MAX_BOX_DESCRIPTION_LENGTH)
    tags: Optional[List[str]] = None
    location_id: Optional[UUID] = None
    qr_code_id: Optional[UUID] = None

    @model_validator(mode="after")
    def check_fields(self):
        require_fields(self)
        if "name" in self.model_fields_set and self.name is None:
            raise ValueError("name cannot be null")
        return self


class BoxResponse(BaseModel):
    """Schema for box response."""
    id: UUID
    workspace_id: UUID
    short_id: str
    name: str
    description: Optional[str] = None
    tags: Optional[List[str]] = None
    location_id: Optional[UUID] = None
    location: Optional[LocationSummary] = None
    qr_code_id: Optional[UUID] = None
    qr_token: Optional[str] = None
    created_at: datetime
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class BoxSearchQuery(BaseModel):
    """Search, filter and pagination parameters for box listing."""
    workspace_id: UUID
    q: Optional[SearchText] = None
    location_id: Optional[UUID] = None
    is_assigned: Optional[bool] = None
    limit: int = Field(DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE)
    offset: int = Field(0, ge=0)


class DuplicateNameCheck(BaseModel):
    """Schema for the duplicate box name check."""
    workspace_id: UUID
    name: BoxName
    exclude_box_id: Optional[UUID] = None


class DuplicateNameResult(BaseModel):
    """Result of the duplicate box name check."""
    is_duplicate: bool
    count: int


class BoxPage(BaseModel):
    """One page of box search results."""
    data: List[BoxResponse]
    total: int
    limit: int
    offset: int
