"""Location routes."""
from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from box_organizer.database import get_db
from box_organizer.schemas.location import (
    LocationCreate,
    LocationDeleteResult,
    LocationDetail,
    LocationResponse,
    LocationSummary,
    LocationUpdate,
)
from box_organizer.services import location_service

router = APIRouter(prefix="/locations", tags=["Locations"])


@router.get("/", response_model=List[LocationResponse])
async def list_locations(
    workspace_id: UUID,
    parent_id: Optional[UUID] = Query(None, description="List children of this location; roots when omitted"),
    db: Session = Depends(get_db),
):
    """List live locations one level at a time."""
    return location_service.list_locations(db, workspace_id, parent_id)


@router.post("/", response_model=LocationResponse, status_code=status.HTTP_201_CREATED)
async def create_location(
    location_data: LocationCreate,
    db: Session = Depends(get_db),
):
    """Create a location, optionally under a parent."""
    return location_service.create_location(db, location_data)


@router.get("/{location_id}", response_model=LocationDetail)
async def get_location(
    location_id: UUID,
    db: Session = Depends(get_db),
):
    """Get a location with its breadcrumbs."""
    location = location_service.get_location(db, location_id)
    ancestors = location_service.get_ancestors(db, location)[:-1]
    detail = LocationDetail.model_validate(location)
    detail.ancestors = [LocationSummary.model_validate(a) for a in ancestors]
    return detail


@router.patch("/{location_id}", response_model=LocationResponse)
async def update_location(
    location_id: UUID,
    location_update: LocationUpdate,
    db: Session = Depends(get_db),
):
    """Rename a location (moving its subtree) or change its description."""
    return location_service.update_location(db, location_id, location_update)


@router.delete("/{location_id}", response_model=LocationDeleteResult)
async def delete_location(
    location_id: UUID,
    db: Session = Depends(get_db),
):
    """Soft delete a location. Boxes placed directly on it become unassigned."""
    unassigned = location_service.soft_delete_location(db, location_id)
    return LocationDeleteResult(id=location_id, unassigned_boxes=unassigned)
