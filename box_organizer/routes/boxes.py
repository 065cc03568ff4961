"""Box routes."""
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from box_organizer.database import get_db
from box_organizer.schemas.box import (
    BoxCreate,
    BoxPage,
    BoxResponse,
    BoxSearchQuery,
    BoxUpdate,
    DuplicateNameCheck,
    DuplicateNameResult,
)
from box_organizer.services import box_service

router = APIRouter(prefix="/boxes", tags=["Boxes"])


@router.get("/", response_model=BoxPage)
async def search_boxes(
    workspace_id: UUID,
    q: Optional[str] = Query(None, description="Search in name, description and tags"),
    location_id: Optional[UUID] = Query(None, description="Filter by location"),
    is_assigned: Optional[bool] = Query(None, description="Filter boxes with or without a location"),
    limit: int = 50,
    offset: int = 0,
    db: Session = Depends(get_db),
):
    """Search boxes of a workspace, paginated."""
    # Bounds are checked by the schema so errors share one shape
    query = BoxSearchQuery(
        workspace_id=workspace_id,
        q=q,
        location_id=location_id,
        is_assigned=is_assigned,
        limit=limit,
        offset=offset,
    )
    boxes, total = box_service.search_boxes(db, query)
    return BoxPage(
        data=[BoxResponse.model_validate(box) for box in boxes],
        total=total,
        limit=query.limit,
        offset=query.offset,
    )


@router.post("/", response_model=BoxResponse, status_code=status.HTTP_201_CREATED)
async def create_box(
    box_data: BoxCreate,
    db: Session = Depends(get_db),
):
    """Create a new box."""
    return box_service.create_box(db, box_data)


@router.post("/check-duplicate", response_model=DuplicateNameResult)
async def check_duplicate_name(
    check: DuplicateNameCheck,
    db: Session = Depends(get_db),
):
    """Warn about boxes sharing a name. Never blocks the write itself."""
    is_duplicate, count = box_service.check_duplicate_name(db, check)
    return DuplicateNameResult(is_duplicate=is_duplicate, count=count)


@router.get("/short/{short_id}", response_model=BoxResponse)
async def get_box_by_short_id(
    short_id: str,
    workspace_id: UUID,
    db: Session = Depends(get_db),
):
    """Get a box by its short public id."""
    return box_service.get_box_by_short_id(db, workspace_id, short_id)


@router.get("/{box_id}", response_model=BoxResponse)
async def get_box(
    box_id: UUID,
    db: Session = Depends(get_db),
):
    """Get a specific box."""
    return box_service.get_box(db, box_id)


@router.patch("/{box_id}", response_model=BoxResponse)
async def update_box(
    box_id: UUID,
    box_update: BoxUpdate,
    db: Session = Depends(get_db),
):
    """Update a box. Only the fields sent are changed."""
    return box_service.update_box(db, box_id, box_update)


@router.delete("/{box_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_box(
    box_id: UUID,
    db: Session = Depends(get_db),
):
    """Delete a box and free its QR code."""
    box_service.delete_box(db, box_id)
    return None
