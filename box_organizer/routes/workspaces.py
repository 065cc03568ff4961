"""Workspace routes."""
from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from box_organizer.database import get_db
from box_organizer.schemas.workspace import WorkspaceCreate, WorkspaceResponse, WorkspaceUpdate
from box_organizer.services import workspace_service

router = APIRouter(prefix="/workspaces", tags=["Workspaces"])


@router.post("/", response_model=WorkspaceResponse, status_code=status.HTTP_201_CREATED)
async def create_workspace(
    workspace_data: WorkspaceCreate,
    db: Session = Depends(get_db),
):
    """Create a new workspace."""
    return workspace_service.create_workspace(db, workspace_data)


@router.get("/{workspace_id}", response_model=WorkspaceResponse)
async def get_workspace(
    workspace_id: UUID,
    db: Session = Depends(get_db),
):
    """Get a specific workspace."""
    return workspace_service.get_workspace(db, workspace_id)


@router.patch("/{workspace_id}", response_model=WorkspaceResponse)
async def update_workspace(
    workspace_id: UUID,
    workspace_update: WorkspaceUpdate,
    db: Session = Depends(get_db),
):
    """Rename a workspace or change its description."""
    return workspace_service.update_workspace(db, workspace_id, workspace_update)


@router.delete("/{workspace_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_workspace(
    workspace_id: UUID,
    db: Session = Depends(get_db),
):
    """Delete a workspace with its locations, boxes and QR codes."""
    workspace_service.delete_workspace(db, workspace_id)
    return None
