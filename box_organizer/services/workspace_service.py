"""Workspace operations."""
from uuid import UUID

import structlog
from sqlalchemy.orm import Session

from box_organizer.database import atomic
from box_organizer.errors import WorkspaceNotFoundError
from box_organizer.models.box import Box
from box_organizer.models.location import Location
from box_organizer.models.qr_code import QrCode
from box_organizer.models.workspace import Workspace
from box_organizer.schemas.workspace import WorkspaceCreate, WorkspaceUpdate

logger = structlog.get_logger(__name__)


def create_workspace(db: Session, data: WorkspaceCreate) -> Workspace:
    with atomic(db):
        workspace = Workspace(name=data.name, description=data.description)
        db.add(workspace)
        db.flush()
        logger.info("workspace_created", workspace_id=str(workspace.id))
    db.refresh(workspace)
    return workspace


def get_workspace(db: Session, workspace_id: UUID) -> Workspace:
    workspace = db.get(Workspace, workspace_id)
    if workspace is None:
        raise WorkspaceNotFoundError()
    return workspace


def update_workspace(db: Session, workspace_id: UUID, data: WorkspaceUpdate) -> Workspace:
    """Rename a workspace or change its description. Only sent fields change."""
    fields = data.model_fields_set

    with atomic(db):
        workspace = get_workspace(db, workspace_id)
        for field in fields:
            setattr(workspace, field, getattr(data, field))
        db.flush()
        logger.info("workspace_updated", workspace_id=str(workspace.id), fields=sorted(fields))

    db.refresh(workspace)
    return workspace


def delete_workspace(db: Session, workspace_id: UUID) -> None:
    """
    Delete a workspace with everything it owns.

    QR codes go first so no assigned code is left pointing at a deleted box,
    then boxes, then the whole location tree in one statement.
    """
    with atomic(db):
        get_workspace(db, workspace_id)
        counts = {}
        for name, model in (("qr_codes", QrCode), ("boxes", Box), ("locations", Location)):
            counts[name] = (
                db.query(model)
                .filter(model.workspace_id == workspace_id)
                .delete(synchronize_session=False)
            )
        db.query(Workspace).filter(Workspace.id == workspace_id).delete(synchronize_session=False)
        logger.info("workspace_deleted", workspace_id=str(workspace_id), **counts)
