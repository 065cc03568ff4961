"""Location hierarchy operations.

Every location stores its materialized ``path`` next to the ``parent_id``
it was computed from. Writes that change a segment rewrite the paths of the
whole subtree in the same transaction, so readers never see a descendant
path that still carries a stale segment.
"""
from typing import List, Optional
from uuid import UUID

import structlog
from pydantic import TypeAdapter
from sqlalchemy import String, func, literal, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from box_organizer.database import atomic
from box_organizer.errors import (
    DepthExceededError,
    LocationNotFoundError,
    ParentNotFoundError,
    SiblingConflictError,
)
from box_organizer.models.box import Box
from box_organizer.models.location import Location
from box_organizer.schemas.common import LocationName
from box_organizer.schemas.location import LocationCreate, LocationUpdate
from box_organizer.services.paths import (
    MAX_LOCATION_DEPTH,
    build_path,
    path_depth,
    replace_last_segment,
    require_segment,
)
from box_organizer.services.workspace_service import get_workspace

logger = structlog.get_logger(__name__)

_location_name = TypeAdapter(LocationName)


def _path_taken(db: Session, workspace_id: UUID, path: str, exclude_id: Optional[UUID] = None) -> bool:
    query = db.query(Location.id).filter(
        Location.workspace_id == workspace_id,
        Location.path == path,
        Location.is_deleted.is_(False),
    )
    if exclude_id is not None:
        query = query.filter(Location.id != exclude_id)
    return db.query(query.exists()).scalar()


def _flush_paths(db: Session) -> None:
    # The partial unique index also catches concurrent writers
    try:
        db.flush()
    except IntegrityError as exc:
        raise SiblingConflictError() from exc


def _descendant_ids(db: Session, location: Location) -> List[UUID]:
    """Ids of every descendant, collected level by level."""
    ids = []
    level = [location.id]
    while level:
        level = [
            row.id
            for row in db.query(Location.id).filter(Location.parent_id.in_(level)).all()
        ]
        ids.extend(level)
    return ids


def get_location(db: Session, location_id: UUID, include_deleted: bool = False) -> Location:
    location = db.get(Location, location_id)
    if location is None or (location.is_deleted and not include_deleted):
        raise LocationNotFoundError()
    return location


def list_locations(db: Session, workspace_id: UUID, parent_id: Optional[UUID] = None) -> List[Location]:
    """Live children of ``parent_id``, or the live roots when it is None."""
    get_workspace(db, workspace_id)
    query = db.query(Location).filter(
        Location.workspace_id == workspace_id,
        Location.is_deleted.is_(False),
    )
    if parent_id is None:
        query = query.filter(Location.parent_id.is_(None))
    else:
        query = query.filter(Location.parent_id == parent_id)
    return query.order_by(Location.name).all()


def get_ancestors(db: Session, location: Location) -> List[Location]:
    """Breadcrumb chain from the root down to ``location`` itself."""
    chain = [location]
    while chain[0].parent_id is not None:
        chain.insert(0, db.get(Location, chain[0].parent_id))
    return chain


def create_location(db: Session, data: LocationCreate) -> Location:
    """
    Create a location under ``data.parent_id`` (or a root).

    Raises:
        EmptySegmentError: the name has no letters or digits.
        ParentNotFoundError: parent missing, soft-deleted or in another workspace.
        DepthExceededError: the new location would sit below level 5.
        SiblingConflictError: a live sibling already sanitizes to the same segment.
    """
    segment = require_segment(data.name)
    get_workspace(db, data.workspace_id)

    with atomic(db):
        parent = None
        if data.parent_id is not None:
            parent = db.get(Location, data.parent_id)
            if parent is None or parent.is_deleted or parent.workspace_id != data.workspace_id:
                raise ParentNotFoundError()

        path = build_path(parent.path if parent else None, segment)
        if path_depth(path) > MAX_LOCATION_DEPTH:
            raise DepthExceededError(MAX_LOCATION_DEPTH)
        if _path_taken(db, data.workspace_id, path):
            raise SiblingConflictError()

        location = Location(
            workspace_id=data.workspace_id,
            parent_id=parent.id if parent else None,
            name=data.name,
            description=data.description,
            path=path,
        )
        db.add(location)
        _flush_paths(db)
        logger.info("location_created", location_id=str(location.id), path=path)

    db.refresh(location)
    return location


def _rename(db: Session, location: Location, name: str) -> None:
    segment = require_segment(name)
    location.name = name

    old_path = location.path
    new_path = replace_last_segment(old_path, segment)
    if new_path == old_path:
        return
    if _path_taken(db, location.workspace_id, new_path, exclude_id=location.id):
        raise SiblingConflictError()

    location.path = new_path
    _flush_paths(db)

    descendant_ids = _descendant_ids(db, location)
    if descendant_ids:
        # Prefix rewrite of the whole subtree in one statement
        suffix = func.substr(Location.path, len(old_path) + 1, type_=String)
        stmt = (
            update(Location)
            .where(Location.id.in_(descendant_ids))
            .values(path=literal(new_path, String) + suffix)
            .execution_options(synchronize_session=False)
        )
        try:
            db.execute(stmt)
        except IntegrityError as exc:
            raise SiblingConflictError() from exc

    logger.info(
        "location_renamed",
        location_id=str(location.id),
        old_path=old_path,
        new_path=new_path,
        descendants=len(descendant_ids),
    )


def rename_location(db: Session, location_id: UUID, new_name: str) -> Location:
    """Rename a location and move its subtree to the new path prefix."""
    name = _location_name.validate_python(new_name)
    require_segment(name)

    with atomic(db):
        location = get_location(db, location_id)
        _rename(db, location, name)

    db.refresh(location)
    return location


def update_location(db: Session, location_id: UUID, data: LocationUpdate) -> Location:
    if "name" in data.model_fields_set:
        require_segment(data.name)

    with atomic(db):
        location = get_location(db, location_id)
        if "name" in data.model_fields_set:
            _rename(db, location, data.name)
        if "description" in data.model_fields_set:
            location.description = data.description
        db.flush()

    db.refresh(location)
    return location


def soft_delete_location(db: Session, location_id: UUID) -> int:
    """
    Mark a location deleted and unassign the boxes placed directly on it.

    Child locations are left alone and keep their paths. Returns the number
    of boxes that lost their location.
    """
    with atomic(db):
        location = get_location(db, location_id)
        location.is_deleted = True
        result = db.execute(
            update(Box)
            .where(Box.location_id == location.id)
            .values(location_id=None)
            .execution_options(synchronize_session=False)
        )
        unassigned = result.rowcount
        logger.info("location_deleted", location_id=str(location.id), unassigned_boxes=unassigned)

    return unassigned
