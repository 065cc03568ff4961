"""Box operations, search and duplicate-name detection."""
from typing import List, Tuple
from uuid import UUID

import structlog
from sqlalchemy import func
from sqlalchemy.orm import Session, joinedload

from box_organizer.database import atomic
from box_organizer.errors import (
    BoxNotFoundError,
    LocationNotFoundError,
    QrCodeAlreadyAssignedError,
    WorkspaceMismatchError,
)
from box_organizer.models.box import Box
from box_organizer.models.location import Location
from box_organizer.models.qr_code import QrCodeStatus
from box_organizer.schemas.box import BoxCreate, BoxSearchQuery, BoxUpdate, DuplicateNameCheck
from box_organizer.services import qr_code_service
from box_organizer.services.identifiers import generate_short_id, insert_with_identifier
from box_organizer.services.search_index import (
    build_search_index,
    match_clause,
    query_tokens,
    rank_expression,
)
from box_organizer.services.workspace_service import get_workspace

logger = structlog.get_logger(__name__)

INDEXED_FIELDS = {"name", "description", "tags"}


def _resolve_location(db: Session, workspace_id: UUID, location_id: UUID) -> Location:
    location = db.get(Location, location_id)
    if location is None or location.is_deleted:
        raise LocationNotFoundError()
    if location.workspace_id != workspace_id:
        raise WorkspaceMismatchError("Location")
    return location


def _short_id_exists(db: Session, workspace_id: UUID, short_id: str) -> bool:
    query = db.query(Box.id).filter(Box.workspace_id == workspace_id, Box.short_id == short_id)
    return db.query(query.exists()).scalar()


def _reindex(box: Box) -> None:
    box.search_index = build_search_index(box.name, box.description, box.tags)


def get_box(db: Session, box_id: UUID) -> Box:
    box = db.get(Box, box_id)
    if box is None:
        raise BoxNotFoundError()
    return box


def get_box_by_short_id(db: Session, workspace_id: UUID, short_id: str) -> Box:
    box = db.query(Box).filter(Box.workspace_id == workspace_id, Box.short_id == short_id).first()
    if box is None:
        raise BoxNotFoundError()
    return box


def create_box(db: Session, data: BoxCreate) -> Box:
    """
    Create a box with a fresh short id and its search index.

    Raises:
        LocationNotFoundError / QrCodeNotFoundError: unknown or deleted reference.
        WorkspaceMismatchError: a reference belongs to another workspace.
        QrCodeAlreadyAssignedError: the QR code already labels another box.
        IdentifierExhaustedError: no free short id after the retry budget.
    """
    get_workspace(db, data.workspace_id)

    with atomic(db):
        location = None
        if data.location_id is not None:
            location = _resolve_location(db, data.workspace_id, data.location_id)

        qr_code = None
        if data.qr_code_id is not None:
            qr_code = qr_code_service.resolve_for_workspace(db, data.workspace_id, data.qr_code_id)
            if qr_code.status == QrCodeStatus.assigned:
                raise QrCodeAlreadyAssignedError()

        def build(short_id: str) -> Box:
            box = Box(
                workspace_id=data.workspace_id,
                short_id=short_id,
                name=data.name,
                description=data.description,
                tags=data.tags,
                location_id=location.id if location else None,
            )
            _reindex(box)
            return box

        box = insert_with_identifier(
            db,
            build,
            generate_short_id,
            lambda candidate: _short_id_exists(db, data.workspace_id, candidate),
            column="short_id",
        )

        if qr_code is not None:
            qr_code_service.attach(qr_code, box)
            db.flush()

        logger.info("box_created", box_id=str(box.id), short_id=box.short_id)

    db.refresh(box)
    return box


def update_box(db: Session, box_id: UUID, data: BoxUpdate) -> Box:
    """
    Apply a partial update.

    Only fields present in the payload are touched. Changing ``qr_code_id``
    releases the previous code and assigns the new one in the same
    transaction.
    """
    fields = data.model_fields_set

    with atomic(db):
        box = get_box(db, box_id)

        for field in INDEXED_FIELDS & fields:
            setattr(box, field, getattr(data, field))
        if INDEXED_FIELDS & fields:
            _reindex(box)

        if "location_id" in fields:
            if data.location_id is None:
                box.location_id = None
            else:
                box.location_id = _resolve_location(db, box.workspace_id, data.location_id).id

        if "qr_code_id" in fields:
            current = box.qr_code
            if data.qr_code_id is None:
                if current is not None:
                    qr_code_service.detach(current)
            elif current is None or current.id != data.qr_code_id:
                new_code = qr_code_service.resolve_for_workspace(db, box.workspace_id, data.qr_code_id)
                if new_code.status == QrCodeStatus.assigned:
                    raise QrCodeAlreadyAssignedError()
                if current is not None:
                    qr_code_service.detach(current)
                    # Free the unique box_id slot before the new code takes it
                    db.flush()
                qr_code_service.attach(new_code, box)

        db.flush()
        logger.info("box_updated", box_id=str(box.id), fields=sorted(fields))

    db.refresh(box)
    return box


def delete_box(db: Session, box_id: UUID) -> None:
    """Delete a box, returning its QR code to the pool."""
    with atomic(db):
        box = get_box(db, box_id)
        if box.qr_code is not None:
            qr_code_service.detach(box.qr_code)
            db.flush()
        db.delete(box)
        logger.info("box_deleted", box_id=str(box_id))


def search_boxes(db: Session, query: BoxSearchQuery) -> Tuple[List[Box], int]:
    """
    Search and page through the boxes of a workspace.

    With ``q`` every query token must match a whole indexed word and results
    are ranked by relevance (name over description over tags), newest first
    on ties. Without ``q`` boxes come newest first. Returns the page and the
    total number of matches.
    """
    get_workspace(db, query.workspace_id)

    base = db.query(Box).filter(Box.workspace_id == query.workspace_id)
    if query.location_id is not None:
        base = base.filter(Box.location_id == query.location_id)
    if query.is_assigned is not None:
        if query.is_assigned:
            base = base.filter(Box.location_id.isnot(None))
        else:
            base = base.filter(Box.location_id.is_(None))

    order = [Box.created_at.desc(), Box.id]
    if query.q is not None:
        tokens = query_tokens(query.q)
        if not tokens:
            # Punctuation-only queries match nothing
            return [], 0
        base = base.filter(match_clause(Box.search_index, tokens))
        order.insert(0, rank_expression(Box.search_index, tokens).desc())

    total = base.count()
    boxes = (
        base.options(joinedload(Box.location), joinedload(Box.qr_code))
        .order_by(*order)
        .offset(query.offset)
        .limit(query.limit)
        .all()
    )
    return boxes, total


def check_duplicate_name(db: Session, check: DuplicateNameCheck) -> Tuple[bool, int]:
    """
    Count boxes with exactly this name (case-sensitive).

    Advisory only: any failure is logged and reported as no duplicate.
    """
    try:
        query = db.query(func.count(Box.id)).filter(
            Box.workspace_id == check.workspace_id,
            Box.name == check.name,
        )
        if check.exclude_box_id is not None:
            query = query.filter(Box.id != check.exclude_box_id)
        count = query.scalar() or 0
    except Exception as exc:
        logger.warning("duplicate_check_failed", error=str(exc))
        db.rollback()
        return False, 0
    return count > 0, count
