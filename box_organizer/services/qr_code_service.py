"""QR code lifecycle: available -> assigned -> available."""
from typing import List, Optional
from uuid import UUID

import structlog
from sqlalchemy.orm import Session

from box_organizer.database import atomic
from box_organizer.errors import (
    BoxNotFoundError,
    QrCodeAlreadyAssignedError,
    QrCodeNotFoundError,
    WorkspaceMismatchError,
)
from box_organizer.models.box import Box
from box_organizer.models.qr_code import QrCode, QrCodeStatus
from box_organizer.schemas.qr_code import QrCodeBatchCreate, QrCodeToken
from box_organizer.services.identifiers import generate_qr_token, insert_with_identifier
from box_organizer.services.workspace_service import get_workspace

logger = structlog.get_logger(__name__)


# ============================================================================
# In-transaction helpers (no commit)
# ============================================================================

def attach(qr_code: QrCode, box: Box) -> None:
    """Link ``qr_code`` to ``box``. The caller owns the transaction."""
    if qr_code.status == QrCodeStatus.assigned and qr_code.box_id != box.id:
        raise QrCodeAlreadyAssignedError()
    qr_code.box = box
    qr_code.status = QrCodeStatus.assigned


def detach(qr_code: QrCode) -> None:
    """Return ``qr_code`` to the pool. The caller owns the transaction."""
    qr_code.box = None
    qr_code.status = QrCodeStatus.available


def resolve_for_workspace(db: Session, workspace_id: UUID, qr_code_id: UUID) -> QrCode:
    qr_code = db.get(QrCode, qr_code_id)
    if qr_code is None:
        raise QrCodeNotFoundError()
    if qr_code.workspace_id != workspace_id:
        raise WorkspaceMismatchError("QR code")
    return qr_code


# ============================================================================
# Operations
# ============================================================================

def get_qr_code(db: Session, qr_code_id: UUID) -> QrCode:
    qr_code = db.get(QrCode, qr_code_id)
    if qr_code is None:
        raise QrCodeNotFoundError()
    return qr_code


def list_qr_codes(
    db: Session,
    workspace_id: UUID,
    status: Optional[QrCodeStatus] = None,
) -> List[QrCode]:
    """QR codes of a workspace, newest first."""
    get_workspace(db, workspace_id)
    query = db.query(QrCode).filter(QrCode.workspace_id == workspace_id)
    if status is not None:
        query = query.filter(QrCode.status == status)
    return query.order_by(QrCode.created_at.desc(), QrCode.token).all()


def _token_exists(db: Session, token: str) -> bool:
    return db.query(db.query(QrCode.id).filter(QrCode.token == token).exists()).scalar()


def generate_batch(db: Session, data: QrCodeBatchCreate) -> List[QrCode]:
    """Create ``data.quantity`` available QR codes with fresh tokens."""
    get_workspace(db, data.workspace_id)

    with atomic(db):
        qr_codes = [
            insert_with_identifier(
                db,
                lambda token: QrCode(workspace_id=data.workspace_id, token=token, status=QrCodeStatus.available),
                generate_qr_token,
                lambda token: _token_exists(db, token),
                column="token",
            )
            for _ in range(data.quantity)
        ]
        logger.info("qr_batch_generated", workspace_id=str(data.workspace_id), quantity=data.quantity)

    for qr_code in qr_codes:
        db.refresh(qr_code)
    return qr_codes


def assign(db: Session, qr_code_id: UUID, box_id: UUID) -> QrCode:
    """
    Assign a QR code to a box.

    A box carries at most one code, so a code the box already had is
    released first. Assigning a code to the box it already belongs to is a
    no-op.
    """
    with atomic(db):
        qr_code = get_qr_code(db, qr_code_id)
        box = db.get(Box, box_id)
        if box is None:
            raise BoxNotFoundError()
        if box.workspace_id != qr_code.workspace_id:
            raise WorkspaceMismatchError("Box")
        if qr_code.status == QrCodeStatus.assigned and qr_code.box_id != box.id:
            raise QrCodeAlreadyAssignedError()

        previous = box.qr_code
        if previous is not None and previous.id != qr_code.id:
            detach(previous)
            db.flush()
        attach(qr_code, box)
        db.flush()
        logger.info("qr_code_assigned", token=qr_code.token, box_id=str(box.id))

    db.refresh(qr_code)
    return qr_code


def release(db: Session, qr_code_id: UUID) -> QrCode:
    """Return a QR code to ``available``. Releasing a free code is a no-op."""
    with atomic(db):
        qr_code = get_qr_code(db, qr_code_id)
        if qr_code.status == QrCodeStatus.assigned:
            box_id = qr_code.box_id
            detach(qr_code)
            db.flush()
            logger.info("qr_code_released", token=qr_code.token, box_id=str(box_id))

    db.refresh(qr_code)
    return qr_code


def resolve_by_token(db: Session, token: str, workspace_id: Optional[UUID] = None) -> QrCode:
    """
    Look a QR code up by its printed token.

    Callers branch on ``status``: an assigned code leads to its box, an
    available one to box creation pre-filled with the code. When
    ``workspace_id`` is given, codes of other workspaces are not found.
    """
    token = QrCodeToken(token=token).token
    qr_code = db.query(QrCode).filter(QrCode.token == token).first()
    if qr_code is None or (workspace_id is not None and qr_code.workspace_id != workspace_id):
        raise QrCodeNotFoundError()
    return qr_code
