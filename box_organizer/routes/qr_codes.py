"""QR code routes."""
from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from box_organizer.database import get_db
from box_organizer.models.qr_code import QrCodeStatus
from box_organizer.schemas.qr_code import (
    QrCodeAssign,
    QrCodeBatchCreate,
    QrCodeBatchResponse,
    QrCodeResponse,
)
from box_organizer.services import qr_code_service

router = APIRouter(prefix="/qr-codes", tags=["QR Codes"])


@router.get("/", response_model=List[QrCodeResponse])
async def list_qr_codes(
    workspace_id: UUID,
    status: Optional[QrCodeStatus] = Query(None, description="Filter by status"),
    db: Session = Depends(get_db),
):
    """List QR codes of a workspace, newest first."""
    return qr_code_service.list_qr_codes(db, workspace_id, status)


@router.post("/batch", response_model=QrCodeBatchResponse, status_code=status.HTTP_201_CREATED)
async def generate_batch(
    batch_data: QrCodeBatchCreate,
    db: Session = Depends(get_db),
):
    """Generate 1 to 100 QR codes ready for printing."""
    qr_codes = qr_code_service.generate_batch(db, batch_data)
    return QrCodeBatchResponse(data=[QrCodeResponse.model_validate(qr) for qr in qr_codes])


@router.get("/{token}", response_model=QrCodeResponse)
async def resolve_token(
    token: str,
    workspace_id: Optional[UUID] = None,
    db: Session = Depends(get_db),
):
    """Resolve a scanned token. ``box_id`` is set when the code is assigned."""
    return qr_code_service.resolve_by_token(db, token, workspace_id)


@router.post("/{qr_code_id}/assign", response_model=QrCodeResponse)
async def assign_qr_code(
    qr_code_id: UUID,
    assign_data: QrCodeAssign,
    db: Session = Depends(get_db),
):
    """Attach a QR code to a box."""
    return qr_code_service.assign(db, qr_code_id, assign_data.box_id)


@router.post("/{qr_code_id}/release", response_model=QrCodeResponse)
async def release_qr_code(
    qr_code_id: UUID,
    db: Session = Depends(get_db),
):
    """Return a QR code to the pool."""
    return qr_code_service.release(db, qr_code_id)
