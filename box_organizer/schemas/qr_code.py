"""QR code schemas for request/response validation."""
from datetime import datetime
from typing import Optional, List
from uuid import UUID

from pydantic import BaseModel, Field

from box_organizer.models.qr_code import QrCodeStatus
from box_organizer.schemas.common import MAX_QR_BATCH, MIN_QR_BATCH, QR_TOKEN_PATTERN


class QrCodeBatchCreate(BaseModel):
    """Schema for generating a batch of QR codes."""
    workspace_id: UUID
    # Strict: "5" and 5.0 are rejected, not coerced
    quantity: int = Field(..., ge=MIN_QR_BATCH, le=MAX_QR_BATCH, strict=True)


class QrCodeAssign(BaseModel):
    """Schema for assigning a QR code to a box."""
    box_id: UUID


class QrCodeToken(BaseModel):
    """Token as printed on the label, e.g. QR-A1B2C3."""
    token: str = Field(..., pattern=QR_TOKEN_PATTERN)


class QrCodeResponse(BaseModel):
    """Schema for QR code response."""
    id: UUID
    workspace_id: UUID
    token: str
    status: QrCodeStatus
    box_id: Optional[UUID] = None
    created_at: datetime

    class Config:
        from_attributes = True


class QrCodeBatchResponse(BaseModel):
    """Schema for batch generation response."""
    data: List[QrCodeResponse]
