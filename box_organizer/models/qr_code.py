"""QR code model and status enumeration."""
import enum
import uuid

from sqlalchemy import Column, String, DateTime, Enum, ForeignKey, CheckConstraint, Uuid
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from box_organizer.database import Base


class QrCodeStatus(str, enum.Enum):
    """QR code lifecycle states."""
    available = "available"
    assigned = "assigned"


class QrCode(Base):
    """
    Pre-generated QR code that can be attached to at most one box.

    ``box_id`` is the only stored link between a box and its QR code, so the
    box side (``Box.qr_code``) always mirrors it.
    """
    __tablename__ = "qr_codes"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    workspace_id = Column(Uuid, ForeignKey("workspaces.id", ondelete="CASCADE"), nullable=False, index=True)
    token = Column(String(20), unique=True, index=True, nullable=False)
    status = Column(
        Enum(QrCodeStatus, native_enum=False, length=20),
        default=QrCodeStatus.available,
        nullable=False,
    )
    box_id = Column(Uuid, ForeignKey("boxes.id", ondelete="SET NULL"), unique=True, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), index=True)

    # Relationships
    workspace = relationship("Workspace", back_populates="qr_codes")
    box = relationship("Box", back_populates="qr_code")

    __table_args__ = (
        CheckConstraint(
            "(status = 'assigned' AND box_id IS NOT NULL) OR (status = 'available' AND box_id IS NULL)",
            name="ck_qr_codes_status_box",
        ),
    )

    def __repr__(self):
        return f"<QrCode(token='{self.token}', status={self.status}, box_id={self.box_id})>"
