"""Box model."""
import uuid

from sqlalchemy import Column, String, Text, DateTime, ForeignKey, JSON, UniqueConstraint, Uuid
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from box_organizer.database import Base


class Box(Base):
    """Box model - belongs to a workspace, optionally placed at a location."""
    __tablename__ = "boxes"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    workspace_id = Column(Uuid, ForeignKey("workspaces.id", ondelete="CASCADE"), nullable=False, index=True)
    location_id = Column(Uuid, ForeignKey("locations.id", ondelete="SET NULL"), nullable=True, index=True)
    short_id = Column(String(10), nullable=False)
    name = Column(String(100), nullable=False, index=True)
    description = Column(Text, nullable=True)
    tags = Column(JSON(none_as_null=True), nullable=True)

    # Derived from name, description and tags on every write
    search_index = Column(Text, nullable=False, default="")

    created_at = Column(DateTime(timezone=True), server_default=func.now(), index=True)
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    # Relationships
    workspace = relationship("Workspace", back_populates="boxes")
    location = relationship("Location", back_populates="boxes")
    qr_code = relationship("QrCode", back_populates="box", uselist=False)

    __table_args__ = (
        UniqueConstraint("workspace_id", "short_id", name="uq_boxes_workspace_short_id"),
    )

    @property
    def qr_code_id(self):
        return self.qr_code.id if self.qr_code is not None else None

    @property
    def qr_token(self):
        return self.qr_code.token if self.qr_code is not None else None
