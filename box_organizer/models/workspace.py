"""Workspace model."""
import uuid

from sqlalchemy import Column, String, Text, DateTime, Uuid
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from box_organizer.database import Base


class Workspace(Base):
    """Workspace model - tenant boundary owning locations, boxes and QR codes."""
    __tablename__ = "workspaces"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    # Relationships
    locations = relationship("Location", back_populates="workspace", cascade="all, delete-orphan")
    boxes = relationship("Box", back_populates="workspace", cascade="all, delete-orphan")
    qr_codes = relationship("QrCode", back_populates="workspace", cascade="all, delete-orphan")
