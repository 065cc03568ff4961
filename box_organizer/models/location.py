"""Location model."""
import uuid

from sqlalchemy import Column, String, Text, DateTime, Boolean, ForeignKey, Index, Uuid, false
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from box_organizer.database import Base


class Location(Base):
    """
    Location model - a node in the storage hierarchy (room, rack, shelf...).

    ``path`` is the materialized chain of sanitized ancestor names joined
    with dots, ending with this location's own segment. ``parent_id`` keeps
    the adjacency list the path is computed from.
    """
    __tablename__ = "locations"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    workspace_id = Column(Uuid, ForeignKey("workspaces.id", ondelete="CASCADE"), nullable=False, index=True)
    parent_id = Column(Uuid, ForeignKey("locations.id"), nullable=True, index=True)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    path = Column(String(1300), nullable=False, index=True)
    is_deleted = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    # Relationships
    workspace = relationship("Workspace", back_populates="locations")
    parent = relationship("Location", remote_side=[id], back_populates="children")
    children = relationship("Location", back_populates="parent")
    boxes = relationship("Box", back_populates="location")

    __table_args__ = (
        # Sibling names are unique among live locations only
        Index(
            "uq_locations_workspace_path_live",
            "workspace_id",
            "path",
            unique=True,
            postgresql_where=(is_deleted == false()),
            sqlite_where=(is_deleted == false()),
        ),
    )

    @property
    def segment(self) -> str:
        return self.path.rsplit(".", 1)[-1]

    @property
    def depth(self) -> int:
        return self.path.count(".") + 1

    def __repr__(self):
        return f"<Location(id={self.id}, path='{self.path}', is_deleted={self.is_deleted})>"
