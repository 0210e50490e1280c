from sqlalchemy import Column, Integer, String, DateTime, Text, Boolean, ForeignKey
from sqlalchemy.orm import relationship
from campusvault.core.database import Base
from campusvault.models.user import generate_uuid, utcnow


RESOURCE_TYPES = ("notes", "pyqs", "assignments", "lab_manual", "presentation")


class Resource(Base):
    __tablename__ = "resources"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    file_name = Column(String(255), nullable=False, comment="Original file name")
    file_size = Column(Integer, nullable=False, comment="Size in bytes")
    file_type = Column(String(20), nullable=False, comment="Lower-case extension, e.g. .pdf")
    resource_type = Column(String(50), nullable=False, index=True)

    # Foreign keys
    subject_id = Column(String(36), ForeignKey("subjects.id"), nullable=False, index=True)
    uploaded_by = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)

    # Stats
    download_count = Column(Integer, default=0, nullable=False)
    is_approved = Column(Boolean, default=True)

    # Timestamps
    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    # Relationships
    subject = relationship("Subject", back_populates="resources")
    uploader = relationship("User", back_populates="resources")

    @property
    def stored_name(self) -> str:
        """Blob name on disk: <id><ext>"""
        return f"{self.id}{self.file_type}"


class Download(Base):
    """Append-only download log, one row per download action"""
    __tablename__ = "downloads"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    user_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    resource_id = Column(String(36), ForeignKey("resources.id"), nullable=False, index=True)
    downloaded_at = Column(DateTime, default=utcnow)
