from sqlalchemy import Column, Integer, String, DateTime
from sqlalchemy.orm import relationship
from campusvault.core.database import Base
from campusvault.models.user import generate_uuid, utcnow


class Subject(Base):
    __tablename__ = "subjects"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    name = Column(String(200), nullable=False)
    code = Column(String(50), nullable=False)
    year = Column(Integer, nullable=False, index=True)
    semester = Column(Integer, nullable=False, comment="1 or 2")
    branch = Column(String(100), nullable=False, default="CSE", index=True)
    icon = Column(String(100), default="fas fa-book")
    created_at = Column(DateTime, default=utcnow)

    # Non-owning: a subject can only be deleted once it has no resources
    resources = relationship("Resource", back_populates="subject")
