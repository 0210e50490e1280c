from typing import Optional
from datetime import datetime
from pydantic import Field

from campusvault.schemas.common import CamelModel


class SubjectBase(CamelModel):
    name: str = Field(min_length=1, max_length=200)
    code: str = Field(min_length=1, max_length=50)
    year: int = Field(ge=1, le=4)
    semester: int = Field(ge=1, le=2)


class SubjectCreate(SubjectBase):
    branch: Optional[str] = None
    icon: Optional[str] = "fas fa-book"


class SubjectUpdate(CamelModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=200)
    code: Optional[str] = Field(default=None, min_length=1, max_length=50)
    icon: Optional[str] = None


class SubjectResponse(SubjectBase):
    id: str
    branch: str
    icon: Optional[str] = None
    created_at: Optional[datetime] = None


class SubjectCleanupResult(CamelModel):
    removed: int
    kept: int


class BranchNormalizeResult(CamelModel):
    changes: int
    removed: int
