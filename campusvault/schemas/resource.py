from typing import Optional
from datetime import datetime

from campusvault.schemas.common import CamelModel


class ResourceResponse(CamelModel):
    id: str
    title: str
    description: Optional[str] = None
    file_name: str
    file_size: int
    file_type: str
    resource_type: str
    subject_id: str
    uploaded_by: str
    download_count: int = 0
    is_approved: bool = True
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class DownloadCreate(CamelModel):
    resource_id: str


class DownloadResponse(CamelModel):
    id: str
    user_id: str
    resource_id: str
    downloaded_at: Optional[datetime] = None
