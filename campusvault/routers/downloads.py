import logging
from typing import List

from fastapi import APIRouter, Depends, status
from fastapi.responses import FileResponse
from sqlalchemy.orm import Session

from campusvault.core.config import settings
from campusvault.core.database import get_db
from campusvault.core.deps import get_current_user, ensure_self_or_admin
from campusvault.core.exceptions import NotFoundError
from campusvault.crud import resource as resource_crud
from campusvault.models.user import User
from campusvault.schemas.common import ResponseModel
from campusvault.schemas.resource import DownloadCreate, DownloadResponse
from campusvault.utils import storage

router = APIRouter(tags=["Downloads"])
logger = logging.getLogger(__name__)


@router.get("/download/{resource_id}")
def download_resource(
    resource_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Stream a resource file; every call logs a download and bumps the counter"""
    resource = resource_crud.get_resource(db, resource_id)
    if not resource:
        raise NotFoundError("Resource not found")

    file_path = storage.blob_path(settings.UPLOAD_DIR, resource.stored_name)
    if not file_path.is_file():
        logger.error(f"File missing for resource {resource_id}: {file_path}")
        raise NotFoundError("File not found")

    resource_crud.record_download(db, current_user.id, resource_id)
    logger.info(f"Download: resource {resource_id} by {current_user.username}")

    return FileResponse(file_path, filename=resource.file_name)


@router.post("/downloads", response_model=ResponseModel[DownloadResponse], status_code=status.HTTP_201_CREATED)
def record_download(
    download_in: DownloadCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Record a download event without streaming the file"""
    if not resource_crud.get_resource(db, download_in.resource_id):
        raise NotFoundError("Resource not found")

    download = resource_crud.record_download(db, current_user.id, download_in.resource_id)
    return ResponseModel(code=201, data=DownloadResponse.model_validate(download))


@router.get("/downloads/user/{user_id}", response_model=ResponseModel[List[DownloadResponse]])
def get_user_downloads(
    user_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Download history of a user"""
    ensure_self_or_admin(current_user, user_id)
    downloads = resource_crud.list_user_downloads(db, user_id)
    return ResponseModel(code=200, data=[DownloadResponse.model_validate(d) for d in downloads])
