import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile, status
from sqlalchemy.orm import Session

from campusvault.core.config import settings
from campusvault.core.database import get_db
from campusvault.core.deps import get_current_user, ensure_self_or_admin
from campusvault.core.exceptions import AppError, ForbiddenError, NotFoundError, ValidationError
from campusvault.crud import resource as resource_crud
from campusvault.crud import subject as subject_crud
from campusvault.models.resource import RESOURCE_TYPES
from campusvault.models.user import User
from campusvault.schemas.common import ResponseModel
from campusvault.schemas.resource import ResourceResponse
from campusvault.utils import storage

router = APIRouter(prefix="/resources", tags=["Resources"])
logger = logging.getLogger(__name__)


@router.get("/user/{user_id}", response_model=ResponseModel[List[ResourceResponse]])
def get_user_resources(
    user_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Resources uploaded by a user"""
    ensure_self_or_admin(current_user, user_id)
    resources = resource_crud.list_user_resources(db, user_id)
    return ResponseModel(code=200, data=[ResourceResponse.model_validate(r) for r in resources])


@router.get("/{subject_id}", response_model=ResponseModel[List[ResourceResponse]])
def get_resources(
    subject_id: str,
    type: Optional[str] = Query(None, description="notes / pyqs / assignments / lab_manual / presentation"),
    db: Session = Depends(get_db)
):
    """Resources of a subject, newest first"""
    resources = resource_crud.list_resources(db, subject_id, type)
    return ResponseModel(code=200, data=[ResourceResponse.model_validate(r) for r in resources])


@router.post("", response_model=ResponseModel[ResourceResponse], status_code=status.HTTP_201_CREATED)
def upload_resource(
    file: Optional[UploadFile] = File(None),
    title: str = Form(..., min_length=1, max_length=255),
    description: Optional[str] = Form(None),
    resourceType: str = Form(...),
    subjectId: str = Form(...),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Upload a file (multipart field "file") and record it under a subject"""
    if settings.UPLOAD_ADMIN_ONLY and not current_user.is_admin:
        raise ForbiddenError("Only admins can upload resources")

    # 1. Reject before anything touches the disk
    title = title.strip()
    if not title:
        raise ValidationError("Title is required")
    if file is None or not file.filename:
        raise ValidationError("No file uploaded")
    if not storage.is_allowed_extension(file.filename, settings.ALLOWED_EXTENSIONS):
        allowed = ", ".join(ext.lstrip(".").upper() for ext in settings.ALLOWED_EXTENSIONS)
        raise ValidationError(f"Invalid file type. Only {allowed} are allowed.")
    if resourceType not in RESOURCE_TYPES:
        raise ValidationError(f"Invalid resource type: {resourceType}")
    if not subject_crud.get_subject(db, subjectId):
        raise NotFoundError("Subject not found")

    # 2. Stream to a temp file (size-limited)
    temp_path, size = storage.save_to_temp(file.file, settings.UPLOAD_DIR, settings.MAX_UPLOAD_SIZE)

    # 3. Insert metadata, then rename the blob to <id><ext>
    try:
        resource = resource_crud.create_resource(
            db,
            title=title,
            description=description,
            file_name=file.filename,
            file_size=size,
            file_type=storage.file_extension(file.filename),
            resource_type=resourceType,
            subject_id=subjectId,
            uploaded_by=current_user.id,
        )
    except Exception:
        db.rollback()
        storage.remove_file(temp_path)
        raise

    try:
        storage.finalize(temp_path, settings.UPLOAD_DIR, resource.stored_name)
    except OSError as e:
        logger.error(f"Could not store file for resource {resource.id}, removing the row: {e}")
        resource_crud.delete_resource(db, resource)
        storage.remove_file(temp_path)
        raise AppError("Could not store the uploaded file") from e

    logger.info(f"Resource uploaded: {resource.id} '{resource.title}' ({size} bytes) by {current_user.username}")

    return ResponseModel(code=201, data=ResourceResponse.model_validate(resource), msg="Resource uploaded")


@router.delete("/{id}", response_model=ResponseModel)
def delete_resource(
    id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Delete a resource and its file (owner or admin)"""
    resource = resource_crud.get_resource(db, id)
    if not resource:
        raise NotFoundError("Resource not found")

    if resource.uploaded_by != current_user.id and not current_user.is_admin:
        raise ForbiddenError("You can only delete your own resources")

    stored_name = resource.stored_name
    resource_crud.delete_resource(db, resource)

    if not storage.remove_file(storage.blob_path(settings.UPLOAD_DIR, stored_name)):
        logger.warning(f"Resource {id} deleted but its file {stored_name} was not on disk")

    logger.info(f"Resource deleted: {id} by {current_user.username}")
    return ResponseModel(code=200, msg="Resource deleted")
