import logging
from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from campusvault.core.config import settings
from campusvault.core.database import get_db
from campusvault.core.deps import get_current_admin
from campusvault.crud import subject as subject_crud
from campusvault.models.user import User
from campusvault.schemas.backup import BackupInfo
from campusvault.schemas.common import ResponseModel
from campusvault.schemas.subject import SubjectCleanupResult, BranchNormalizeResult
from campusvault.utils import backup

router = APIRouter(prefix="/admin", tags=["Maintenance"])
logger = logging.getLogger(__name__)


@router.post("/subjects/cleanup", response_model=ResponseModel[SubjectCleanupResult])
def cleanup_subjects(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_admin)
):
    """Merge duplicate subjects (admin)"""
    result = subject_crud.cleanup_duplicate_subjects(db)
    return ResponseModel(code=200, data=SubjectCleanupResult(**result))


@router.post("/subjects/normalize-branches", response_model=ResponseModel[BranchNormalizeResult])
def normalize_branches(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_admin)
):
    """Rewrite legacy branch names to their canonical value (admin)"""
    result = subject_crud.normalize_branches(db)
    return ResponseModel(code=200, data=BranchNormalizeResult(**result))


@router.post("/backups", response_model=ResponseModel[BackupInfo], status_code=status.HTTP_201_CREATED)
def create_backup(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_admin)
):
    """Take a backup now (admin)"""
    name = backup.create_backup(db, settings.UPLOAD_DIR, settings.BACKUP_DIR)
    logger.info(f"Backup {name} requested by {current_user.username}")
    info = next(b for b in backup.list_backups(settings.BACKUP_DIR) if b["name"] == name)
    return ResponseModel(code=201, data=BackupInfo(**info), msg="Backup created")


@router.get("/backups", response_model=ResponseModel[List[BackupInfo]])
def get_backups(current_user: User = Depends(get_current_admin)):
    """Available backups, newest first (admin)"""
    return ResponseModel(code=200, data=[BackupInfo(**b) for b in backup.list_backups(settings.BACKUP_DIR)])
