"""Resource, download-log and stats data access."""
import logging
from typing import Dict, List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from campusvault.models.resource import Resource, Download

logger = logging.getLogger(__name__)


def list_resources(db: Session, subject_id: str, resource_type: Optional[str] = None) -> List[Resource]:
    query = db.query(Resource).filter(Resource.subject_id == subject_id)
    if resource_type:
        query = query.filter(Resource.resource_type == resource_type)
    return query.order_by(Resource.created_at.desc()).all()


def get_resource(db: Session, resource_id: str) -> Optional[Resource]:
    return db.query(Resource).filter(Resource.id == resource_id).first()


def list_user_resources(db: Session, user_id: str) -> List[Resource]:
    return db.query(Resource).filter(Resource.uploaded_by == user_id).order_by(Resource.created_at.desc()).all()


def create_resource(
    db: Session,
    title: str,
    file_name: str,
    file_size: int,
    file_type: str,
    resource_type: str,
    subject_id: str,
    uploaded_by: str,
    description: Optional[str] = None,
) -> Resource:
    resource = Resource(
        title=title,
        description=description,
        file_name=file_name,
        file_size=file_size,
        file_type=file_type,
        resource_type=resource_type,
        subject_id=subject_id,
        uploaded_by=uploaded_by,
    )
    db.add(resource)
    db.commit()
    db.refresh(resource)
    return resource


def delete_resource(db: Session, resource: Resource) -> None:
    """Delete the row and its download log; the blob is the caller's business"""
    db.query(Download).filter(Download.resource_id == resource.id).delete(synchronize_session=False)
    db.delete(resource)
    db.commit()


# --- Downloads ---

def record_download(db: Session, user_id: str, resource_id: str) -> Download:
    """Append one Download row and bump the counter by exactly one, in one commit"""
    download = Download(user_id=user_id, resource_id=resource_id)
    db.add(download)
    db.query(Resource).filter(Resource.id == resource_id).update(
        {Resource.download_count: Resource.download_count + 1}, synchronize_session=False
    )
    db.commit()
    db.refresh(download)
    return download


def list_user_downloads(db: Session, user_id: str) -> List[Download]:
    return db.query(Download).filter(Download.user_id == user_id).order_by(Download.downloaded_at.desc()).all()


# --- Stats ---

def get_user_stats(db: Session, user_id: str) -> Dict[str, int]:
    uploads = db.query(func.count(Resource.id)).filter(Resource.uploaded_by == user_id).scalar()
    downloads = db.query(func.count(Download.id)).filter(Download.user_id == user_id).scalar()
    total_downloads = db.query(func.sum(Resource.download_count)).filter(Resource.uploaded_by == user_id).scalar()
    return {
        "uploads": uploads or 0,
        "downloads": downloads or 0,
        "total_downloads": int(total_downloads or 0),
    }
