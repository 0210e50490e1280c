"""Subject directory data access."""
import logging
from collections import defaultdict
from typing import Dict, List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from campusvault.core.config import settings
from campusvault.core.exceptions import ConflictError, NotFoundError
from campusvault.models.resource import Resource
from campusvault.models.subject import Subject

logger = logging.getLogger(__name__)


def canonical_branch(branch: Optional[str]) -> str:
    """Resolve a requested branch: blank -> default, legacy alias -> canonical name"""
    branch = (branch or "").strip()
    if not branch:
        return settings.DEFAULT_BRANCH
    return settings.BRANCH_ALIASES.get(branch, branch)


def legacy_names(branch: str) -> List[str]:
    """Legacy aliases that map onto a canonical branch"""
    return [alias for alias, target in settings.BRANCH_ALIASES.items() if target == branch]


def list_subjects(db: Session, year: int, semester: int, branch: Optional[str] = None) -> List[Subject]:
    return db.query(Subject).filter(
        Subject.year == year,
        Subject.semester == semester,
        Subject.branch == canonical_branch(branch)
    ).order_by(Subject.name).all()


def list_all_subjects(db: Session) -> List[Subject]:
    return db.query(Subject).order_by(Subject.year, Subject.semester, Subject.name).all()


def get_subject(db: Session, subject_id: str) -> Optional[Subject]:
    return db.query(Subject).filter(Subject.id == subject_id).first()


def find_existing_subject(db: Session, name: str, code: str, year: int, semester: int, branch: str) -> Optional[Subject]:
    """Exact match on the five-field key; rows still carrying a legacy branch alias also match"""
    query = db.query(Subject).filter(
        Subject.name == name,
        Subject.code == code,
        Subject.year == year,
        Subject.semester == semester,
    )
    subject = query.filter(Subject.branch == branch).order_by(Subject.created_at).first()
    if subject is None:
        aliases = legacy_names(branch)
        if aliases:
            subject = query.filter(Subject.branch.in_(aliases)).order_by(Subject.created_at).first()
    return subject


def create_subject(
    db: Session,
    name: str,
    code: str,
    year: int,
    semester: int,
    branch: Optional[str] = None,
    icon: Optional[str] = None,
) -> tuple[Subject, bool]:
    """Idempotent create. Returns (subject, created)."""
    branch = canonical_branch(branch)
    existing = find_existing_subject(db, name, code, year, semester, branch)
    if existing:
        return existing, False

    subject = Subject(
        name=name,
        code=code,
        year=year,
        semester=semester,
        branch=branch,
        icon=icon or "fas fa-book",
    )
    db.add(subject)
    db.commit()
    db.refresh(subject)
    logger.info(f"Subject created: {subject.code} {subject.name} ({subject.branch} Y{year}S{semester})")
    return subject, True


def update_subject(db: Session, subject_id: str, **fields) -> Subject:
    subject = get_subject(db, subject_id)
    if not subject:
        raise NotFoundError("Subject not found")

    for key, value in fields.items():
        if value is not None:
            setattr(subject, key, value)
    db.commit()
    db.refresh(subject)
    return subject


def count_subject_resources(db: Session, subject_id: str) -> int:
    return db.query(func.count(Resource.id)).filter(Resource.subject_id == subject_id).scalar() or 0


def delete_subject(db: Session, subject_id: str) -> None:
    """Delete a subject that owns no resources"""
    subject = get_subject(db, subject_id)
    if not subject:
        raise NotFoundError("Subject not found")

    resource_count = count_subject_resources(db, subject_id)
    if resource_count:
        raise ConflictError(f"Cannot delete subject: {resource_count} resource(s) still reference it")

    db.delete(subject)
    db.commit()
    logger.info(f"Subject deleted: {subject_id}")


# --- Maintenance ---

def cleanup_duplicate_subjects(db: Session) -> Dict[str, int]:
    """
    Merge subjects sharing (name, code, year, semester, branch).

    The oldest row of each group is kept; resources of the other rows are
    repointed to it before those rows are deleted.
    """
    groups = defaultdict(list)
    for subject in db.query(Subject).order_by(Subject.created_at, Subject.id).all():
        key = (subject.name, subject.code, subject.year, subject.semester, subject.branch)
        groups[key].append(subject)

    removed = 0
    try:
        for duplicates in groups.values():
            keep, *extra = duplicates
            for subject in extra:
                db.query(Resource).filter(Resource.subject_id == subject.id).update(
                    {"subject_id": keep.id}, synchronize_session=False
                )
                db.delete(subject)
                removed += 1
        db.commit()
    except Exception:
        db.rollback()
        raise

    logger.info(f"Duplicate subject cleanup: removed {removed}, kept {len(groups)}")
    return {"removed": removed, "kept": len(groups)}


def normalize_branches(db: Session, aliases: Optional[Dict[str, str]] = None) -> Dict[str, int]:
    """Rewrite legacy branch names to their canonical value and merge the duplicates this creates"""
    aliases = settings.BRANCH_ALIASES if aliases is None else aliases
    removed = cleanup_duplicate_subjects(db)["removed"]

    changes = 0
    try:
        for legacy, canonical in aliases.items():
            if legacy == canonical:
                continue
            updated = db.query(Subject).filter(Subject.branch == legacy).update(
                {"branch": canonical}, synchronize_session=False
            )
            if updated:
                logger.info(f"Branch migration: updated {updated} subjects from '{legacy}' to '{canonical}'")
            changes += updated
        db.commit()
    except Exception:
        db.rollback()
        raise

    db.expire_all()
    removed += cleanup_duplicate_subjects(db)["removed"]
    return {"changes": changes, "removed": removed}
