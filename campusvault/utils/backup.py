"""
Backup & restore of the database rows and uploaded files.

Layout of one backup:

    <BACKUP_DIR>/campusvault-backup-<timestamp>/
        manifest.json   {name, created, version, includes, paths}
        database.json   {metadata: {backupDate, version, recordCounts}, data: {<table>: [rows]}}
        files/          copy of the upload directory
"""
import json
import logging
import shutil
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, List, Optional

from sqlalchemy import DateTime, or_
from sqlalchemy.orm import Session

from campusvault.models import User, UserSession, Subject, Resource, Download
from campusvault.utils.storage import TEMP_SUFFIX, ensure_dir

logger = logging.getLogger(__name__)

BACKUP_VERSION = "1.0"
BACKUP_PREFIX = "campusvault-backup-"
MANIFEST_FILE = "manifest.json"
DATABASE_FILE = "database.json"
FILES_DIR = "files"

# Restore order; deletion runs in reverse
TABLES = (
    ("users", User),
    ("subjects", Subject),
    ("resources", Resource),
    ("downloads", Download),
)


class BackupError(Exception):
    pass


def generate_backup_name(suffix: str = "") -> str:
    timestamp = datetime.now(timezone.utc).strftime("%Y-%m-%dT%H-%M-%S")
    return f"{BACKUP_PREFIX}{timestamp}{suffix}"


def _serialize(value):
    if isinstance(value, datetime):
        return value.isoformat()
    return value


def _row_to_dict(model, row) -> dict:
    return {column.name: _serialize(getattr(row, column.key)) for column in model.__table__.columns}


def _dict_to_row(model, record: dict):
    values = {}
    for column in model.__table__.columns:
        if column.name not in record:
            continue
        value = record[column.name]
        if isinstance(column.type, DateTime) and isinstance(value, str):
            value = datetime.fromisoformat(value)
        values[column.key] = value
    return model(**values)


def _drop_clashing_users(db: Session, records: List[dict]) -> int:
    """
    Delete current users that share a username or email with a backup user
    stored under another id, so the backup row can take its place.
    """
    removed = 0
    for record in records:
        clashes = db.query(User).filter(
            or_(User.username == record.get("username"), User.email == record.get("email")),
            User.id != record.get("id"),
        ).all()
        for user in clashes:
            db.query(UserSession).filter(UserSession.user_id == user.id).delete(synchronize_session=False)
            db.query(User).filter(User.id == user.id).delete(synchronize_session=False)
            logger.warning(f"Restore: replacing user {user.username} ({user.id}) with backup id {record.get('id')}")
            removed += 1
    return removed


def directory_size(path: Path) -> int:
    return sum(p.stat().st_size for p in Path(path).rglob("*") if p.is_file())


def export_database(db: Session) -> dict:
    data = {
        name: [_row_to_dict(model, row) for row in db.query(model).all()]
        for name, model in TABLES
    }
    return {
        "metadata": {
            "backupDate": datetime.now(timezone.utc).isoformat(),
            "version": BACKUP_VERSION,
            "recordCounts": {name: len(rows) for name, rows in data.items()},
        },
        "data": data,
    }


def _copy_files(src_dir: Path, dest_dir: Path) -> int:
    count = 0
    if not Path(src_dir).exists():
        return count
    for src in Path(src_dir).rglob("*"):
        if not src.is_file():
            continue
        # Skip in-flight uploads, databases and logs
        if src.suffix in (TEMP_SUFFIX, ".db", ".log"):
            continue
        dest = Path(dest_dir) / src.relative_to(src_dir)
        dest.parent.mkdir(parents=True, exist_ok=True)
        shutil.copy2(src, dest)
        count += 1
    return count


def create_backup(db: Session, upload_dir: Path, backup_dir: Path, suffix: str = "") -> str:
    """Write a full backup; a failed backup leaves no partial directory behind"""
    ensure_dir(backup_dir)
    name = generate_backup_name(suffix)
    target = Path(backup_dir) / name
    attempt = 0
    while target.exists():
        attempt += 1
        target = Path(backup_dir) / f"{name}-{attempt}"
    name = target.name

    logger.info(f"Starting backup: {name}")
    try:
        target.mkdir(parents=True)

        export = export_database(db)
        with open(target / DATABASE_FILE, "w", encoding="utf-8") as f:
            json.dump(export, f, ensure_ascii=False, indent=2)

        file_count = _copy_files(upload_dir, target / FILES_DIR)

        manifest = {
            "name": name,
            "created": datetime.now(timezone.utc).isoformat(),
            "version": BACKUP_VERSION,
            "includes": {"database": True, "files": True},
            "paths": {"database": f"./{DATABASE_FILE}", "files": f"./{FILES_DIR}/"},
            "recordCounts": export["metadata"]["recordCounts"],
            "fileCount": file_count,
        }
        with open(target / MANIFEST_FILE, "w", encoding="utf-8") as f:
            json.dump(manifest, f, ensure_ascii=False, indent=2)
    except Exception:
        logger.exception(f"Backup failed: {name}")
        shutil.rmtree(target, ignore_errors=True)
        raise

    logger.info(f"Backup completed: {name} ({file_count} files, {directory_size(target)} bytes)")
    return name


def read_manifest(path: Path) -> Optional[dict]:
    manifest_path = Path(path) / MANIFEST_FILE
    if not manifest_path.exists():
        return None
    try:
        with open(manifest_path, encoding="utf-8") as f:
            return json.load(f)
    except (OSError, ValueError) as e:
        logger.warning(f"Unreadable manifest {manifest_path}: {e}")
        return None


def list_backups(backup_dir: Path) -> List[Dict]:
    """Backups found under backup_dir, newest first"""
    backup_dir = Path(backup_dir)
    if not backup_dir.exists():
        return []

    backups = []
    for path in sorted((p for p in backup_dir.iterdir() if p.is_dir()), key=lambda p: p.name, reverse=True):
        manifest = read_manifest(path) or {}
        created = manifest.get("created")
        backups.append({
            "name": path.name,
            "created": datetime.fromisoformat(created) if created else None,
            "size_bytes": directory_size(path),
            "record_counts": manifest.get("recordCounts", {}),
        })
    return backups


def restore_backup(db: Session, name: str, upload_dir: Path, backup_dir: Path) -> Dict[str, int]:
    """
    Replace subjects, resources and downloads with the backup's rows and
    upsert its users, then copy its files back into upload_dir. A current
    user whose username or email belongs to a backup user with another id
    is replaced by the backup user.

    A "-prerestore" backup of the current state is taken first. The database
    part runs in one transaction.
    """
    source = Path(backup_dir) / name
    database_file = source / DATABASE_FILE
    if not source.is_dir():
        raise BackupError(f"Backup '{name}' not found")
    if not database_file.exists():
        raise BackupError(f"Backup '{name}' has no {DATABASE_FILE}")

    with open(database_file, encoding="utf-8") as f:
        payload = json.load(f)
    data = payload.get("data", {})

    pre_restore = create_backup(db, upload_dir, backup_dir, suffix="-prerestore")
    logger.info(f"Pre-restore backup created: {pre_restore}")

    counts = {}
    try:
        # Users are kept (admin accounts survive a restore) and upserted below
        for table_name, model in reversed(TABLES):
            if model is not User:
                db.query(model).delete(synchronize_session=False)
        _drop_clashing_users(db, data.get("users", []))
        # Rows loaded by the pre-restore export are stale now
        db.expunge_all()

        for table_name, model in TABLES:
            records = data.get(table_name, [])
            for record in records:
                db.merge(_dict_to_row(model, record))
            # Parents must exist before children reference them
            db.flush()
            counts[table_name] = len(records)
        db.commit()
    except Exception:
        db.rollback()
        logger.exception(f"Restore failed: {name}")
        raise

    counts["files"] = _copy_files(source / FILES_DIR, ensure_dir(upload_dir))
    logger.info(f"Restore completed from {name}: {counts}")
    return counts


def prune_backups(backup_dir: Path, keep: int) -> List[str]:
    """Remove all but the newest `keep` regular backups (pre-restore snapshots are left alone)"""
    regular = [
        b["name"] for b in list_backups(backup_dir)
        if "-prerestore" not in b["name"]
    ]
    removed = regular[keep:] if keep > 0 else []
    for name in removed:
        shutil.rmtree(Path(backup_dir) / name, ignore_errors=True)
        logger.info(f"Pruned backup: {name}")
    return removed
