#!/usr/bin/env python3
"""
CampusVault backup & restore utility.

Usage:
    python scripts/backup.py create
    python scripts/backup.py list
    python scripts/backup.py restore <backup-name>
    python scripts/backup.py prune [--keep 7]
"""
import argparse
import os
import sys

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from campusvault.core.config import settings
from campusvault.core.database import SessionLocal, engine, Base
from campusvault.utils import backup


def cmd_create(db, args):
    name = backup.create_backup(db, settings.UPLOAD_DIR, settings.BACKUP_DIR)
    print(f"🎉 Backup created: {name}")
    print(f"📍 Location: {settings.BACKUP_DIR / name}")


def cmd_list(db, args):
    backups = backup.list_backups(settings.BACKUP_DIR)
    if not backups:
        print("No backups found")
        return
    print("📋 Available backups:")
    print("─" * 80)
    for b in backups:
        created = b["created"].strftime("%Y-%m-%d %H:%M:%S") if b["created"] else "Unknown"
        print(b["name"])
        print(f"   Created: {created}")
        print(f"   Size:    {b['size_bytes'] / (1024 * 1024):.2f} MB")
        if b["record_counts"]:
            print(f"   Records: {b['record_counts']}")
        print()


def cmd_restore(db, args):
    counts = backup.restore_backup(db, args.name, settings.UPLOAD_DIR, settings.BACKUP_DIR)
    print(f"✅ Restore completed: {counts}")


def cmd_prune(db, args):
    removed = backup.prune_backups(settings.BACKUP_DIR, args.keep)
    print(f"🧹 Removed {len(removed)} backup(s)")


def main():
    parser = argparse.ArgumentParser(description="CampusVault backup & restore")
    sub = parser.add_subparsers(dest="command", required=True)
    sub.add_parser("create", help="Create a backup").set_defaults(func=cmd_create)
    sub.add_parser("list", help="List backups").set_defaults(func=cmd_list)
    restore = sub.add_parser("restore", help="Restore a backup")
    restore.add_argument("name")
    restore.set_defaults(func=cmd_restore)
    prune = sub.add_parser("prune", help="Remove old backups")
    prune.add_argument("--keep", type=int, default=settings.BACKUP_KEEP)
    prune.set_defaults(func=cmd_prune)
    args = parser.parse_args()

    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        args.func(db, args)
    except (backup.BackupError, OSError) as e:
        print(f"❌ {e}")
        sys.exit(1)
    finally:
        db.close()


if __name__ == "__main__":
    main()
