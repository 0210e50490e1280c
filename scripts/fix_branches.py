#!/usr/bin/env python3
"""
Merge duplicate subjects and rewrite legacy branch names (see BRANCH_ALIASES).

Usage:
    python scripts/fix_branches.py            # apply
    python scripts/fix_branches.py --dry-run  # only show the branch breakdown
"""
import argparse
import os
import sys

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from sqlalchemy import func

from campusvault.core.config import settings
from campusvault.core.database import SessionLocal
from campusvault.crud.subject import normalize_branches
from campusvault.models.subject import Subject


def print_branch_breakdown(db, title: str):
    print(f"\n{title}")
    rows = db.query(Subject.branch, func.count(Subject.id)).group_by(Subject.branch).order_by(Subject.branch).all()
    for branch, count in rows:
        print(f"   {branch:<25} {count}")


def main():
    parser = argparse.ArgumentParser(description="Normalize subject branches")
    parser.add_argument("--dry-run", action="store_true")
    args = parser.parse_args()

    db = SessionLocal()
    try:
        print(f"Aliases: {settings.BRANCH_ALIASES}")
        print_branch_breakdown(db, "Before:")
        if args.dry_run:
            return

        result = normalize_branches(db)
        print(f"\n✅ Updated {result['changes']} subjects, merged {result['removed']} duplicates")
        print_branch_breakdown(db, "After:")
    except Exception as e:
        print(f"❌ Migration failed: {e}")
        sys.exit(1)
    finally:
        db.close()


if __name__ == "__main__":
    main()
