#!/usr/bin/env python3
"""
Seed sample subjects into an empty database.

Usage:
    python scripts/seed.py [--branch CSE]
"""
import argparse
import os
import sys

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from campusvault.core.database import SessionLocal, engine, Base
from campusvault.utils.seed import seed_subjects


def main():
    parser = argparse.ArgumentParser(description="Seed sample subjects")
    parser.add_argument("--branch", default=None, help="Branch for the sample subjects (default: DEFAULT_BRANCH)")
    args = parser.parse_args()

    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        created = seed_subjects(db, args.branch)
        if created:
            print(f"✅ Created {created} subjects")
        else:
            print("📚 Database already has subjects, skipping seeding")
    finally:
        db.close()


if __name__ == "__main__":
    main()
