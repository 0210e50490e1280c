"""normalize legacy subject branch names and merge resulting duplicates

Revision ID: 0002
Revises: 0001
Create Date: 2026-10-19 09:30:00.000000

"""
from typing import Sequence, Union

from alembic import op
from sqlalchemy.orm import Session

from campusvault.crud.subject import normalize_branches


# revision identifiers, used by Alembic.
revision: str = '0002'
down_revision: Union[str, Sequence[str], None] = '0001'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # Joins the migration transaction; its commits do not end it
    session = Session(bind=op.get_bind())
    try:
        result = normalize_branches(session)
    finally:
        session.close()
    print(f"Branch migration: {result['changes']} subjects updated, {result['removed']} duplicates merged")


def downgrade() -> None:
    # Data migration; the legacy names are not recoverable
    pass
