"""initial schema: users, sessions, subjects, resources, downloads

Revision ID: 0001
Revises:
Create Date: 2026-10-19 09:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '0001'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        'users',
        sa.Column('id', sa.String(length=36), primary_key=True),
        sa.Column('username', sa.String(length=100), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('password', sa.String(length=255), nullable=False, comment='scrypt hash: <hex(key)>.<hex(salt)>'),
        sa.Column('full_name', sa.String(length=200), nullable=False),
        sa.Column('year', sa.Integer(), nullable=False, comment='1-4'),
        sa.Column('branch', sa.String(length=100), nullable=False),
        sa.Column('is_admin', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(), server_default=sa.func.now()),
    )
    op.create_index('ix_users_username', 'users', ['username'], unique=True)
    op.create_index('ix_users_email', 'users', ['email'], unique=True)

    op.create_table(
        'user_sessions',
        sa.Column('id', sa.String(length=36), primary_key=True),
        sa.Column('user_id', sa.String(length=36), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now()),
        sa.Column('expires_at', sa.DateTime(), nullable=False),
    )
    op.create_index('ix_user_sessions_user_id', 'user_sessions', ['user_id'])

    op.create_table(
        'subjects',
        sa.Column('id', sa.String(length=36), primary_key=True),
        sa.Column('name', sa.String(length=200), nullable=False),
        sa.Column('code', sa.String(length=50), nullable=False),
        sa.Column('year', sa.Integer(), nullable=False),
        sa.Column('semester', sa.Integer(), nullable=False, comment='1 or 2'),
        sa.Column('branch', sa.String(length=100), nullable=False),
        sa.Column('icon', sa.String(length=100), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
    )
    op.create_index('ix_subjects_year', 'subjects', ['year'])
    op.create_index('ix_subjects_branch', 'subjects', ['branch'])

    op.create_table(
        'resources',
        sa.Column('id', sa.String(length=36), primary_key=True),
        sa.Column('title', sa.String(length=255), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('file_name', sa.String(length=255), nullable=False, comment='Original file name'),
        sa.Column('file_size', sa.Integer(), nullable=False, comment='Size in bytes'),
        sa.Column('file_type', sa.String(length=20), nullable=False, comment='Lower-case extension, e.g. .pdf'),
        sa.Column('resource_type', sa.String(length=50), nullable=False),
        sa.Column('subject_id', sa.String(length=36), sa.ForeignKey('subjects.id'), nullable=False),
        sa.Column('uploaded_by', sa.String(length=36), sa.ForeignKey('users.id'), nullable=False),
        sa.Column('download_count', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('is_approved', sa.Boolean(), nullable=True, server_default=sa.true()),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
    )
    op.create_index('ix_resources_resource_type', 'resources', ['resource_type'])
    op.create_index('ix_resources_subject_id', 'resources', ['subject_id'])
    op.create_index('ix_resources_uploaded_by', 'resources', ['uploaded_by'])

    op.create_table(
        'downloads',
        sa.Column('id', sa.String(length=36), primary_key=True),
        sa.Column('user_id', sa.String(length=36), sa.ForeignKey('users.id'), nullable=False),
        sa.Column('resource_id', sa.String(length=36), sa.ForeignKey('resources.id'), nullable=False),
        sa.Column('downloaded_at', sa.DateTime(), nullable=True),
    )
    op.create_index('ix_downloads_user_id', 'downloads', ['user_id'])
    op.create_index('ix_downloads_resource_id', 'downloads', ['resource_id'])


def downgrade() -> None:
    op.drop_table('downloads')
    op.drop_table('resources')
    op.drop_table('subjects')
    op.drop_table('user_sessions')
    op.drop_table('users')
