"""Create users, refresh tokens, notes and sharing tables

Revision ID: a1f3c9d2e001
Revises:
Create Date: 2026-10-19 09:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision: str = 'a1f3c9d2e001'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _uuid(name: str, **kwargs) -> sa.Column:
    return sa.Column(name, postgresql.UUID(as_uuid=True), **kwargs)


def _ts(name: str, nullable: bool = False) -> sa.Column:
    return sa.Column(name, sa.DateTime(timezone=True), nullable=nullable)


def upgrade() -> None:
    op.create_table(
        'users',
        _uuid('id', primary_key=True),
        sa.Column('username', sa.String(length=50), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('password_hash', sa.String(length=64), nullable=False),
        sa.Column('password_salt', sa.String(length=32), nullable=False),
        _ts('created_at'),
        _ts('updated_at'),
        sa.UniqueConstraint('username'),
        sa.UniqueConstraint('email'),
        sa.CheckConstraint('length(username) >= 3', name='ck_users_username_len'),
    )
    op.create_index('idx_users_email', 'users', ['email'])

    op.create_table(
        'refresh_tokens',
        _uuid('id', primary_key=True),
        _uuid('user_id', sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('token_hash', sa.String(length=64), nullable=False),
        sa.Column('device', sa.String(length=255), nullable=False),
        _ts('created_at'),
    )
    op.create_index('idx_refresh_tokens_user_id', 'refresh_tokens', ['user_id'])
    op.create_index('idx_refresh_tokens_lookup', 'refresh_tokens', ['user_id', 'token_hash'])

    op.create_table(
        'notes',
        _uuid('id', primary_key=True),
        _uuid('user_id', sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('title', sa.String(length=150), nullable=False),
        sa.Column('content', sa.Text(), nullable=False),
        sa.Column('status', sa.String(length=20), nullable=False, server_default='active'),
        _ts('deleted_at', nullable=True),
        _ts('created_at'),
        _ts('updated_at'),
        sa.CheckConstraint("status IN ('active', 'archived', 'deleted')", name='ck_notes_status'),
    )
    op.create_index('idx_notes_user_id', 'notes', ['user_id'])
    op.create_index('idx_notes_user_status', 'notes', ['user_id', 'status'])
    op.create_index('idx_notes_updated_at', 'notes', ['updated_at'])

    op.create_table(
        'note_share_sessions',
        _uuid('id', primary_key=True),
        _uuid('note_id', sa.ForeignKey('notes.id', ondelete='CASCADE'), nullable=False),
        sa.Column('public_id', sa.String(length=36), nullable=False),
        sa.Column('share_type', sa.String(length=10), nullable=False, server_default='public'),
        _ts('expires_at', nullable=True),
        _ts('created_at'),
        _ts('updated_at'),
        sa.UniqueConstraint('note_id'),
        sa.UniqueConstraint('public_id'),
        sa.CheckConstraint("share_type IN ('public', 'private')", name='ck_share_sessions_type'),
    )
    op.create_index('idx_share_sessions_public_id', 'note_share_sessions', ['public_id'])

    op.create_table(
        'note_share_session_assignments',
        _uuid('id', primary_key=True),
        _uuid(
            'share_session_id',
            sa.ForeignKey('note_share_sessions.id', ondelete='CASCADE'),
            nullable=False,
        ),
        _uuid('user_id', sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        _ts('created_at'),
        sa.UniqueConstraint(
            'share_session_id', 'user_id', name='uq_share_assignment_session_user'
        ),
    )
    op.create_index(
        'idx_share_assignments_user_id', 'note_share_session_assignments', ['user_id']
    )


def downgrade() -> None:
    op.drop_table('note_share_session_assignments')
    op.drop_table('note_share_sessions')
    op.drop_table('notes')
    op.drop_table('refresh_tokens')
    op.drop_table('users')
