"""Add notes_attachments table

Revision ID: b7d2e4f6a802
Revises: a1f3c9d2e001
Create Date: 2026-10-19 15:30:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision: str = 'b7d2e4f6a802'
down_revision: Union[str, Sequence[str], None] = 'a1f3c9d2e001'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        'notes_attachments',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column(
            'note_id',
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey('notes.id', ondelete='CASCADE'),
            nullable=False,
        ),
        sa.Column('file_url', sa.String(length=500), nullable=False),
        sa.Column('file_name', sa.String(length=255), nullable=False),
        sa.Column('file_mime_type', sa.String(length=100), nullable=False),
        sa.Column('file_size', sa.Integer(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index('idx_notes_attachments_note_id', 'notes_attachments', ['note_id'])


def downgrade() -> None:
    op.drop_index('idx_notes_attachments_note_id', table_name='notes_attachments')
    op.drop_table('notes_attachments')
