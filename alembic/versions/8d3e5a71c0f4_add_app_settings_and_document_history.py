"""Add app_settings and document_history

Revision ID: 8d3e5a71c0f4
Revises: 4b1f0c2a9d31
Create Date: 2026-10-19 16:40:22.503118

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '8d3e5a71c0f4'
down_revision: Union[str, Sequence[str], None] = '4b1f0c2a9d31'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        'app_settings',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('key', sa.String(length=100), nullable=False),
        sa.Column('value', sa.Text(), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('key'),
    )
    op.create_table(
        'document_history',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('document_id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=True),
        sa.Column('user_email', sa.String(length=255), nullable=True),
        sa.Column('snapshot_before', sa.Text(), nullable=True),
        sa.Column('snapshot_after', sa.Text(), nullable=False),
        sa.Column('diff_added', sa.Text(), nullable=True),
        sa.Column('diff_removed', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(['document_id'], ['documents.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('idx_document_history_document_id', 'document_history', ['document_id'], unique=False)


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index('idx_document_history_document_id', table_name='document_history')
    op.drop_table('document_history')
    op.drop_table('app_settings')
