"""Initial schema: users, tags and positioned notes

Revision ID: 3f1c2a9b7d10
Revises:
Create Date: 2026-10-18 10:12:05.118204

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision: str = '3f1c2a9b7d10'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _stamps() -> list:
    return [
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
    ]


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        'users',
        *_stamps(),
        sa.Column('username', sa.String(length=50), nullable=False),
        sa.Column('password_hash', sa.String(length=255), nullable=False),
        sa.Column('full_name', sa.String(length=100), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.UniqueConstraint('username'),
        sa.CheckConstraint('length(username) <= 50', name='ck_users_username_len'),
    )
    op.create_index('idx_users_username', 'users', ['username'])

    # owner_id NULL marks a system tag
    op.create_table(
        'tags',
        *_stamps(),
        sa.Column('label', sa.String(length=50), nullable=False),
        sa.Column('code', sa.String(length=60), nullable=False),
        sa.Column('color', sa.String(length=10), nullable=False),
        sa.Column(
            'owner_id',
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey('users.id', ondelete='CASCADE'),
            nullable=True,
        ),
        sa.UniqueConstraint('owner_id', 'code', name='uq_tags_owner_code'),
        sa.CheckConstraint('code = lower(code)', name='ck_tags_code_lowercase'),
        sa.CheckConstraint('length(label) <= 50', name='ck_tags_label_len'),
    )
    op.create_index('idx_tags_owner_id', 'tags', ['owner_id'])
    op.create_index('idx_tags_code', 'tags', ['code'])

    op.create_table(
        'notes',
        *_stamps(),
        sa.Column('title', sa.String(length=200), nullable=False),
        sa.Column('content', sa.Text(), nullable=False),
        sa.Column(
            'owner_id',
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey('users.id', ondelete='CASCADE'),
            nullable=False,
        ),
        sa.Column(
            'tag_id',
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey('tags.id', ondelete='CASCADE'),
            nullable=False,
        ),
        sa.Column('pos_x', sa.Float(), nullable=False),
        sa.Column('pos_y', sa.Float(), nullable=False),
        sa.Column('order_index', sa.Integer(), nullable=False),
        sa.Column('last_moved_at', sa.BigInteger(), nullable=False),
        sa.CheckConstraint('order_index >= 0', name='ck_notes_order_non_negative'),
        sa.CheckConstraint('length(title) <= 200', name='ck_notes_title_len'),
    )
    op.create_index('idx_notes_owner_order', 'notes', ['owner_id', 'order_index'])
    op.create_index('idx_notes_tag_id', 'notes', ['tag_id'])


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index('idx_notes_tag_id', table_name='notes')
    op.drop_index('idx_notes_owner_order', table_name='notes')
    op.drop_table('notes')
    op.drop_index('idx_tags_code', table_name='tags')
    op.drop_index('idx_tags_owner_id', table_name='tags')
    op.drop_table('tags')
    op.drop_index('idx_users_username', table_name='users')
    op.drop_table('users')
