"""create pages and page_contents

Revision ID: 1a2b3c4d5e6f
Revises:
Create Date: 2026-10-18 09:00:00.000000

Baseline schema: pages plus their ordered content blocks. Deleting a page
cascades to its blocks.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
import advanced_alchemy.types
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision: str = '1a2b3c4d5e6f'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _json():
    return sa.JSON().with_variant(postgresql.JSONB(astext_type=sa.Text()), 'postgresql')


def upgrade() -> None:
    op.create_table('pages',
        sa.Column('id', advanced_alchemy.types.guid.GUID(length=16), nullable=False),
        sa.Column('title', sa.String(length=255), nullable=False),
        sa.Column('slug', sa.String(length=255), nullable=False),
        sa.Column('excerpt', sa.String(length=1000), nullable=True),
        sa.Column('content', sa.Text(), nullable=False),
        sa.Column('template', sa.Enum('default', 'landing', 'blog', 'portfolio', 'contact', name='pagetemplate', native_enum=False, length=20), nullable=False),
        sa.Column('sort_order', sa.Integer(), nullable=False),
        sa.Column('status', sa.Enum('draft', 'published', 'archived', name='pagestatus', native_enum=False, length=20), nullable=False),
        sa.Column('published_at', advanced_alchemy.types.datetime.DateTimeUTC(timezone=True), nullable=True),
        sa.Column('meta_data', _json(), nullable=True),
        sa.Column('created_by', advanced_alchemy.types.guid.GUID(length=16), nullable=True),
        sa.Column('updated_by', advanced_alchemy.types.guid.GUID(length=16), nullable=True),
        sa.Column('sa_orm_sentinel', sa.Integer(), nullable=True),
        sa.Column('created_at', advanced_alchemy.types.datetime.DateTimeUTC(timezone=True), nullable=False),
        sa.Column('updated_at', advanced_alchemy.types.datetime.DateTimeUTC(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint('id', name=op.f('pk_pages'))
    )
    op.create_index(op.f('ix_pages_slug'), 'pages', ['slug'], unique=True)
    op.create_index(op.f('ix_pages_status'), 'pages', ['status'], unique=False)
    op.create_index(op.f('ix_pages_sort_order'), 'pages', ['sort_order'], unique=False)
    op.create_index(op.f('ix_pages_published_at'), 'pages', ['published_at'], unique=False)
    op.create_index(op.f('ix_pages_created_by'), 'pages', ['created_by'], unique=False)

    op.create_table('page_contents',
        sa.Column('id', advanced_alchemy.types.guid.GUID(length=16), nullable=False),
        sa.Column('page_id', advanced_alchemy.types.guid.GUID(length=16), nullable=False),
        sa.Column('priority', sa.Integer(), nullable=False),
        sa.Column('text', sa.Text(), nullable=True),
        sa.Column('images', _json(), nullable=False),
        sa.Column('sa_orm_sentinel', sa.Integer(), nullable=True),
        sa.Column('created_at', advanced_alchemy.types.datetime.DateTimeUTC(timezone=True), nullable=False),
        sa.Column('updated_at', advanced_alchemy.types.datetime.DateTimeUTC(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(['page_id'], ['pages.id'], name=op.f('fk_page_contents_page_id_pages'), ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id', name=op.f('pk_page_contents'))
    )
    op.create_index(op.f('ix_page_contents_page_id'), 'page_contents', ['page_id'], unique=False)


def downgrade() -> None:
    op.drop_index(op.f('ix_page_contents_page_id'), table_name='page_contents')
    op.drop_table('page_contents')
    op.drop_index(op.f('ix_pages_created_by'), table_name='pages')
    op.drop_index(op.f('ix_pages_published_at'), table_name='pages')
    op.drop_index(op.f('ix_pages_sort_order'), table_name='pages')
    op.drop_index(op.f('ix_pages_status'), table_name='pages')
    op.drop_index(op.f('ix_pages_slug'), table_name='pages')
    op.drop_table('pages')
