"""Hits table for the statistics service

Revision ID: 001_hits
Revises:
Create Date: 2026-10-19

Creates:
- hits (one row per recorded request)
- idx_hits_uri_timestamp for windowed counts per URI
"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '001_hits'
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        'hits',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('app', sa.String(length=255), nullable=False),
        sa.Column('uri', sa.String(length=512), nullable=False),
        sa.Column('ip', sa.String(length=64), nullable=False),
        sa.Column('timestamp', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('idx_hits_uri_timestamp', 'hits', ['uri', 'timestamp'])


def downgrade() -> None:
    op.drop_index('idx_hits_uri_timestamp', table_name='hits')
    op.drop_table('hits')
