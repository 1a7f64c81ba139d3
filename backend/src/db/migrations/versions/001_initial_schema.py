"""Initial event-management schema

Revision ID: 001_initial_schema
Revises:
Create Date: 2026-10-19

Creates:
- users, categories, locations
- events (with eventstate enum, capacity check constraints)
- requests (with requeststatus enum, one request per requester/event)
"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '001_initial_schema'
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    """Create all tables of the event-management service."""

    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('name', sa.String(length=250), nullable=False),
        sa.Column('email', sa.String(length=254), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_users_email', 'users', ['email'], unique=True)

    op.create_table(
        'categories',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('name', sa.String(length=50), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_categories_name', 'categories', ['name'], unique=True)

    op.create_table(
        'locations',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('lat', sa.Float(), nullable=False),
        sa.Column('lon', sa.Float(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )

    op.create_table(
        'events',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('annotation', sa.String(length=2000), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('title', sa.String(length=120), nullable=False),
        sa.Column('category_id', sa.Integer(), nullable=False),
        sa.Column('initiator_id', sa.Integer(), nullable=False),
        sa.Column('location_id', sa.Integer(), nullable=False),
        sa.Column('event_date', sa.DateTime(), nullable=False),
        sa.Column('created_on', sa.DateTime(), nullable=False),
        sa.Column('published_on', sa.DateTime(), nullable=True),
        sa.Column('paid', sa.Boolean(), nullable=False),
        sa.Column('participant_limit', sa.Integer(), nullable=False),
        sa.Column('request_moderation', sa.Boolean(), nullable=False),
        sa.Column('confirmed_requests', sa.Integer(), nullable=False),
        sa.Column('views', sa.Integer(), nullable=False),
        sa.Column(
            'state',
            sa.Enum('PENDING', 'PUBLISHED', 'CANCELED', name='eventstate'),
            nullable=False
        ),
        sa.ForeignKeyConstraint(['category_id'], ['categories.id'], ondelete='RESTRICT'),
        sa.ForeignKeyConstraint(['initiator_id'], ['users.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['location_id'], ['locations.id']),
        sa.PrimaryKeyConstraint('id'),
        sa.CheckConstraint('participant_limit >= 0', name='ck_events_participant_limit'),
        sa.CheckConstraint('confirmed_requests >= 0', name='ck_events_confirmed_requests'),
    )
    op.create_index('ix_events_category_id', 'events', ['category_id'])
    op.create_index('ix_events_initiator_id', 'events', ['initiator_id'])
    op.create_index('idx_events_state_date', 'events', ['state', 'event_date'])

    op.create_table(
        'requests',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('requester_id', sa.Integer(), nullable=False),
        sa.Column('event_id', sa.Integer(), nullable=False),
        sa.Column('created', sa.DateTime(), nullable=False),
        sa.Column(
            'status',
            sa.Enum('PENDING', 'CONFIRMED', 'CANCELED', 'REJECTED', name='requeststatus'),
            nullable=False
        ),
        sa.ForeignKeyConstraint(['requester_id'], ['users.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['event_id'], ['events.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('requester_id', 'event_id', name='uq_requests_requester_event'),
    )
    op.create_index('ix_requests_requester_id', 'requests', ['requester_id'])
    op.create_index('idx_requests_event_status', 'requests', ['event_id', 'status'])


def downgrade() -> None:
    """Drop all tables and enums."""
    op.drop_index('idx_requests_event_status', table_name='requests')
    op.drop_index('ix_requests_requester_id', table_name='requests')
    op.drop_table('requests')

    op.drop_index('idx_events_state_date', table_name='events')
    op.drop_index('ix_events_initiator_id', table_name='events')
    op.drop_index('ix_events_category_id', table_name='events')
    op.drop_table('events')

    op.drop_table('locations')
    op.drop_index('ix_categories_name', table_name='categories')
    op.drop_table('categories')

    op.drop_index('ix_users_email', table_name='users')
    op.drop_table('users')

    sa.Enum(name='requeststatus').drop(op.get_bind(), checkfirst=True)
    sa.Enum(name='eventstate').drop(op.get_bind(), checkfirst=True)
