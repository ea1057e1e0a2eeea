"""initial schema

Revision ID: 0001_initial_schema
Revises:
Create Date: 2026-10-18 09:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '0001_initial_schema'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

USER_ROLES = sa.Enum('volunteer', 'admin', name='userroles')
USER_STATUS = sa.Enum('pending', 'approved', 'rejected', name='userstatus')
HOUR_LOG_STATUS = sa.Enum('pending', 'approved', 'rejected', name='hourlogstatus')
MESSAGE_STATUS = sa.Enum('unread', 'read', 'replied', name='messagestatus')


def timestamps():
    return [
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
    ]


def upgrade() -> None:
    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('full_name', sa.String(length=100), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('password', sa.String(length=100), nullable=False),
        sa.Column('role', USER_ROLES, nullable=False),
        sa.Column('status', USER_STATUS, nullable=False),
        sa.Column('skills', sa.JSON(), nullable=False),
        sa.Column('availability', sa.JSON(), nullable=False),
        sa.Column('profile_picture', sa.String(), nullable=True),
        sa.Column('password_reset_token', sa.String(length=64), nullable=True),
        sa.Column('password_reset_expires', sa.DateTime(timezone=True), nullable=True),
        *timestamps(),
        sa.PrimaryKeyConstraint('id', name='pk_users'),
    )
    op.create_index('ix_users_email', 'users', ['email'], unique=True)
    op.create_index(
        'ix_users_password_reset_token', 'users', ['password_reset_token']
    )

    op.create_table(
        'events',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('title', sa.String(length=200), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('date', sa.DateTime(timezone=True), nullable=False),
        sa.Column('location', sa.String(length=255), nullable=False),
        sa.Column('slots_available', sa.Integer(), nullable=False),
        sa.Column('banner_image', sa.String(), nullable=True),
        sa.Column('tags', sa.JSON(), nullable=False),
        sa.Column('created_by_id', sa.Integer(), nullable=False),
        *timestamps(),
        sa.ForeignKeyConstraint(
            ['created_by_id'], ['users.id'], name='fk_events_created_by_id_users'
        ),
        sa.PrimaryKeyConstraint('id', name='pk_events'),
    )
    op.create_index('ix_events_date', 'events', ['date'])

    for table in ('registrations', 'waitlist_entries'):
        op.create_table(
            table,
            sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
            sa.Column('volunteer_id', sa.Integer(), nullable=False),
            sa.Column('event_id', sa.Integer(), nullable=False),
            *timestamps(),
            sa.ForeignKeyConstraint(
                ['volunteer_id'], ['users.id'], name=f'fk_{table}_volunteer_id_users'
            ),
            sa.ForeignKeyConstraint(
                ['event_id'], ['events.id'], name=f'fk_{table}_event_id_events'
            ),
            sa.PrimaryKeyConstraint('id', name=f'pk_{table}'),
            sa.UniqueConstraint(
                'volunteer_id', 'event_id', name=f'uq_{table}_volunteer_idevent_id'
            ),
        )
        op.create_index(f'ix_{table}_event_id', table, ['event_id'])

    op.create_table(
        'hour_logs',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('volunteer_id', sa.Integer(), nullable=False),
        sa.Column('event_id', sa.Integer(), nullable=True),
        sa.Column('hours', sa.Float(), nullable=False),
        sa.Column('date_worked', sa.Date(), nullable=False),
        sa.Column('status', HOUR_LOG_STATUS, nullable=False),
        sa.Column('submitted_at', sa.DateTime(timezone=True), nullable=False),
        *timestamps(),
        sa.ForeignKeyConstraint(
            ['volunteer_id'], ['users.id'], name='fk_hour_logs_volunteer_id_users'
        ),
        sa.ForeignKeyConstraint(
            ['event_id'], ['events.id'], name='fk_hour_logs_event_id_events'
        ),
        sa.PrimaryKeyConstraint('id', name='pk_hour_logs'),
    )
    op.create_index('ix_hour_logs_volunteer_id', 'hour_logs', ['volunteer_id'])
    op.create_index('ix_hour_logs_status', 'hour_logs', ['status'])

    op.create_table(
        'support_messages',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('subject', sa.String(length=200), nullable=False),
        sa.Column('body', sa.Text(), nullable=False),
        sa.Column('status', MESSAGE_STATUS, nullable=False),
        sa.Column('admin_reply', sa.Text(), nullable=True),
        sa.Column('replied_at', sa.DateTime(timezone=True), nullable=True),
        *timestamps(),
        sa.ForeignKeyConstraint(
            ['user_id'], ['users.id'], name='fk_support_messages_user_id_users'
        ),
        sa.PrimaryKeyConstraint('id', name='pk_support_messages'),
    )
    op.create_index('ix_support_messages_user_id', 'support_messages', ['user_id'])


def downgrade() -> None:
    op.drop_index('ix_support_messages_user_id', table_name='support_messages')
    op.drop_table('support_messages')
    op.drop_index('ix_hour_logs_status', table_name='hour_logs')
    op.drop_index('ix_hour_logs_volunteer_id', table_name='hour_logs')
    op.drop_table('hour_logs')
    for table in ('waitlist_entries', 'registrations'):
        op.drop_index(f'ix_{table}_event_id', table_name=table)
        op.drop_table(table)
    op.drop_index('ix_events_date', table_name='events')
    op.drop_table('events')
    op.drop_index('ix_users_password_reset_token', table_name='users')
    op.drop_index('ix_users_email', table_name='users')
    op.drop_table('users')

    bind = op.get_bind()
    for enum_type in (MESSAGE_STATUS, HOUR_LOG_STATUS, USER_STATUS, USER_ROLES):
        enum_type.drop(bind, checkfirst=True)
