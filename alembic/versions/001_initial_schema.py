"""initial schema: roster, events, rsvps, registration fields

Revision ID: 001_initial_schema
Revises:
Create Date: 2026-10-19 09:00:00.000000

"""
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision = '001_initial_schema'
down_revision = None
branch_labels = None
depends_on = None

# Created explicitly below so tables sharing a type do not each try to create it
participant_type = postgresql.ENUM('adult', 'youth', name='participanttype', create_type=False)
field_scope = postgresql.ENUM('per_person', 'per_youth', 'per_family', name='fieldscope', create_type=False)
field_type = postgresql.ENUM('text', 'numeric', 'select', 'boolean', name='fieldtype', create_type=False)
ENUM_TYPES = (participant_type, field_scope, field_type)

def timestamps():
    return [
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
    ]

def upgrade() -> None:
    bind = op.get_bind()
    if bind.dialect.name == "postgresql":
        for enum_type in ENUM_TYPES:
            enum_type.create(bind, checkfirst=True)

    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('email', sa.String(255), nullable=True),
        sa.Column('first_name', sa.String(100), nullable=False),
        sa.Column('last_name', sa.String(100), nullable=False),
        sa.Column('phone_cell', sa.String(30), nullable=True),
        sa.Column('phone_home', sa.String(30), nullable=True),
        sa.Column('is_admin', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        *timestamps(),
    )
    op.create_index('ix_users_id', 'users', ['id'])
    op.create_index('ix_users_email', 'users', ['email'], unique=True)

    op.create_table(
        'youth',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('first_name', sa.String(100), nullable=False),
        sa.Column('last_name', sa.String(100), nullable=False),
        sa.Column('preferred_name', sa.String(100), nullable=True),
        sa.Column('grade', sa.Integer(), nullable=True),
        *timestamps(),
    )
    op.create_index('ix_youth_id', 'youth', ['id'])

    op.create_table(
        'parent_relationships',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('youth_id', sa.Integer(), sa.ForeignKey('youth.id', ondelete='CASCADE'), nullable=False),
        sa.Column('adult_id', sa.Integer(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        *timestamps(),
        sa.UniqueConstraint('youth_id', 'adult_id', name='uq_parent_relationship'),
    )
    op.create_index('ix_parent_relationships_youth_id', 'parent_relationships', ['youth_id'])
    op.create_index('ix_parent_relationships_adult_id', 'parent_relationships', ['adult_id'])

    op.create_table(
        'events',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('location', sa.String(255), nullable=True),
        sa.Column('starts_at', sa.DateTime(), nullable=True),
        sa.Column('ends_at', sa.DateTime(), nullable=True),
        *timestamps(),
    )
    op.create_index('ix_events_id', 'events', ['id'])

    op.create_table(
        'rsvps',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('event_id', sa.Integer(), sa.ForeignKey('events.id', ondelete='CASCADE'), nullable=False),
        sa.Column('created_by_user_id', sa.Integer(), sa.ForeignKey('users.id'), nullable=False),
        sa.Column('answer', sa.String(10), nullable=False, server_default='yes'),
        sa.Column('comments', sa.Text(), nullable=True),
        *timestamps(),
    )
    op.create_index('ix_rsvps_event_id', 'rsvps', ['event_id'])
    op.create_index('ix_rsvps_created_by_user_id', 'rsvps', ['created_by_user_id'])

    op.create_table(
        'rsvp_members',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('rsvp_id', sa.Integer(), sa.ForeignKey('rsvps.id', ondelete='CASCADE'), nullable=False),
        sa.Column('event_id', sa.Integer(), sa.ForeignKey('events.id', ondelete='CASCADE'), nullable=False),
        sa.Column('participant_type', participant_type, nullable=False),
        sa.Column('youth_id', sa.Integer(), sa.ForeignKey('youth.id'), nullable=True),
        sa.Column('adult_id', sa.Integer(), sa.ForeignKey('users.id'), nullable=True),
        *timestamps(),
    )
    op.create_index('ix_rsvp_members_rsvp_id', 'rsvp_members', ['rsvp_id'])
    op.create_index('ix_rsvp_members_event_id', 'rsvp_members', ['event_id'])

    op.create_table(
        'event_registration_field_definitions',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('event_id', sa.Integer(), sa.ForeignKey('events.id', ondelete='CASCADE'), nullable=False),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('scope', field_scope, nullable=False),
        sa.Column('field_type', field_type, nullable=False),
        sa.Column('required', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('option_list', sa.Text(), nullable=True),
        sa.Column('sequence_number', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('created_by', sa.Integer(), sa.ForeignKey('users.id', ondelete='SET NULL'), nullable=True),
        *timestamps(),
    )
    op.create_index('ix_event_registration_field_definitions_event_id', 'event_registration_field_definitions', ['event_id'])

    op.create_table(
        'event_registration_field_data',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column(
            'event_registration_field_definition_id',
            sa.Integer(),
            sa.ForeignKey('event_registration_field_definitions.id', ondelete='CASCADE'),
            nullable=False,
        ),
        sa.Column('participant_type', participant_type, nullable=False),
        sa.Column('participant_id', sa.Integer(), nullable=False),
        sa.Column('value', sa.Text(), nullable=True),
        *timestamps(),
        sa.UniqueConstraint(
            'event_registration_field_definition_id', 'participant_type', 'participant_id',
            name='uq_field_data_participant',
        ),
    )
    op.create_index(
        'ix_event_registration_field_data_event_registration_field_definition_id',
        'event_registration_field_data',
        ['event_registration_field_definition_id'],
    )

    op.create_table(
        'activity_log',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id', ondelete='SET NULL'), nullable=True),
        sa.Column('action_type', sa.String(100), nullable=False),
        sa.Column('json_metadata', sa.Text(), nullable=True),
        *timestamps(),
    )
    op.create_index('ix_activity_log_user_id', 'activity_log', ['user_id'])
    op.create_index('ix_activity_log_action_type', 'activity_log', ['action_type'])

def downgrade() -> None:
    op.drop_table('activity_log')
    op.drop_table('event_registration_field_data')
    op.drop_table('event_registration_field_definitions')
    op.drop_table('rsvp_members')
    op.drop_table('rsvps')
    op.drop_table('events')
    op.drop_table('parent_relationships')
    op.drop_table('youth')
    op.drop_table('users')
    bind = op.get_bind()
    if bind.dialect.name == "postgresql":
        for enum_type in reversed(ENUM_TYPES):
            enum_type.drop(bind, checkfirst=True)
