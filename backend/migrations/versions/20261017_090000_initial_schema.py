"""initial schema: users, sessions, events, registrations, contacts, gallery

Revision ID: 20261017_090000
Revises:
Create Date: 2026-10-17 09:00:00

"""
from alembic import op
import sqlalchemy as sa

revision = '20261017_090000'
down_revision = None
branch_labels = None
depends_on = None


def _timestamps():
    return [
        sa.Column('created_at', sa.TIMESTAMP(timezone=True), server_default=sa.func.now()),
        sa.Column('updated_at', sa.TIMESTAMP(timezone=True), server_default=sa.func.now()),
    ]


def upgrade() -> None:
    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('name', sa.String(50), nullable=False),
        sa.Column('email', sa.String(255), nullable=False),
        sa.Column('phone', sa.String(20), nullable=False),
        sa.Column('password_hash', sa.String(255), nullable=False),
        sa.Column('profile_image', sa.String(500), nullable=True),
        sa.Column('role', sa.String(20), nullable=False, server_default='user'),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        *_timestamps(),
    )
    op.create_index('ix_users_id', 'users', ['id'])
    op.create_index('ix_users_email', 'users', ['email'], unique=True)
    op.create_index('ix_users_phone', 'users', ['phone'], unique=True)
    op.create_index('ix_users_role', 'users', ['role'])

    op.create_table(
        'sessions',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('session_token', sa.String(255), nullable=False),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('created_at', sa.TIMESTAMP(timezone=True), server_default=sa.func.now()),
        sa.Column('expires_at', sa.TIMESTAMP(timezone=True), nullable=False),
        sa.Column('ip_address', sa.String(45), nullable=True),
        sa.Column('user_agent', sa.Text(), nullable=True),
        sa.Column('is_active', sa.Boolean(), server_default=sa.true()),
    )
    op.create_index('ix_sessions_id', 'sessions', ['id'])
    op.create_index('ix_sessions_session_token', 'sessions', ['session_token'], unique=True)
    op.create_index('idx_sessions_user_id', 'sessions', ['user_id'])
    op.create_index('idx_sessions_expires_at', 'sessions', ['expires_at'])

    op.create_table(
        'events',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('title', sa.String(100), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('short_description', sa.String(200), nullable=False),
        sa.Column('date', sa.TIMESTAMP(timezone=True), nullable=False),
        sa.Column('registration_deadline', sa.TIMESTAMP(timezone=True), nullable=False),
        sa.Column('duration', sa.String(100), nullable=False),
        sa.Column('location_address', sa.String(500), nullable=False),
        sa.Column('location_latitude', sa.Float(), nullable=True),
        sa.Column('location_longitude', sa.Float(), nullable=True),
        sa.Column('price', sa.Float(), nullable=False, server_default='0'),
        sa.Column('max_participants', sa.Integer(), nullable=False),
        sa.Column('current_participants', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('difficulty', sa.String(20), nullable=False),
        sa.Column('status', sa.String(20), nullable=False, server_default='active'),
        sa.Column('images', sa.JSON(), nullable=False),
        sa.Column('equipment', sa.JSON(), nullable=False),
        sa.Column('requirements', sa.JSON(), nullable=False),
        sa.Column('includes', sa.JSON(), nullable=False),
        sa.Column('tags', sa.JSON(), nullable=False),
        sa.Column('created_by_id', sa.Integer(), sa.ForeignKey('users.id', ondelete='RESTRICT'), nullable=False),
        *_timestamps(),
        sa.CheckConstraint('current_participants >= 0', name='ck_events_current_non_negative'),
        sa.CheckConstraint('current_participants <= max_participants', name='ck_events_current_lte_max'),
        sa.CheckConstraint('max_participants >= 1', name='ck_events_max_positive'),
        sa.CheckConstraint('price >= 0', name='ck_events_price_non_negative'),
    )
    op.create_index('ix_events_id', 'events', ['id'])
    op.create_index('ix_events_status', 'events', ['status'])
    op.create_index('ix_events_created_by_id', 'events', ['created_by_id'])
    op.create_index('idx_events_date_status', 'events', ['date', 'status'])

    op.create_table(
        'registrations',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('event_id', sa.Integer(), sa.ForeignKey('events.id', ondelete='RESTRICT'), nullable=False),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('participant_details', sa.JSON(), nullable=False),
        sa.Column('registration_status', sa.String(20), nullable=False, server_default='pending'),
        sa.Column('payment_status', sa.String(20), nullable=False, server_default='pending'),
        sa.Column('registration_date', sa.TIMESTAMP(timezone=True), server_default=sa.func.now()),
        sa.Column('payment_date', sa.TIMESTAMP(timezone=True), nullable=True),
        sa.Column('payment_amount', sa.Float(), nullable=False),
        sa.Column('waiver_signed', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('notes', sa.Text(), nullable=True),
        *_timestamps(),
        sa.UniqueConstraint('event_id', 'user_id', name='uq_registrations_event_user'),
    )
    op.create_index('ix_registrations_id', 'registrations', ['id'])
    op.create_index('ix_registrations_event_id', 'registrations', ['event_id'])
    op.create_index('ix_registrations_user_id', 'registrations', ['user_id'])
    op.create_index('idx_registrations_status', 'registrations', ['registration_status'])
    op.create_index('idx_registrations_date', 'registrations', ['registration_date'])

    op.create_table(
        'contacts',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('name', sa.String(100), nullable=False),
        sa.Column('email', sa.String(255), nullable=False),
        sa.Column('phone', sa.String(20), nullable=True),
        sa.Column('subject', sa.String(200), nullable=False),
        sa.Column('message', sa.Text(), nullable=False),
        sa.Column('status', sa.String(20), nullable=False, server_default='new'),
        sa.Column('priority', sa.String(20), nullable=False, server_default='medium'),
        sa.Column('admin_notes', sa.Text(), nullable=True),
        sa.Column('response_date', sa.TIMESTAMP(timezone=True), nullable=True),
        sa.Column('whatsapp_sent', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('whatsapp_sent_at', sa.TIMESTAMP(timezone=True), nullable=True),
        *_timestamps(),
    )
    op.create_index('ix_contacts_id', 'contacts', ['id'])
    op.create_index('ix_contacts_created_at', 'contacts', ['created_at'])
    op.create_index('idx_contacts_status_created', 'contacts', ['status', 'created_at'])
    op.create_index('idx_contacts_priority_created', 'contacts', ['priority', 'created_at'])

    op.create_table(
        'gallery_images',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('title', sa.String(100), nullable=False),
        sa.Column('description', sa.String(500), nullable=True),
        sa.Column('image_url', sa.String(500), nullable=False),
        sa.Column('alt_text', sa.String(255), nullable=False),
        sa.Column('category', sa.String(30), nullable=False, server_default='Other'),
        sa.Column('tags', sa.JSON(), nullable=False),
        sa.Column('event_id', sa.Integer(), sa.ForeignKey('events.id', ondelete='SET NULL'), nullable=True),
        sa.Column('uploaded_by_id', sa.Integer(), sa.ForeignKey('users.id', ondelete='RESTRICT'), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('views', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('likes', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('featured', sa.Boolean(), nullable=False, server_default=sa.false()),
        *_timestamps(),
    )
    op.create_index('ix_gallery_images_id', 'gallery_images', ['id'])
    op.create_index('ix_gallery_images_event_id', 'gallery_images', ['event_id'])
    op.create_index('idx_gallery_category_active', 'gallery_images', ['category', 'is_active'])
    op.create_index('idx_gallery_featured_created', 'gallery_images', ['featured', 'created_at'])


def downgrade() -> None:
    op.drop_table('gallery_images')
    op.drop_table('contacts')
    op.drop_table('registrations')
    op.drop_table('events')
    op.drop_table('sessions')
    op.drop_table('users')
