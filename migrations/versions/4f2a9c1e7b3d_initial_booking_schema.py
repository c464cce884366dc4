"""Initial booking schema

Revision ID: 4f2a9c1e7b3d
Revises:
Create Date: 2026-10-19 09:12:44.518203

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '4f2a9c1e7b3d'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    # Create languages table
    op.create_table(
        'languages',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('name')
    )

    # Create users table
    op.create_table(
        'users',
        sa.Column('id', sa.UUID(), nullable=False),
        sa.Column('role', sa.String(length=20), nullable=False),
        sa.Column('status', sa.String(length=20), nullable=False, server_default='active'),
        sa.Column('name', sa.String(length=255), nullable=False, server_default=''),
        sa.Column('email', sa.String(length=255), nullable=True),
        sa.Column('mobile', sa.String(length=30), nullable=True),
        sa.Column('town', sa.String(length=100), nullable=True),
        sa.Column('translator_type', sa.String(length=30), nullable=True),
        sa.Column('translator_level', sa.String(length=100), nullable=True),
        sa.Column('gender', sa.String(length=10), nullable=True),
        sa.Column('consumer_type', sa.String(length=30), nullable=True),
        sa.Column('customer_type', sa.String(length=30), nullable=True),
        sa.Column('not_get_notification', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('not_get_nighttime', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('not_get_emergency', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.text('CURRENT_TIMESTAMP')),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.text('CURRENT_TIMESTAMP')),
        sa.PrimaryKeyConstraint('id')
    )

    # Create user_languages table
    op.create_table(
        'user_languages',
        sa.Column('user_id', sa.UUID(), nullable=False),
        sa.Column('language_id', sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['language_id'], ['languages.id'], ),
        sa.PrimaryKeyConstraint('user_id', 'language_id')
    )

    # Create jobs table
    op.create_table(
        'jobs',
        sa.Column('id', sa.UUID(), nullable=False),
        sa.Column('user_id', sa.UUID(), nullable=False),
        sa.Column('from_language_id', sa.Integer(), nullable=False),
        sa.Column('status', sa.String(length=30), nullable=False, server_default='pending'),
        sa.Column('immediate', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('due', sa.DateTime(timezone=True), nullable=True),
        sa.Column('duration', sa.Integer(), nullable=False),
        sa.Column('will_expire_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('end_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('withdraw_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('session_time', sa.String(length=20), nullable=True),
        sa.Column('gender', sa.String(length=10), nullable=True),
        sa.Column('certified', sa.String(length=20), nullable=False, server_default='none'),
        sa.Column('customer_phone_type', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('customer_physical_type', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('town', sa.String(length=100), nullable=True),
        sa.Column('job_type', sa.String(length=20), nullable=False, server_default='unpaid'),
        sa.Column('admin_comments', sa.Text(), nullable=True),
        sa.Column('flagged', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('manually_handled', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('by_admin', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('user_email', sa.String(length=255), nullable=True),
        sa.Column('reference', sa.String(length=255), nullable=True),
        sa.Column('reopened_from_id', sa.UUID(), nullable=True),
        sa.Column('email_sent', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('cust_16_hour_email', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('cust_48_hour_email', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.text('CURRENT_TIMESTAMP')),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.text('CURRENT_TIMESTAMP')),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ),
        sa.ForeignKeyConstraint(['from_language_id'], ['languages.id'], ),
        sa.ForeignKeyConstraint(['reopened_from_id'], ['jobs.id'], ),
        sa.PrimaryKeyConstraint('id')
    )

    # Create translator_assignments table
    op.create_table(
        'translator_assignments',
        sa.Column('id', sa.UUID(), nullable=False),
        sa.Column('job_id', sa.UUID(), nullable=False),
        sa.Column('translator_id', sa.UUID(), nullable=False),
        sa.Column('cancel_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('completed_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('completed_by', sa.UUID(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.text('CURRENT_TIMESTAMP')),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.text('CURRENT_TIMESTAMP')),
        sa.ForeignKeyConstraint(['job_id'], ['jobs.id'], ),
        sa.ForeignKeyConstraint(['translator_id'], ['users.id'], ),
        sa.ForeignKeyConstraint(['completed_by'], ['users.id'], ),
        sa.PrimaryKeyConstraint('id')
    )

    # Create user_blacklists table
    op.create_table(
        'user_blacklists',
        sa.Column('id', sa.UUID(), nullable=False),
        sa.Column('customer_id', sa.UUID(), nullable=False),
        sa.Column('translator_id', sa.UUID(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.text('CURRENT_TIMESTAMP')),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.text('CURRENT_TIMESTAMP')),
        sa.ForeignKeyConstraint(['customer_id'], ['users.id'], ),
        sa.ForeignKeyConstraint(['translator_id'], ['users.id'], ),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('customer_id', 'translator_id', name='uq_blacklist_pair')
    )

    # Create indexes
    op.create_index('ix_users_role', 'users', ['role'])
    op.create_index('ix_users_status', 'users', ['status'])
    op.create_index('ix_users_email', 'users', ['email'], unique=True)
    op.create_index('ix_users_translator_type', 'users', ['translator_type'])
    op.create_index('ix_user_languages_language_id', 'user_languages', ['language_id'])
    op.create_index('ix_jobs_user_id', 'jobs', ['user_id'])
    op.create_index('ix_jobs_from_language_id', 'jobs', ['from_language_id'])
    op.create_index('ix_jobs_status', 'jobs', ['status'])
    op.create_index('ix_jobs_due', 'jobs', ['due'])
    op.create_index('ix_jobs_will_expire_at', 'jobs', ['will_expire_at'])
    op.create_index('ix_jobs_reopened_from_id', 'jobs', ['reopened_from_id'])
    op.create_index('ix_translator_assignments_job_id', 'translator_assignments', ['job_id'])
    op.create_index('ix_translator_assignments_translator_id', 'translator_assignments', ['translator_id'])
    op.create_index('ix_user_blacklists_customer_id', 'user_blacklists', ['customer_id'])
    op.create_index('ix_user_blacklists_translator_id', 'user_blacklists', ['translator_id'])


def downgrade() -> None:
    """Downgrade schema."""
    # Drop tables in reverse order
    op.drop_table('user_blacklists')
    op.drop_table('translator_assignments')
    op.drop_table('jobs')
    op.drop_table('user_languages')
    op.drop_table('users')
    op.drop_table('languages')
