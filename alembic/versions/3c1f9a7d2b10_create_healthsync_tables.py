"""create healthsync tables

Revision ID: 3c1f9a7d2b10
Revises:
Create Date: 2025-07-09 10:15:18.000000

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '3c1f9a7d2b10'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        'users',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('email', sa.String(255), nullable=False, unique=True),
        sa.Column('full_name', sa.String(255), nullable=False),
        sa.Column('hashed_password', sa.String(255), nullable=False),
        sa.Column('role', sa.String(20), nullable=False),
        sa.Column('is_active', sa.Boolean(), server_default=sa.true()),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.CheckConstraint("role IN ('doctor', 'patient')", name='ck_users_role'),
    )
    op.create_table(
        'doctor_patient_links',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('doctor_id', sa.Uuid(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('patient_id', sa.Uuid(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.UniqueConstraint('doctor_id', 'patient_id', name='uq_doctor_patient'),
    )
    op.create_table(
        'health_logs',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('user_id', sa.Uuid(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('date', sa.Date(), nullable=False, server_default=sa.func.current_date()),
        sa.Column('steps', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('water_ml', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('heart_rate', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('sleep_hours', sa.Numeric(3, 1), nullable=False, server_default='0'),
        sa.Column('notes', sa.Text()),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.CheckConstraint('steps >= 0 AND water_ml >= 0 AND heart_rate >= 0 AND sleep_hours >= 0',
                           name='ck_health_logs_non_negative'),
    )
    op.create_table(
        'messages',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('sender_id', sa.Uuid(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('receiver_id', sa.Uuid(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('message', sa.Text(), nullable=False),
        sa.Column('timestamp', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_table(
        'checkups',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('doctor_id', sa.Uuid(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('patient_id', sa.Uuid(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('date', sa.DateTime(timezone=True), nullable=False),
        sa.Column('purpose', sa.Text(), nullable=False),
        sa.Column('status', sa.String(20), nullable=False, server_default='upcoming'),
        sa.Column('notes', sa.Text()),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.CheckConstraint("status IN ('upcoming', 'completed', 'cancelled')", name='ck_checkups_status'),
    )

    op.create_index('idx_health_logs_user_date', 'health_logs', ['user_id', sa.text('date DESC')])
    op.create_index('idx_messages_conversation', 'messages', ['sender_id', 'receiver_id', sa.text('timestamp DESC')])
    op.create_index('idx_checkups_patient_date', 'checkups', ['patient_id', 'date'])
    op.create_index('idx_doctor_patient_links_doctor', 'doctor_patient_links', ['doctor_id'])


def downgrade():
    op.drop_index('idx_doctor_patient_links_doctor', table_name='doctor_patient_links')
    op.drop_index('idx_checkups_patient_date', table_name='checkups')
    op.drop_index('idx_messages_conversation', table_name='messages')
    op.drop_index('idx_health_logs_user_date', table_name='health_logs')
    op.drop_table('checkups')
    op.drop_table('messages')
    op.drop_table('health_logs')
    op.drop_table('doctor_patient_links')
    op.drop_table('users')
