"""Create tenant analytics schema

Revision ID: 3f9a1c7e2b40
Revises:
Create Date: 2026-10-19 09:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3f9a1c7e2b40'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        'tenants',
        sa.Column('id', sa.Text(), primary_key=True),
        sa.Column('name', sa.Text(), server_default=''),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_table(
        'tenant_users',
        sa.Column('id', sa.Text(), primary_key=True),
        sa.Column('tenant_id', sa.Text(), sa.ForeignKey('tenants.id'), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index('ix_tenant_users_tenant_id', 'tenant_users', ['tenant_id'])

    op.create_table(
        'reach_outs',
        sa.Column('id', sa.Text(), primary_key=True),
        sa.Column('tenant_id', sa.Text(), sa.ForeignKey('tenants.id'), nullable=False),
        sa.Column('author_id', sa.Text(), nullable=False),
        sa.Column('status', sa.Text(), nullable=False, server_default='pending'),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index('ix_reach_outs_tenant_status_created', 'reach_outs',
                    ['tenant_id', 'status', 'created_at'])

    op.create_table(
        'replies',
        sa.Column('id', sa.Text(), primary_key=True),
        sa.Column('tenant_id', sa.Text(), sa.ForeignKey('tenants.id'), nullable=False),
        sa.Column('parent_reach_out_id', sa.Text(), sa.ForeignKey('reach_outs.id'), nullable=False),
        sa.Column('author_id', sa.Text(), nullable=False),
        sa.Column('status', sa.Text(), nullable=False, server_default='pending'),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index('ix_replies_tenant_parent', 'replies', ['tenant_id', 'parent_reach_out_id'])

    op.create_table(
        'partnerships',
        sa.Column('id', sa.Text(), primary_key=True),
        sa.Column('tenant_id', sa.Text(), sa.ForeignKey('tenants.id'), nullable=False),
        sa.Column('mentor_id', sa.Text(), nullable=False),
        sa.Column('mentee_id', sa.Text(), nullable=False),
        sa.Column('status', sa.Text(), nullable=False, server_default='active'),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column('ended_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('last_check_in_date', sa.Date(), nullable=True),
    )
    op.create_index('ix_partnerships_tenant_status', 'partnerships', ['tenant_id', 'status'])

    op.create_table(
        'check_ins',
        sa.Column('id', sa.Text(), primary_key=True),
        sa.Column('tenant_id', sa.Text(), sa.ForeignKey('tenants.id'), nullable=False),
        sa.Column('partnership_id', sa.Text(), sa.ForeignKey('partnerships.id'), nullable=False),
        sa.Column('date', sa.Date(), nullable=False),
        sa.Column('temptation_level', sa.Integer(), nullable=False, server_default='1'),
        sa.Column('triggers', sa.JSON()),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index('ix_check_ins_tenant_partnership', 'check_ins', ['tenant_id', 'partnership_id'])

    op.create_table(
        'threads',
        sa.Column('id', sa.Text(), primary_key=True),
        sa.Column('tenant_id', sa.Text(), sa.ForeignKey('tenants.id'), nullable=False),
        sa.Column('user_a', sa.Text(), nullable=False),
        sa.Column('user_b', sa.Text(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index('ix_threads_tenant_id', 'threads', ['tenant_id'])

    op.create_table(
        'metric_snapshots',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('tenant_id', sa.Text(), sa.ForeignKey('tenants.id'), nullable=False),
        sa.Column('timestamp', sa.DateTime(timezone=True), nullable=False),
        sa.Column('active_user_count', sa.Integer(), server_default='0'),
        sa.Column('reach_outs_30d', sa.Integer(), server_default='0'),
        sa.Column('total_reach_outs', sa.Integer(), server_default='0'),
        sa.Column('avg_replies_per_reach_out', sa.Float(), server_default='0.0'),
        sa.Column('percent_reach_outs_with_reply', sa.Integer(), server_default='0'),
        sa.Column('active_partnerships', sa.Integer(), server_default='0'),
        sa.Column('percent_users_reached_out', sa.Integer(), server_default='0'),
        sa.Column('avg_response_time_hours', sa.Float(), server_default='0.0'),
        sa.Column('check_in_completion_rate', sa.Integer(), server_default='0'),
        sa.Column('check_ins_completed', sa.Integer(), server_default='0'),
        sa.Column('check_ins_possible', sa.Integer(), server_default='0'),
        sa.Column('reach_outs_today', sa.Integer(), server_default='0'),
        sa.Column('replies_today', sa.Integer(), server_default='0'),
        sa.UniqueConstraint('tenant_id', 'timestamp', name='uq_metric_snapshot_tenant_timestamp'),
    )

    op.create_table(
        'analytics_documents',
        sa.Column('tenant_id', sa.Text(), sa.ForeignKey('tenants.id'), primary_key=True),
        sa.Column('stats', sa.JSON()),
        sa.Column('time_series', sa.JSON()),
        sa.Column('historical', sa.JSON()),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
    )


def downgrade() -> None:
    op.drop_table('analytics_documents')
    op.drop_table('metric_snapshots')
    op.drop_index('ix_threads_tenant_id', table_name='threads')
    op.drop_table('threads')
    op.drop_index('ix_check_ins_tenant_partnership', table_name='check_ins')
    op.drop_table('check_ins')
    op.drop_index('ix_partnerships_tenant_status', table_name='partnerships')
    op.drop_table('partnerships')
    op.drop_index('ix_replies_tenant_parent', table_name='replies')
    op.drop_table('replies')
    op.drop_index('ix_reach_outs_tenant_status_created', table_name='reach_outs')
    op.drop_table('reach_outs')
    op.drop_index('ix_tenant_users_tenant_id', table_name='tenant_users')
    op.drop_table('tenant_users')
    op.drop_table('tenants')
