"""initial_fleet_workcheck

Revision ID: f1a2b3c4d5e6
Revises:
Create Date: 2026-10-19 09:00:00.000000

차량 점검 스키마 생성: users, units, check_items, workchecks,
workcheck_items, workcheck_item_images, approvals.
Create the fleet workcheck schema. The partial unique indexes on
workchecks allow one live workcheck per staff member per day and one
live workcheck per unit per day.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import UUID, JSONB


# revision identifiers, used by Alembic.
revision: str = 'f1a2b3c4d5e6'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # users — 점검 직원 및 관리자 (Staff inspectors and admins)
    op.create_table(
        'users',
        sa.Column('id', UUID(as_uuid=True), primary_key=True),
        sa.Column('first_name', sa.String(100), nullable=False),
        sa.Column('last_name', sa.String(100), nullable=False),
        sa.Column('username', sa.String(100), nullable=False, unique=True),
        sa.Column('password_hash', sa.String(255), nullable=False),
        sa.Column('role', sa.String(10), server_default='STAFF', nullable=False),
        sa.Column('phone_number', sa.String(30), nullable=True),
        sa.Column('user_image', sa.String(500), nullable=True),
        sa.Column('is_active', sa.Boolean(), server_default=sa.text('true'), nullable=False),
        sa.Column('last_login', sa.DateTime(timezone=True), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
    )

    # units — 차량/장비, 소프트 삭제 (Vehicles and equipment, soft-deleted)
    op.create_table(
        'units',
        sa.Column('id', UUID(as_uuid=True), primary_key=True),
        sa.Column('name', sa.String(100), nullable=False),
        sa.Column('type', sa.String(100), nullable=False),
        sa.Column('number_plate', sa.String(30), nullable=True),
        sa.Column('is_deleted', sa.Boolean(), server_default=sa.text('false'), nullable=False),
        sa.Column('deleted_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
    )

    # check_items — 점검 항목 카탈로그 (Check item catalog)
    op.create_table(
        'check_items',
        sa.Column('id', UUID(as_uuid=True), primary_key=True),
        sa.Column('code', sa.String(30), nullable=False, unique=True),
        sa.Column('label', sa.String(255), nullable=False),
        sa.Column('sort_order', sa.Integer(), server_default='1', nullable=False),
        sa.Column('is_active', sa.Boolean(), server_default=sa.text('true'), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
    )

    # workchecks — 일일 점검 (Daily inspection per staff member and unit)
    op.create_table(
        'workchecks',
        sa.Column('id', UUID(as_uuid=True), primary_key=True),
        sa.Column('checker_id', UUID(as_uuid=True), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('unit_id', UUID(as_uuid=True), sa.ForeignKey('units.id', ondelete='RESTRICT'), nullable=False),
        sa.Column('work_date', sa.Date(), nullable=False),
        sa.Column('hours_meter', sa.Float(), nullable=True),
        sa.Column('is_submitted', sa.Boolean(), server_default=sa.text('false'), nullable=False),
        sa.Column('is_deleted', sa.Boolean(), server_default=sa.text('false'), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
    )

    # 점검 인덱스 — Workcheck indexes
    op.create_index('ix_workchecks_checker_id', 'workchecks', ['checker_id'])
    op.create_index(
        'uq_workcheck_checker_day', 'workchecks', ['checker_id', 'work_date'],
        unique=True, postgresql_where=sa.text('is_deleted = false'),
    )
    op.create_index(
        'uq_workcheck_unit_day', 'workchecks', ['unit_id', 'work_date'],
        unique=True, postgresql_where=sa.text('is_deleted = false'),
    )

    # workcheck_items — 점검 항목 기록 (Check item snapshot per workcheck)
    op.create_table(
        'workcheck_items',
        sa.Column('id', UUID(as_uuid=True), primary_key=True),
        sa.Column('workcheck_id', UUID(as_uuid=True), sa.ForeignKey('workchecks.id', ondelete='CASCADE'), nullable=False),
        sa.Column('item_id', UUID(as_uuid=True), sa.ForeignKey('check_items.id', ondelete='RESTRICT'), nullable=False),
        sa.Column('position', sa.Integer(), server_default='1', nullable=False),
        sa.Column('actions', JSONB(), server_default=sa.text("'[]'::jsonb"), nullable=False),
        sa.Column('note', sa.Text(), server_default='', nullable=False),
    )
    op.create_index('ix_workcheck_items_workcheck_id', 'workcheck_items', ['workcheck_id'])
    op.create_index('ix_workcheck_items_item_id', 'workcheck_items', ['item_id'])

    # workcheck_item_images — 항목당 증빙 사진 1장 (One evidence photo per item)
    op.create_table(
        'workcheck_item_images',
        sa.Column('id', UUID(as_uuid=True), primary_key=True),
        sa.Column('item_id', UUID(as_uuid=True), sa.ForeignKey('workcheck_items.id', ondelete='CASCADE'), nullable=False, unique=True),
        sa.Column('file_name', sa.String(1000), nullable=False),
        sa.Column('uploaded_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
    )

    # approvals — 관리자 검토 (Admin review, one per workcheck)
    op.create_table(
        'approvals',
        sa.Column('id', UUID(as_uuid=True), primary_key=True),
        sa.Column('workcheck_id', UUID(as_uuid=True), sa.ForeignKey('workchecks.id', ondelete='CASCADE'), nullable=False, unique=True),
        sa.Column('status', sa.String(20), server_default='pending', nullable=False),
        sa.Column('approver_id', UUID(as_uuid=True), sa.ForeignKey('users.id', ondelete='SET NULL'), nullable=True),
        sa.Column('comments', sa.Text(), nullable=True),
        sa.Column('approved_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index('ix_approvals_status', 'approvals', ['status'])


def downgrade() -> None:
    op.drop_index('ix_approvals_status', table_name='approvals')
    op.drop_table('approvals')
    op.drop_table('workcheck_item_images')
    op.drop_index('ix_workcheck_items_item_id', table_name='workcheck_items')
    op.drop_index('ix_workcheck_items_workcheck_id', table_name='workcheck_items')
    op.drop_table('workcheck_items')
    op.drop_index('uq_workcheck_unit_day', table_name='workchecks')
    op.drop_index('uq_workcheck_checker_day', table_name='workchecks')
    op.drop_index('ix_workchecks_checker_id', table_name='workchecks')
    op.drop_table('workchecks')
    op.drop_table('check_items')
    op.drop_table('units')
    op.drop_table('users')
