"""Baseline migration - users, orders, tickets and sequences

Revision ID: 0001_baseline
Revises: 
Create Date: 2026-10-19

Portable DDL (SQLite for local dev, PostgreSQL in production). Enum columns
are VARCHAR with the canonical values stored as-is.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '0001_baseline'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _status(name: str, *values: str) -> sa.Enum:
    return sa.Enum(*values, name=name, native_enum=False, length=32)


def upgrade() -> None:
    # ==========================================================================
    # Users
    # ==========================================================================
    op.create_table(
        'users',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('phone', sa.String(32), nullable=False, unique=True),
        sa.Column('email', sa.String(255), nullable=True, unique=True),
        sa.Column('password_hash', sa.Text(), nullable=False),
        sa.Column('role', _status('user_role', 'customer', 'admin'), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
    )

    op.create_table(
        'password_reset_codes',
        sa.Column('phone', sa.String(32), primary_key=True),
        sa.Column('code_hash', sa.Text(), nullable=False),
        sa.Column('expires_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
    )

    # ==========================================================================
    # Sequences
    # ==========================================================================
    op.create_table(
        'sequence_counters',
        sa.Column('name', sa.String(64), primary_key=True),
        sa.Column('value', sa.Integer(), nullable=False),
    )

    # ==========================================================================
    # Orders
    # ==========================================================================
    order_status = ('Pending', 'In Progress', 'Delivering', 'Completed')
    op.create_table(
        'orders',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('order_number', sa.Integer(), nullable=False, unique=True),
        sa.Column(
            'user_id', sa.Uuid(),
            sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False,
        ),
        sa.Column(
            'service',
            _status('service_type', 'Wash and Fold', 'Wash and Iron', 'Iron', 'Dry Clean'),
            nullable=False,
        ),
        sa.Column('cloth_types', sa.JSON(), nullable=False),
        sa.Column('pickup_address', sa.Text(), nullable=False),
        sa.Column('lat', sa.Float(), nullable=True),
        sa.Column('lng', sa.Float(), nullable=True),
        sa.Column('phone', sa.String(32), nullable=False),
        sa.Column('notes', sa.Text(), nullable=False),
        sa.Column('pickup_date', sa.String(32), nullable=False),
        sa.Column('pickup_time', sa.String(32), nullable=False),
        sa.Column('delivery', _status('delivery_class', 'regular', 'express'), nullable=False),
        sa.Column('status', _status('order_status', *order_status), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index('idx_orders_user_created', 'orders', ['user_id', 'created_at'])
    op.create_index('idx_orders_status', 'orders', ['status'])

    op.create_table(
        'order_status_changes',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column(
            'order_id', sa.Uuid(),
            sa.ForeignKey('orders.id', ondelete='CASCADE'), nullable=False,
        ),
        sa.Column('from_status', _status('order_status', *order_status), nullable=False),
        sa.Column('to_status', _status('order_status', *order_status), nullable=False),
        sa.Column(
            'changed_by_user_id', sa.Uuid(),
            sa.ForeignKey('users.id', ondelete='SET NULL'), nullable=True,
        ),
        sa.Column('changed_at', sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index(
        'ix_order_status_changes_order_id', 'order_status_changes', ['order_id']
    )

    # ==========================================================================
    # Support tickets
    # ==========================================================================
    op.create_table(
        'tickets',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('user_name', sa.String(255), nullable=False),
        sa.Column('mobile', sa.String(32), nullable=False),
        sa.Column('order_id', sa.String(64), nullable=True),
        sa.Column('issue', sa.Text(), nullable=False),
        sa.Column(
            'status', _status('ticket_status', 'Pending', 'Contacted', 'Resolved'),
            nullable=False,
        ),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
    )

    op.create_table(
        'ticket_replies',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column(
            'ticket_id', sa.Uuid(),
            sa.ForeignKey('tickets.id', ondelete='CASCADE'), nullable=False,
        ),
        sa.Column('sender', _status('reply_sender', 'customer', 'admin'), nullable=False),
        sa.Column('message', sa.Text(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index('ix_ticket_replies_ticket_id', 'ticket_replies', ['ticket_id'])


def downgrade() -> None:
    op.drop_table('ticket_replies')
    op.drop_table('tickets')
    op.drop_table('order_status_changes')
    op.drop_table('orders')
    op.drop_table('sequence_counters')
    op.drop_table('password_reset_codes')
    op.drop_table('users')
