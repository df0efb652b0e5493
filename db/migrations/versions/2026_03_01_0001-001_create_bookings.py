"""Create bookings table.

Revision ID: 001
Revises:
Create Date: 2026-03-01

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '001'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


ACTIVE_STATUS_CLAUSE = sa.text("status != 'cancelled'")


def upgrade() -> None:
    """Create the bookings table and its indexes."""
    op.create_table(
        'bookings',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('date', sa.Date(), nullable=False),
        sa.Column('time', sa.String(length=5), nullable=False),
        sa.Column('service', sa.String(length=100), nullable=False),
        sa.Column('service_kind', sa.String(length=20), nullable=True),
        sa.Column('customer_name', sa.String(length=100), nullable=False),
        sa.Column('phone', sa.String(length=30), nullable=False),
        sa.Column('email', sa.String(length=254), nullable=False),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('status', sa.String(length=20), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint('id', name=op.f('pk_bookings')),
        sqlite_autoincrement=True,
    )

    op.create_index(op.f('ix_bookings_date'), 'bookings', ['date'], unique=False)
    op.create_index(op.f('ix_bookings_customer_name'), 'bookings', ['customer_name'], unique=False)
    op.create_index(op.f('ix_bookings_phone'), 'bookings', ['phone'], unique=False)
    op.create_index(op.f('ix_bookings_status'), 'bookings', ['status'], unique=False)
    op.create_index(op.f('ix_bookings_created_at'), 'bookings', ['created_at'], unique=False)
    op.create_index('ix_bookings_status_date', 'bookings', ['status', 'date'], unique=False)

    # One active booking per slot; cancelled rows do not hold the slot
    op.create_index(
        'uq_bookings_active_slot',
        'bookings',
        ['date', 'time'],
        unique=True,
        sqlite_where=ACTIVE_STATUS_CLAUSE,
        postgresql_where=ACTIVE_STATUS_CLAUSE,
    )


def downgrade() -> None:
    """Drop the bookings table."""
    op.drop_index('uq_bookings_active_slot', table_name='bookings')
    op.drop_index('ix_bookings_status_date', table_name='bookings')
    op.drop_index(op.f('ix_bookings_created_at'), table_name='bookings')
    op.drop_index(op.f('ix_bookings_status'), table_name='bookings')
    op.drop_index(op.f('ix_bookings_phone'), table_name='bookings')
    op.drop_index(op.f('ix_bookings_customer_name'), table_name='bookings')
    op.drop_index(op.f('ix_bookings_date'), table_name='bookings')
    op.drop_table('bookings')
