"""init_cinema_schema

Revision ID: 0001
Revises:
Create Date: 2026-10-18

Schema:
- seat: Physical seats per screen (static price and class)
- showtime: Scheduled screenings
- seat_hold: Time-boxed seat claims, UNIQUE(showtime_id, seat_id)
- booking: Purchases with UUID7 primary key and payment state
- booked_seat: Permanent seat ownership, UNIQUE(showtime_id, seat_id)
"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '0001'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create all tables with final schema."""

    # ========== Seat inventory ==========
    op.create_table(
        'seat',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('screen_id', sa.Integer(), nullable=False),
        sa.Column('row_label', sa.String(length=4), nullable=False),
        sa.Column('column_index', sa.Integer(), nullable=False),
        sa.Column('seat_number', sa.String(length=10), nullable=False),
        sa.Column('seat_class', sa.String(length=20), nullable=False),
        sa.Column('price', sa.Numeric(10, 2), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('screen_id', 'seat_number', name='uq_seat_screen_number'),
    )
    op.create_index(op.f('ix_seat_screen_id'), 'seat', ['screen_id'], unique=False)

    op.create_table(
        'showtime',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('movie_id', sa.Integer(), nullable=False),
        sa.Column('screen_id', sa.Integer(), nullable=False),
        sa.Column('show_date', sa.Date(), nullable=False),
        sa.Column('show_time', sa.Time(), nullable=False),
        sa.Column('price', sa.Numeric(10, 2), nullable=False),
        sa.Column(
            'created_at',
            sa.DateTime(timezone=True),
            server_default=sa.text('now()'),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_showtime_movie_id'), 'showtime', ['movie_id'], unique=False)

    # ========== Holds ==========
    op.create_table(
        'seat_hold',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('user_id', sa.String(length=255), nullable=False),
        sa.Column('showtime_id', sa.Integer(), nullable=False),
        sa.Column('seat_id', sa.Integer(), nullable=False),
        sa.Column('expires_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column(
            'created_at',
            sa.DateTime(timezone=True),
            server_default=sa.text('now()'),
            nullable=False,
        ),
        sa.ForeignKeyConstraint(['showtime_id'], ['showtime.id']),
        sa.ForeignKeyConstraint(['seat_id'], ['seat.id']),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('showtime_id', 'seat_id', name='uq_seat_hold_showtime_seat'),
    )
    op.create_index(
        'ix_seat_hold_user_showtime', 'seat_hold', ['user_id', 'showtime_id'], unique=False
    )
    # Sweep index
    op.create_index(op.f('ix_seat_hold_expires_at'), 'seat_hold', ['expires_at'], unique=False)

    # ========== Bookings ==========
    op.create_table(
        'booking',
        sa.Column('id', sa.Uuid(), nullable=False),  # UUID7
        sa.Column('user_id', sa.String(length=255), nullable=False),
        sa.Column('showtime_id', sa.Integer(), nullable=False),
        sa.Column('booking_reference', sa.String(length=40), nullable=False),
        sa.Column('seat_ids', sa.JSON(), nullable=False),
        sa.Column('total_amount', sa.Numeric(10, 2), nullable=False),
        sa.Column('booking_fee', sa.Numeric(10, 2), nullable=False),
        sa.Column('currency', sa.String(length=3), nullable=False),
        sa.Column('payment_status', sa.String(length=20), nullable=False),
        sa.Column('status', sa.String(length=20), nullable=False),
        sa.Column('payment_order_id', sa.String(length=64), nullable=True),
        sa.Column('payment_id', sa.String(length=64), nullable=True),
        sa.Column(
            'created_at',
            sa.DateTime(timezone=True),
            server_default=sa.text('now()'),
            nullable=False,
        ),
        sa.Column(
            'updated_at',
            sa.DateTime(timezone=True),
            server_default=sa.text('now()'),
            nullable=False,
        ),
        sa.Column('paid_at', sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(['showtime_id'], ['showtime.id']),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('booking_reference'),
    )
    op.create_index(op.f('ix_booking_user_id'), 'booking', ['user_id'], unique=False)
    op.create_index(op.f('ix_booking_showtime_id'), 'booking', ['showtime_id'], unique=False)
    op.create_index(
        op.f('ix_booking_payment_status'), 'booking', ['payment_status'], unique=False
    )
    op.create_index(
        op.f('ix_booking_payment_order_id'), 'booking', ['payment_order_id'], unique=False
    )

    op.create_table(
        'booked_seat',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('booking_id', sa.Uuid(), nullable=False),
        sa.Column('seat_id', sa.Integer(), nullable=False),
        sa.Column('showtime_id', sa.Integer(), nullable=False),
        sa.Column(
            'created_at',
            sa.DateTime(timezone=True),
            server_default=sa.text('now()'),
            nullable=False,
        ),
        sa.ForeignKeyConstraint(['booking_id'], ['booking.id']),
        sa.ForeignKeyConstraint(['seat_id'], ['seat.id']),
        sa.ForeignKeyConstraint(['showtime_id'], ['showtime.id']),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('showtime_id', 'seat_id', name='uq_booked_seat_showtime_seat'),
    )
    op.create_index(
        op.f('ix_booked_seat_booking_id'), 'booked_seat', ['booking_id'], unique=False
    )


def downgrade() -> None:
    """Drop all tables."""
    op.drop_index(op.f('ix_booked_seat_booking_id'), table_name='booked_seat')
    op.drop_table('booked_seat')

    op.drop_index(op.f('ix_booking_payment_order_id'), table_name='booking')
    op.drop_index(op.f('ix_booking_payment_status'), table_name='booking')
    op.drop_index(op.f('ix_booking_showtime_id'), table_name='booking')
    op.drop_index(op.f('ix_booking_user_id'), table_name='booking')
    op.drop_table('booking')

    op.drop_index(op.f('ix_seat_hold_expires_at'), table_name='seat_hold')
    op.drop_index('ix_seat_hold_user_showtime', table_name='seat_hold')
    op.drop_table('seat_hold')

    op.drop_index(op.f('ix_showtime_movie_id'), table_name='showtime')
    op.drop_table('showtime')

    op.drop_index(op.f('ix_seat_screen_id'), table_name='seat')
    op.drop_table('seat')
