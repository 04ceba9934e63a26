"""
Reservation State Enum - the shopping session of one user for one showtime

    empty -> holding -> awaiting_payment -> confirmed
                 \            \
                  -> expired   -> expired / cancelled

The state is derived from stored holds and bookings on every read;
there is no process-resident session object.
"""

from enum import StrEnum


class ReservationState(StrEnum):
    EMPTY = 'empty'
    HOLDING = 'holding'
    AWAITING_PAYMENT = 'awaiting_payment'
    CONFIRMED = 'confirmed'
    EXPIRED = 'expired'
    CANCELLED = 'cancelled'
