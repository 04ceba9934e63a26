"""
Seat Status Enum - derived per (showtime, seat), never stored

booked: a BookedSeat row exists (permanent)
held:   an unexpired hold exists by any user
"""

from enum import StrEnum


class SeatStatus(StrEnum):
    AVAILABLE = 'available'
    HELD = 'held'
    BOOKED = 'booked'
