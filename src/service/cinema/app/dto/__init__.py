"""Application layer DTOs"""

from src.service.cinema.app.dto.booking_result import (
    BookingDetail,
    BookingWithPaymentOrder,
    ConfirmedBooking,
)
from src.service.cinema.app.dto.hold_result import HoldResult
from src.service.cinema.app.dto.sweep_result import SweepResult

__all__ = [
    'BookingDetail',
    'BookingWithPaymentOrder',
    'ConfirmedBooking',
    'HoldResult',
    'SweepResult',
]
