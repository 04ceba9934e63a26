"""Cinema Domain Enums"""

from src.service.cinema.domain.enum.reservation_state import ReservationState
from src.service.cinema.domain.enum.seat_status import SeatStatus

__all__ = ['ReservationState', 'SeatStatus']
