"""
Database Models

Import all models here to ensure they are registered with SQLAlchemy
"""

from src.service.cinema.driven_adapter.model.booked_seat_model import BookedSeatModel
from src.service.cinema.driven_adapter.model.booking_model import BookingModel
from src.service.cinema.driven_adapter.model.seat_hold_model import SeatHoldModel
from src.service.cinema.driven_adapter.model.seat_model import SeatModel
from src.service.cinema.driven_adapter.model.showtime_model import ShowtimeModel

__all__ = [
    'BookedSeatModel',
    'BookingModel',
    'SeatHoldModel',
    'SeatModel',
    'ShowtimeModel',
]
