"""
Wire Modules Configuration

Defines the modules that need dependency injection wiring.
Shared between production and test environments.
"""

from types import ModuleType

from src.service.cinema.app.command import (
    confirm_payment_use_case,
    create_booking_use_case,
    release_hold_use_case,
    request_hold_use_case,
    retry_payment_order_use_case,
    sweep_expired_holds_use_case,
)
from src.service.cinema.app.query import (
    get_booking_use_case,
    get_reservation_session_use_case,
    get_seat_availability_use_case,
    get_showtime_use_case,
    list_bookings_use_case,
)
from src.service.cinema.driving_adapter.http_controller.auth import current_user


WIRE_MODULES: list[ModuleType] = [
    request_hold_use_case,
    release_hold_use_case,
    create_booking_use_case,
    retry_payment_order_use_case,
    confirm_payment_use_case,
    sweep_expired_holds_use_case,
    get_seat_availability_use_case,
    get_showtime_use_case,
    get_booking_use_case,
    list_bookings_use_case,
    get_reservation_session_use_case,
    current_user,
]
