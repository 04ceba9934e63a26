import attrs

from src.service.cinema.domain.entity.booking_entity import BookedSeat, Booking
from src.service.cinema.domain.value_object.payment_order import PaymentOrder


@attrs.define(frozen=True)
class BookingWithPaymentOrder:
    """Pending booking plus the gateway order the client pays against"""

    booking: Booking
    payment_order: PaymentOrder
    key_id: str


@attrs.define(frozen=True)
class ConfirmedBooking:
    booking: Booking
    booked_seats: list[BookedSeat]


@attrs.define(frozen=True)
class BookingDetail:
    booking: Booking
    booked_seats: list[BookedSeat]
