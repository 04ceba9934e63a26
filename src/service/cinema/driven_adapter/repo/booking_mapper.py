"""Row <-> entity conversion shared by the booking command and query repositories"""

from src.platform.database.db_types import ensure_utc
from src.service.cinema.domain.entity.booking_entity import (
    BookedSeat,
    Booking,
    BookingStatus,
    PaymentStatus,
)
from src.service.cinema.driven_adapter.model.booked_seat_model import BookedSeatModel
from src.service.cinema.driven_adapter.model.booking_model import BookingModel


def booking_to_entity(db_booking: BookingModel) -> Booking:
    return Booking(
        id=db_booking.id,
        user_id=db_booking.user_id,
        showtime_id=db_booking.showtime_id,
        booking_reference=db_booking.booking_reference,
        seat_ids=sorted(db_booking.seat_ids or []),
        total_amount=db_booking.total_amount,
        booking_fee=db_booking.booking_fee,
        currency=db_booking.currency,
        payment_status=PaymentStatus(db_booking.payment_status),
        status=BookingStatus(db_booking.status),
        payment_order_id=db_booking.payment_order_id,
        payment_id=db_booking.payment_id,
        created_at=ensure_utc(db_booking.created_at),
        updated_at=ensure_utc(db_booking.updated_at),
        paid_at=ensure_utc(db_booking.paid_at),
    )


def booked_seat_to_entity(db_booked_seat: BookedSeatModel) -> BookedSeat:
    return BookedSeat(
        id=db_booked_seat.id,
        booking_id=db_booked_seat.booking_id,
        seat_id=db_booked_seat.seat_id,
        showtime_id=db_booked_seat.showtime_id,
        created_at=ensure_utc(db_booked_seat.created_at),
    )
