"""Entity builders for unit tests"""

from datetime import date, time, timedelta
from decimal import Decimal
from typing import Iterable

from src.service.cinema.domain.entity.booking_entity import Booking
from src.service.cinema.domain.entity.hold_entity import Hold
from src.service.cinema.domain.entity.seat_entity import Seat, SeatClass
from src.service.cinema.domain.entity.showtime_entity import Showtime
from test.service.cinema.cinema_test_constants import (
    BASE_TIME,
    BOOKING_FEE,
    SCREEN_ID,
    SHOWTIME_ID,
    STANDARD_PRICE,
    USER_ALICE,
)


def build_showtime(*, showtime_id: int = SHOWTIME_ID, screen_id: int = SCREEN_ID) -> Showtime:
    return Showtime(
        id=showtime_id,
        movie_id=1,
        screen_id=screen_id,
        show_date=date(2026, 1, 10),
        show_time=time(19, 30),
        price=STANDARD_PRICE,
    )


def build_seat(
    seat_id: int,
    *,
    screen_id: int = SCREEN_ID,
    price: Decimal = STANDARD_PRICE,
    is_active: bool = True,
) -> Seat:
    return Seat(
        id=seat_id,
        screen_id=screen_id,
        row_label='A',
        column_index=seat_id,
        seat_number=f'A{seat_id}',
        seat_class=SeatClass.STANDARD,
        price=price,
        is_active=is_active,
    )


def build_holds(
    seat_ids: Iterable[int], *, user_id: str = USER_ALICE, ttl_seconds: int = 600
) -> list[Hold]:
    return Hold.create_for_seats(
        user_id=user_id,
        showtime_id=SHOWTIME_ID,
        seat_ids=seat_ids,
        now=BASE_TIME,
        ttl=timedelta(seconds=ttl_seconds),
    )


def build_booking(
    seat_ids: Iterable[int],
    *,
    user_id: str = USER_ALICE,
    payment_order_id: str | None = 'order_0001',
) -> Booking:
    booking = Booking.create(
        user_id=user_id,
        showtime_id=SHOWTIME_ID,
        seat_ids=seat_ids,
        total_amount=Decimal('14.50'),
        booking_fee=BOOKING_FEE,
        currency='INR',
        now=BASE_TIME,
    )
    if payment_order_id is None:
        return booking
    return booking.attach_payment_order(order_id=payment_order_id, now=BASE_TIME)
