from datetime import timedelta
from decimal import Decimal

import pytest

from src.service.cinema.domain.entity.hold_entity import Hold
from src.service.cinema.domain.entity.seat_entity import Seat, SeatClass
from src.service.cinema.domain.enum.seat_status import SeatStatus
from src.service.cinema.domain.seat_availability import resolve_availability
from test.service.cinema.cinema_test_constants import (
    BASE_TIME,
    SCREEN_ID,
    SHOWTIME_ID,
    USER_ALICE,
    USER_BOB,
)


def _seat(seat_id: int) -> Seat:
    return Seat(
        id=seat_id,
        screen_id=SCREEN_ID,
        row_label='A',
        column_index=seat_id,
        seat_number=f'A{seat_id}',
        seat_class=SeatClass.STANDARD,
        price=Decimal('12.00'),
    )


def _hold(seat_id: int, *, user_id: str, expires_in: int) -> Hold:
    return Hold(
        user_id=user_id,
        showtime_id=SHOWTIME_ID,
        seat_id=seat_id,
        expires_at=BASE_TIME + timedelta(seconds=expires_in),
        created_at=BASE_TIME,
    )


@pytest.mark.unit
class TestResolveAvailability:
    @pytest.fixture
    def seats(self) -> list[Seat]:
        return [_seat(seat_id) for seat_id in (1, 2, 3, 4)]

    def test_booked_wins_over_held(self, seats: list[Seat]):
        availability = resolve_availability(
            showtime_id=SHOWTIME_ID,
            seats=seats,
            booked_seat_ids=[1],
            holds=[_hold(1, user_id=USER_BOB, expires_in=300)],
            now=BASE_TIME,
        )

        assert availability.status_of(1) == SeatStatus.BOOKED

    def test_expired_hold_reads_as_available(self, seats: list[Seat]):
        availability = resolve_availability(
            showtime_id=SHOWTIME_ID,
            seats=seats,
            booked_seat_ids=[],
            holds=[_hold(2, user_id=USER_BOB, expires_in=0)],
            now=BASE_TIME,
        )

        assert availability.status_of(2) == SeatStatus.AVAILABLE

    def test_counts_and_requester_flag(self, seats: list[Seat]):
        availability = resolve_availability(
            showtime_id=SHOWTIME_ID,
            seats=seats,
            booked_seat_ids=[4],
            holds=[
                _hold(1, user_id=USER_ALICE, expires_in=300),
                _hold(2, user_id=USER_BOB, expires_in=300),
            ],
            now=BASE_TIME,
            requester_id=USER_ALICE,
        )

        assert availability.count(SeatStatus.AVAILABLE) == 1
        assert availability.count(SeatStatus.HELD) == 2
        assert availability.count(SeatStatus.BOOKED) == 1
        held_by_me = {s.seat.id: s.held_by_requester for s in availability.seats}
        assert held_by_me == {1: True, 2: False, 3: False, 4: False}

    def test_anonymous_requester_never_owns_holds(self, seats: list[Seat]):
        availability = resolve_availability(
            showtime_id=SHOWTIME_ID,
            seats=seats,
            booked_seat_ids=[],
            holds=[_hold(1, user_id=USER_ALICE, expires_in=300)],
            now=BASE_TIME,
        )

        assert not any(s.held_by_requester for s in availability.seats)

    def test_unknown_seat_raises_key_error(self, seats: list[Seat]):
        availability = resolve_availability(
            showtime_id=SHOWTIME_ID, seats=seats, booked_seat_ids=[], holds=[], now=BASE_TIME
        )

        with pytest.raises(KeyError):
            availability.status_of(99)
