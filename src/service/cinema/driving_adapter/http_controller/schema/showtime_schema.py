from datetime import date, datetime, time
from decimal import Decimal
from typing import List, Optional
from uuid import UUID

from pydantic import ConfigDict
from pydantic.alias_generators import to_camel

from src.service.cinema.domain.entity.showtime_entity import Showtime
from src.service.cinema.domain.enum.reservation_state import ReservationState
from src.service.cinema.domain.enum.seat_status import SeatStatus
from src.service.cinema.domain.reservation_session import ReservationSession
from src.service.cinema.domain.seat_availability import SeatAvailability, ShowtimeAvailability
from src.service.cinema.driving_adapter.http_controller.schema.base_schema import CamelModel


class ShowtimeResponse(CamelModel):
    id: int
    movie_id: int
    screen_id: int
    show_date: date
    show_time: time
    price: Decimal

    @classmethod
    def from_entity(cls, showtime: Showtime) -> 'ShowtimeResponse':
        return cls(
            id=showtime.id,
            movie_id=showtime.movie_id,
            screen_id=showtime.screen_id,
            show_date=showtime.show_date,
            show_time=showtime.show_time,
            price=showtime.price,
        )


class SeatResponse(CamelModel):
    id: int
    seat_number: str
    row_label: str
    column_index: int
    seat_class: str
    price: Decimal
    is_active: bool
    status: SeatStatus
    held_by_me: bool = False

    @classmethod
    def from_availability(cls, availability: SeatAvailability) -> 'SeatResponse':
        seat = availability.seat
        return cls(
            id=seat.id,
            seat_number=seat.seat_number,
            row_label=seat.row_label,
            column_index=seat.column_index,
            seat_class=seat.seat_class.value,
            price=seat.price,
            is_active=seat.is_active,
            status=availability.status,
            held_by_me=availability.held_by_requester,
        )


class SeatCounts(CamelModel):
    available: int
    held: int
    booked: int


class SeatMapResponse(CamelModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        json_schema_extra={
            'example': {
                'showtimeId': 1,
                'seats': [
                    {
                        'id': 1,
                        'seatNumber': 'A1',
                        'rowLabel': 'A',
                        'columnIndex': 1,
                        'seatClass': 'standard',
                        'price': '12.00',
                        'isActive': True,
                        'status': 'available',
                        'heldByMe': False,
                    }
                ],
                'counts': {'available': 1, 'held': 0, 'booked': 0},
            }
        },
    )

    showtime_id: int
    seats: List[SeatResponse]
    counts: SeatCounts

    @classmethod
    def from_availability(cls, availability: ShowtimeAvailability) -> 'SeatMapResponse':
        return cls(
            showtime_id=availability.showtime_id,
            seats=[SeatResponse.from_availability(seat) for seat in availability.seats],
            counts=SeatCounts(
                available=availability.count(SeatStatus.AVAILABLE),
                held=availability.count(SeatStatus.HELD),
                booked=availability.count(SeatStatus.BOOKED),
            ),
        )


class ReservationSessionResponse(CamelModel):
    showtime_id: int
    state: ReservationState
    held_seat_ids: List[int]
    hold_expires_at: Optional[datetime] = None
    booking_id: Optional[UUID] = None
    booking_reference: Optional[str] = None

    @classmethod
    def from_session(cls, session: ReservationSession) -> 'ReservationSessionResponse':
        return cls(
            showtime_id=session.showtime_id,
            state=session.state,
            held_seat_ids=session.held_seat_ids,
            hold_expires_at=session.hold_expires_at,
            booking_id=session.booking.id if session.booking else None,
            booking_reference=session.booking.booking_reference if session.booking else None,
        )
