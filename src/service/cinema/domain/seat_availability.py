"""
Availability resolution for a showtime

A seat is `booked` if a BookedSeat exists, else `held` if an unexpired hold
exists by any user, else `available`. Expired holds are ignored even if the
sweeper has not removed them yet.
"""

from datetime import datetime
from typing import Iterable, Optional

import attrs

from src.service.cinema.domain.entity.hold_entity import Hold
from src.service.cinema.domain.entity.seat_entity import Seat
from src.service.cinema.domain.enum.seat_status import SeatStatus


@attrs.define(frozen=True)
class SeatAvailability:
    seat: Seat
    status: SeatStatus
    held_by_requester: bool = False


@attrs.define(frozen=True)
class ShowtimeAvailability:
    showtime_id: int
    seats: list[SeatAvailability]

    def count(self, status: SeatStatus) -> int:
        return sum(1 for seat in self.seats if seat.status == status)

    def status_of(self, seat_id: int) -> SeatStatus:
        for seat in self.seats:
            if seat.seat.id == seat_id:
                return seat.status
        raise KeyError(seat_id)


def resolve_availability(
    *,
    showtime_id: int,
    seats: Iterable[Seat],
    booked_seat_ids: Iterable[int],
    holds: Iterable[Hold],
    now: datetime,
    requester_id: Optional[str] = None,
) -> ShowtimeAvailability:
    booked = set(booked_seat_ids)
    active_holders: dict[int, str] = {
        hold.seat_id: hold.user_id for hold in holds if hold.is_active(now=now)
    }

    resolved = []
    for seat in seats:
        if seat.id in booked:
            resolved.append(SeatAvailability(seat=seat, status=SeatStatus.BOOKED))
        elif seat.id in active_holders:
            resolved.append(
                SeatAvailability(
                    seat=seat,
                    status=SeatStatus.HELD,
                    held_by_requester=requester_id is not None
                    and active_holders[seat.id] == requester_id,
                )
            )
        else:
            resolved.append(SeatAvailability(seat=seat, status=SeatStatus.AVAILABLE))

    return ShowtimeAvailability(showtime_id=showtime_id, seats=resolved)
