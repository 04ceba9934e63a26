from datetime import datetime
from typing import Iterable, Optional

import attrs

from src.service.cinema.domain.entity.booking_entity import Booking, BookingStatus, PaymentStatus
from src.service.cinema.domain.entity.hold_entity import Hold
from src.service.cinema.domain.enum.reservation_state import ReservationState


@attrs.define(frozen=True)
class ReservationSession:
    user_id: str
    showtime_id: int
    state: ReservationState
    held_seat_ids: list[int] = attrs.field(factory=list)
    hold_expires_at: Optional[datetime] = None
    booking: Optional[Booking] = None


def derive_reservation_session(
    *,
    user_id: str,
    showtime_id: int,
    holds: Iterable[Hold],
    bookings: Iterable[Booking],
    now: datetime,
) -> ReservationSession:
    """
    Derive the shopping-session state of `user_id` for `showtime_id`.

    Live holds win: a user who already paid and starts a new selection is
    `holding` again. Without live holds the latest booking decides.
    """
    own_holds = [h for h in holds if h.user_id == user_id and h.showtime_id == showtime_id]
    active_holds = [h for h in own_holds if h.is_active(now=now)]
    own_bookings = [b for b in bookings if b.user_id == user_id and b.showtime_id == showtime_id]
    latest = max(own_bookings, key=lambda b: b.created_at or now, default=None)

    if active_holds:
        held = sorted(h.seat_id for h in active_holds)
        expires_at = min(h.expires_at for h in active_holds)
        awaiting = latest is not None and latest.is_pending and latest.covers_exactly(held)
        return ReservationSession(
            user_id=user_id,
            showtime_id=showtime_id,
            state=ReservationState.AWAITING_PAYMENT if awaiting else ReservationState.HOLDING,
            held_seat_ids=held,
            hold_expires_at=expires_at,
            booking=latest if awaiting else None,
        )

    if latest is not None:
        if latest.payment_status == PaymentStatus.COMPLETED:
            state = (
                ReservationState.CANCELLED
                if latest.status == BookingStatus.CANCELLED
                else ReservationState.CONFIRMED
            )
        elif latest.payment_status == PaymentStatus.FAILED:
            state = ReservationState.CANCELLED
        else:
            # Pending payment but the holds behind it have lapsed
            state = ReservationState.EXPIRED
        return ReservationSession(
            user_id=user_id, showtime_id=showtime_id, state=state, booking=latest
        )

    state = ReservationState.EXPIRED if own_holds else ReservationState.EMPTY
    return ReservationSession(user_id=user_id, showtime_id=showtime_id, state=state)
