from datetime import datetime
from decimal import Decimal
from enum import StrEnum
from typing import Iterable, List, Optional
from uuid import UUID

import attrs
from uuid_utils.compat import uuid7

from src.platform.exception.exceptions import DomainError, ForbiddenError
from src.platform.logging.loguru_io import Logger
from src.service.cinema.domain.reservation_error import BookingNotPayableError
from src.service.cinema.domain.value_object.booking_reference import generate_booking_reference


class PaymentStatus(StrEnum):
    PENDING = 'pending'
    COMPLETED = 'completed'
    FAILED = 'failed'


class BookingStatus(StrEnum):
    CONFIRMED = 'confirmed'
    CANCELLED = 'cancelled'
    USED = 'used'


@attrs.define
class Booking:
    """
    A purchase of a fixed seat set for one showtime.

    Created with payment_status=pending before the payment order exists.
    Seats are final once payment_status=completed; from then on only the
    lifecycle `status` (confirmed -> used / cancelled) may change.
    """

    id: UUID
    user_id: str
    showtime_id: int
    booking_reference: str
    seat_ids: List[int]
    total_amount: Decimal
    booking_fee: Decimal
    currency: str
    payment_status: PaymentStatus = PaymentStatus.PENDING
    status: BookingStatus = BookingStatus.CONFIRMED
    payment_order_id: Optional[str] = None
    payment_id: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    paid_at: Optional[datetime] = None

    @classmethod
    @Logger.io
    def create(
        cls,
        *,
        user_id: str,
        showtime_id: int,
        seat_ids: Iterable[int],
        total_amount: Decimal,
        booking_fee: Decimal,
        currency: str,
        now: datetime,
        reference_prefix: str = 'SN',
    ) -> 'Booking':
        unique_seat_ids = sorted(set(seat_ids))
        if not unique_seat_ids:
            raise DomainError('A booking needs at least one seat', 400)
        if total_amount <= 0:
            raise DomainError('totalAmount must be greater than zero', 400)

        return cls(
            id=uuid7(),
            user_id=user_id,
            showtime_id=showtime_id,
            booking_reference=generate_booking_reference(now=now, prefix=reference_prefix),
            seat_ids=unique_seat_ids,
            total_amount=total_amount,
            booking_fee=booking_fee,
            currency=currency,
            payment_status=PaymentStatus.PENDING,
            status=BookingStatus.CONFIRMED,
            created_at=now,
            updated_at=now,
        )

    @property
    def is_pending(self) -> bool:
        return self.payment_status == PaymentStatus.PENDING

    def validate_owned_by(self, user_id: str) -> None:
        if self.user_id != user_id:
            raise ForbiddenError('Access denied')

    def validate_can_be_paid(self) -> None:
        if self.payment_status != PaymentStatus.PENDING:
            raise BookingNotPayableError(
                f'Booking {self.booking_reference} is {self.payment_status}, not pending'
            )

    def covers_exactly(self, seat_ids: Iterable[int]) -> bool:
        return set(self.seat_ids) == set(seat_ids)

    def attach_payment_order(self, *, order_id: str, now: datetime) -> 'Booking':
        return attrs.evolve(self, payment_order_id=order_id, updated_at=now)

    @Logger.io
    def mark_as_completed(self, *, payment_id: str, now: datetime) -> 'Booking':
        self.validate_can_be_paid()
        return attrs.evolve(
            self,
            payment_status=PaymentStatus.COMPLETED,
            payment_id=payment_id,
            paid_at=now,
            updated_at=now,
        )

    def mark_as_failed(self, *, now: datetime) -> 'Booking':
        self.validate_can_be_paid()
        return attrs.evolve(self, payment_status=PaymentStatus.FAILED, updated_at=now)


@attrs.define(frozen=True)
class BookedSeat:
    """Permanent proof that `booking_id` owns `seat_id` for `showtime_id`."""

    booking_id: UUID
    seat_id: int
    showtime_id: int
    created_at: Optional[datetime] = None
    id: Optional[int] = None

    @classmethod
    def for_booking(cls, booking: Booking, *, now: datetime) -> list['BookedSeat']:
        return [
            cls(
                booking_id=booking.id,
                seat_id=seat_id,
                showtime_id=booking.showtime_id,
                created_at=now,
            )
            for seat_id in booking.seat_ids
        ]
