"""
Booking Ledger Command Repository Implementation

Writes bookings and their BookedSeats on the Unit of Work session. Nothing here
commits; confirm-payment relies on the insert, the status update and the hold
delete landing in the same transaction.
"""

from datetime import datetime
from typing import Iterable, List, Optional
from uuid import UUID

import attrs
from sqlalchemy import insert as sql_insert, select, update as sql_update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from src.platform.logging.loguru_io import Logger
from src.service.cinema.app.interface.i_booking_ledger_command_repo import (
    IBookingLedgerCommandRepo,
)
from src.service.cinema.domain.entity.booking_entity import BookedSeat, Booking, PaymentStatus
from src.service.cinema.domain.reservation_error import SeatAlreadyBookedError
from src.service.cinema.driven_adapter.model.booked_seat_model import BookedSeatModel
from src.service.cinema.driven_adapter.model.booking_model import BookingModel
from src.service.cinema.driven_adapter.repo.booking_mapper import booking_to_entity


class BookingLedgerCommandRepoImpl(IBookingLedgerCommandRepo):
    def __init__(self) -> None:
        self.session: AsyncSession | None = None

    def _require_session(self) -> AsyncSession:
        if self.session is None:
            raise RuntimeError('BookingLedgerCommandRepoImpl must be used inside a Unit of Work')
        return self.session

    @Logger.io
    async def create(self, *, booking: Booking) -> Booking:
        await self._require_session().execute(
            sql_insert(BookingModel).values(
                id=booking.id,
                user_id=booking.user_id,
                showtime_id=booking.showtime_id,
                booking_reference=booking.booking_reference,
                seat_ids=list(booking.seat_ids),
                total_amount=booking.total_amount,
                booking_fee=booking.booking_fee,
                currency=booking.currency,
                payment_status=booking.payment_status.value,
                status=booking.status.value,
                payment_order_id=booking.payment_order_id,
                payment_id=booking.payment_id,
                created_at=booking.created_at,
                updated_at=booking.updated_at,
                paid_at=booking.paid_at,
            )
        )
        return booking

    @Logger.io
    async def get_by_id(self, *, booking_id: UUID, for_update: bool = False) -> Optional[Booking]:
        stmt = (
            select(BookingModel)
            .where(BookingModel.id == booking_id)
            .execution_options(populate_existing=True)
        )
        if for_update:
            stmt = stmt.with_for_update()
        result = await self._require_session().execute(stmt)
        db_booking = result.scalar_one_or_none()
        return booking_to_entity(db_booking) if db_booking else None

    @Logger.io
    async def update_payment(self, *, booking: Booking) -> Booking:
        await self._require_session().execute(
            sql_update(BookingModel)
            .where(BookingModel.id == booking.id)
            .values(
                payment_status=booking.payment_status.value,
                status=booking.status.value,
                payment_order_id=booking.payment_order_id,
                payment_id=booking.payment_id,
                paid_at=booking.paid_at,
                updated_at=booking.updated_at,
            )
            .execution_options(synchronize_session=False)
        )
        return booking

    async def _update_if_pending(self, *, booking_id: UUID, **values) -> bool:
        result = await self._require_session().execute(
            sql_update(BookingModel)
            .where(
                BookingModel.id == booking_id,
                BookingModel.payment_status == PaymentStatus.PENDING.value,
            )
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        return bool(result.rowcount)  # type: ignore[attr-defined]

    @Logger.io
    async def attach_payment_order(self, *, booking_id: UUID, order_id: str, now: datetime) -> bool:
        return await self._update_if_pending(
            booking_id=booking_id, payment_order_id=order_id, updated_at=now
        )

    @Logger.io
    async def mark_failed_if_pending(self, *, booking_id: UUID, now: datetime) -> bool:
        return await self._update_if_pending(
            booking_id=booking_id,
            payment_status=PaymentStatus.FAILED.value,
            updated_at=now,
        )

    @Logger.io
    async def list_by_user_and_showtime(self, *, user_id: str, showtime_id: int) -> List[Booking]:
        result = await self._require_session().execute(
            select(BookingModel)
            .where(
                BookingModel.user_id == user_id,
                BookingModel.showtime_id == showtime_id,
            )
            .order_by(BookingModel.created_at.desc())
            .execution_options(populate_existing=True)
        )
        return [booking_to_entity(db_booking) for db_booking in result.scalars()]

    @Logger.io
    async def list_booked_seat_ids(
        self, *, showtime_id: int, seat_ids: Optional[Iterable[int]] = None
    ) -> List[int]:
        stmt = select(BookedSeatModel.seat_id).where(BookedSeatModel.showtime_id == showtime_id)
        if seat_ids is not None:
            ids = list(set(seat_ids))
            if not ids:
                return []
            stmt = stmt.where(BookedSeatModel.seat_id.in_(ids))
        result = await self._require_session().execute(stmt)
        return sorted(result.scalars())

    @Logger.io
    async def insert_booked_seats(self, *, booked_seats: List[BookedSeat]) -> List[BookedSeat]:
        if not booked_seats:
            return []
        try:
            result = await self._require_session().execute(
                sql_insert(BookedSeatModel).returning(BookedSeatModel.seat_id, BookedSeatModel.id),
                [
                    {
                        'booking_id': booked_seat.booking_id,
                        'seat_id': booked_seat.seat_id,
                        'showtime_id': booked_seat.showtime_id,
                        'created_at': booked_seat.created_at,
                    }
                    for booked_seat in booked_seats
                ],
            )
        except IntegrityError as e:
            raise SeatAlreadyBookedError(
                'One or more seats have already been booked',
                seat_ids=[booked_seat.seat_id for booked_seat in booked_seats],
            ) from e

        ids_by_seat = {seat_id: row_id for seat_id, row_id in result.all()}
        return [
            attrs.evolve(booked_seat, id=ids_by_seat.get(booked_seat.seat_id))
            for booked_seat in booked_seats
        ]

    @Logger.io
    async def list_stale_pending(self, *, created_before: datetime) -> List[Booking]:
        result = await self._require_session().execute(
            select(BookingModel)
            .where(
                BookingModel.payment_status == PaymentStatus.PENDING.value,
                BookingModel.created_at < created_before,
            )
            .order_by(BookingModel.created_at)
            .execution_options(populate_existing=True)
        )
        return [booking_to_entity(db_booking) for db_booking in result.scalars()]
