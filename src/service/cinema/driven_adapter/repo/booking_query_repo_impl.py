from contextlib import asynccontextmanager
from typing import AsyncContextManager, AsyncIterator, Callable, List, Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.platform.logging.loguru_io import Logger
from src.service.cinema.app.interface.i_booking_query_repo import IBookingQueryRepo
from src.service.cinema.domain.entity.booking_entity import BookedSeat, Booking
from src.service.cinema.driven_adapter.model.booked_seat_model import BookedSeatModel
from src.service.cinema.driven_adapter.model.booking_model import BookingModel
from src.service.cinema.driven_adapter.repo.booking_mapper import (
    booked_seat_to_entity,
    booking_to_entity,
)


class BookingQueryRepoImpl(IBookingQueryRepo):
    def __init__(
        self, session_factory: Callable[..., AsyncContextManager[AsyncSession]] | None = None
    ):
        self.session_factory = session_factory
        self.session: AsyncSession | None = None

    @asynccontextmanager
    async def _get_session(self) -> AsyncIterator[AsyncSession]:
        if self.session is not None:
            # Session injected by UoW
            yield self.session
        elif self.session_factory is not None:
            async with self.session_factory() as session:
                yield session
        else:
            raise RuntimeError('No session or session_factory available')

    @Logger.io
    async def get_by_id(self, *, booking_id: UUID) -> Optional[Booking]:
        async with self._get_session() as session:
            db_booking = await session.get(BookingModel, booking_id)
            return booking_to_entity(db_booking) if db_booking else None

    @Logger.io
    async def list_by_user(self, *, user_id: str) -> List[Booking]:
        async with self._get_session() as session:
            result = await session.execute(
                select(BookingModel)
                .where(BookingModel.user_id == user_id)
                .order_by(BookingModel.created_at.desc(), BookingModel.id.desc())
            )
            return [booking_to_entity(db_booking) for db_booking in result.scalars()]

    @Logger.io
    async def list_booked_seats(self, *, booking_id: UUID) -> List[BookedSeat]:
        async with self._get_session() as session:
            result = await session.execute(
                select(BookedSeatModel)
                .where(BookedSeatModel.booking_id == booking_id)
                .order_by(BookedSeatModel.seat_id)
            )
            return [booked_seat_to_entity(row) for row in result.scalars()]
