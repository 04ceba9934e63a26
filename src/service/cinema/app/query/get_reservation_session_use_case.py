from typing import Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.database.unit_of_work import AbstractUnitOfWork
from src.platform.exception.exceptions import NotFoundError
from src.platform.logging.loguru_io import Logger
from src.service.cinema.app.clock import Clock
from src.service.cinema.domain.reservation_session import (
    ReservationSession,
    derive_reservation_session,
)


class GetReservationSessionUseCase:
    """Where a user stands for one showtime, derived from stored holds and bookings."""

    def __init__(self, *, uow: AbstractUnitOfWork, clock: Clock):
        self.uow = uow
        self.clock = clock

    @classmethod
    @inject
    def depends(
        cls,
        uow: AbstractUnitOfWork = Depends(Provide[Container.unit_of_work]),
        clock: Clock = Depends(Provide[Container.clock]),
    ) -> Self:
        return cls(uow=uow, clock=clock)

    @Logger.io
    async def get_session(self, *, user_id: str, showtime_id: int) -> ReservationSession:
        now = self.clock()
        async with self.uow:
            showtime = await self.uow.seat_inventory_repo.get_showtime(showtime_id=showtime_id)
            if showtime is None:
                raise NotFoundError('Showtime not found')
            holds = await self.uow.hold_ledger_repo.list_by_user_and_showtime(
                user_id=user_id, showtime_id=showtime_id
            )
            bookings = await self.uow.booking_ledger_repo.list_by_user_and_showtime(
                user_id=user_id, showtime_id=showtime_id
            )

        return derive_reservation_session(
            user_id=user_id, showtime_id=showtime_id, holds=holds, bookings=bookings, now=now
        )
