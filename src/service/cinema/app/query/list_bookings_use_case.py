from typing import List, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.logging.loguru_io import Logger
from src.service.cinema.app.interface.i_booking_query_repo import IBookingQueryRepo
from src.service.cinema.domain.entity.booking_entity import Booking


class ListBookingsUseCase:
    def __init__(self, *, booking_query_repo: IBookingQueryRepo):
        self.booking_query_repo = booking_query_repo

    @classmethod
    @inject
    def depends(
        cls, booking_query_repo: IBookingQueryRepo = Depends(Provide[Container.booking_query_repo])
    ) -> Self:
        return cls(booking_query_repo=booking_query_repo)

    @Logger.io
    async def list_bookings(self, *, user_id: str) -> List[Booking]:
        return await self.booking_query_repo.list_by_user(user_id=user_id)
