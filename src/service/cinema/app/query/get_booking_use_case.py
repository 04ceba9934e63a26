from typing import Self
from uuid import UUID

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.exception.exceptions import NotFoundError
from src.platform.logging.loguru_io import Logger
from src.service.cinema.app.dto.booking_result import BookingDetail
from src.service.cinema.app.interface.i_booking_query_repo import IBookingQueryRepo


class GetBookingUseCase:
    def __init__(self, *, booking_query_repo: IBookingQueryRepo):
        self.booking_query_repo = booking_query_repo

    @classmethod
    @inject
    def depends(
        cls, booking_query_repo: IBookingQueryRepo = Depends(Provide[Container.booking_query_repo])
    ) -> Self:
        return cls(booking_query_repo=booking_query_repo)

    @Logger.io
    async def get_booking(self, *, user_id: str, booking_id: UUID) -> BookingDetail:
        booking = await self.booking_query_repo.get_by_id(booking_id=booking_id)
        if booking is None:
            raise NotFoundError('Booking not found')
        booking.validate_owned_by(user_id)

        booked_seats = await self.booking_query_repo.list_booked_seats(booking_id=booking_id)
        return BookingDetail(booking=booking, booked_seats=booked_seats)
