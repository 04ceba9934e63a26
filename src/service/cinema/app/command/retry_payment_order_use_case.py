from typing import Self
from uuid import UUID

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.database.unit_of_work import AbstractUnitOfWork
from src.platform.exception.exceptions import NotFoundError
from src.platform.logging.loguru_io import Logger
from src.service.cinema.app.clock import Clock
from src.service.cinema.app.command.payment_order_opener import open_payment_order
from src.service.cinema.app.dto.booking_result import BookingWithPaymentOrder
from src.service.cinema.app.interface.i_payment_gateway import IPaymentGateway
from src.service.cinema.domain.reservation_error import HoldExpiredError


class RetryPaymentOrderUseCase:
    """
    Open a fresh gateway order for a pending booking whose first order failed
    or was abandoned. Refused once the holds behind the booking have lapsed.
    """

    def __init__(
        self, *, uow: AbstractUnitOfWork, payment_gateway: IPaymentGateway, clock: Clock
    ) -> None:
        self.uow = uow
        self.payment_gateway = payment_gateway
        self.clock = clock

    @classmethod
    @inject
    def depends(
        cls,
        uow: AbstractUnitOfWork = Depends(Provide[Container.unit_of_work]),
        payment_gateway: IPaymentGateway = Depends(Provide[Container.payment_gateway]),
        clock: Clock = Depends(Provide[Container.clock]),
    ) -> Self:
        return cls(uow=uow, payment_gateway=payment_gateway, clock=clock)

    @Logger.io
    async def retry_payment_order(
        self, *, user_id: str, booking_id: UUID
    ) -> BookingWithPaymentOrder:
        now = self.clock()
        async with self.uow:
            booking = await self.uow.booking_ledger_repo.get_by_id(booking_id=booking_id)
            if booking is None:
                raise NotFoundError('Booking not found')
            booking.validate_owned_by(user_id)
            booking.validate_can_be_paid()

            holds = await self.uow.hold_ledger_repo.list_by_user_and_showtime(
                user_id=user_id, showtime_id=booking.showtime_id
            )
            live = {hold.seat_id for hold in holds if hold.is_active(now=now)}
            lapsed = set(booking.seat_ids) - live
            if lapsed:
                raise HoldExpiredError('Your hold on these seats has expired', seat_ids=lapsed)

        return await open_payment_order(
            uow=self.uow,
            payment_gateway=self.payment_gateway,
            clock=self.clock,
            booking=booking,
        )
