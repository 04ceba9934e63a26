from decimal import Decimal
from typing import Iterable, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends
from opentelemetry import trace

from src.platform.config.core_setting import Settings
from src.platform.config.di import Container
from src.platform.database.unit_of_work import AbstractUnitOfWork
from src.platform.exception.exceptions import NotFoundError
from src.platform.logging.loguru_io import Logger
from src.service.cinema.app.clock import Clock
from src.service.cinema.app.command.payment_order_opener import open_payment_order
from src.service.cinema.app.dto.booking_result import BookingWithPaymentOrder
from src.service.cinema.app.interface.i_payment_gateway import IPaymentGateway
from src.service.cinema.domain.entity.booking_entity import Booking
from src.service.cinema.domain.reservation_error import AmountMismatchError, HoldMismatchError


CENT = Decimal('0.01')


class CreateBookingUseCase:
    """
    Turn the caller's live hold into a pending booking and open a payment order.

    Flow:
    1. In one transaction: check the live hold equals the requested seats,
       check the amount, insert the pending booking
    2. Outside the transaction: create the gateway order keyed by the
       booking reference and store its id

    Holds are kept; they are consumed by payment confirmation.
    """

    def __init__(
        self,
        *,
        uow: AbstractUnitOfWork,
        payment_gateway: IPaymentGateway,
        clock: Clock,
        booking_fee: Decimal = Decimal('2.50'),
        currency: str = 'INR',
        reference_prefix: str = 'SN',
        validate_total_amount: bool = True,
    ) -> None:
        self.uow = uow
        self.payment_gateway = payment_gateway
        self.clock = clock
        self.booking_fee = booking_fee
        self.currency = currency
        self.reference_prefix = reference_prefix
        self.validate_total_amount = validate_total_amount
        self.tracer = trace.get_tracer(__name__)

    @classmethod
    @inject
    def depends(
        cls,
        uow: AbstractUnitOfWork = Depends(Provide[Container.unit_of_work]),
        payment_gateway: IPaymentGateway = Depends(Provide[Container.payment_gateway]),
        clock: Clock = Depends(Provide[Container.clock]),
        config: Settings = Depends(Provide[Container.config_service]),
    ) -> Self:
        return cls(
            uow=uow,
            payment_gateway=payment_gateway,
            clock=clock,
            booking_fee=config.BOOKING_FEE,
            currency=config.PAYMENT_CURRENCY,
            reference_prefix=config.BOOKING_REFERENCE_PREFIX,
            validate_total_amount=config.VALIDATE_TOTAL_AMOUNT,
        )

    @Logger.io
    async def create_booking(
        self,
        *,
        user_id: str,
        showtime_id: int,
        seat_ids: Iterable[int],
        total_amount: Decimal,
    ) -> BookingWithPaymentOrder:
        requested = set(seat_ids)

        with self.tracer.start_as_current_span(
            'use_case.create_booking',
            attributes={'showtime.id': showtime_id, 'user.id': user_id},
        ) as span:
            now = self.clock()
            async with self.uow:
                showtime = await self.uow.seat_inventory_repo.get_showtime(showtime_id=showtime_id)
                if showtime is None:
                    raise NotFoundError('Showtime not found')

                holds = await self.uow.hold_ledger_repo.list_by_user_and_showtime(
                    user_id=user_id, showtime_id=showtime_id
                )
                held = {hold.seat_id for hold in holds if hold.is_active(now=now)}
                if not requested or held != requested:
                    raise HoldMismatchError(
                        'Selected seats do not match your current hold',
                        seat_ids=held ^ requested,
                    )

                if self.validate_total_amount:
                    await self._check_total_amount(seat_ids=requested, total_amount=total_amount)

                booking = Booking.create(
                    user_id=user_id,
                    showtime_id=showtime_id,
                    seat_ids=requested,
                    total_amount=total_amount,
                    booking_fee=self.booking_fee,
                    currency=self.currency,
                    now=now,
                    reference_prefix=self.reference_prefix,
                )
                await self.uow.booking_ledger_repo.create(booking=booking)
                await self.uow.commit()

            span.set_attribute('booking.id', str(booking.id))
            span.set_attribute('booking.reference', booking.booking_reference)

            return await open_payment_order(
                uow=self.uow,
                payment_gateway=self.payment_gateway,
                clock=self.clock,
                booking=booking,
            )

    async def _check_total_amount(self, *, seat_ids: set[int], total_amount: Decimal) -> None:
        seats = await self.uow.seat_inventory_repo.get_seats_by_ids(seat_ids=seat_ids)
        expected = sum((seat.price for seat in seats), Decimal('0')) + self.booking_fee
        if Decimal(total_amount).quantize(CENT) != expected.quantize(CENT):
            raise AmountMismatchError(
                f'totalAmount {total_amount} does not match seat prices plus fee ({expected})'
            )
