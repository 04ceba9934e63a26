from typing import Iterable, Self
from uuid import UUID

from dependency_injector.wiring import Provide, inject
from fastapi import Depends
from opentelemetry import trace

from src.platform.config.di import Container
from src.platform.database.unit_of_work import AbstractUnitOfWork
from src.platform.exception.exceptions import CustomBaseError, NotFoundError
from src.platform.logging.loguru_io import Logger
from src.platform.metrics.reservation_metrics import metrics
from src.service.cinema.app.clock import Clock
from src.service.cinema.app.dto.booking_result import ConfirmedBooking
from src.service.cinema.app.interface.i_payment_gateway import IPaymentGateway
from src.service.cinema.domain.entity.booking_entity import BookedSeat, Booking
from src.service.cinema.domain.reservation_error import (
    HoldExpiredError,
    HoldMismatchError,
    PaymentVerificationFailedError,
    SeatAlreadyBookedError,
)
from src.service.cinema.domain.value_object.payment_proof import PaymentProof


class ConfirmPaymentUseCase:
    """
    Verify a checkout proof and promote the caller's holds to booked seats.

    Everything after the signature check happens in one transaction with the
    booking row locked: insert BookedSeats, mark the booking completed, delete
    the caller's holds for the showtime. Any failure leaves no BookedSeat rows,
    the holds intact and the booking pending.
    """

    def __init__(
        self, *, uow: AbstractUnitOfWork, payment_gateway: IPaymentGateway, clock: Clock
    ) -> None:
        self.uow = uow
        self.payment_gateway = payment_gateway
        self.clock = clock
        self.tracer = trace.get_tracer(__name__)

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
    async def confirm_payment(
        self,
        *,
        user_id: str,
        booking_id: UUID,
        payment_proof: PaymentProof,
        seat_ids: Iterable[int],
    ) -> ConfirmedBooking:
        result = 'error'
        with self.tracer.start_as_current_span(
            'use_case.confirm_payment',
            attributes={'booking.id': str(booking_id), 'user.id': user_id},
        ):
            try:
                confirmed = await self._confirm(
                    user_id=user_id,
                    booking_id=booking_id,
                    payment_proof=payment_proof,
                    requested=set(seat_ids),
                )
                result = 'success'
            except CustomBaseError as e:
                result = e.kind
                raise
            finally:
                metrics.record_booking_confirmation(result=result)

        Logger.base.info(
            f'🎟️ [BOOKING] confirmed {confirmed.booking.booking_reference} '
            f'seats={confirmed.booking.seat_ids}'
        )
        return confirmed

    async def _confirm(
        self,
        *,
        user_id: str,
        booking_id: UUID,
        payment_proof: PaymentProof,
        requested: set[int],
    ) -> ConfirmedBooking:
        now = self.clock()
        async with self.uow:
            booking = await self.uow.booking_ledger_repo.get_by_id(
                booking_id=booking_id, for_update=True
            )
            if booking is None:
                raise NotFoundError('Booking not found')
            booking.validate_owned_by(user_id)
            booking.validate_can_be_paid()
            self._verify_proof(booking=booking, payment_proof=payment_proof)

            if not booking.covers_exactly(requested):
                raise HoldMismatchError(
                    'Seats do not match the booking', seat_ids=set(booking.seat_ids) ^ requested
                )

            already_booked = await self.uow.booking_ledger_repo.list_booked_seat_ids(
                showtime_id=booking.showtime_id, seat_ids=booking.seat_ids
            )
            if already_booked:
                raise SeatAlreadyBookedError(
                    'Some seats have already been booked', seat_ids=already_booked
                )

            holds = await self.uow.hold_ledger_repo.list_by_user_and_showtime(
                user_id=user_id, showtime_id=booking.showtime_id
            )
            live = {hold.seat_id for hold in holds if hold.is_active(now=now)}
            lapsed = set(booking.seat_ids) - live
            if lapsed:
                raise HoldExpiredError('Your hold on these seats has expired', seat_ids=lapsed)

            booked_seats = await self.uow.booking_ledger_repo.insert_booked_seats(
                booked_seats=BookedSeat.for_booking(booking, now=now)
            )
            completed = booking.mark_as_completed(payment_id=payment_proof.payment_id, now=now)
            await self.uow.booking_ledger_repo.update_payment(booking=completed)
            await self.uow.hold_ledger_repo.delete_for_user(
                user_id=user_id, showtime_id=booking.showtime_id
            )
            await self.uow.commit()

        return ConfirmedBooking(booking=completed, booked_seats=booked_seats)

    def _verify_proof(self, *, booking: Booking, payment_proof: PaymentProof) -> None:
        if booking.payment_order_id is None or payment_proof.order_id != booking.payment_order_id:
            raise PaymentVerificationFailedError('Payment proof does not belong to this booking')
        if not self.payment_gateway.verify_signature(
            order_id=payment_proof.order_id,
            payment_id=payment_proof.payment_id,
            signature=payment_proof.signature,
        ):
            raise PaymentVerificationFailedError('Payment signature verification failed')
