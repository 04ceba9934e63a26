"""Shared step of create-booking and retry-payment-order: ask the gateway for an order"""

from src.platform.database.unit_of_work import AbstractUnitOfWork
from src.platform.logging.loguru_io import Logger
from src.platform.metrics.reservation_metrics import metrics
from src.service.cinema.app.clock import Clock
from src.service.cinema.app.dto.booking_result import BookingWithPaymentOrder
from src.service.cinema.app.interface.i_payment_gateway import IPaymentGateway
from src.service.cinema.domain.entity.booking_entity import Booking
from src.service.cinema.domain.reservation_error import (
    BookingNotPayableError,
    GatewayUnavailableError,
    PaymentInitFailedError,
)


@Logger.io
async def open_payment_order(
    *,
    uow: AbstractUnitOfWork,
    payment_gateway: IPaymentGateway,
    clock: Clock,
    booking: Booking,
) -> BookingWithPaymentOrder:
    """
    Runs outside any open transaction: the gateway call may take seconds and
    must not hold a connection. On failure the pending booking stays as is.
    """
    try:
        payment_order = await payment_gateway.create_order(
            amount=booking.total_amount,
            currency=booking.currency,
            reference=booking.booking_reference,
        )
    except GatewayUnavailableError as e:
        metrics.record_payment_order(result='failed')
        raise PaymentInitFailedError(f'Could not create payment order: {e.message}') from e

    # The booking may have been paid or failed while the gateway call was in flight
    updated = booking.attach_payment_order(order_id=payment_order.order_id, now=clock())
    async with uow:
        attached = await uow.booking_ledger_repo.attach_payment_order(
            booking_id=booking.id, order_id=updated.payment_order_id, now=updated.updated_at
        )
        if not attached:
            metrics.record_payment_order(result='stale')
            raise BookingNotPayableError(
                f'Booking {booking.booking_reference} is no longer pending payment'
            )
        await uow.commit()

    metrics.record_payment_order(result='success')
    return BookingWithPaymentOrder(
        booking=updated, payment_order=payment_order, key_id=payment_gateway.key_id
    )
