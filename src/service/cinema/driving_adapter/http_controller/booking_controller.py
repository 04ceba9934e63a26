from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, status
from opentelemetry import trace

from src.platform.logging.loguru_io import Logger
from src.service.cinema.app.command.confirm_payment_use_case import ConfirmPaymentUseCase
from src.service.cinema.app.command.create_booking_use_case import CreateBookingUseCase
from src.service.cinema.app.command.retry_payment_order_use_case import (
    RetryPaymentOrderUseCase,
)
from src.service.cinema.app.query.get_booking_use_case import GetBookingUseCase
from src.service.cinema.app.query.list_bookings_use_case import ListBookingsUseCase
from src.service.cinema.driving_adapter.http_controller.auth.current_user import (
    get_current_user_id,
)
from src.service.cinema.driving_adapter.http_controller.schema.booking_schema import (
    BookingCreateRequest,
    BookingDetailResponse,
    BookingResponse,
    BookingWithPaymentOrderResponse,
    VerifyPaymentRequest,
)


router = APIRouter()
tracer = trace.get_tracer(__name__)


@router.get('')
@Logger.io
async def list_my_bookings(
    user_id: str = Depends(get_current_user_id),
    use_case: ListBookingsUseCase = Depends(ListBookingsUseCase.depends),
) -> List[BookingResponse]:
    bookings = await use_case.list_bookings(user_id=user_id)
    return [BookingResponse.from_entity(booking) for booking in bookings]


@router.post('', status_code=status.HTTP_201_CREATED)
@Logger.io
async def create_booking(
    request: BookingCreateRequest,
    user_id: str = Depends(get_current_user_id),
    use_case: CreateBookingUseCase = Depends(CreateBookingUseCase.depends),
) -> BookingWithPaymentOrderResponse:
    with tracer.start_as_current_span('controller.create_booking') as span:
        span.set_attribute('showtime_id', request.showtime_id)
        span.set_attribute('seat_count', len(request.seat_ids))

        result = await use_case.create_booking(
            user_id=user_id,
            showtime_id=request.showtime_id,
            seat_ids=request.seat_ids,
            total_amount=request.total_amount,
        )
        return BookingWithPaymentOrderResponse.from_result(result)


@router.post('/verify-payment')
@Logger.io
async def verify_payment(
    request: VerifyPaymentRequest,
    user_id: str = Depends(get_current_user_id),
    use_case: ConfirmPaymentUseCase = Depends(ConfirmPaymentUseCase.depends),
) -> BookingDetailResponse:
    with tracer.start_as_current_span('controller.verify_payment') as span:
        span.set_attribute('booking_id', str(request.booking_id))

        confirmed = await use_case.confirm_payment(
            user_id=user_id,
            booking_id=request.booking_id,
            payment_proof=request.payment_proof.to_value_object(),
            seat_ids=request.seat_ids,
        )
        return BookingDetailResponse.from_result(confirmed)


@router.get('/{booking_id}')
@Logger.io
async def get_booking(
    booking_id: UUID,
    user_id: str = Depends(get_current_user_id),
    use_case: GetBookingUseCase = Depends(GetBookingUseCase.depends),
) -> BookingDetailResponse:
    detail = await use_case.get_booking(user_id=user_id, booking_id=booking_id)
    return BookingDetailResponse.from_result(detail)


@router.post('/{booking_id}/payment-order')
@Logger.io
async def retry_payment_order(
    booking_id: UUID,
    user_id: str = Depends(get_current_user_id),
    use_case: RetryPaymentOrderUseCase = Depends(RetryPaymentOrderUseCase.depends),
) -> BookingWithPaymentOrderResponse:
    """New gateway order for a pending booking whose holds are still live."""
    result = await use_case.retry_payment_order(user_id=user_id, booking_id=booking_id)
    return BookingWithPaymentOrderResponse.from_result(result)
