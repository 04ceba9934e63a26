from datetime import datetime
from decimal import Decimal
from typing import List, Optional
from uuid import UUID

from pydantic import ConfigDict, Field
from pydantic.alias_generators import to_camel

from src.service.cinema.app.dto.booking_result import (
    BookingDetail,
    BookingWithPaymentOrder,
    ConfirmedBooking,
)
from src.service.cinema.domain.entity.booking_entity import BookedSeat, Booking
from src.service.cinema.domain.value_object.payment_order import PaymentOrder
from src.service.cinema.domain.value_object.payment_proof import PaymentProof
from src.service.cinema.driving_adapter.http_controller.schema.base_schema import CamelModel


class BookingCreateRequest(CamelModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        json_schema_extra={
            'example': {'showtimeId': 1, 'seatIds': [1], 'totalAmount': '14.50'},
        },
    )

    showtime_id: int
    seat_ids: List[int]
    total_amount: Decimal = Field(gt=0)


class PaymentProofRequest(CamelModel):
    order_id: str
    payment_id: str
    signature: str

    def to_value_object(self) -> PaymentProof:
        return PaymentProof(
            order_id=self.order_id, payment_id=self.payment_id, signature=self.signature
        )


class VerifyPaymentRequest(CamelModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        json_schema_extra={
            'example': {
                'bookingId': '01936d8f-5e73-7c4e-a9c5-123456789abc',  # UUID7
                'paymentProof': {
                    'orderId': 'order_N5Yc0Z1cZ2vZ3P',
                    'paymentId': 'pay_N5YcA1b2C3d4E5',
                    'signature': '<hmac-sha256 hex>',
                },
                'seatIds': [1],
            }
        },
    )

    booking_id: UUID
    payment_proof: PaymentProofRequest
    seat_ids: List[int]


class BookingResponse(CamelModel):
    id: UUID  # UUID7
    booking_reference: str
    showtime_id: int
    seat_ids: List[int]
    total_amount: Decimal
    booking_fee: Decimal
    currency: str
    payment_status: str
    status: str
    payment_order_id: Optional[str] = None
    payment_id: Optional[str] = None
    created_at: Optional[datetime] = None
    paid_at: Optional[datetime] = None

    @classmethod
    def from_entity(cls, booking: Booking) -> 'BookingResponse':
        return cls(
            id=booking.id,
            booking_reference=booking.booking_reference,
            showtime_id=booking.showtime_id,
            seat_ids=booking.seat_ids,
            total_amount=booking.total_amount,
            booking_fee=booking.booking_fee,
            currency=booking.currency,
            payment_status=booking.payment_status.value,
            status=booking.status.value,
            payment_order_id=booking.payment_order_id,
            payment_id=booking.payment_id,
            created_at=booking.created_at,
            paid_at=booking.paid_at,
        )


class PaymentOrderResponse(CamelModel):
    order_id: str
    amount: Decimal
    currency: str
    receipt: str

    @classmethod
    def from_value_object(cls, order: PaymentOrder) -> 'PaymentOrderResponse':
        return cls(
            order_id=order.order_id,
            amount=order.amount,
            currency=order.currency,
            receipt=order.receipt,
        )


class BookingWithPaymentOrderResponse(CamelModel):
    booking: BookingResponse
    payment_order: PaymentOrderResponse
    key_id: str

    @classmethod
    def from_result(cls, result: BookingWithPaymentOrder) -> 'BookingWithPaymentOrderResponse':
        return cls(
            booking=BookingResponse.from_entity(result.booking),
            payment_order=PaymentOrderResponse.from_value_object(result.payment_order),
            key_id=result.key_id,
        )


class BookedSeatResponse(CamelModel):
    seat_id: int
    showtime_id: int
    booking_id: UUID

    @classmethod
    def from_entity(cls, booked_seat: BookedSeat) -> 'BookedSeatResponse':
        return cls(
            seat_id=booked_seat.seat_id,
            showtime_id=booked_seat.showtime_id,
            booking_id=booked_seat.booking_id,
        )


class BookingDetailResponse(CamelModel):
    booking: BookingResponse
    booked_seats: List[BookedSeatResponse]

    @classmethod
    def from_result(cls, result: BookingDetail | ConfirmedBooking) -> 'BookingDetailResponse':
        return cls(
            booking=BookingResponse.from_entity(result.booking),
            booked_seats=[BookedSeatResponse.from_entity(seat) for seat in result.booked_seats],
        )


class SweepResponse(CamelModel):
    deleted_holds: int
    failed_bookings: int
