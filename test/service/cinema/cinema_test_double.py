"""
Test doubles shared by cinema unit and integration tests

- FakeClock: a settable clock, plugged in wherever `Clock` is expected
- StubPaymentGateway: deterministic orders, real HMAC signature check
- StubUnitOfWork: AsyncMock repositories behind the Unit of Work interface
"""

from datetime import datetime, timedelta
from decimal import Decimal
from unittest.mock import AsyncMock

from src.platform.database.unit_of_work import AbstractUnitOfWork
from src.service.cinema.app.interface.i_booking_ledger_command_repo import (
    IBookingLedgerCommandRepo,
)
from src.service.cinema.app.interface.i_hold_ledger_command_repo import IHoldLedgerCommandRepo
from src.service.cinema.app.interface.i_payment_gateway import IPaymentGateway
from src.service.cinema.app.interface.i_seat_inventory_query_repo import ISeatInventoryQueryRepo
from src.service.cinema.domain.reservation_error import GatewayUnavailableError
from src.service.cinema.domain.value_object.payment_order import PaymentOrder
from src.service.cinema.driven_adapter.payment.razorpay_gateway_impl import RazorpayGatewayImpl
from test.service.cinema.cinema_test_constants import PAYMENT_KEY_ID, PAYMENT_KEY_SECRET


class FakeClock:
    def __init__(self, now: datetime) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, *, seconds: float) -> datetime:
        self.now = self.now + timedelta(seconds=seconds)
        return self.now


class StubPaymentGateway(IPaymentGateway):
    def __init__(self, *, secret: str = PAYMENT_KEY_SECRET) -> None:
        self.secret = secret
        self.fail = False
        self.orders: list[PaymentOrder] = []

    @property
    def key_id(self) -> str:
        return PAYMENT_KEY_ID

    async def create_order(self, *, amount: Decimal, currency: str, reference: str) -> PaymentOrder:
        if self.fail:
            raise GatewayUnavailableError('Payment gateway unreachable: connection refused')
        order = PaymentOrder(
            order_id=f'order_{len(self.orders) + 1:04d}',
            amount=amount,
            currency=currency,
            receipt=reference,
        )
        self.orders.append(order)
        return order

    def verify_signature(self, *, order_id: str, payment_id: str, signature: str) -> bool:
        return signature == self.sign(order_id=order_id, payment_id=payment_id)

    def sign(self, *, order_id: str, payment_id: str) -> str:
        return RazorpayGatewayImpl.compute_signature(
            order_id=order_id, payment_id=payment_id, secret=self.secret
        )


class StubUnitOfWork(AbstractUnitOfWork):
    def __init__(self) -> None:
        self.seat_inventory_repo = AsyncMock(spec=ISeatInventoryQueryRepo)
        self.hold_ledger_repo = AsyncMock(spec=IHoldLedgerCommandRepo)
        self.booking_ledger_repo = AsyncMock(spec=IBookingLedgerCommandRepo)
        self.committed = 0
        self.rolled_back = 0

    async def _commit(self) -> None:
        self.committed += 1

    async def rollback(self) -> None:
        self.rolled_back += 1
