"""
Unit tests for CreateBookingUseCase

Test Focus:
1. Hold match: requested seats must equal the caller's live holds
2. Amount check: sum of seat prices plus booking fee, optional
3. Payment order: created after commit, failure keeps the pending booking
"""

from decimal import Decimal

import pytest

from src.platform.exception.exceptions import NotFoundError
from src.service.cinema.app.command.create_booking_use_case import CreateBookingUseCase
from src.service.cinema.domain.entity.booking_entity import PaymentStatus
from src.service.cinema.domain.reservation_error import (
    AmountMismatchError,
    HoldMismatchError,
    PaymentInitFailedError,
)
from test.service.cinema.cinema_test_constants import (
    BASE_TIME,
    BOOKING_FEE,
    PAYMENT_KEY_ID,
    PREMIUM_PRICE,
    SHOWTIME_ID,
    USER_ALICE,
)
from test.service.cinema.cinema_test_double import FakeClock, StubPaymentGateway, StubUnitOfWork
from test.service.cinema.unit.cinema_builders import build_holds, build_seat, build_showtime


@pytest.fixture
def stub_uow() -> StubUnitOfWork:
    uow = StubUnitOfWork()
    uow.seat_inventory_repo.get_showtime.return_value = build_showtime()
    uow.seat_inventory_repo.get_seats_by_ids.return_value = [
        build_seat(1),
        build_seat(6, price=PREMIUM_PRICE),
    ]
    uow.hold_ledger_repo.list_by_user_and_showtime.return_value = build_holds([1, 6])
    uow.booking_ledger_repo.create.side_effect = lambda *, booking: booking
    uow.booking_ledger_repo.attach_payment_order.return_value = True
    return uow


@pytest.fixture
def gateway() -> StubPaymentGateway:
    return StubPaymentGateway()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock(BASE_TIME)


@pytest.fixture
def use_case(
    stub_uow: StubUnitOfWork, gateway: StubPaymentGateway, clock: FakeClock
) -> CreateBookingUseCase:
    return CreateBookingUseCase(
        uow=stub_uow, payment_gateway=gateway, clock=clock, booking_fee=BOOKING_FEE
    )


# 12.00 + 18.00 + 2.50
EXPECTED_TOTAL = Decimal('32.50')


@pytest.mark.unit
class TestCreateBookingValidation:
    async def test_unknown_showtime(self, use_case: CreateBookingUseCase, stub_uow: StubUnitOfWork):
        stub_uow.seat_inventory_repo.get_showtime.return_value = None

        with pytest.raises(NotFoundError):
            await use_case.create_booking(
                user_id=USER_ALICE, showtime_id=999, seat_ids=[1, 6], total_amount=EXPECTED_TOTAL
            )

    async def test_subset_of_hold_is_mismatch(
        self, use_case: CreateBookingUseCase, stub_uow: StubUnitOfWork
    ):
        with pytest.raises(HoldMismatchError) as exc_info:
            await use_case.create_booking(
                user_id=USER_ALICE,
                showtime_id=SHOWTIME_ID,
                seat_ids=[1],
                total_amount=Decimal('14.50'),
            )

        assert exc_info.value.extra['seatIds'] == [6]
        stub_uow.booking_ledger_repo.create.assert_not_called()

    async def test_expired_hold_is_mismatch(
        self, use_case: CreateBookingUseCase, clock: FakeClock
    ):
        clock.advance(seconds=601)

        with pytest.raises(HoldMismatchError):
            await use_case.create_booking(
                user_id=USER_ALICE,
                showtime_id=SHOWTIME_ID,
                seat_ids=[1, 6],
                total_amount=EXPECTED_TOTAL,
            )

    async def test_empty_seat_list_is_mismatch(
        self, use_case: CreateBookingUseCase, stub_uow: StubUnitOfWork
    ):
        stub_uow.hold_ledger_repo.list_by_user_and_showtime.return_value = []

        with pytest.raises(HoldMismatchError):
            await use_case.create_booking(
                user_id=USER_ALICE,
                showtime_id=SHOWTIME_ID,
                seat_ids=[],
                total_amount=EXPECTED_TOTAL,
            )

    async def test_wrong_total_is_amount_mismatch(
        self, use_case: CreateBookingUseCase, stub_uow: StubUnitOfWork
    ):
        with pytest.raises(AmountMismatchError):
            await use_case.create_booking(
                user_id=USER_ALICE,
                showtime_id=SHOWTIME_ID,
                seat_ids=[1, 6],
                total_amount=Decimal('30.00'),
            )

        stub_uow.booking_ledger_repo.create.assert_not_called()
        assert stub_uow.committed == 0

    async def test_amount_check_can_be_disabled(
        self, stub_uow: StubUnitOfWork, gateway: StubPaymentGateway, clock: FakeClock
    ):
        use_case = CreateBookingUseCase(
            uow=stub_uow, payment_gateway=gateway, clock=clock, validate_total_amount=False
        )

        result = await use_case.create_booking(
            user_id=USER_ALICE,
            showtime_id=SHOWTIME_ID,
            seat_ids=[1, 6],
            total_amount=Decimal('1.00'),
        )

        assert result.booking.total_amount == Decimal('1.00')


@pytest.mark.unit
class TestCreateBookingPaymentOrder:
    async def test_pending_booking_with_payment_order(
        self, use_case: CreateBookingUseCase, stub_uow: StubUnitOfWork, gateway: StubPaymentGateway
    ):
        result = await use_case.create_booking(
            user_id=USER_ALICE,
            showtime_id=SHOWTIME_ID,
            seat_ids=[6, 1],
            total_amount=Decimal('32.5'),
        )

        assert result.booking.payment_status == PaymentStatus.PENDING
        assert result.booking.seat_ids == [1, 6]
        assert result.booking.booking_fee == BOOKING_FEE
        assert result.booking.payment_order_id == result.payment_order.order_id
        assert result.key_id == PAYMENT_KEY_ID
        assert gateway.orders[0].receipt == result.booking.booking_reference
        assert gateway.orders[0].amount == Decimal('32.5')

        # booking insert and payment-order update are separate transactions
        assert stub_uow.committed == 2
        stub_uow.booking_ledger_repo.attach_payment_order.assert_awaited_once_with(
            booking_id=result.booking.id, order_id=result.payment_order.order_id, now=BASE_TIME
        )

    async def test_holds_are_kept(self, use_case: CreateBookingUseCase, stub_uow: StubUnitOfWork):
        await use_case.create_booking(
            user_id=USER_ALICE,
            showtime_id=SHOWTIME_ID,
            seat_ids=[1, 6],
            total_amount=EXPECTED_TOTAL,
        )

        stub_uow.hold_ledger_repo.delete_for_user.assert_not_called()

    async def test_gateway_failure_keeps_pending_booking(
        self, use_case: CreateBookingUseCase, stub_uow: StubUnitOfWork, gateway: StubPaymentGateway
    ):
        gateway.fail = True

        with pytest.raises(PaymentInitFailedError) as exc_info:
            await use_case.create_booking(
                user_id=USER_ALICE,
                showtime_id=SHOWTIME_ID,
                seat_ids=[1, 6],
                total_amount=EXPECTED_TOTAL,
            )

        assert exc_info.value.status_code == 502
        stub_uow.booking_ledger_repo.create.assert_awaited_once()
        stub_uow.booking_ledger_repo.attach_payment_order.assert_not_called()
        assert stub_uow.committed == 1
