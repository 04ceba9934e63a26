"""
Integration tests for the cinema repositories on a real database

Test Focus:
1. Seat inventory reads (ordering, inactive seats included)
2. Hold ledger: expiry boundaries, conflict lookup, unique (showtime, seat)
3. Booking ledger: round trip of money / seat list / UUID7, booked-seat uniqueness
"""

from datetime import timedelta
from decimal import Decimal

import pytest

from src.platform.database.orm_db_setting import Database
from src.platform.database.unit_of_work import SqlAlchemyUnitOfWork
from src.service.cinema.domain.entity.booking_entity import (
    BookedSeat,
    Booking,
    PaymentStatus,
)
from src.service.cinema.domain.entity.hold_entity import Hold
from src.service.cinema.domain.reservation_error import (
    SeatAlreadyBookedError,
    SeatUnavailableError,
)
from src.service.cinema.driven_adapter.repo.booking_query_repo_impl import BookingQueryRepoImpl
from src.service.cinema.driven_adapter.repo.seat_inventory_query_repo_impl import (
    SeatInventoryQueryRepoImpl,
)
from test.service.cinema.cinema_test_constants import (
    BASE_TIME,
    BOOKING_FEE,
    SCREEN_ID,
    SEAT_A1,
    SEAT_A2,
    SEAT_A3,
    SEAT_C1_INACTIVE,
    SHOWTIME_ID,
    USER_ALICE,
    USER_BOB,
)


pytestmark = [pytest.mark.integration, pytest.mark.usefixtures('seeded_db')]


def _holds(user_id: str, *seat_ids: int, ttl: int = 600) -> list[Hold]:
    return Hold.create_for_seats(
        user_id=user_id,
        showtime_id=SHOWTIME_ID,
        seat_ids=seat_ids,
        now=BASE_TIME,
        ttl=timedelta(seconds=ttl),
    )


def _booking(*seat_ids: int, user_id: str = USER_ALICE, now=BASE_TIME) -> Booking:
    return Booking.create(
        user_id=user_id,
        showtime_id=SHOWTIME_ID,
        seat_ids=seat_ids,
        total_amount=Decimal('14.50'),
        booking_fee=BOOKING_FEE,
        currency='INR',
        now=now,
    )


async def _insert_holds(uow: SqlAlchemyUnitOfWork, holds: list[Hold]) -> list[Hold]:
    async with uow:
        inserted = await uow.hold_ledger_repo.insert_holds(holds=holds)
        await uow.commit()
    return inserted


class TestSeatInventoryQueryRepo:
    async def test_list_seats_ordered_by_row_then_column(self):
        repo = SeatInventoryQueryRepoImpl(session_factory=Database(read_only=True).session)

        seats = await repo.list_seats_by_screen(screen_id=SCREEN_ID)

        assert [seat.seat_number for seat in seats] == ['A1', 'A2', 'A3', 'A4', 'A5', 'B1', 'C1']
        assert not next(s for s in seats if s.id == SEAT_C1_INACTIVE).is_active
        assert seats[0].price == Decimal('12.00')

    async def test_get_showtime(self):
        repo = SeatInventoryQueryRepoImpl(session_factory=Database(read_only=True).session)

        showtime = await repo.get_showtime(showtime_id=SHOWTIME_ID)

        assert showtime is not None
        assert showtime.screen_id == SCREEN_ID
        assert await repo.get_showtime(showtime_id=404) is None


class TestHoldLedgerRepo:
    async def test_inserted_holds_get_ids_and_read_back_in_utc(self, uow: SqlAlchemyUnitOfWork):
        inserted = await _insert_holds(uow, _holds(USER_ALICE, SEAT_A1, SEAT_A2))

        assert all(hold.id is not None for hold in inserted)
        async with uow:
            stored = await uow.hold_ledger_repo.list_by_user_and_showtime(
                user_id=USER_ALICE, showtime_id=SHOWTIME_ID
            )
        assert [hold.seat_id for hold in stored] == [SEAT_A1, SEAT_A2]
        assert stored[0].expires_at == BASE_TIME + timedelta(seconds=600)

    async def test_active_listing_excludes_holds_at_expiry(self, uow: SqlAlchemyUnitOfWork):
        await _insert_holds(uow, _holds(USER_ALICE, SEAT_A1))

        async with uow:
            before = await uow.hold_ledger_repo.list_active_by_showtime(
                showtime_id=SHOWTIME_ID, now=BASE_TIME + timedelta(seconds=599)
            )
            at_expiry = await uow.hold_ledger_repo.list_active_by_showtime(
                showtime_id=SHOWTIME_ID, now=BASE_TIME + timedelta(seconds=600)
            )

        assert [hold.seat_id for hold in before] == [SEAT_A1]
        assert at_expiry == []

    async def test_delete_expired_only_removes_lapsed_holds(self, uow: SqlAlchemyUnitOfWork):
        await _insert_holds(uow, _holds(USER_ALICE, SEAT_A1, ttl=60))
        await _insert_holds(uow, _holds(USER_BOB, SEAT_A2, ttl=600))

        async with uow:
            deleted = await uow.hold_ledger_repo.delete_expired(
                now=BASE_TIME + timedelta(seconds=60)
            )
            await uow.commit()
        async with uow:
            remaining = await uow.hold_ledger_repo.list_active_by_showtime(
                showtime_id=SHOWTIME_ID, now=BASE_TIME
            )

        assert deleted == 1
        assert [hold.seat_id for hold in remaining] == [SEAT_A2]

    async def test_conflicts_exclude_own_and_expired_holds(self, uow: SqlAlchemyUnitOfWork):
        await _insert_holds(uow, _holds(USER_ALICE, SEAT_A1))
        await _insert_holds(uow, _holds(USER_BOB, SEAT_A2, ttl=30))

        async with uow:
            conflicts = await uow.hold_ledger_repo.find_active_conflicts(
                showtime_id=SHOWTIME_ID,
                seat_ids=[SEAT_A1, SEAT_A2],
                user_id=USER_ALICE,
                now=BASE_TIME + timedelta(seconds=30),
            )
            for_bob = await uow.hold_ledger_repo.find_active_conflicts(
                showtime_id=SHOWTIME_ID,
                seat_ids=[SEAT_A1, SEAT_A2],
                user_id=USER_BOB,
                now=BASE_TIME,
            )

        assert conflicts == []
        assert [hold.seat_id for hold in for_bob] == [SEAT_A1]

    async def test_unique_constraint_names_only_the_taken_seats(self, uow: SqlAlchemyUnitOfWork):
        await _insert_holds(uow, _holds(USER_ALICE, SEAT_A1))

        with pytest.raises(SeatUnavailableError) as exc_info:
            await _insert_holds(uow, _holds(USER_BOB, SEAT_A1, SEAT_A3))

        assert exc_info.value.extra['seatIds'] == [SEAT_A1]
        async with uow:
            bobs = await uow.hold_ledger_repo.list_by_user_and_showtime(
                user_id=USER_BOB, showtime_id=SHOWTIME_ID
            )
        assert bobs == []

    async def test_delete_for_user_leaves_other_users(self, uow: SqlAlchemyUnitOfWork):
        await _insert_holds(uow, _holds(USER_ALICE, SEAT_A1, SEAT_A2))
        await _insert_holds(uow, _holds(USER_BOB, SEAT_A3))

        async with uow:
            released = await uow.hold_ledger_repo.delete_for_user(
                user_id=USER_ALICE, showtime_id=SHOWTIME_ID
            )
            await uow.commit()
        async with uow:
            remaining = await uow.hold_ledger_repo.list_active_by_showtime(
                showtime_id=SHOWTIME_ID, now=BASE_TIME
            )

        assert released == 2
        assert [hold.user_id for hold in remaining] == [USER_BOB]


class TestBookingLedgerRepo:
    async def test_round_trip(self, uow: SqlAlchemyUnitOfWork):
        booking = _booking(SEAT_A2, SEAT_A1)

        async with uow:
            await uow.booking_ledger_repo.create(booking=booking)
            await uow.commit()
        async with uow:
            stored = await uow.booking_ledger_repo.get_by_id(booking_id=booking.id, for_update=True)

        assert stored == booking
        assert stored.seat_ids == [SEAT_A1, SEAT_A2]
        assert stored.total_amount == Decimal('14.50')

    async def test_update_payment_persists_completion(self, uow: SqlAlchemyUnitOfWork):
        booking = _booking(SEAT_A1)
        async with uow:
            await uow.booking_ledger_repo.create(booking=booking)
            await uow.commit()

        completed = booking.attach_payment_order(
            order_id='order_1', now=BASE_TIME
        ).mark_as_completed(payment_id='pay_1', now=BASE_TIME + timedelta(minutes=1))
        async with uow:
            await uow.booking_ledger_repo.update_payment(booking=completed)
            await uow.commit()

        reader = BookingQueryRepoImpl(session_factory=Database(read_only=True).session)
        stored = await reader.get_by_id(booking_id=booking.id)
        assert stored is not None
        assert stored.payment_status == PaymentStatus.COMPLETED
        assert stored.payment_order_id == 'order_1'
        assert stored.paid_at == BASE_TIME + timedelta(minutes=1)

    async def test_pending_only_transitions_leave_completed_booking_alone(
        self, uow: SqlAlchemyUnitOfWork
    ):
        pending, paid = _booking(SEAT_A1), _booking(SEAT_A2)
        completed = paid.attach_payment_order(order_id='order_1', now=BASE_TIME).mark_as_completed(
            payment_id='pay_1', now=BASE_TIME
        )
        async with uow:
            await uow.booking_ledger_repo.create(booking=pending)
            await uow.booking_ledger_repo.create(booking=completed)
            await uow.commit()

        later = BASE_TIME + timedelta(minutes=5)
        async with uow:
            attached = await uow.booking_ledger_repo.attach_payment_order(
                booking_id=pending.id, order_id='order_2', now=later
            )
            reattached = await uow.booking_ledger_repo.attach_payment_order(
                booking_id=completed.id, order_id='order_3', now=later
            )
            failed = await uow.booking_ledger_repo.mark_failed_if_pending(
                booking_id=completed.id, now=later
            )
            await uow.commit()

        assert (attached, reattached, failed) == (True, False, False)
        async with uow:
            stored_pending = await uow.booking_ledger_repo.get_by_id(booking_id=pending.id)
            stored_paid = await uow.booking_ledger_repo.get_by_id(booking_id=completed.id)
        assert stored_pending.payment_order_id == 'order_2'
        assert stored_pending.payment_status == PaymentStatus.PENDING
        assert stored_paid == completed

    async def test_booked_seat_unique_per_showtime(self, uow: SqlAlchemyUnitOfWork):
        first, second = _booking(SEAT_A1), _booking(SEAT_A1, SEAT_A2, user_id=USER_BOB)
        async with uow:
            await uow.booking_ledger_repo.create(booking=first)
            await uow.booking_ledger_repo.create(booking=second)
            await uow.booking_ledger_repo.insert_booked_seats(
                booked_seats=BookedSeat.for_booking(first, now=BASE_TIME)
            )
            await uow.commit()

        with pytest.raises(SeatAlreadyBookedError):
            async with uow:
                await uow.booking_ledger_repo.insert_booked_seats(
                    booked_seats=BookedSeat.for_booking(second, now=BASE_TIME)
                )
                await uow.commit()

        async with uow:
            booked = await uow.booking_ledger_repo.list_booked_seat_ids(showtime_id=SHOWTIME_ID)
            subset = await uow.booking_ledger_repo.list_booked_seat_ids(
                showtime_id=SHOWTIME_ID, seat_ids=[SEAT_A2]
            )
        assert booked == [SEAT_A1]
        assert subset == []

    async def test_list_stale_pending(self, uow: SqlAlchemyUnitOfWork):
        old = _booking(SEAT_A1, now=BASE_TIME - timedelta(hours=1))
        fresh = _booking(SEAT_A2, now=BASE_TIME)
        async with uow:
            await uow.booking_ledger_repo.create(booking=old)
            await uow.booking_ledger_repo.create(booking=fresh)
            await uow.commit()

        async with uow:
            stale = await uow.booking_ledger_repo.list_stale_pending(
                created_before=BASE_TIME - timedelta(minutes=30)
            )

        assert [booking.id for booking in stale] == [old.id]

    async def test_query_repo_lists_newest_first(self, uow: SqlAlchemyUnitOfWork):
        older = _booking(SEAT_A1, now=BASE_TIME - timedelta(minutes=5))
        newer = _booking(SEAT_A2, now=BASE_TIME)
        async with uow:
            await uow.booking_ledger_repo.create(booking=older)
            await uow.booking_ledger_repo.create(booking=newer)
            await uow.booking_ledger_repo.insert_booked_seats(
                booked_seats=BookedSeat.for_booking(newer, now=BASE_TIME)
            )
            await uow.commit()

        reader = BookingQueryRepoImpl(session_factory=Database(read_only=True).session)
        listed = await reader.list_by_user(user_id=USER_ALICE)
        booked_seats = await reader.list_booked_seats(booking_id=newer.id)

        assert [booking.id for booking in listed] == [newer.id, older.id]
        assert [(seat.seat_id, seat.booking_id) for seat in booked_seats] == [(SEAT_A2, newer.id)]
