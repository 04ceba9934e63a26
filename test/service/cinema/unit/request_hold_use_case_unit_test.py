"""
Unit tests for RequestHoldUseCase

Test Focus:
1. Input validation: seat count limit, unknown showtime, invalid seats
2. Conflict detection against bookings and other users' live holds
3. Replace semantics: caller's old holds deleted before the new insert
4. Failures never reach the write steps or commit
"""

from datetime import timedelta

import pytest

from src.platform.exception.exceptions import NotFoundError
from src.service.cinema.app.command.request_hold_use_case import RequestHoldUseCase
from src.service.cinema.domain.reservation_error import (
    InvalidSeatError,
    LimitExceededError,
    SeatUnavailableError,
)
from test.service.cinema.cinema_test_constants import (
    BASE_TIME,
    OTHER_SCREEN_ID,
    SHOWTIME_ID,
    USER_ALICE,
    USER_BOB,
)
from test.service.cinema.cinema_test_double import FakeClock, StubUnitOfWork
from test.service.cinema.unit.cinema_builders import build_holds, build_seat, build_showtime


@pytest.fixture
def stub_uow() -> StubUnitOfWork:
    uow = StubUnitOfWork()
    uow.seat_inventory_repo.get_showtime.return_value = build_showtime()
    uow.seat_inventory_repo.get_seats_by_ids.side_effect = lambda *, seat_ids: [
        build_seat(seat_id) for seat_id in seat_ids
    ]
    uow.hold_ledger_repo.delete_expired.return_value = 0
    uow.hold_ledger_repo.find_active_conflicts.return_value = []
    uow.hold_ledger_repo.delete_for_user.return_value = 0
    uow.hold_ledger_repo.insert_holds.side_effect = lambda *, holds: holds
    uow.booking_ledger_repo.list_booked_seat_ids.return_value = []
    return uow


@pytest.fixture
def use_case(stub_uow: StubUnitOfWork) -> RequestHoldUseCase:
    return RequestHoldUseCase(
        uow=stub_uow, clock=FakeClock(BASE_TIME), hold_ttl_seconds=600, max_seats_per_hold=8
    )


@pytest.mark.unit
class TestRequestHoldValidation:
    @pytest.mark.parametrize('seat_ids', [[], list(range(1, 10))])
    async def test_seat_count_outside_limit(
        self, use_case: RequestHoldUseCase, stub_uow: StubUnitOfWork, seat_ids: list[int]
    ):
        with pytest.raises(LimitExceededError):
            await use_case.request_hold(
                user_id=USER_ALICE, showtime_id=SHOWTIME_ID, seat_ids=seat_ids
            )

        stub_uow.seat_inventory_repo.get_showtime.assert_not_called()

    async def test_duplicates_count_once_towards_limit(self, use_case: RequestHoldUseCase):
        result = await use_case.request_hold(
            user_id=USER_ALICE, showtime_id=SHOWTIME_ID, seat_ids=[1, 2, 3, 4, 5, 6, 7, 8, 8, 1]
        )

        assert result.seat_ids == [1, 2, 3, 4, 5, 6, 7, 8]

    async def test_unknown_showtime(self, use_case: RequestHoldUseCase, stub_uow: StubUnitOfWork):
        stub_uow.seat_inventory_repo.get_showtime.return_value = None

        with pytest.raises(NotFoundError):
            await use_case.request_hold(user_id=USER_ALICE, showtime_id=999, seat_ids=[1])

    async def test_missing_inactive_and_foreign_seats_are_invalid(
        self, use_case: RequestHoldUseCase, stub_uow: StubUnitOfWork
    ):
        stub_uow.seat_inventory_repo.get_seats_by_ids.side_effect = None
        stub_uow.seat_inventory_repo.get_seats_by_ids.return_value = [
            build_seat(1),
            build_seat(2, is_active=False),
            build_seat(3, screen_id=OTHER_SCREEN_ID),
        ]

        with pytest.raises(InvalidSeatError) as exc_info:
            await use_case.request_hold(
                user_id=USER_ALICE, showtime_id=SHOWTIME_ID, seat_ids=[1, 2, 3, 4]
            )

        assert exc_info.value.extra['seatIds'] == [2, 3, 4]
        stub_uow.hold_ledger_repo.insert_holds.assert_not_called()
        assert stub_uow.committed == 0


@pytest.mark.unit
class TestRequestHoldConflicts:
    async def test_booked_seat_is_unavailable(
        self, use_case: RequestHoldUseCase, stub_uow: StubUnitOfWork
    ):
        stub_uow.booking_ledger_repo.list_booked_seat_ids.return_value = [2]

        with pytest.raises(SeatUnavailableError) as exc_info:
            await use_case.request_hold(
                user_id=USER_ALICE, showtime_id=SHOWTIME_ID, seat_ids=[1, 2]
            )

        assert exc_info.value.extra['seatIds'] == [2]
        assert exc_info.value.status_code == 409

    async def test_seat_held_by_other_user_is_unavailable(
        self, use_case: RequestHoldUseCase, stub_uow: StubUnitOfWork
    ):
        stub_uow.hold_ledger_repo.find_active_conflicts.return_value = build_holds(
            [1], user_id=USER_BOB
        )

        with pytest.raises(SeatUnavailableError):
            await use_case.request_hold(
                user_id=USER_ALICE, showtime_id=SHOWTIME_ID, seat_ids=[1, 2]
            )

        stub_uow.hold_ledger_repo.delete_for_user.assert_not_called()
        stub_uow.hold_ledger_repo.insert_holds.assert_not_called()
        assert stub_uow.committed == 0

    async def test_expired_holds_are_swept_before_conflict_check(
        self, use_case: RequestHoldUseCase, stub_uow: StubUnitOfWork
    ):
        await use_case.request_hold(
            user_id=USER_ALICE, showtime_id=SHOWTIME_ID, seat_ids=[1]
        )

        stub_uow.hold_ledger_repo.delete_expired.assert_awaited_once_with(
            now=BASE_TIME, showtime_id=SHOWTIME_ID
        )
        stub_uow.hold_ledger_repo.find_active_conflicts.assert_awaited_once_with(
            showtime_id=SHOWTIME_ID, seat_ids=[1], user_id=USER_ALICE, now=BASE_TIME
        )


@pytest.mark.unit
class TestRequestHoldSuccess:
    async def test_replaces_callers_holds_and_commits(
        self, use_case: RequestHoldUseCase, stub_uow: StubUnitOfWork
    ):
        result = await use_case.request_hold(
            user_id=USER_ALICE, showtime_id=SHOWTIME_ID, seat_ids=[3, 1]
        )

        stub_uow.hold_ledger_repo.delete_for_user.assert_awaited_once_with(
            user_id=USER_ALICE, showtime_id=SHOWTIME_ID
        )
        inserted = stub_uow.hold_ledger_repo.insert_holds.await_args.kwargs['holds']
        assert [hold.seat_id for hold in inserted] == [1, 3]
        assert stub_uow.committed == 1
        assert result.showtime_id == SHOWTIME_ID
        assert result.seat_ids == [1, 3]
        assert result.expires_at == BASE_TIME + timedelta(seconds=600)

    async def test_ttl_comes_from_configuration(self, stub_uow: StubUnitOfWork):
        use_case = RequestHoldUseCase(uow=stub_uow, clock=FakeClock(BASE_TIME), hold_ttl_seconds=90)

        result = await use_case.request_hold(
            user_id=USER_ALICE, showtime_id=SHOWTIME_ID, seat_ids=[1]
        )

        assert result.expires_at == BASE_TIME + timedelta(seconds=90)

    async def test_lost_insert_race_propagates_without_commit(
        self, use_case: RequestHoldUseCase, stub_uow: StubUnitOfWork
    ):
        stub_uow.hold_ledger_repo.insert_holds.side_effect = SeatUnavailableError(
            'One or more seats were just taken by another user', seat_ids=[1]
        )

        with pytest.raises(SeatUnavailableError):
            await use_case.request_hold(
                user_id=USER_ALICE, showtime_id=SHOWTIME_ID, seat_ids=[1]
            )

        assert stub_uow.committed == 0
        assert stub_uow.rolled_back == 1
