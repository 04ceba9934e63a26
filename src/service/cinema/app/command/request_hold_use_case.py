import time
from datetime import timedelta
from typing import Iterable, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends
from opentelemetry import trace

from src.platform.config.core_setting import Settings
from src.platform.config.di import Container
from src.platform.database.unit_of_work import AbstractUnitOfWork
from src.platform.exception.exceptions import CustomBaseError, NotFoundError
from src.platform.logging.loguru_io import Logger
from src.platform.metrics.reservation_metrics import metrics
from src.service.cinema.app.clock import Clock
from src.service.cinema.app.dto.hold_result import HoldResult
from src.service.cinema.domain.entity.hold_entity import Hold
from src.service.cinema.domain.reservation_error import (
    InvalidSeatError,
    LimitExceededError,
    SeatUnavailableError,
)


class RequestHoldUseCase:
    """
    Place (or replace) a user's seat hold for one showtime.

    All-or-nothing: either every requested seat is held by the caller after
    commit, or the request fails and the caller's previous holds are untouched.

    Flow (single transaction):
    1. Validate count, showtime and seats
    2. Delete expired holds for the showtime
    3. Reject seats that are booked or held by someone else
    4. Replace the caller's holds with the new set
    5. Insert; the unique (showtime_id, seat_id) constraint settles races
    """

    def __init__(
        self,
        *,
        uow: AbstractUnitOfWork,
        clock: Clock,
        hold_ttl_seconds: int = 600,
        max_seats_per_hold: int = 8,
    ) -> None:
        self.uow = uow
        self.clock = clock
        self.hold_ttl = timedelta(seconds=hold_ttl_seconds)
        self.max_seats_per_hold = max_seats_per_hold
        self.tracer = trace.get_tracer(__name__)

    @classmethod
    @inject
    def depends(
        cls,
        uow: AbstractUnitOfWork = Depends(Provide[Container.unit_of_work]),
        clock: Clock = Depends(Provide[Container.clock]),
        config: Settings = Depends(Provide[Container.config_service]),
    ) -> Self:
        return cls(
            uow=uow,
            clock=clock,
            hold_ttl_seconds=config.HOLD_TTL_SECONDS,
            max_seats_per_hold=config.MAX_SEATS_PER_HOLD,
        )

    @Logger.io
    async def request_hold(
        self, *, user_id: str, showtime_id: int, seat_ids: Iterable[int]
    ) -> HoldResult:
        requested = sorted(set(seat_ids))
        started = time.perf_counter()
        result = 'error'

        with self.tracer.start_as_current_span(
            'use_case.request_hold',
            attributes={
                'showtime.id': showtime_id,
                'user.id': user_id,
                'seat.count': len(requested),
            },
        ):
            try:
                hold_result, swept = await self._request_hold(
                    user_id=user_id, showtime_id=showtime_id, requested=requested
                )
                result = 'success'
            except CustomBaseError as e:
                result = e.kind
                raise
            finally:
                metrics.record_hold_request(
                    result=result,
                    seat_count=len(requested),
                    duration=time.perf_counter() - started,
                )

        metrics.record_holds_swept(trigger='hold', count=swept)
        return hold_result

    async def _request_hold(
        self, *, user_id: str, showtime_id: int, requested: list[int]
    ) -> tuple[HoldResult, int]:
        if not 1 <= len(requested) <= self.max_seats_per_hold:
            raise LimitExceededError(
                f'Select between 1 and {self.max_seats_per_hold} seats (got {len(requested)})'
            )

        now = self.clock()
        async with self.uow:
            showtime = await self.uow.seat_inventory_repo.get_showtime(showtime_id=showtime_id)
            if showtime is None:
                raise NotFoundError('Showtime not found')

            seats = {
                seat.id: seat
                for seat in await self.uow.seat_inventory_repo.get_seats_by_ids(seat_ids=requested)
            }
            invalid = [
                seat_id
                for seat_id in requested
                if seat_id not in seats
                or not seats[seat_id].can_be_held_for(screen_id=showtime.screen_id)
            ]
            if invalid:
                raise InvalidSeatError(
                    'Seats do not exist, are inactive or belong to another screen',
                    seat_ids=invalid,
                )

            swept = await self.uow.hold_ledger_repo.delete_expired(
                now=now, showtime_id=showtime_id
            )

            booked = await self.uow.booking_ledger_repo.list_booked_seat_ids(
                showtime_id=showtime_id, seat_ids=requested
            )
            held_by_others = await self.uow.hold_ledger_repo.find_active_conflicts(
                showtime_id=showtime_id, seat_ids=requested, user_id=user_id, now=now
            )
            unavailable = set(booked) | {hold.seat_id for hold in held_by_others}
            if unavailable:
                raise SeatUnavailableError(
                    'Some selected seats are no longer available', seat_ids=unavailable
                )

            await self.uow.hold_ledger_repo.delete_for_user(
                user_id=user_id, showtime_id=showtime_id
            )
            holds = await self.uow.hold_ledger_repo.insert_holds(
                holds=Hold.create_for_seats(
                    user_id=user_id,
                    showtime_id=showtime_id,
                    seat_ids=requested,
                    now=now,
                    ttl=self.hold_ttl,
                )
            )
            await self.uow.commit()

        Logger.base.info(
            f'🪑 [HOLD] user={user_id} showtime={showtime_id} seats={requested} '
            f'expires_at={holds[0].expires_at.isoformat()}'
        )
        return (
            HoldResult(showtime_id=showtime_id, holds=holds, expires_at=holds[0].expires_at),
            swept,
        )
