from typing import Optional, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends
from opentelemetry import trace

from src.platform.config.core_setting import Settings
from src.platform.config.di import Container
from src.platform.database.unit_of_work import AbstractUnitOfWork
from src.platform.exception.exceptions import NotFoundError
from src.platform.logging.loguru_io import Logger
from src.platform.metrics.reservation_metrics import metrics
from src.service.cinema.app.clock import Clock
from src.service.cinema.domain.seat_availability import ShowtimeAvailability, resolve_availability


class GetSeatAvailabilityUseCase:
    """
    Seat map for a showtime: every seat of the screen with available / held / booked.

    Reads from the primary inside one transaction so a sweep-on-read and the
    snapshot agree.
    """

    def __init__(self, *, uow: AbstractUnitOfWork, clock: Clock, sweep_on_read: bool = True):
        self.uow = uow
        self.clock = clock
        self.sweep_on_read = sweep_on_read
        self.tracer = trace.get_tracer(__name__)

    @classmethod
    @inject
    def depends(
        cls,
        uow: AbstractUnitOfWork = Depends(Provide[Container.unit_of_work]),
        clock: Clock = Depends(Provide[Container.clock]),
        config: Settings = Depends(Provide[Container.config_service]),
    ) -> Self:
        return cls(uow=uow, clock=clock, sweep_on_read=config.SWEEP_ON_READ)

    @Logger.io
    async def get_availability(
        self, *, showtime_id: int, requester_id: Optional[str] = None
    ) -> ShowtimeAvailability:
        with self.tracer.start_as_current_span(
            'use_case.get_seat_availability', attributes={'showtime.id': showtime_id}
        ):
            now = self.clock()
            swept = 0
            async with self.uow:
                showtime = await self.uow.seat_inventory_repo.get_showtime(showtime_id=showtime_id)
                if showtime is None:
                    raise NotFoundError('Showtime not found')

                if self.sweep_on_read:
                    swept = await self.uow.hold_ledger_repo.delete_expired(
                        now=now, showtime_id=showtime_id
                    )

                seats = await self.uow.seat_inventory_repo.list_seats_by_screen(
                    screen_id=showtime.screen_id
                )
                booked_seat_ids = await self.uow.booking_ledger_repo.list_booked_seat_ids(
                    showtime_id=showtime_id
                )
                holds = await self.uow.hold_ledger_repo.list_active_by_showtime(
                    showtime_id=showtime_id, now=now
                )
                await self.uow.commit()

            metrics.record_holds_swept(trigger='read', count=swept)
            return resolve_availability(
                showtime_id=showtime_id,
                seats=seats,
                booked_seat_ids=booked_seat_ids,
                holds=holds,
                now=now,
                requester_id=requester_id,
            )
