from datetime import datetime, timedelta
from typing import Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.core_setting import Settings
from src.platform.config.di import Container
from src.platform.database.unit_of_work import AbstractUnitOfWork
from src.platform.logging.loguru_io import Logger
from src.platform.metrics.reservation_metrics import metrics
from src.service.cinema.app.clock import Clock
from src.service.cinema.app.dto.sweep_result import SweepResult


class SweepExpiredHoldsUseCase:
    """
    Delete holds past their expiry and fail pending bookings nobody can pay
    for any more.

    A pending booking is failed once it is older than the pending TTL and its
    owner has no live hold left on the showtime. Each step is its own short
    transaction; storage errors propagate to the caller.
    """

    def __init__(
        self,
        *,
        uow: AbstractUnitOfWork,
        clock: Clock,
        pending_booking_ttl_seconds: int = 1800,
    ) -> None:
        self.uow = uow
        self.clock = clock
        self.pending_booking_ttl = timedelta(seconds=pending_booking_ttl_seconds)

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
            pending_booking_ttl_seconds=config.PENDING_BOOKING_TTL_SECONDS,
        )

    @Logger.io
    async def sweep(self, *, trigger: str = 'manual') -> SweepResult:
        now = self.clock()
        deleted = await self.sweep_expired_holds(now=now, trigger=trigger)
        failed = await self.fail_stale_pending_bookings(now=now)
        return SweepResult(deleted_holds=deleted, failed_bookings=failed)

    @Logger.io
    async def sweep_expired_holds(self, *, now: datetime, trigger: str = 'manual') -> int:
        async with self.uow:
            deleted = await self.uow.hold_ledger_repo.delete_expired(now=now)
            await self.uow.commit()

        metrics.record_holds_swept(trigger=trigger, count=deleted)
        if deleted:
            Logger.base.info(f'🧹 [SWEEP] trigger={trigger} deleted {deleted} expired holds')
        return deleted

    @Logger.io
    async def fail_stale_pending_bookings(self, *, now: datetime) -> int:
        failed = 0
        async with self.uow:
            stale = await self.uow.booking_ledger_repo.list_stale_pending(
                created_before=now - self.pending_booking_ttl
            )
            for booking in stale:
                holds = await self.uow.hold_ledger_repo.list_by_user_and_showtime(
                    user_id=booking.user_id, showtime_id=booking.showtime_id
                )
                if any(hold.is_active(now=now) for hold in holds):
                    continue
                # Conditional: a confirm may have completed it since it was listed
                if await self.uow.booking_ledger_repo.mark_failed_if_pending(
                    booking_id=booking.id, now=now
                ):
                    failed += 1
            await self.uow.commit()

        metrics.record_stale_bookings_failed(count=failed)
        if failed:
            Logger.base.info(f'🧹 [SWEEP] marked {failed} stale pending bookings as failed')
        return failed
