"""
Production FastAPI Application

Cinema seat hold / booking / payment API plus the periodic expiry sweeper.
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import anyio
from fastapi import FastAPI
from fastapi.responses import RedirectResponse

from src.platform.app_factory import create_app
from src.platform.config.core_setting import settings
from src.platform.config.di import container
from src.platform.config.wire_modules import WIRE_MODULES
from src.platform.database.orm_db_setting import dispose_engines, get_engine
from src.platform.logging.loguru_io import Logger
from src.platform.observability.tracing import TracingConfig
from src.service.cinema.app.command.sweep_expired_holds_use_case import SweepExpiredHoldsUseCase
from src.service.cinema.driving_adapter.background.expiry_sweeper import ExpirySweeper


def build_sweep_use_case() -> SweepExpiredHoldsUseCase:
    return SweepExpiredHoldsUseCase(
        uow=container.unit_of_work(),
        clock=container.clock(),
        pending_booking_ttl_seconds=settings.PENDING_BOOKING_TTL_SECONDS,
    )


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    Logger.base.info('🚀 [Cinema Booking] Starting up...')

    tracing = TracingConfig(service_name='cinema-booking')
    tracing.setup()
    Logger.base.info('📊 [Cinema Booking] OpenTelemetry tracing configured')

    container.wire(modules=WIRE_MODULES)
    Logger.base.info('🔌 [Cinema Booking] Dependency injection wired')

    tracing.instrument_sqlalchemy(engines=[get_engine(), get_engine(read_only=True)])
    Logger.base.info('🗄️  [Cinema Booking] Database engines ready + instrumented')

    async with anyio.create_task_group() as tg:
        sweeper = ExpirySweeper(
            use_case_factory=build_sweep_use_case,
            interval_seconds=settings.SWEEP_INTERVAL_SECONDS,
        )
        await sweeper.start(task_group=tg)
        Logger.base.info('✅ [Cinema Booking] Ready to serve requests')

        yield

        Logger.base.info('🛑 [Cinema Booking] Shutting down...')
        tg.cancel_scope.cancel()

    await dispose_engines()
    Logger.base.info('🗄️  [Cinema Booking] Database engines disposed')

    tracing.shutdown()
    container.unwire()
    Logger.base.info('👋 [Cinema Booking] Shutdown complete')


app = create_app(lifespan=lifespan)


@app.get('/')
async def root() -> RedirectResponse:
    """Root endpoint - redirect to docs."""
    return RedirectResponse(url='/docs')
