from typing import Callable

import anyio
from anyio.abc import TaskGroup

from src.platform.logging.loguru_io import Logger
from src.service.cinema.app.command.sweep_expired_holds_use_case import SweepExpiredHoldsUseCase
from src.service.cinema.app.dto.sweep_result import SweepResult


class ExpirySweeper:
    """
    Periodic driver for SweepExpiredHoldsUseCase.

    Each tick builds a fresh use case (fresh Unit of Work and session). A failed
    tick is logged and the loop carries on; the next tick retries.
    """

    def __init__(
        self,
        *,
        use_case_factory: Callable[[], SweepExpiredHoldsUseCase],
        interval_seconds: float = 60.0,
    ) -> None:
        self.use_case_factory = use_case_factory
        self.interval_seconds = interval_seconds
        self.tick_count = 0

    async def start(self, *, task_group: TaskGroup) -> None:
        task_group.start_soon(self._sweep_loop)  # pyrefly: ignore[bad-argument-type]
        Logger.base.info(f'🧹 [Sweeper] Started, interval={self.interval_seconds}s')

    async def _sweep_loop(self) -> None:
        while True:
            await anyio.sleep(self.interval_seconds)
            await self.run_once()

    async def run_once(self) -> SweepResult | None:
        self.tick_count += 1
        try:
            return await self.use_case_factory().sweep(trigger='periodic')
        except Exception as e:
            Logger.base.error(f'❌ [Sweeper] Tick {self.tick_count} failed: {e}')
            return None
