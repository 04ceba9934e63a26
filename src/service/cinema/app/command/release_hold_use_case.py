from typing import Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.database.unit_of_work import AbstractUnitOfWork
from src.platform.logging.loguru_io import Logger


class ReleaseHoldUseCase:
    """Drop all of a user's holds for a showtime. Idempotent."""

    def __init__(self, *, uow: AbstractUnitOfWork) -> None:
        self.uow = uow

    @classmethod
    @inject
    def depends(cls, uow: AbstractUnitOfWork = Depends(Provide[Container.unit_of_work])) -> Self:
        return cls(uow=uow)

    @Logger.io
    async def release_hold(self, *, user_id: str, showtime_id: int) -> int:
        async with self.uow:
            released = await self.uow.hold_ledger_repo.delete_for_user(
                user_id=user_id, showtime_id=showtime_id
            )
            await self.uow.commit()
        return released
