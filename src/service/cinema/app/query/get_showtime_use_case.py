from typing import Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.exception.exceptions import NotFoundError
from src.platform.logging.loguru_io import Logger
from src.service.cinema.app.interface.i_seat_inventory_query_repo import ISeatInventoryQueryRepo
from src.service.cinema.domain.entity.showtime_entity import Showtime


class GetShowtimeUseCase:
    def __init__(self, *, seat_inventory_query_repo: ISeatInventoryQueryRepo):
        self.seat_inventory_query_repo = seat_inventory_query_repo

    @classmethod
    @inject
    def depends(
        cls,
        seat_inventory_query_repo: ISeatInventoryQueryRepo = Depends(
            Provide[Container.seat_inventory_query_repo]
        ),
    ) -> Self:
        return cls(seat_inventory_query_repo=seat_inventory_query_repo)

    @Logger.io
    async def get_showtime(self, *, showtime_id: int) -> Showtime:
        showtime = await self.seat_inventory_query_repo.get_showtime(showtime_id=showtime_id)
        if showtime is None:
            raise NotFoundError('Showtime not found')
        return showtime
