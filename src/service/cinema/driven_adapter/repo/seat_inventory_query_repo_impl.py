from contextlib import asynccontextmanager
from typing import AsyncContextManager, AsyncIterator, Callable, Iterable, List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.platform.database.db_types import ensure_utc
from src.platform.logging.loguru_io import Logger
from src.service.cinema.app.interface.i_seat_inventory_query_repo import ISeatInventoryQueryRepo
from src.service.cinema.domain.entity.seat_entity import Seat, SeatClass
from src.service.cinema.domain.entity.showtime_entity import Showtime
from src.service.cinema.driven_adapter.model.seat_model import SeatModel
from src.service.cinema.driven_adapter.model.showtime_model import ShowtimeModel


class SeatInventoryQueryRepoImpl(ISeatInventoryQueryRepo):
    def __init__(
        self, session_factory: Callable[..., AsyncContextManager[AsyncSession]] | None = None
    ):
        self.session_factory = session_factory
        self.session: AsyncSession | None = None

    @asynccontextmanager
    async def _get_session(self) -> AsyncIterator[AsyncSession]:
        """
        Get session for query execution.

        If session is injected (from UoW), yield it directly without context management.
        Otherwise, use session_factory context manager.
        """
        if self.session is not None:
            yield self.session
        elif self.session_factory is not None:
            async with self.session_factory() as session:
                yield session
        else:
            raise RuntimeError('No session or session_factory available')

    @staticmethod
    def _to_seat(db_seat: SeatModel) -> Seat:
        return Seat(
            id=db_seat.id,
            screen_id=db_seat.screen_id,
            row_label=db_seat.row_label,
            column_index=db_seat.column_index,
            seat_number=db_seat.seat_number,
            seat_class=SeatClass(db_seat.seat_class),
            price=db_seat.price,
            is_active=db_seat.is_active,
        )

    @staticmethod
    def _to_showtime(db_showtime: ShowtimeModel) -> Showtime:
        return Showtime(
            id=db_showtime.id,
            movie_id=db_showtime.movie_id,
            screen_id=db_showtime.screen_id,
            show_date=db_showtime.show_date,
            show_time=db_showtime.show_time,
            price=db_showtime.price,
            created_at=ensure_utc(db_showtime.created_at),
        )

    @Logger.io
    async def get_showtime(self, *, showtime_id: int) -> Optional[Showtime]:
        async with self._get_session() as session:
            db_showtime = await session.get(ShowtimeModel, showtime_id)
            return self._to_showtime(db_showtime) if db_showtime else None

    @Logger.io
    async def list_seats_by_screen(self, *, screen_id: int) -> List[Seat]:
        async with self._get_session() as session:
            result = await session.execute(
                select(SeatModel)
                .where(SeatModel.screen_id == screen_id)
                .order_by(SeatModel.row_label, SeatModel.column_index)
            )
            return [self._to_seat(db_seat) for db_seat in result.scalars()]

    @Logger.io
    async def get_seats_by_ids(self, *, seat_ids: Iterable[int]) -> List[Seat]:
        ids = list(set(seat_ids))
        if not ids:
            return []
        async with self._get_session() as session:
            result = await session.execute(select(SeatModel).where(SeatModel.id.in_(ids)))
            return [self._to_seat(db_seat) for db_seat in result.scalars()]
