"""
Hold Ledger Command Repository Implementation

All methods run on the session injected by the Unit of Work and never commit;
the use case decides the transaction boundary.
"""

from datetime import datetime
from typing import Iterable, List, Optional

import attrs
from sqlalchemy import delete as sql_delete, insert as sql_insert, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from src.platform.database.db_types import ensure_utc
from src.platform.logging.loguru_io import Logger
from src.service.cinema.app.interface.i_hold_ledger_command_repo import IHoldLedgerCommandRepo
from src.service.cinema.domain.entity.hold_entity import Hold
from src.service.cinema.domain.reservation_error import SeatUnavailableError
from src.service.cinema.driven_adapter.model.seat_hold_model import SeatHoldModel


class HoldLedgerCommandRepoImpl(IHoldLedgerCommandRepo):
    def __init__(self) -> None:
        self.session: AsyncSession | None = None

    def _require_session(self) -> AsyncSession:
        if self.session is None:
            raise RuntimeError('HoldLedgerCommandRepoImpl must be used inside a Unit of Work')
        return self.session

    @staticmethod
    def _to_entity(db_hold: SeatHoldModel) -> Hold:
        return Hold(
            id=db_hold.id,
            user_id=db_hold.user_id,
            showtime_id=db_hold.showtime_id,
            seat_id=db_hold.seat_id,
            expires_at=ensure_utc(db_hold.expires_at),  # type: ignore[arg-type]
            created_at=ensure_utc(db_hold.created_at),  # type: ignore[arg-type]
        )

    @Logger.io
    async def delete_expired(self, *, now: datetime, showtime_id: Optional[int] = None) -> int:
        stmt = sql_delete(SeatHoldModel).where(SeatHoldModel.expires_at <= now)
        if showtime_id is not None:
            stmt = stmt.where(SeatHoldModel.showtime_id == showtime_id)
        result = await self._require_session().execute(
            stmt.execution_options(synchronize_session=False)
        )
        return result.rowcount or 0  # type: ignore[attr-defined]

    @Logger.io
    async def list_active_by_showtime(self, *, showtime_id: int, now: datetime) -> List[Hold]:
        result = await self._require_session().execute(
            select(SeatHoldModel).where(
                SeatHoldModel.showtime_id == showtime_id,
                SeatHoldModel.expires_at > now,
            )
            .execution_options(populate_existing=True)
        )
        return [self._to_entity(db_hold) for db_hold in result.scalars()]

    @Logger.io
    async def list_by_user_and_showtime(self, *, user_id: str, showtime_id: int) -> List[Hold]:
        result = await self._require_session().execute(
            select(SeatHoldModel)
            .where(
                SeatHoldModel.user_id == user_id,
                SeatHoldModel.showtime_id == showtime_id,
            )
            .order_by(SeatHoldModel.seat_id)
            .execution_options(populate_existing=True)
        )
        return [self._to_entity(db_hold) for db_hold in result.scalars()]

    @Logger.io
    async def find_active_conflicts(
        self, *, showtime_id: int, seat_ids: Iterable[int], user_id: str, now: datetime
    ) -> List[Hold]:
        ids = list(set(seat_ids))
        if not ids:
            return []
        result = await self._require_session().execute(
            select(SeatHoldModel).where(
                SeatHoldModel.showtime_id == showtime_id,
                SeatHoldModel.seat_id.in_(ids),
                SeatHoldModel.user_id != user_id,
                SeatHoldModel.expires_at > now,
            )
            .execution_options(populate_existing=True)
        )
        return [self._to_entity(db_hold) for db_hold in result.scalars()]

    @Logger.io
    async def delete_for_user(self, *, user_id: str, showtime_id: int) -> int:
        result = await self._require_session().execute(
            sql_delete(SeatHoldModel)
            .where(
                SeatHoldModel.user_id == user_id,
                SeatHoldModel.showtime_id == showtime_id,
            )
            .execution_options(synchronize_session=False)
        )
        return result.rowcount or 0  # type: ignore[attr-defined]

    @Logger.io
    async def insert_holds(self, *, holds: List[Hold]) -> List[Hold]:
        if not holds:
            return []
        session = self._require_session()
        try:
            # Savepoint keeps the transaction usable for the conflict lookup below
            async with session.begin_nested():
                result = await session.execute(
                    sql_insert(SeatHoldModel).returning(SeatHoldModel.seat_id, SeatHoldModel.id),
                    [
                        {
                            'user_id': hold.user_id,
                            'showtime_id': hold.showtime_id,
                            'seat_id': hold.seat_id,
                            'expires_at': hold.expires_at,
                            'created_at': hold.created_at,
                        }
                        for hold in holds
                    ],
                )
                rows = result.all()
        except IntegrityError as e:
            # Lost the race: a concurrent request committed a hold on one of these seats
            raise SeatUnavailableError(
                'One or more seats were just taken by another user',
                seat_ids=await self._conflicting_seat_ids(holds),
            ) from e

        ids_by_seat = {seat_id: hold_id for seat_id, hold_id in rows}
        return [attrs.evolve(hold, id=ids_by_seat.get(hold.seat_id)) for hold in holds]

    async def _conflicting_seat_ids(self, holds: List[Hold]) -> List[int]:
        requested = [hold.seat_id for hold in holds]
        first = holds[0]
        # Holds of one request share created_at, the request's clock reading
        conflicts = await self.find_active_conflicts(
            showtime_id=first.showtime_id,
            seat_ids=requested,
            user_id=first.user_id,
            now=first.created_at,
        )
        return sorted({hold.seat_id for hold in conflicts}) or requested
