"""
Unit of Work Pattern - one database session and transaction shared by the
seat inventory, hold ledger and booking ledger repositories

Architecture:
- UoW owns the session lifecycle and commit/rollback
- Repositories receive the shared session from the UoW
- Use cases coordinate several repositories inside one `async with uow` block
- Leaving the block without commit rolls back; driver/pool failures raised
  inside the block surface as StorageUnavailableError
"""

from __future__ import annotations

import abc
from types import TracebackType
from typing import TYPE_CHECKING, Callable

from sqlalchemy.exc import DBAPIError
from sqlalchemy.exc import TimeoutError as PoolTimeoutError
from sqlalchemy.ext.asyncio import AsyncSession

from src.platform.database.orm_db_setting import get_session_maker
from src.platform.database.storage_errors import to_storage_error
from src.platform.exception.exceptions import StorageUnavailableError


if TYPE_CHECKING:
    from src.service.cinema.app.interface.i_booking_ledger_command_repo import (
        IBookingLedgerCommandRepo,
    )
    from src.service.cinema.app.interface.i_hold_ledger_command_repo import (
        IHoldLedgerCommandRepo,
    )
    from src.service.cinema.app.interface.i_seat_inventory_query_repo import (
        ISeatInventoryQueryRepo,
    )


class AbstractUnitOfWork(abc.ABC):
    """
    Abstract Unit of Work for the cinema booking service

    Usage:
        async with uow:
            await uow.hold_ledger_repo.delete_expired(now=now)
            await uow.hold_ledger_repo.insert_holds(holds=holds)
            await uow.commit()
    """

    seat_inventory_repo: ISeatInventoryQueryRepo
    hold_ledger_repo: IHoldLedgerCommandRepo
    booking_ledger_repo: IBookingLedgerCommandRepo

    async def __aenter__(self) -> AbstractUnitOfWork:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.rollback()

    async def commit(self) -> None:
        await self._commit()

    @abc.abstractmethod
    async def _commit(self) -> None:
        raise NotImplementedError

    @abc.abstractmethod
    async def rollback(self) -> None:
        raise NotImplementedError


class SqlAlchemyUnitOfWork(AbstractUnitOfWork):
    """
    SQLAlchemy implementation of Unit of Work

    Opens its own session from `session_factory` on enter and closes it on exit,
    so one instance can be reused for several sequential transactions.
    """

    def __init__(self, session_factory: Callable[[], AsyncSession] | None = None) -> None:
        self._session_factory = session_factory
        self.session: AsyncSession | None = None

    async def __aenter__(self) -> SqlAlchemyUnitOfWork:
        from src.service.cinema.driven_adapter.repo.booking_ledger_command_repo_impl import (
            BookingLedgerCommandRepoImpl,
        )
        from src.service.cinema.driven_adapter.repo.hold_ledger_command_repo_impl import (
            HoldLedgerCommandRepoImpl,
        )
        from src.service.cinema.driven_adapter.repo.seat_inventory_query_repo_impl import (
            SeatInventoryQueryRepoImpl,
        )

        session_factory = self._session_factory or get_session_maker(read_only=False)
        self.session = session_factory()

        # Create repositories with shared session
        self.seat_inventory_repo = SeatInventoryQueryRepoImpl()
        self.seat_inventory_repo.session = self.session
        self.hold_ledger_repo = HoldLedgerCommandRepoImpl()
        self.hold_ledger_repo.session = self.session
        self.booking_ledger_repo = BookingLedgerCommandRepoImpl()
        self.booking_ledger_repo.session = self.session

        await super().__aenter__()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        try:
            await super().__aexit__(exc_type, exc, tb)
        except (DBAPIError, PoolTimeoutError) as rollback_error:
            raise StorageUnavailableError(
                f'Storage is temporarily unavailable: {type(exc or rollback_error).__name__}'
            ) from (exc or rollback_error)
        finally:
            if self.session is not None:
                await self.session.close()
                self.session = None

        if exc is not None and not isinstance(exc, StorageUnavailableError):
            if (storage_error := to_storage_error(exc)) is not None:
                raise storage_error from exc

    async def _commit(self) -> None:
        assert self.session is not None, 'commit() called outside `async with uow`'
        await self.session.commit()

    async def rollback(self) -> None:
        if self.session is not None:
            await self.session.rollback()


def get_unit_of_work() -> AbstractUnitOfWork:
    """Factory used by the DI container; each use-case call gets its own session."""
    return SqlAlchemyUnitOfWork()
