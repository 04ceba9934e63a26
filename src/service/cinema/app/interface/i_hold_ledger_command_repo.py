from abc import ABC, abstractmethod
from datetime import datetime
from typing import Iterable, List, Optional

from src.service.cinema.domain.entity.hold_entity import Hold


class IHoldLedgerCommandRepo(ABC):
    """
    Seat holds. Runs inside a Unit of Work: nothing here commits.

    The store enforces UNIQUE(showtime_id, seat_id); callers delete expired
    holds for the showtime first, so the constraint only ever bites between
    live holds.
    """

    @abstractmethod
    async def delete_expired(self, *, now: datetime, showtime_id: Optional[int] = None) -> int:
        """Delete holds with expires_at <= now; returns the number deleted"""
        pass

    @abstractmethod
    async def list_active_by_showtime(self, *, showtime_id: int, now: datetime) -> List[Hold]:
        pass

    @abstractmethod
    async def list_by_user_and_showtime(self, *, user_id: str, showtime_id: int) -> List[Hold]:
        """Including expired holds that have not been swept yet"""
        pass

    @abstractmethod
    async def find_active_conflicts(
        self, *, showtime_id: int, seat_ids: Iterable[int], user_id: str, now: datetime
    ) -> List[Hold]:
        """Unexpired holds on `seat_ids` owned by anyone other than `user_id`"""
        pass

    @abstractmethod
    async def delete_for_user(self, *, user_id: str, showtime_id: int) -> int:
        pass

    @abstractmethod
    async def insert_holds(self, *, holds: List[Hold]) -> List[Hold]:
        """
        Raises:
            SeatUnavailableError: a concurrent request won one of the seats
        """
        pass
