from abc import ABC, abstractmethod
from typing import Iterable, List, Optional

from src.service.cinema.domain.entity.seat_entity import Seat
from src.service.cinema.domain.entity.showtime_entity import Showtime


class ISeatInventoryQueryRepo(ABC):
    """Read-only view of screens' seats and scheduled showtimes"""

    @abstractmethod
    async def get_showtime(self, *, showtime_id: int) -> Optional[Showtime]:
        pass

    @abstractmethod
    async def list_seats_by_screen(self, *, screen_id: int) -> List[Seat]:
        """All seats of the screen (active and inactive), ordered by row then column"""
        pass

    @abstractmethod
    async def get_seats_by_ids(self, *, seat_ids: Iterable[int]) -> List[Seat]:
        pass
