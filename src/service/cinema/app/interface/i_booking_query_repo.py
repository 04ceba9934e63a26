from abc import ABC, abstractmethod
from typing import List, Optional
from uuid import UUID

from src.service.cinema.domain.entity.booking_entity import BookedSeat, Booking


class IBookingQueryRepo(ABC):
    """Repository interface for booking read operations"""

    @abstractmethod
    async def get_by_id(self, *, booking_id: UUID) -> Optional[Booking]:
        pass

    @abstractmethod
    async def list_by_user(self, *, user_id: str) -> List[Booking]:
        """Newest first"""
        pass

    @abstractmethod
    async def list_booked_seats(self, *, booking_id: UUID) -> List[BookedSeat]:
        pass
