from abc import ABC, abstractmethod
from datetime import datetime
from typing import Iterable, List, Optional
from uuid import UUID

from src.service.cinema.domain.entity.booking_entity import BookedSeat, Booking


class IBookingLedgerCommandRepo(ABC):
    """Bookings and booked seats. Runs inside a Unit of Work: nothing here commits."""

    @abstractmethod
    async def create(self, *, booking: Booking) -> Booking:
        pass

    @abstractmethod
    async def get_by_id(self, *, booking_id: UUID, for_update: bool = False) -> Optional[Booking]:
        """`for_update` takes a row lock until the transaction ends (no-op on SQLite)"""
        pass

    @abstractmethod
    async def update_payment(self, *, booking: Booking) -> Booking:
        """
        Persist payment_status / payment_order_id / payment_id / paid_at.
        Writes the whole payment state: only call with the row locked.
        """
        pass

    @abstractmethod
    async def attach_payment_order(self, *, booking_id: UUID, order_id: str, now: datetime) -> bool:
        """Set payment_order_id while the booking is still pending. False if it no longer is."""
        pass

    @abstractmethod
    async def mark_failed_if_pending(self, *, booking_id: UUID, now: datetime) -> bool:
        """Pending -> failed. False if the booking was paid or failed in the meantime."""
        pass

    @abstractmethod
    async def list_by_user_and_showtime(self, *, user_id: str, showtime_id: int) -> List[Booking]:
        pass

    @abstractmethod
    async def list_booked_seat_ids(
        self, *, showtime_id: int, seat_ids: Optional[Iterable[int]] = None
    ) -> List[int]:
        pass

    @abstractmethod
    async def insert_booked_seats(self, *, booked_seats: List[BookedSeat]) -> List[BookedSeat]:
        """
        Raises:
            SeatAlreadyBookedError: another booking already owns one of the seats
        """
        pass

    @abstractmethod
    async def list_stale_pending(self, *, created_before: datetime) -> List[Booking]:
        pass
