from datetime import datetime
from uuid import UUID

from sqlalchemy import DateTime, ForeignKey, Integer, UniqueConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from src.platform.database.orm_db_setting import Base


class BookedSeatModel(Base):
    """UNIQUE(showtime_id, seat_id) is the final guard against double booking."""

    __tablename__ = 'booked_seat'
    __table_args__ = (
        UniqueConstraint('showtime_id', 'seat_id', name='uq_booked_seat_showtime_seat'),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    booking_id: Mapped[UUID] = mapped_column(
        Uuid(as_uuid=True), ForeignKey('booking.id'), nullable=False, index=True
    )
    seat_id: Mapped[int] = mapped_column(ForeignKey('seat.id'), nullable=False)
    showtime_id: Mapped[int] = mapped_column(ForeignKey('showtime.id'), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
