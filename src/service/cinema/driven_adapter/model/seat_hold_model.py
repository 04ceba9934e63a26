from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Index, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from src.platform.database.orm_db_setting import Base


class SeatHoldModel(Base):
    """
    One row per held seat.

    UNIQUE(showtime_id, seat_id) makes concurrent hold requests for the same seat
    collide in the database; expired rows are deleted in the same transaction
    before inserting, so only live holds ever compete.
    """

    __tablename__ = 'seat_hold'
    __table_args__ = (
        UniqueConstraint('showtime_id', 'seat_id', name='uq_seat_hold_showtime_seat'),
        Index('ix_seat_hold_user_showtime', 'user_id', 'showtime_id'),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[str] = mapped_column(String(255), nullable=False)
    showtime_id: Mapped[int] = mapped_column(ForeignKey('showtime.id'), nullable=False)
    seat_id: Mapped[int] = mapped_column(ForeignKey('seat.id'), nullable=False)
    expires_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, index=True  # sweep index
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
