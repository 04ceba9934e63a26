from datetime import datetime
from decimal import Decimal
from typing import Optional
from uuid import UUID

from sqlalchemy import JSON, DateTime, ForeignKey, Numeric, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from src.platform.database.orm_db_setting import Base


class BookingModel(Base):
    __tablename__ = 'booking'

    id: Mapped[UUID] = mapped_column(Uuid(as_uuid=True), primary_key=True)  # UUID7
    user_id: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    showtime_id: Mapped[int] = mapped_column(ForeignKey('showtime.id'), nullable=False, index=True)
    booking_reference: Mapped[str] = mapped_column(String(40), nullable=False, unique=True)
    seat_ids: Mapped[list[int]] = mapped_column(JSON, nullable=False)
    total_amount: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    booking_fee: Mapped[Decimal] = mapped_column(
        Numeric(10, 2), nullable=False, default=Decimal('2.50')
    )
    currency: Mapped[str] = mapped_column(String(3), nullable=False, default='INR')
    payment_status: Mapped[str] = mapped_column(
        String(20), nullable=False, default='pending', index=True
    )
    status: Mapped[str] = mapped_column(String(20), nullable=False, default='confirmed')
    payment_order_id: Mapped[Optional[str]] = mapped_column(String(64), nullable=True, index=True)
    payment_id: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    paid_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
