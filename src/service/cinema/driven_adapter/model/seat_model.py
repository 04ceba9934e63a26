from decimal import Decimal

from sqlalchemy import Boolean, Integer, Numeric, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from src.platform.database.orm_db_setting import Base


class SeatModel(Base):
    __tablename__ = 'seat'
    __table_args__ = (UniqueConstraint('screen_id', 'seat_number', name='uq_seat_screen_number'),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    screen_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    row_label: Mapped[str] = mapped_column(String(4), nullable=False)
    column_index: Mapped[int] = mapped_column(Integer, nullable=False)
    seat_number: Mapped[str] = mapped_column(String(10), nullable=False)  # A1, A2, B1...
    seat_class: Mapped[str] = mapped_column(String(20), nullable=False, default='standard')
    price: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
