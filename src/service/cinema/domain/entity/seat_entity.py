from decimal import Decimal
from enum import StrEnum

import attrs


class SeatClass(StrEnum):
    STANDARD = 'standard'
    PREMIUM = 'premium'


@attrs.define(frozen=True)
class Seat:
    """A physical seat on a screen. Only `is_active` ever changes (maintenance)."""

    id: int
    screen_id: int
    row_label: str
    column_index: int
    seat_number: str  # e.g. 'A1'
    seat_class: SeatClass
    price: Decimal
    is_active: bool = True

    def can_be_held_for(self, *, screen_id: int) -> bool:
        return self.is_active and self.screen_id == screen_id
