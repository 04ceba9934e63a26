from datetime import date, datetime, time
from decimal import Decimal
from typing import Optional

import attrs


@attrs.define(frozen=True)
class Showtime:
    id: int
    movie_id: int
    screen_id: int
    show_date: date
    show_time: time
    price: Decimal
    created_at: Optional[datetime] = None
