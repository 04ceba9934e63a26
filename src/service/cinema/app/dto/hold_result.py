from datetime import datetime

import attrs

from src.service.cinema.domain.entity.hold_entity import Hold


@attrs.define(frozen=True)
class HoldResult:
    showtime_id: int
    holds: list[Hold]
    expires_at: datetime

    @property
    def seat_ids(self) -> list[int]:
        return [hold.seat_id for hold in self.holds]
