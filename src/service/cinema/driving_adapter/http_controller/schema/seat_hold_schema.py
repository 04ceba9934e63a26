from datetime import datetime
from typing import List

from pydantic import ConfigDict
from pydantic.alias_generators import to_camel

from src.service.cinema.app.dto.hold_result import HoldResult
from src.service.cinema.driving_adapter.http_controller.schema.base_schema import CamelModel


class HoldSeatsRequest(CamelModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        json_schema_extra={'example': {'showtimeId': 1, 'seatIds': [1, 2]}},
    )

    showtime_id: int
    seat_ids: List[int]


class HeldSeatResponse(CamelModel):
    seat_id: int
    expires_at: datetime


class HoldResponse(CamelModel):
    showtime_id: int
    held_seats: List[HeldSeatResponse]
    expires_at: datetime

    @classmethod
    def from_result(cls, result: HoldResult) -> 'HoldResponse':
        return cls(
            showtime_id=result.showtime_id,
            held_seats=[
                HeldSeatResponse(seat_id=hold.seat_id, expires_at=hold.expires_at)
                for hold in result.holds
            ],
            expires_at=result.expires_at,
        )


class ReleaseHoldResponse(CamelModel):
    showtime_id: int
    released: int
