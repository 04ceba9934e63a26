from datetime import datetime, timedelta
from typing import Iterable, Optional

import attrs


@attrs.define(frozen=True)
class Hold:
    """
    A time-boxed claim by one user on one seat for one showtime.

    Expiry is soft: an expired hold may still sit in storage until swept, but it
    never counts as `held` and never blocks another user.
    """

    user_id: str
    showtime_id: int
    seat_id: int
    expires_at: datetime
    created_at: datetime
    id: Optional[int] = None

    @classmethod
    def create_for_seats(
        cls,
        *,
        user_id: str,
        showtime_id: int,
        seat_ids: Iterable[int],
        now: datetime,
        ttl: timedelta,
    ) -> list['Hold']:
        expires_at = now + ttl
        return [
            cls(
                user_id=user_id,
                showtime_id=showtime_id,
                seat_id=seat_id,
                expires_at=expires_at,
                created_at=now,
            )
            for seat_id in sorted(set(seat_ids))
        ]

    def is_active(self, *, now: datetime) -> bool:
        return self.expires_at > now

    def is_owned_by(self, user_id: str) -> bool:
        return self.user_id == user_id
