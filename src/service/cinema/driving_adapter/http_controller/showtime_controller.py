from typing import Optional

from fastapi import APIRouter, Depends

from src.platform.logging.loguru_io import Logger
from src.service.cinema.app.query.get_reservation_session_use_case import (
    GetReservationSessionUseCase,
)
from src.service.cinema.app.query.get_seat_availability_use_case import (
    GetSeatAvailabilityUseCase,
)
from src.service.cinema.app.query.get_showtime_use_case import GetShowtimeUseCase
from src.service.cinema.driving_adapter.http_controller.auth.current_user import (
    get_current_user_id,
    get_optional_user_id,
)
from src.service.cinema.driving_adapter.http_controller.schema.showtime_schema import (
    ReservationSessionResponse,
    SeatMapResponse,
    ShowtimeResponse,
)


router = APIRouter()


@router.get('/{showtime_id}')
@Logger.io
async def get_showtime(
    showtime_id: int,
    use_case: GetShowtimeUseCase = Depends(GetShowtimeUseCase.depends),
) -> ShowtimeResponse:
    showtime = await use_case.get_showtime(showtime_id=showtime_id)
    return ShowtimeResponse.from_entity(showtime)


@router.get('/{showtime_id}/seats')
@Logger.io
async def get_seat_map(
    showtime_id: int,
    user_id: Optional[str] = Depends(get_optional_user_id),
    use_case: GetSeatAvailabilityUseCase = Depends(GetSeatAvailabilityUseCase.depends),
) -> SeatMapResponse:
    """Seat map with per-seat status; `heldByMe` is set when the caller is authenticated."""
    availability = await use_case.get_availability(showtime_id=showtime_id, requester_id=user_id)
    return SeatMapResponse.from_availability(availability)


@router.get('/{showtime_id}/session')
@Logger.io
async def get_reservation_session(
    showtime_id: int,
    user_id: str = Depends(get_current_user_id),
    use_case: GetReservationSessionUseCase = Depends(GetReservationSessionUseCase.depends),
) -> ReservationSessionResponse:
    session = await use_case.get_session(user_id=user_id, showtime_id=showtime_id)
    return ReservationSessionResponse.from_session(session)
