from fastapi import APIRouter, Depends, status

from src.platform.logging.loguru_io import Logger
from src.service.cinema.app.command.release_hold_use_case import ReleaseHoldUseCase
from src.service.cinema.app.command.request_hold_use_case import RequestHoldUseCase
from src.service.cinema.driving_adapter.http_controller.auth.current_user import (
    get_current_user_id,
)
from src.service.cinema.driving_adapter.http_controller.schema.seat_hold_schema import (
    HoldResponse,
    HoldSeatsRequest,
    ReleaseHoldResponse,
)


router = APIRouter()


@router.post('/hold', status_code=status.HTTP_200_OK)
@Logger.io
async def hold_seats(
    request: HoldSeatsRequest,
    user_id: str = Depends(get_current_user_id),
    use_case: RequestHoldUseCase = Depends(RequestHoldUseCase.depends),
) -> HoldResponse:
    """Replace the caller's hold for the showtime with `seatIds` (all or nothing)."""
    result = await use_case.request_hold(
        user_id=user_id, showtime_id=request.showtime_id, seat_ids=request.seat_ids
    )
    return HoldResponse.from_result(result)


@router.delete('/hold/{showtime_id}')
@Logger.io
async def release_hold(
    showtime_id: int,
    user_id: str = Depends(get_current_user_id),
    use_case: ReleaseHoldUseCase = Depends(ReleaseHoldUseCase.depends),
) -> ReleaseHoldResponse:
    released = await use_case.release_hold(user_id=user_id, showtime_id=showtime_id)
    return ReleaseHoldResponse(showtime_id=showtime_id, released=released)
