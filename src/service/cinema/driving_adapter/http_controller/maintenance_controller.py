from fastapi import APIRouter, Depends

from src.platform.logging.loguru_io import Logger
from src.service.cinema.app.command.sweep_expired_holds_use_case import SweepExpiredHoldsUseCase
from src.service.cinema.driving_adapter.http_controller.auth.current_user import (
    get_current_user_id,
)
from src.service.cinema.driving_adapter.http_controller.schema.booking_schema import SweepResponse


router = APIRouter()


@router.post('/sweep-expired-holds')
@Logger.io
async def sweep_expired_holds(
    user_id: str = Depends(get_current_user_id),
    use_case: SweepExpiredHoldsUseCase = Depends(SweepExpiredHoldsUseCase.depends),
) -> SweepResponse:
    Logger.base.info(f'🧹 [SWEEP] manual sweep requested by user={user_id}')
    result = await use_case.sweep(trigger='manual')
    return SweepResponse(
        deleted_holds=result.deleted_holds, failed_bookings=result.failed_bookings
    )
