"""Robot configuration endpoints - requires authentication."""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from paperfx.auth import get_current_account
from paperfx.database import get_session
from paperfx.models import Account
from paperfx.schemas.robot import RobotConfigBody, RobotConfigResponse
from paperfx.services import accounts as account_service
from paperfx.services.robot import RobotSettings

router = APIRouter()


def _config_response(settings: RobotSettings) -> RobotConfigResponse:
    return RobotConfigResponse(
        fast_ma=settings.fast_ma,
        slow_ma=settings.slow_ma,
        rsi_period=settings.rsi_period,
        lot_size=settings.lot_size,
        max_positions=settings.max_positions,
        risk_percent=settings.risk_percent,
        created_at=settings.created_at,
        is_default=settings.is_default,
    )


@router.post(
    "/config",
    response_model=RobotConfigResponse,
    summary="Save robot config",
)
async def set_config(
    data: RobotConfigBody,
    account: Account = Depends(get_current_account),
    session: AsyncSession = Depends(get_session),
) -> RobotConfigResponse:
    """Replace the robot configuration. All six fields are required."""
    settings = await account_service.set_robot_config(
        session, account.id, data.model_dump()
    )
    return _config_response(settings)


@router.get(
    "/config",
    response_model=RobotConfigResponse,
    summary="Get robot config",
)
async def get_config(
    account: Account = Depends(get_current_account),
    session: AsyncSession = Depends(get_session),
) -> RobotConfigResponse:
    """Get the saved robot configuration, or the defaults if none was saved."""
    settings = await account_service.get_robot_config(session, account.id)
    return _config_response(settings)
