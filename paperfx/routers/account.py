"""Account endpoints - requires authentication."""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from paperfx.auth import get_current_account
from paperfx.database import get_session
from paperfx.models import Account
from paperfx.schemas.account import AccountInfoResponse
from paperfx.services import accounts as account_service

router = APIRouter()


@router.get(
    "/info",
    response_model=AccountInfoResponse,
    summary="Get my account info",
)
async def get_account_info(
    account: Account = Depends(get_current_account),
    session: AsyncSession = Depends(get_session),
) -> AccountInfoResponse:
    """Get the authenticated user's balances and open position count.

    - **cash_balance**: Cash after all reservations and settlements
    - **equity**: Same as cash_balance (open positions are not marked to market)
    """
    info = await account_service.get_account_info(session, account.id)
    return AccountInfoResponse.model_validate(info)
