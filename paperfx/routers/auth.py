"""Registration and login endpoints."""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from paperfx.database import get_session
from paperfx.models import Account
from paperfx.schemas.auth import (
    AuthResponse,
    LoginRequest,
    RegisterRequest,
    RegisterResponse,
    UserSummary,
)
from paperfx.services import accounts as account_service

router = APIRouter()


def _user_summary(account: Account) -> UserSummary:
    return UserSummary(
        id=account.id,
        name=account.name,
        email=account.email,
        cash_balance=account.cash_balance,
        equity=account.equity,
    )


@router.post(
    "/register",
    response_model=RegisterResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register a new account",
)
async def register(
    data: RegisterRequest,
    session: AsyncSession = Depends(get_session),
) -> RegisterResponse:
    """Create a simulated trading account with a 1000.00 starting balance.

    Returns a bearer token for the new account.
    **Store the token securely - it cannot be retrieved later.**
    """
    registration = await account_service.register(
        session, data.name, data.email, data.password
    )
    return RegisterResponse(
        token=registration.token,
        user=_user_summary(registration.account),
        account_id=registration.account.id,
        starting_balance=registration.starting_balance,
    )


@router.post(
    "/login",
    response_model=AuthResponse,
    summary="Log in",
)
async def login(
    data: LoginRequest,
    session: AsyncSession = Depends(get_session),
) -> AuthResponse:
    """Exchange email and password for a new bearer token."""
    result = await account_service.authenticate(session, data.email, data.password)
    return AuthResponse(token=result.token, user=_user_summary(result.account))
