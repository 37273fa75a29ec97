"""Account service - the operations the API surface invokes.

Composes the ledger, position lifecycle and robot config stores. Every
mutation of an account runs inside that account's lock, with the account
reloaded from storage once the lock is held, so concurrent requests on one
account apply their arithmetic in sequence.
"""

import logging
from collections.abc import AsyncIterator, Mapping
from contextlib import asynccontextmanager
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from paperfx import auth, telemetry
from paperfx.errors import (
    AuthenticationError,
    ConflictError,
    InvariantViolation,
    ValidationError,
)
from paperfx.locks import account_locks
from paperfx.models import Account, Trade, TradeSide
from paperfx.services import ledger, positions, robot
from paperfx.services.positions import PositionClosed, PositionOpened
from paperfx.services.robot import RobotSettings

logger = logging.getLogger(__name__)


@dataclass
class Registration:
    """A newly registered account and its first session token."""

    account: Account
    token: str

    @property
    def starting_balance(self) -> Decimal:
        return ledger.STARTING_BALANCE


@dataclass
class Login:
    """An authenticated account and a fresh session token."""

    account: Account
    token: str


@dataclass
class AccountInfo:
    """Account overview."""

    id: str
    name: str
    email: str
    cash_balance: Decimal
    equity: Decimal
    open_position_count: int
    created_at: datetime


def _require_text(value, field: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"{field} is required")
    return value.strip()


async def _require_account(
    session: AsyncSession, account_id: str, *, for_update: bool = False
) -> Account:
    """Load an account that authentication already vouched for.

    Raises:
        InvariantViolation: If the account does not exist
    """
    account = await ledger.get_account(session, account_id, for_update=for_update)
    if account is None:
        logger.critical(
            "Authenticated account missing from ledger",
            extra={"account_id": account_id},
        )
        raise InvariantViolation(f"Account '{account_id}' not found")
    return account


@asynccontextmanager
async def _locked_account(
    session: AsyncSession, account_id: str
) -> AsyncIterator[Account]:
    """Hold the account's lock and yield a freshly loaded account.

    Uncommitted changes are rolled back if the block raises.
    """
    async with account_locks.hold(account_id):
        try:
            yield await _require_account(session, account_id, for_update=True)
        except Exception:
            await session.rollback()
            raise


# ============================================================================
# Registration and login
# ============================================================================


async def register(
    session: AsyncSession, name: str, email: str, credential: str
) -> Registration:
    """Create an account with the starting balance and log it in.

    Raises:
        ValidationError: If name, email or credential is blank or email is malformed
        ConflictError: If the email is already registered
    """
    name = _require_text(name, "name")
    email = _require_text(email, "email")
    # Blank check only; the credential is hashed exactly as given
    _require_text(credential, "password")
    if "@" not in email:
        raise ValidationError("email must be an email address")

    if await ledger.get_account_by_email(session, email) is not None:
        raise ConflictError("Email already registered")

    try:
        account = await ledger.create_account(
            session, name, email, auth.hash_credential(credential)
        )
        token = await auth.issue_token(session, account)
        await session.commit()
    except IntegrityError:
        # Lost a race with a concurrent registration of the same email
        await session.rollback()
        raise ConflictError("Email already registered")

    telemetry.record_account_registered()
    logger.info(
        "Account registered",
        extra={"account_id": account.id, "cash_balance": float(account.cash_balance)},
    )

    return Registration(account=account, token=token)


async def authenticate(session: AsyncSession, email: str, credential: str) -> Login:
    """Verify credentials and issue a session token.

    Raises:
        ValidationError: If email or credential is blank
        AuthenticationError: If the email is unknown or the credential wrong
    """
    email = _require_text(email, "email")
    _require_text(credential, "password")

    account = await ledger.get_account_by_email(session, email)
    if account is None or not auth.verify_credential(credential, account.credential_hash):
        telemetry.record_login_failure()
        logger.info("Login rejected", extra={"email": ledger.normalize_email(email)})
        raise AuthenticationError("Invalid email or password")

    token = await auth.issue_token(session, account)
    await session.commit()

    return Login(account=account, token=token)


# ============================================================================
# Account queries
# ============================================================================


async def get_account_info(session: AsyncSession, account_id: str) -> AccountInfo:
    """Get balances and open position count for an account."""
    account = await _require_account(session, account_id)
    open_count = await positions.count_open(session, account_id)

    return AccountInfo(
        id=account.id,
        name=account.name,
        email=account.email,
        cash_balance=account.cash_balance,
        equity=account.equity,
        open_position_count=open_count,
        created_at=account.created_at,
    )


# ============================================================================
# Positions
# ============================================================================


async def open_position(
    session: AsyncSession,
    account_id: str,
    side: TradeSide | str,
    symbol: str,
    volume,
    entry_price,
    stop_loss=None,
    take_profit=None,
) -> PositionOpened:
    """Open a position for the account. See positions.open_position."""
    async with _locked_account(session, account_id) as account:
        return await positions.open_position(
            session,
            account,
            side,
            symbol,
            volume,
            entry_price,
            stop_loss=stop_loss,
            take_profit=take_profit,
        )


async def close_position(
    session: AsyncSession, account_id: str, trade_id: str, close_price
) -> PositionClosed:
    """Close one of the account's open positions. See positions.close_position."""
    async with _locked_account(session, account_id) as account:
        return await positions.close_position(session, account, trade_id, close_price)


async def list_open_positions(session: AsyncSession, account_id: str) -> list[Trade]:
    await _require_account(session, account_id)
    return await positions.list_open(session, account_id)


async def list_history(session: AsyncSession, account_id: str) -> list[Trade]:
    """Closed positions in close order."""
    await _require_account(session, account_id)
    return await positions.list_history(session, account_id)


# ============================================================================
# Robot config
# ============================================================================


async def set_robot_config(
    session: AsyncSession, account_id: str, params: Mapping
) -> RobotSettings:
    """Replace the account's robot config. See robot.set_config."""
    async with _locked_account(session, account_id):
        return await robot.set_config(session, account_id, params)


async def get_robot_config(session: AsyncSession, account_id: str) -> RobotSettings:
    """Stored robot config, or the defaults. Never absent."""
    await _require_account(session, account_id)
    return await robot.get_config(session, account_id)
