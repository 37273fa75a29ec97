"""Ledger store - account records and cash balance mutation.

Balances change only through debit() and credit(). Neither validates the
amount's effect on the balance: simulated accounts may overdraw.
"""

import logging
import uuid
from decimal import Decimal, localcontext

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from paperfx.models import Account
from paperfx.money import LEDGER_CONTEXT

logger = logging.getLogger(__name__)

# Every new account starts with this much simulated cash
STARTING_BALANCE = Decimal("1000.00")


def generate_account_id() -> str:
    """Generate a unique account ID."""
    return str(uuid.uuid4())


def normalize_email(email: str) -> str:
    return email.strip().lower()


async def create_account(
    session: AsyncSession, name: str, email: str, credential_hash: str
) -> Account:
    """Add a new account with the starting balance to the session.

    The caller commits.

    Args:
        session: Database session
        name: Display name
        email: Login email (normalized here)
        credential_hash: Output of auth.hash_credential

    Returns:
        The pending account
    """
    account = Account(
        id=generate_account_id(),
        name=name,
        email=normalize_email(email),
        credential_hash=credential_hash,
        cash_balance=STARTING_BALANCE,
    )
    session.add(account)
    await session.flush()
    return account


async def get_account(
    session: AsyncSession, account_id: str, *, for_update: bool = False
) -> Account | None:
    """Get an account by ID.

    Args:
        session: Database session
        account_id: Account ID
        for_update: Reload from the database even if the account is already
            in the session, and lock the row where the backend supports it.
            Use this inside an account lock before touching the balance.

    Returns:
        Account or None if not found
    """
    query = select(Account).where(Account.id == account_id)
    if for_update:
        query = query.with_for_update().execution_options(populate_existing=True)
    result = await session.execute(query)
    return result.scalar_one_or_none()


async def get_account_by_email(session: AsyncSession, email: str) -> Account | None:
    """Get an account by its (case-insensitive) email."""
    result = await session.execute(
        select(Account).where(Account.email == normalize_email(email))
    )
    return result.scalar_one_or_none()


async def list_accounts(session: AsyncSession) -> list[Account]:
    """Get all accounts, oldest first."""
    result = await session.execute(select(Account).order_by(Account.created_at))
    return list(result.scalars().all())


def debit(account: Account, amount: Decimal) -> Decimal:
    """Take amount out of the account's cash balance.

    Args:
        account: Account to debit
        amount: Non-negative magnitude

    Returns:
        The balance after the debit
    """
    with localcontext(LEDGER_CONTEXT):
        account.cash_balance = account.cash_balance - amount
    if account.cash_balance < 0:
        logger.info(
            "Account overdrawn",
            extra={"account_id": account.id, "cash_balance": float(account.cash_balance)},
        )
    return account.cash_balance


def credit(account: Account, amount: Decimal) -> Decimal:
    """Add amount to the account's cash balance.

    Args:
        account: Account to credit
        amount: Amount to add. Close settlement can make this negative
            when the loss exceeds the closing notional; it is applied as is.

    Returns:
        The balance after the credit
    """
    with localcontext(LEDGER_CONTEXT):
        account.cash_balance = account.cash_balance + amount
    return account.cash_balance
