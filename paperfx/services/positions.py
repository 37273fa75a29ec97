"""Position lifecycle - opening, closing and listing simulated trades.

Settlement rules:
1. Opening reserves the full notional: the account is debited
   volume * entry_price.
2. Closing realizes P&L by side:
   BUY:  (close_price - entry_price) * volume
   SELL: (entry_price - close_price) * volume
3. Closing credits volume * close_price + pnl.
4. A trade closes exactly once; closing it again is a NotFoundError.

The functions that mutate an account expect the caller to hold that
account's lock (see paperfx.locks) and to pass an Account loaded inside it.
Each commits its own changes so the trade and the balance move together.
"""

import logging
import uuid
from dataclasses import dataclass
from decimal import Decimal, localcontext

from sqlalchemy import and_, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from paperfx import telemetry
from paperfx.database import utcnow
from paperfx.errors import InvariantViolation, NotFoundError, ValidationError
from paperfx.models import Account, Trade, TradeSide, TradeStatus
from paperfx.money import LEDGER_CONTEXT, to_decimal
from paperfx.services import ledger

logger = logging.getLogger(__name__)


@dataclass
class PositionOpened:
    """Result of opening a position."""

    trade: Trade
    balance: Decimal


@dataclass
class PositionClosed:
    """Result of closing a position."""

    trade: Trade
    realized_pnl: Decimal
    balance: Decimal


def generate_trade_id() -> str:
    """Generate a unique trade ID."""
    return str(uuid.uuid4())


def _positive(value, field: str) -> Decimal:
    amount = to_decimal(value, field)
    if amount <= 0:
        raise ValidationError(f"{field} must be greater than 0")
    return amount


def _parse_side(side) -> TradeSide:
    if isinstance(side, TradeSide):
        return side
    value = getattr(side, "value", side)
    try:
        return TradeSide(str(value).upper())
    except ValueError:
        raise ValidationError(f"side must be BUY or SELL, got {value!r}")


def calculate_pnl(
    side: TradeSide, entry_price: Decimal, close_price: Decimal, volume: Decimal
) -> Decimal:
    """Realized profit/loss of closing a position.

    BUY profits when price rises, SELL profits when price falls.
    """
    with localcontext(LEDGER_CONTEXT):
        if side == TradeSide.BUY:
            return (close_price - entry_price) * volume
        return (entry_price - close_price) * volume


async def open_position(
    session: AsyncSession,
    account: Account,
    side: TradeSide | str,
    symbol: str,
    volume,
    entry_price,
    stop_loss=None,
    take_profit=None,
) -> PositionOpened:
    """Open a position and reserve its notional.

    Args:
        session: Database session
        account: Owning account, loaded under its lock
        side: BUY or SELL
        symbol: Instrument identifier
        volume: Position size (> 0)
        entry_price: Price at open (> 0)
        stop_loss: Optional advisory stop level (> 0)
        take_profit: Optional advisory target level (> 0)

    Returns:
        The new trade and the balance after the debit

    Raises:
        ValidationError: If any input is missing or out of range
    """
    trade_side = _parse_side(side)
    if not isinstance(symbol, str) or not symbol.strip():
        raise ValidationError("symbol must be a non-empty string")
    volume = _positive(volume, "volume")
    entry_price = _positive(entry_price, "entry_price")
    if stop_loss is not None:
        stop_loss = _positive(stop_loss, "stop_loss")
    if take_profit is not None:
        take_profit = _positive(take_profit, "take_profit")

    trade = Trade(
        id=generate_trade_id(),
        account_id=account.id,
        side=trade_side,
        symbol=symbol.strip(),
        volume=volume,
        entry_price=entry_price,
        stop_loss=stop_loss,
        take_profit=take_profit,
        status=TradeStatus.OPEN,
        opened_at=utcnow(),
    )
    # Trade and debit share one commit
    session.add(trade)
    balance = ledger.debit(account, trade.notional)
    await session.commit()

    telemetry.record_position_opened(trade.symbol, trade_side.value, trade.notional)
    logger.info(
        "Position opened",
        extra={
            "account_id": account.id,
            "trade_id": trade.id,
            "symbol": trade.symbol,
            "side": trade_side.value,
            "volume": float(volume),
            "entry_price": float(entry_price),
            "cash_balance": float(balance),
        },
    )

    return PositionOpened(trade=trade, balance=balance)


async def get_open_trade(
    session: AsyncSession, account_id: str, trade_id: str
) -> Trade | None:
    """Get an open trade owned by the account.

    Returns:
        Trade or None if unknown, owned by someone else, or already closed
    """
    result = await session.execute(
        select(Trade)
        .where(
            and_(
                Trade.id == trade_id,
                Trade.account_id == account_id,
                Trade.status == TradeStatus.OPEN,
            )
        )
        .execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()


async def close_position(
    session: AsyncSession,
    account: Account,
    trade_id: str,
    close_price,
) -> PositionClosed:
    """Close an open position at close_price and settle it.

    Args:
        session: Database session
        account: Owning account, loaded under its lock
        trade_id: ID of a currently open trade of this account
        close_price: Price at close (> 0)

    Returns:
        The closed trade, its realized P&L and the balance after the credit

    Raises:
        ValidationError: If close_price is not positive
        NotFoundError: If the trade is not open for this account
    """
    close_price = _positive(close_price, "close_price")

    trade = await get_open_trade(session, account.id, trade_id)
    if trade is None:
        raise NotFoundError(f"Trade '{trade_id}' not found")

    pnl = calculate_pnl(trade.side, trade.entry_price, close_price, trade.volume)

    closed_count = await session.scalar(
        select(func.count())
        .select_from(Trade)
        .where(
            and_(
                Trade.account_id == account.id,
                Trade.status == TradeStatus.CLOSED,
            )
        )
    )

    trade.status = TradeStatus.CLOSED
    trade.close_price = close_price
    trade.closed_at = utcnow()
    trade.realized_pnl = pnl
    trade.close_sequence = closed_count + 1

    with localcontext(LEDGER_CONTEXT):
        settlement = trade.volume * close_price + pnl
    balance = ledger.credit(account, settlement)
    await session.commit()

    telemetry.record_position_closed(trade.symbol, trade.side.value, pnl)
    logger.info(
        "Position closed",
        extra={
            "account_id": account.id,
            "trade_id": trade.id,
            "symbol": trade.symbol,
            "side": trade.side.value,
            "close_price": float(close_price),
            "realized_pnl": float(pnl),
            "cash_balance": float(balance),
        },
    )

    return PositionClosed(trade=trade, realized_pnl=pnl, balance=balance)


async def list_open(session: AsyncSession, account_id: str) -> list[Trade]:
    """Get the account's open positions, oldest first.

    Raises:
        InvariantViolation: If an open row carries settlement fields
    """
    result = await session.execute(
        select(Trade)
        .where(and_(Trade.account_id == account_id, Trade.status == TradeStatus.OPEN))
        .order_by(Trade.opened_at, Trade.id)
    )
    trades = list(result.scalars().all())

    for trade in trades:
        if trade.closed_at is not None or trade.close_sequence is not None:
            logger.critical(
                "Open trade carries close fields",
                extra={"account_id": account_id, "trade_id": trade.id},
            )
            raise InvariantViolation(f"Trade '{trade.id}' is both open and closed")

    return trades


async def list_history(session: AsyncSession, account_id: str) -> list[Trade]:
    """Get the account's closed positions in the order they were closed."""
    result = await session.execute(
        select(Trade)
        .where(
            and_(Trade.account_id == account_id, Trade.status == TradeStatus.CLOSED)
        )
        .order_by(Trade.close_sequence)
    )
    return list(result.scalars().all())


async def count_open(session: AsyncSession, account_id: str) -> int:
    """Number of open positions for an account."""
    result = await session.scalar(
        select(func.count())
        .select_from(Trade)
        .where(and_(Trade.account_id == account_id, Trade.status == TradeStatus.OPEN))
    )
    return int(result or 0)
