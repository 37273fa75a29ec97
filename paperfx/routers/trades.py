"""Trading endpoints - requires authentication."""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from paperfx.auth import get_current_account
from paperfx.database import get_session
from paperfx.models import Account, Trade, TradeSide
from paperfx.schemas.trade import (
    OrderCreate,
    PositionClose,
    PositionClosedResponse,
    PositionCreate,
    PositionOpenedResponse,
    TradeListResponse,
    TradeResponse,
)
from paperfx.services import accounts as account_service

router = APIRouter()


def _trade_response(trade: Trade) -> TradeResponse:
    return TradeResponse(
        id=trade.id,
        side=trade.side.value,
        symbol=trade.symbol,
        volume=trade.volume,
        entry_price=trade.entry_price,
        stop_loss=trade.stop_loss,
        take_profit=trade.take_profit,
        status=trade.status.value,
        opened_at=trade.opened_at,
        close_price=trade.close_price,
        closed_at=trade.closed_at,
        realized_pnl=trade.realized_pnl,
    )


async def _open(
    session: AsyncSession, account: Account, side: TradeSide, data: PositionCreate
) -> PositionOpenedResponse:
    result = await account_service.open_position(
        session,
        account.id,
        side,
        data.symbol,
        data.volume,
        data.entry_price,
        stop_loss=data.stop_loss,
        take_profit=data.take_profit,
    )
    return PositionOpenedResponse(
        trade=_trade_response(result.trade),
        cash_balance=result.balance,
    )


# ============================================================================
# Opening positions
# ============================================================================


@router.post(
    "/buy",
    response_model=PositionOpenedResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Open a BUY position",
)
async def buy(
    data: PositionCreate,
    account: Account = Depends(get_current_account),
    session: AsyncSession = Depends(get_session),
) -> PositionOpenedResponse:
    """Open a BUY position at entry_price.

    The full notional (volume * entry_price) is debited from cash.
    """
    return await _open(session, account, TradeSide.BUY, data)


@router.post(
    "/sell",
    response_model=PositionOpenedResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Open a SELL position",
)
async def sell(
    data: PositionCreate,
    account: Account = Depends(get_current_account),
    session: AsyncSession = Depends(get_session),
) -> PositionOpenedResponse:
    """Open a SELL position at entry_price.

    The full notional (volume * entry_price) is debited from cash.
    """
    return await _open(session, account, TradeSide.SELL, data)


@router.post(
    "/orders",
    response_model=PositionOpenedResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Open a position",
)
async def place_order(
    data: OrderCreate,
    account: Account = Depends(get_current_account),
    session: AsyncSession = Depends(get_session),
) -> PositionOpenedResponse:
    """Open a position with the side given in the request body.

    - **side**: BUY or SELL
    - **symbol**: Instrument identifier
    - **volume**: Position size
    - **entry_price**: Price at open
    - **stop_loss** / **take_profit**: Optional, recorded but not enforced
    """
    return await _open(session, account, TradeSide[data.side.value], data)


# ============================================================================
# Closing and listing
# ============================================================================


@router.post(
    "/close/{trade_id}",
    response_model=PositionClosedResponse,
    summary="Close a position",
)
async def close_trade(
    trade_id: str,
    data: PositionClose,
    account: Account = Depends(get_current_account),
    session: AsyncSession = Depends(get_session),
) -> PositionClosedResponse:
    """Close an open position at close_price.

    Realized P&L is (close - entry) * volume for BUY and
    (entry - close) * volume for SELL. Cash is credited with
    volume * close_price + P&L. A trade can only be closed once.
    """
    result = await account_service.close_position(
        session, account.id, trade_id, data.close_price
    )
    return PositionClosedResponse(
        trade=_trade_response(result.trade),
        realized_pnl=result.realized_pnl,
        cash_balance=result.balance,
    )


@router.get(
    "/open",
    response_model=TradeListResponse,
    summary="List my open positions",
)
async def list_open(
    account: Account = Depends(get_current_account),
    session: AsyncSession = Depends(get_session),
) -> TradeListResponse:
    """Get all open positions, oldest first."""
    trades = await account_service.list_open_positions(session, account.id)
    return TradeListResponse(
        trades=[_trade_response(t) for t in trades],
        count=len(trades),
    )


@router.get(
    "/history",
    response_model=TradeListResponse,
    summary="List my closed positions",
)
async def list_history(
    account: Account = Depends(get_current_account),
    session: AsyncSession = Depends(get_session),
) -> TradeListResponse:
    """Get closed positions in the order they were closed."""
    trades = await account_service.list_history(session, account.id)
    return TradeListResponse(
        trades=[_trade_response(t) for t in trades],
        count=len(trades),
    )
