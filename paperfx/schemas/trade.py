"""Pydantic schemas for trade endpoints."""

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Annotated

from pydantic import BaseModel, Field

from paperfx.money import MAX_AMOUNT, MAX_DECIMAL_PLACES

# Same bounds as paperfx.money.to_decimal applies in the services
Amount = Annotated[
    Decimal, Field(gt=0, lt=MAX_AMOUNT, decimal_places=MAX_DECIMAL_PLACES)
]


# ============================================================================
# Enums (matching model enums)
# ============================================================================


class TradeSide(str, Enum):
    """Buy or sell."""

    BUY = "BUY"
    SELL = "SELL"


class TradeStatus(str, Enum):
    """Position status."""

    OPEN = "OPEN"
    CLOSED = "CLOSED"


# ============================================================================
# Requests
# ============================================================================


class PositionCreate(BaseModel):
    """Request schema for /trade/buy and /trade/sell (side comes from the route)."""

    symbol: str = Field(..., min_length=1, max_length=64, description="Instrument, e.g. EURUSD")
    volume: Amount = Field(..., description="Position size")
    entry_price: Amount = Field(..., description="Price at open")
    stop_loss: Amount | None = Field(default=None, description="Advisory stop level")
    take_profit: Amount | None = Field(default=None, description="Advisory target level")


class OrderCreate(PositionCreate):
    """Request schema for placing an order with an explicit side."""

    side: TradeSide = Field(..., description="BUY or SELL")


class PositionClose(BaseModel):
    """Request schema for closing a position."""

    close_price: Amount = Field(..., description="Price at close")


# ============================================================================
# Responses
# ============================================================================


class TradeResponse(BaseModel):
    """Response schema for trade data."""

    id: str
    side: TradeSide
    symbol: str
    volume: Decimal
    entry_price: Decimal
    stop_loss: Decimal | None = None
    take_profit: Decimal | None = None
    status: TradeStatus
    opened_at: datetime
    close_price: Decimal | None = None
    closed_at: datetime | None = None
    realized_pnl: Decimal | None = None

    model_config = {"from_attributes": True}


class PositionOpenedResponse(BaseModel):
    """Response for opening a position."""

    trade: TradeResponse
    cash_balance: Decimal = Field(..., description="Balance after the notional debit")


class PositionClosedResponse(BaseModel):
    """Response for closing a position."""

    trade: TradeResponse
    realized_pnl: Decimal
    cash_balance: Decimal = Field(..., description="Balance after settlement")


class TradeListResponse(BaseModel):
    """Response for listing trades."""

    trades: list[TradeResponse] = Field(default_factory=list)
    count: int = 0
