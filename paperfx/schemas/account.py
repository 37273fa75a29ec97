"""Pydantic schemas for account endpoints."""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel


class AccountInfoResponse(BaseModel):
    """Response schema for account info."""

    id: str
    name: str
    email: str
    cash_balance: Decimal
    equity: Decimal
    open_position_count: int
    created_at: datetime

    model_config = {"from_attributes": True}
