"""Pydantic schemas for robot config endpoints.

Field names on the wire keep the camelCase keys trading robots expect
(fastMA, slowMA, ...).
"""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, Field

from paperfx.money import MAX_AMOUNT, MAX_DECIMAL_PLACES

MAX_COUNT = int(MAX_AMOUNT)


class RobotConfigBody(BaseModel):
    """Robot parameters, all required and positive."""

    fast_ma: int = Field(..., gt=0, lt=MAX_COUNT, alias="fastMA")
    slow_ma: int = Field(..., gt=0, lt=MAX_COUNT, alias="slowMA")
    rsi_period: int = Field(..., gt=0, lt=MAX_COUNT, alias="rsiPeriod")
    lot_size: Decimal = Field(
        ..., gt=0, lt=MAX_AMOUNT, decimal_places=MAX_DECIMAL_PLACES, alias="lotSize"
    )
    max_positions: int = Field(..., gt=0, lt=MAX_COUNT, alias="maxPositions")
    risk_percent: Decimal = Field(
        ..., gt=0, lt=MAX_AMOUNT, decimal_places=MAX_DECIMAL_PLACES, alias="riskPercent"
    )

    model_config = {"populate_by_name": True}


class RobotConfigResponse(RobotConfigBody):
    """Stored or default robot config."""

    created_at: datetime | None = Field(default=None, alias="createdAt")
    is_default: bool = Field(default=False, alias="isDefault")

    model_config = {"populate_by_name": True, "from_attributes": True}
