"""Pydantic schemas for request/response validation."""

from paperfx.schemas.account import AccountInfoResponse
from paperfx.schemas.auth import (
    AuthResponse,
    LoginRequest,
    RegisterRequest,
    RegisterResponse,
    UserSummary,
)
from paperfx.schemas.robot import RobotConfigBody, RobotConfigResponse
from paperfx.schemas.trade import (
    OrderCreate,
    PositionClose,
    PositionClosedResponse,
    PositionCreate,
    PositionOpenedResponse,
    TradeListResponse,
    TradeResponse,
    TradeSide,
    TradeStatus,
)

__all__ = [
    # Auth schemas
    "RegisterRequest",
    "RegisterResponse",
    "LoginRequest",
    "AuthResponse",
    "UserSummary",
    # Account schemas
    "AccountInfoResponse",
    # Trade schemas
    "PositionCreate",
    "OrderCreate",
    "PositionClose",
    "TradeResponse",
    "PositionOpenedResponse",
    "PositionClosedResponse",
    "TradeListResponse",
    "TradeSide",
    "TradeStatus",
    # Robot schemas
    "RobotConfigBody",
    "RobotConfigResponse",
]
