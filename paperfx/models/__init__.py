"""
SQLAlchemy models for PaperFX.

This module exports all models and the Base class for easy imports:
    from paperfx.models import Base, Account, Trade, RobotConfig, SessionToken
"""

from paperfx.database import Base
from paperfx.models.account import Account
from paperfx.models.trade import Trade, TradeSide, TradeStatus
from paperfx.models.robot_config import RobotConfig
from paperfx.models.session_token import SessionToken

__all__ = [
    "Base",
    "Account",
    "Trade",
    "TradeSide",
    "TradeStatus",
    "RobotConfig",
    "SessionToken",
]
