"""API routers."""

from paperfx.routers.account import router as account_router
from paperfx.routers.auth import router as auth_router
from paperfx.routers.robot import router as robot_router
from paperfx.routers.trades import router as trades_router

__all__ = ["account_router", "auth_router", "robot_router", "trades_router"]
