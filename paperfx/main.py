"""
FastAPI application entry point.

Run with: uvicorn paperfx.main:app --reload
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from paperfx._version import VERSION
from paperfx.database import init_db
from paperfx.errors import InvariantViolation, PaperFXError

# Import models to ensure they're registered with SQLAlchemy
from paperfx.models import Account, RobotConfig, SessionToken, Trade  # noqa: F401
from paperfx.routers import account_router, auth_router, robot_router, trades_router
from paperfx import telemetry

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create missing tables and start telemetry before serving requests."""
    await init_db()
    logger.info("Database initialized")

    if telemetry.setup_telemetry():
        root = logging.getLogger()
        root.addHandler(telemetry.get_log_handler())
        root.setLevel(logging.INFO)
        logger.info("Telemetry initialized (OTLP metrics + logs enabled)")
    else:
        logger.info("Telemetry disabled")

    yield

    logger.info("Application shutting down")


app = FastAPI(
    title="PaperFX API",
    description="Simulated forex trading accounts with P&L settlement",
    version=VERSION,
    lifespan=lifespan,
)


@app.exception_handler(PaperFXError)
async def paperfx_error_handler(request: Request, exc: PaperFXError) -> JSONResponse:
    """Translate domain errors raised by services into HTTP responses."""
    if isinstance(exc, InvariantViolation):
        logger.critical(
            "Invariant violation",
            extra={"path": request.url.path, "detail": exc.detail},
        )
        return JSONResponse(
            status_code=exc.status_code,
            content={"detail": "Internal consistency error"},
        )

    headers = {"WWW-Authenticate": "Bearer"} if exc.status_code == 401 else None
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail},
        headers=headers,
    )


# Register routers
app.include_router(auth_router, prefix="/api/auth", tags=["auth"])
app.include_router(account_router, prefix="/api/account", tags=["account"])
app.include_router(trades_router, prefix="/api/trade", tags=["trading"])
app.include_router(robot_router, prefix="/api/robot", tags=["robot"])


@app.get("/")
async def root():
    """Service banner with the endpoint index."""
    return {
        "message": "PaperFX Trading API",
        "status": "Online",
        "version": VERSION,
        "endpoints": {
            "auth": ["/api/auth/register", "/api/auth/login"],
            "account": ["/api/account/info"],
            "trading": [
                "/api/trade/buy",
                "/api/trade/sell",
                "/api/trade/orders",
                "/api/trade/open",
                "/api/trade/close/{trade_id}",
                "/api/trade/history",
            ],
            "robot": ["/api/robot/config"],
        },
    }


@app.get("/health")
async def health_check():
    """Liveness probe."""
    return {"status": "ok"}


@app.get("/api/version")
async def get_version():
    """API and build version."""
    return {
        "version": VERSION,
        "api_version": "v1",
    }
