"""
Database configuration for PaperFX.

Uses async SQLAlchemy with SQLite (local) or any async backend set in
DATABASE_URL. Monetary values are stored as exact decimal text so balances
never pick up floating-point drift, whatever the backend.
"""

import os
from datetime import datetime, UTC
from decimal import Decimal

from sqlalchemy import String
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.types import TypeDecorator

# Database URL from environment, defaults to SQLite for local development
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite+aiosqlite:///./paperfx.db")

# Create async engine
# echo=False by default, set SQLALCHEMY_ECHO=1 to enable SQL logging
engine = create_async_engine(DATABASE_URL, echo=os.getenv("SQLALCHEMY_ECHO") == "1")

# Session factory - creates new database sessions
AsyncSessionLocal = async_sessionmaker(
    bind=engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models."""
    pass


class ExactDecimal(TypeDecorator):
    """Decimal column persisted as its string form.

    SQLite has no native decimal type and would round-trip Numeric through
    float; storing text keeps every digit.
    """

    impl = String(128)
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is None:
            return None
        return str(Decimal(value))

    def process_result_value(self, value, dialect):
        if value is None:
            return None
        return Decimal(value)


def utcnow() -> datetime:
    """Naive UTC timestamp, matching what DateTime columns store."""
    return datetime.now(UTC).replace(tzinfo=None)


async def init_db() -> None:
    """Create all database tables.

    Called on application startup to ensure tables exist.
    In production, you'd use Alembic migrations instead.
    """
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def get_session() -> AsyncSession:
    """Dependency that provides a database session.

    Usage in FastAPI:
        @app.get("/example")
        async def example(session: AsyncSession = Depends(get_session)):
            ...
    """
    async with AsyncSessionLocal() as session:
        yield session
