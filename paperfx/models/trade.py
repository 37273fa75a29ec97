"""
Trade model - a simulated position and, once closed, its settlement.

Open and closed positions share one table partitioned by status. A trade
moves from OPEN to CLOSED exactly once; closed rows are never modified
again.
"""

import enum
from datetime import datetime
from decimal import Decimal, localcontext

from sqlalchemy import DateTime, Enum, ForeignKey, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from paperfx.database import Base, ExactDecimal, utcnow
from paperfx.money import LEDGER_CONTEXT


class TradeSide(enum.Enum):
    """Direction of the position."""

    BUY = "BUY"  # Profits when price rises
    SELL = "SELL"  # Profits when price falls


class TradeStatus(enum.Enum):
    """Position lifecycle status."""

    OPEN = "OPEN"
    CLOSED = "CLOSED"  # Terminal


class Trade(Base):
    """A simulated position owned by one account."""

    __tablename__ = "trades"

    # Primary key: unique trade identifier
    id: Mapped[str] = mapped_column(String, primary_key=True)

    # Owner, fixed at creation
    account_id: Mapped[str] = mapped_column(
        String, ForeignKey("accounts.id"), nullable=False
    )

    side: Mapped[TradeSide] = mapped_column(Enum(TradeSide), nullable=False)

    # Opaque instrument identifier, e.g. EURUSD
    symbol: Mapped[str] = mapped_column(String(64), nullable=False)

    volume: Mapped[Decimal] = mapped_column(ExactDecimal, nullable=False)
    entry_price: Mapped[Decimal] = mapped_column(ExactDecimal, nullable=False)

    # Advisory only, nothing monitors prices against these
    stop_loss: Mapped[Decimal | None] = mapped_column(ExactDecimal, nullable=True)
    take_profit: Mapped[Decimal | None] = mapped_column(ExactDecimal, nullable=True)

    status: Mapped[TradeStatus] = mapped_column(
        Enum(TradeStatus), nullable=False, default=TradeStatus.OPEN
    )

    opened_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=utcnow
    )

    # Settlement fields, NULL while open
    close_price: Mapped[Decimal | None] = mapped_column(ExactDecimal, nullable=True)
    closed_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)
    realized_pnl: Mapped[Decimal | None] = mapped_column(ExactDecimal, nullable=True)

    # 1-based position in the owner's history (close order)
    close_sequence: Mapped[int | None] = mapped_column(Integer, nullable=True)

    account: Mapped["Account"] = relationship(back_populates="trades")

    __table_args__ = (
        Index("ix_trades_account_status", "account_id", "status"),
    )

    @property
    def notional(self) -> Decimal:
        """Cash-equivalent size at entry (volume * entry price)."""
        with localcontext(LEDGER_CONTEXT):
            return self.volume * self.entry_price

    def __repr__(self) -> str:
        return (
            f"Trade(id={self.id!r}, {self.side.value} {self.volume} {self.symbol} "
            f"@ {self.entry_price}, status={self.status.value})"
        )


# Import at end to avoid circular imports
from paperfx.models.account import Account
