"""
RobotConfig model - strategy parameters for an account's trading robot.

At most one row per account (the account id is the primary key). Writes
replace every field; there is no partial update.
"""

from datetime import datetime
from decimal import Decimal

from sqlalchemy import DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from paperfx.database import Base, ExactDecimal, utcnow


class RobotConfig(Base):
    """Moving-average/RSI robot parameters for one account."""

    __tablename__ = "robot_configs"

    account_id: Mapped[str] = mapped_column(
        String, ForeignKey("accounts.id"), primary_key=True
    )

    fast_ma: Mapped[int] = mapped_column(Integer, nullable=False)
    slow_ma: Mapped[int] = mapped_column(Integer, nullable=False)
    rsi_period: Mapped[int] = mapped_column(Integer, nullable=False)
    lot_size: Mapped[Decimal] = mapped_column(ExactDecimal, nullable=False)
    max_positions: Mapped[int] = mapped_column(Integer, nullable=False)
    risk_percent: Mapped[Decimal] = mapped_column(ExactDecimal, nullable=False)

    # Stamped on every write
    created_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=utcnow
    )

    account: Mapped["Account"] = relationship(back_populates="robot_config")

    def __repr__(self) -> str:
        return (
            f"RobotConfig(account={self.account_id!r}, fast_ma={self.fast_ma}, "
            f"slow_ma={self.slow_ma}, rsi_period={self.rsi_period})"
        )


# Import at end to avoid circular imports
from paperfx.models.account import Account
