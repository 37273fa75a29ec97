"""
Account model - one simulated trading account per registered user.

The account holds the cash ledger. Balances may go negative: the simulation
reserves full notional on open and never rejects an order for lack of cash.
"""

from datetime import datetime
from decimal import Decimal

from sqlalchemy import DateTime, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from paperfx.database import Base, ExactDecimal, utcnow


class Account(Base):
    """A user's simulated trading account."""

    __tablename__ = "accounts"

    # Primary key: opaque unique account identifier (uuid4)
    id: Mapped[str] = mapped_column(String, primary_key=True)

    name: Mapped[str] = mapped_column(String(255), nullable=False)

    # Login identity, normalized to lower case
    email: Mapped[str] = mapped_column(String(320), nullable=False, unique=True)

    # Salted credential hash, see paperfx.auth.hash_credential
    credential_hash: Mapped[str] = mapped_column(String(255), nullable=False)

    # Cash ledger; only debit/credit in services.ledger change it
    cash_balance: Mapped[Decimal] = mapped_column(
        ExactDecimal, nullable=False, default=Decimal("0.00")
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=utcnow
    )

    # Relationships
    trades: Mapped[list["Trade"]] = relationship(back_populates="account")
    robot_config: Mapped["RobotConfig"] = relationship(
        back_populates="account", uselist=False
    )
    session_tokens: Mapped[list["SessionToken"]] = relationship(
        back_populates="account"
    )

    @property
    def equity(self) -> Decimal:
        """Equity without mark-to-market: identical to the cash balance."""
        return self.cash_balance

    def __repr__(self) -> str:
        return f"Account(id={self.id!r}, email={self.email!r}, cash_balance={self.cash_balance})"


# Import at end to avoid circular imports
from paperfx.models.robot_config import RobotConfig
from paperfx.models.session_token import SessionToken
from paperfx.models.trade import Trade
