"""
SessionToken model - bearer tokens issued at registration and login.

Only the SHA-256 hash of a token is stored; the plain token is returned to
the caller once and cannot be recovered.
"""

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from paperfx.database import Base, utcnow


class SessionToken(Base):
    """An issued session token bound to one account."""

    __tablename__ = "session_tokens"

    # SHA-256 hex digest of the bearer token
    token_hash: Mapped[str] = mapped_column(String(64), primary_key=True)

    account_id: Mapped[str] = mapped_column(
        String, ForeignKey("accounts.id"), nullable=False, index=True
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=utcnow
    )
    expires_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)

    account: Mapped["Account"] = relationship(back_populates="session_tokens")

    def __repr__(self) -> str:
        return f"SessionToken(account={self.account_id!r}, expires_at={self.expires_at})"


# Import at end to avoid circular imports
from paperfx.models.account import Account
