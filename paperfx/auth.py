"""Authentication - credential hashing and bearer session tokens.

Credentials are stored as salted PBKDF2 hashes. Sessions are opaque random
tokens; only their SHA-256 hash is persisted, bound to the account that
logged in, and they expire after PAPERFX_TOKEN_TTL_DAYS days.
"""

import hashlib
import hmac
import os
import secrets
from datetime import timedelta

from fastapi import Depends, HTTPException, Security, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from paperfx.database import get_session, utcnow
from paperfx.models import Account, SessionToken

TOKEN_TTL_DAYS = int(os.getenv("PAPERFX_TOKEN_TTL_DAYS", "30"))

PBKDF2_ITERATIONS = 260_000

# Bearer token header scheme
bearer_scheme = HTTPBearer(auto_error=False)


def hash_credential(credential: str) -> str:
    """Hash a credential for storage.

    Returns:
        "pbkdf2_sha256$<iterations>$<salt hex>$<hash hex>"
    """
    salt = secrets.token_bytes(16)
    digest = hashlib.pbkdf2_hmac(
        "sha256", credential.encode(), salt, PBKDF2_ITERATIONS
    )
    return f"pbkdf2_sha256${PBKDF2_ITERATIONS}${salt.hex()}${digest.hex()}"


def verify_credential(credential: str, stored_hash: str) -> bool:
    """Check a credential against a hash from hash_credential()."""
    try:
        algorithm, iterations, salt_hex, digest_hex = stored_hash.split("$")
    except ValueError:
        return False
    if algorithm != "pbkdf2_sha256":
        return False

    digest = hashlib.pbkdf2_hmac(
        "sha256", credential.encode(), bytes.fromhex(salt_hex), int(iterations)
    )
    return hmac.compare_digest(digest.hex(), digest_hex)


def generate_token() -> str:
    """Generate a session token.

    Returns:
        A URL-safe random string (pfx_ prefix + 43 characters)
    """
    return f"pfx_{secrets.token_urlsafe(32)}"


def hash_token(token: str) -> str:
    """SHA-256 hash of a session token (64 hex characters)."""
    return hashlib.sha256(token.encode()).hexdigest()


async def issue_token(session: AsyncSession, account: Account) -> str:
    """Create a session token for an account.

    The token row is added to the session; the caller commits.

    Returns:
        The plain token. It is not stored and cannot be retrieved later.
    """
    token = generate_token()
    now = utcnow()
    session.add(
        SessionToken(
            token_hash=hash_token(token),
            account_id=account.id,
            created_at=now,
            expires_at=now + timedelta(days=TOKEN_TTL_DAYS),
        )
    )
    return token


async def resolve_token(session: AsyncSession, token: str) -> Account | None:
    """Map a bearer token to its account.

    Returns:
        The account, or None if the token is unknown or expired
    """
    result = await session.execute(
        select(Account)
        .join(SessionToken, SessionToken.account_id == Account.id)
        .where(
            SessionToken.token_hash == hash_token(token),
            SessionToken.expires_at > utcnow(),
        )
    )
    return result.scalar_one_or_none()


async def get_current_account(
    credentials: HTTPAuthorizationCredentials | None = Security(bearer_scheme),
    session: AsyncSession = Depends(get_session),
) -> Account:
    """Validate the bearer token and return the associated account.

    Raises:
        HTTPException: If the token is missing, unknown or expired
    """
    if credentials is None or not credentials.credentials:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="No token provided",
            headers={"WWW-Authenticate": "Bearer"},
        )

    account = await resolve_token(session, credentials.credentials)
    if account is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token",
            headers={"WWW-Authenticate": "Bearer"},
        )

    return account
