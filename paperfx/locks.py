"""Per-account mutual exclusion.

Every mutation of an account (opening or closing a position, writing its
robot config) runs while holding that account's lock. Locks of different
accounts are independent, so unrelated accounts proceed in parallel.
"""

import asyncio
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager


class AccountLocks:
    """Lazily created asyncio.Lock per account id."""

    def __init__(self) -> None:
        self._locks: dict[str, asyncio.Lock] = {}

    def get(self, account_id: str) -> asyncio.Lock:
        """Return the lock for an account, creating it on first use.

        No await between lookup and insert, so two coroutines can never
        create different locks for the same account.
        """
        lock = self._locks.get(account_id)
        if lock is None:
            lock = self._locks[account_id] = asyncio.Lock()
        return lock

    @asynccontextmanager
    async def hold(self, account_id: str) -> AsyncIterator[None]:
        """Serialize the enclosed block against other holders of this account."""
        async with self.get(account_id):
            yield

    def is_locked(self, account_id: str) -> bool:
        lock = self._locks.get(account_id)
        return lock is not None and lock.locked()

    def __len__(self) -> int:
        return len(self._locks)


# Process-wide registry; accounts live for the process lifetime
account_locks = AccountLocks()
