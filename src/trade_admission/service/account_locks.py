"""Per-account serialization of read -> validate -> commit."""

import asyncio
from contextlib import asynccontextmanager
from typing import AsyncIterator


class AccountLockRegistry:
    """Hands out one asyncio.Lock per account id.

    Holding an account's lock across reading its snapshot, validating and
    committing the resulting usage prevents two concurrent requests from
    both passing against the same pre-update drawdown figures.

    A lock lives only while some task holds or waits for it, so the
    registry does not grow with the number of accounts ever seen.
    """

    def __init__(self) -> None:
        self._locks: dict[str, asyncio.Lock] = {}
        self._users: dict[str, int] = {}

    def is_locked(self, account_id: str) -> bool:
        lock = self._locks.get(account_id)
        return lock is not None and lock.locked()

    def __len__(self) -> int:
        return len(self._locks)

    @asynccontextmanager
    async def hold(self, account_id: str) -> AsyncIterator[None]:
        """Hold the account's lock for the duration of the block."""
        lock = self._locks.setdefault(account_id, asyncio.Lock())
        self._users[account_id] = self._users.get(account_id, 0) + 1
        try:
            async with lock:
                yield
        finally:
            self._users[account_id] -= 1
            if not self._users[account_id]:
                del self._users[account_id]
                del self._locks[account_id]
