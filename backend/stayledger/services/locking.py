"""Per-key serialization for ledger writes.

Payments, charges, status changes and checkout on one booking must not
interleave, or a payment could slip past the checkout gate. Inside one
process an ``asyncio.Lock`` per key does that; across processes the row lock
taken by ``SELECT ... FOR UPDATE`` (see ``booking_service``) does. The
transaction is committed *before* the lock is released so the next holder
always reads committed state.
"""

import asyncio
import logging
from collections.abc import AsyncIterator, Hashable
from contextlib import asynccontextmanager

from sqlalchemy.ext.asyncio import AsyncSession

logger = logging.getLogger(__name__)


class KeyedLocks:
    """A lazily-populated ``asyncio.Lock`` per key, dropped when nobody holds or waits."""

    def __init__(self) -> None:
        self._locks: dict[Hashable, asyncio.Lock] = {}
        self._users: dict[Hashable, int] = {}

    def __contains__(self, key: Hashable) -> bool:
        return key in self._locks

    @asynccontextmanager
    async def hold(self, key: Hashable) -> AsyncIterator[None]:
        lock = self._locks.setdefault(key, asyncio.Lock())
        if lock.locked():
            logger.debug("Waiting for lock on %s", key)
        self._users[key] = self._users.get(key, 0) + 1
        try:
            async with lock:
                yield
        finally:
            self._users[key] -= 1
            if self._users[key] == 0:
                del self._users[key]
                del self._locks[key]


booking_locks = KeyedLocks()
unit_locks = KeyedLocks()


@asynccontextmanager
async def serialized(db: AsyncSession, locks: KeyedLocks, key: Hashable) -> AsyncIterator[None]:
    """Hold ``key`` for the duration of the block and commit before letting go.

    Any exception rolls the whole block back, so a rejected operation leaves
    no partial rows behind.
    """
    async with locks.hold(key):
        try:
            yield
            await db.commit()
        except Exception:
            await db.rollback()
            raise
