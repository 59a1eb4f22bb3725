"""Per-owner serialization of order mutations."""

import asyncio
from contextlib import asynccontextmanager
from typing import AsyncIterator, Dict, Hashable


class OwnerLocks:
    """One ``asyncio.Lock`` per owner key, dropped once nobody holds or waits for it.

    Reorders read an order, then shift siblings; holding the owner's lock across
    that read-modify-write keeps concurrent moves from different tabs from
    leaving gaps or duplicates.
    """

    def __init__(self):
        self._locks: Dict[Hashable, asyncio.Lock] = {}
        self._users: Dict[Hashable, int] = {}

    @asynccontextmanager
    async def hold(self, owner: Hashable) -> AsyncIterator[None]:
        lock = self._locks.get(owner)
        if lock is None:
            lock = self._locks[owner] = asyncio.Lock()
        self._users[owner] = self._users.get(owner, 0) + 1
        try:
            async with lock:
                yield
        finally:
            self._users[owner] -= 1
            if self._users[owner] == 0:
                del self._users[owner]
                del self._locks[owner]

    def __len__(self) -> int:
        return len(self._locks)

    def is_locked(self, owner: Hashable) -> bool:
        lock = self._locks.get(owner)
        return lock is not None and lock.locked()


# Shared by every PositionStore in the process.
owner_locks = OwnerLocks()


def get_owner_locks() -> OwnerLocks:
    """Process-wide owner lock registry."""
    return owner_locks
