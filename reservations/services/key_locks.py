"""Per-key mutual exclusion for admissions and decisions."""

from __future__ import annotations
from tracking import t

import asyncio
from contextlib import asynccontextmanager
from typing import AsyncIterator, Dict, Hashable, Tuple


class KeyedLockTable:
    """Hand out one ``asyncio.Lock`` per key.

    Entries are created on first use and dropped once no task holds or waits
    on them, so the table stays proportional to the keys in flight.
    """

    def __init__(self) -> None:
        t('reservations.services.key_locks.KeyedLockTable.__init__')
        self._locks: Dict[Tuple[Hashable, ...], asyncio.Lock] = {}
        self._users: Dict[Tuple[Hashable, ...], int] = {}

    @asynccontextmanager
    async def hold(self, *key: Hashable) -> AsyncIterator[None]:
        """Hold the lock for ``key`` for the duration of the ``async with`` block."""
        t('reservations.services.key_locks.KeyedLockTable.hold')
        lock = self._locks.get(key)
        if lock is None:
            lock = self._locks[key] = asyncio.Lock()
        self._users[key] = self._users.get(key, 0) + 1
        try:
            async with lock:
                yield
        finally:
            remaining = self._users[key] - 1
            if remaining:
                self._users[key] = remaining
            else:
                del self._users[key]
                del self._locks[key]

    def is_held(self, *key: Hashable) -> bool:
        lock = self._locks.get(key)
        return bool(lock and lock.locked())

    def __len__(self) -> int:
        return len(self._locks)


__all__ = ["KeyedLockTable"]
