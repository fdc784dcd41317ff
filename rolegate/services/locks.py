"""
In-process per-principal locks.

Only needed when the store cannot enforce the (principal, role)
uniqueness constraint. Not shared between processes.
"""

import asyncio
import weakref


class PrincipalLocks:
    """
    Registry of asyncio locks keyed by principal.

    Locks are created on first use and dropped once nobody holds a reference.

    Usage:
        locks = PrincipalLocks()
        async with locks.lock("42"):
            ...
    """

    def __init__(self):
        self._locks: weakref.WeakValueDictionary[str, asyncio.Lock] = (
            weakref.WeakValueDictionary()
        )

    def lock(self, principal_id: str) -> asyncio.Lock:
        """Get the lock for a principal."""
        lock = self._locks.get(principal_id)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[principal_id] = lock
        return lock

    def __len__(self) -> int:
        return len(self._locks)
