"""
Per-service mutual exclusion for reconciliation.
"""

import asyncio
from contextlib import asynccontextmanager
from typing import AsyncIterator, Dict


class ServiceLocks:
    """
    One asyncio.Lock per service name.

    Reconciliations of the same service queue behind each other; different
    services never contend. Scope is a single process and event loop.
    An entry lives only while someone holds or waits on it.
    """

    def __init__(self) -> None:
        self._locks: Dict[str, asyncio.Lock] = {}
        self._holders: Dict[str, int] = {}

    def __len__(self) -> int:
        return len(self._locks)

    @asynccontextmanager
    async def hold(self, service: str) -> AsyncIterator[None]:
        lock = self._locks.setdefault(service, asyncio.Lock())
        self._holders[service] = self._holders.get(service, 0) + 1
        try:
            async with lock:
                yield
        finally:
            self._holders[service] -= 1
            if self._holders[service] == 0:
                del self._holders[service]
                del self._locks[service]

    def locked(self, service: str) -> bool:
        lock = self._locks.get(service)
        return lock is not None and lock.locked()


_default_locks = ServiceLocks()


def get_service_locks() -> ServiceLocks:
    """Process-wide lock registry used by the API."""
    return _default_locks
