"""
Per-event serialization of capacity changes.

Confirming, auto-confirming and cancelling participation requests all read the
event's confirmed count, decide, then write the recounted value back. Two such
sequences for the same event must not interleave inside one process, so each
runs while holding the event's lock. Across processes the row lock taken by
the request service (SELECT ... FOR UPDATE on PostgreSQL) does the same job.
"""

import threading
from contextlib import contextmanager
from typing import Dict, Iterator, Optional


class EventLockRegistry:
    """
    Registry of one threading.Lock per event id.

    Thread Safety:
        The registry itself is guarded by a lock; per-event locks are created
        lazily and never removed, so the same event always maps to the same
        lock object.

    Usage:
        registry = get_event_lock_registry()
        with registry.hold(event.id):
            ...  # check vacancy, update requests, recount, commit
    """

    def __init__(self):
        self._locks: Dict[int, threading.Lock] = {}
        self._lock = threading.Lock()

    def get_lock(self, event_id: int) -> threading.Lock:
        """Return the lock for an event, creating it on first use."""
        with self._lock:
            lock = self._locks.get(event_id)
            if lock is None:
                lock = threading.Lock()
                self._locks[event_id] = lock
            return lock

    @contextmanager
    def hold(self, event_id: int) -> Iterator[None]:
        """Hold the event's lock for the duration of the block."""
        lock = self.get_lock(event_id)
        with lock:
            yield

    def __len__(self) -> int:
        with self._lock:
            return len(self._locks)


# Singleton instance shared by all request handlers
_registry_instance: Optional[EventLockRegistry] = None
_registry_guard = threading.Lock()


def get_event_lock_registry() -> EventLockRegistry:
    """
    Get or create the singleton EventLockRegistry instance.

    Returns:
        EventLockRegistry: Singleton instance
    """
    global _registry_instance

    with _registry_guard:
        if _registry_instance is None:
            _registry_instance = EventLockRegistry()
        return _registry_instance
