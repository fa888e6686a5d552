"""
Per-studio mutual exclusion for booking creation.

Booking creation reads existing reservations, runs the conflict check and
inserts the new row. Two requests for the same studio must never interleave
those steps. Inside one process this lock serializes them; across processes
the repository additionally takes a row lock on the studio (SELECT ... FOR
UPDATE) within the same transaction.

The lock scope is the whole studio rather than (studio, room) because a
room-less booking conflicts with every room of its studio.
"""

from __future__ import annotations

from contextlib import contextmanager
import logging
import threading
import time
from typing import Dict, Iterator

from ..monitoring.prometheus_metrics import prometheus_metrics
from .exceptions import BookingLockTimeoutException

logger = logging.getLogger(__name__)

_REGISTRY_LOCK = threading.Lock()
_STUDIO_LOCKS: Dict[str, threading.Lock] = {}


def _lock_for(studio_id: str) -> threading.Lock:
    with _REGISTRY_LOCK:
        lock = _STUDIO_LOCKS.get(studio_id)
        if lock is None:
            lock = threading.Lock()
            _STUDIO_LOCKS[studio_id] = lock
        return lock


@contextmanager
def studio_booking_lock(studio_id: str, timeout_s: float) -> Iterator[None]:
    """
    Hold the booking lock for ``studio_id`` for the duration of the block.

    Raises:
        BookingLockTimeoutException: If the lock isn't acquired within ``timeout_s``
    """
    lock = _lock_for(studio_id)
    started = time.monotonic()
    if not lock.acquire(timeout=timeout_s):
        prometheus_metrics.record_booking_lock("acquire", "timeout", time.monotonic() - started)
        logger.warning(
            "booking_lock_timeout",
            extra={"studio_id": studio_id, "timeout_seconds": timeout_s},
        )
        raise BookingLockTimeoutException(studio_id, timeout_s)

    prometheus_metrics.record_booking_lock("acquire", "success", time.monotonic() - started)
    try:
        yield
    finally:
        lock.release()
        prometheus_metrics.record_booking_lock("release", "success")
