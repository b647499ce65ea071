from __future__ import annotations

import threading


class WriteLock:
    """Process-wide critical section for multi-step writes.

    Generators and lifecycle managers share one instance (see container) so a reader never
    observes an adjustment marked Applied without its owning document, or the reverse.
    Re-entrant: a lifecycle call may run inside another locked operation.
    """

    def __init__(self) -> None:
        self._lock = threading.RLock()

    def __enter__(self) -> "WriteLock":
        self._lock.acquire()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self._lock.release()
