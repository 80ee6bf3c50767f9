from __future__ import annotations

import threading
import uuid
from typing import Callable

IdGenerator = Callable[[], str]

# Largest integer a double-precision float represents exactly.
MAX_SEQUENTIAL_ID = 2**53 - 1


def random_id() -> str:
    """Return a collision-resistant random id (32 hex chars)."""
    return uuid.uuid4().hex


class SequentialIdGenerator:
    """Produce "1", "2", "3", ... and wrap before ``MAX_SEQUENTIAL_ID``.

    Calling ``reset()`` restarts the sequence, which keeps ids short and
    predictable in tests that reset the store between cases.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._count = 0

    def __call__(self) -> str:
        with self._lock:
            self._count = (self._count + 1) % MAX_SEQUENTIAL_ID
            return str(self._count)

    def reset(self) -> None:
        with self._lock:
            self._count = 0


__all__ = ["IdGenerator", "MAX_SEQUENTIAL_ID", "SequentialIdGenerator", "random_id"]
