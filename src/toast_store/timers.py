from __future__ import annotations

import logging
from dataclasses import dataclass, field
from threading import RLock
from typing import Callable, Dict, Optional

from .clock import Cancellable, Scheduler, ThreadingScheduler

logger = logging.getLogger(__name__)


@dataclass
class _PendingRemoval:
    toast_id: str
    on_fire: Callable[[], None] = field(repr=False)
    handle: Optional[Cancellable] = field(default=None, repr=False)


class RemovalTimerRegistry:
    """Per-toast bookkeeping of delayed removals.

    At most one timer is pending per toast id. A timer removes its own entry
    before running its callback, and a timer that was cancelled after it
    started firing is ignored.
    """

    def __init__(self, scheduler: Optional[Scheduler] = None) -> None:
        self._scheduler: Scheduler = scheduler or ThreadingScheduler()
        self._pending: Dict[str, _PendingRemoval] = {}
        self._lock = RLock()

    def schedule(self, toast_id: str, delay_ms: float, on_fire: Callable[[], None]) -> bool:
        """Run ``on_fire`` once after ``delay_ms``.

        Returns:
            True if a timer was started, False if one was already pending
            for ``toast_id`` (the existing timer wins) or scheduling failed.
        """
        with self._lock:
            if toast_id in self._pending:
                logger.debug("Removal already pending for toast %s", toast_id)
                return False
            entry = _PendingRemoval(toast_id, on_fire)
            self._pending[toast_id] = entry
            try:
                entry.handle = self._scheduler.call_later(delay_ms / 1000.0, lambda: self._fire(entry))
            except Exception:
                logger.exception("Failed to schedule removal for toast %s", toast_id)
                self._pending.pop(toast_id, None)
                return False
            logger.debug("Scheduled removal of toast %s in %sms", toast_id, delay_ms)
            return True

    def _fire(self, entry: _PendingRemoval) -> None:
        with self._lock:
            if self._pending.get(entry.toast_id) is not entry:
                logger.debug("Stale removal timer for toast %s ignored", entry.toast_id)
                return
            del self._pending[entry.toast_id]
        entry.on_fire()

    def cancel(self, toast_id: str) -> bool:
        """Cancel the pending removal for ``toast_id``. Safe when none is pending."""
        with self._lock:
            entry = self._pending.pop(toast_id, None)
        if entry is None:
            return False
        if entry.handle is not None:
            entry.handle.cancel()
        logger.debug("Cancelled removal of toast %s", toast_id)
        return True

    def cancel_all(self) -> int:
        """Cancel every pending removal. Returns how many were cancelled."""
        with self._lock:
            entries = list(self._pending.values())
            self._pending.clear()
        for entry in entries:
            if entry.handle is not None:
                entry.handle.cancel()
        if entries:
            logger.debug("Cancelled %d pending removals", len(entries))
        return len(entries)

    def is_pending(self, toast_id: str) -> bool:
        with self._lock:
            return toast_id in self._pending

    def pending_count(self) -> int:
        with self._lock:
            return len(self._pending)


__all__ = ["RemovalTimerRegistry"]
