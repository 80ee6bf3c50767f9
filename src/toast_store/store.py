from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass, field
from functools import partial
from threading import RLock
from typing import Any, Callable, Deque, List, Mapping, Optional, Tuple

from .clock import Scheduler
from .config import ToastConfig, load_config
from .ids import IdGenerator, random_id
from .models import (
    EMPTY_STATE,
    AddToast,
    DismissToast,
    RemoveToast,
    Toast,
    ToastState,
    UpdateToast,
)
from .reducer import closed_by, reduce
from .timers import RemovalTimerRegistry

logger = logging.getLogger(__name__)

Listener = Callable[[ToastState], Any]


@dataclass(frozen=True)
class ToastHandle:
    """Control object for one toast, bound to its id."""

    id: str
    store: "ToastStore" = field(repr=False, compare=False)

    def dismiss(self) -> None:
        self.store.dispatch(DismissToast(self.id))

    def update(self, changes: Optional[Mapping[Any, Any]] = None, **fields: Any) -> None:
        """Merge ``changes`` and keyword ``fields`` into this toast. The id cannot be changed."""
        patch = dict(changes) if isinstance(changes, Mapping) else {}
        patch.update(fields)
        self.store.dispatch(UpdateToast(self.id, patch))

    def on_open_change(self, open_: bool) -> None:
        if not open_:
            self.dismiss()


class ToastStore:
    """Process-wide toast state with delayed removal and subscriber fan-out.

    Construct one per application (or per test) and hand it to whatever
    needs to raise notifications; ``get_default_store()`` builds a shared one
    lazily for callers that prefer a global.

    Nothing on the runtime surface raises: malformed input becomes a no-op,
    and an exception in one subscriber is logged without affecting the
    others. Dispatches issued from inside a subscriber run after the current
    fan-out completes.
    """

    def __init__(
        self,
        config: Optional[ToastConfig] = None,
        *,
        scheduler: Optional[Scheduler] = None,
        id_factory: Optional[IdGenerator] = None,
    ) -> None:
        self.config = config or ToastConfig()
        self._timers = RemovalTimerRegistry(scheduler)
        self._ids: IdGenerator = id_factory or random_id
        self._state: ToastState = EMPTY_STATE
        self._listeners: List[Listener] = []
        self._queue: Deque[Any] = deque()
        self._dispatching = False
        self._generation = 0
        self._lock = RLock()

    # ---- State -------------------------------------------------------------
    @property
    def state(self) -> ToastState:
        return self._state

    @property
    def toasts(self) -> Tuple[Toast, ...]:
        return self._state.toasts

    def get(self, toast_id: str) -> Optional[Toast]:
        return self._state.get(toast_id)

    def toast_count(self) -> int:
        return len(self._state)

    # ---- Dispatch ----------------------------------------------------------
    def dispatch(self, action: Any) -> None:
        """Apply ``action`` and publish the resulting state to every subscriber."""
        with self._lock:
            self._queue.append(action)
            if self._dispatching:
                logger.debug("Queued nested dispatch of %r", action)
                return
            self._dispatching = True
            try:
                while self._queue:
                    queued = self._queue.popleft()
                    try:
                        self._apply(queued)
                    except Exception:
                        logger.exception("Dispatch of %r failed; continuing with queued actions", queued)
            finally:
                self._queue.clear()
                self._dispatching = False

    def _apply(self, action: Any) -> None:
        before = self._state
        try:
            after = reduce(before, action, capacity=self.config.capacity)
        except Exception:
            logger.exception("Reducer failed on %r; state unchanged", action)
            return

        try:
            self._sync_timers(action, before, after)
        except Exception:
            logger.exception("Updating removal timers failed for %r", action)

        self._state = after
        logger.debug("Dispatched %s; %d toast(s)", type(action).__name__, len(after))
        self._notify(after)

    def _sync_timers(self, action: Any, before: ToastState, after: ToastState) -> None:
        if isinstance(action, DismissToast):
            for toast_id in closed_by(action, after):
                self._timers.schedule(
                    toast_id,
                    self.config.remove_delay_ms,
                    partial(self._remove_after_delay, toast_id, self._generation),
                )
        elif isinstance(action, RemoveToast):
            if action.toast_id is None:
                self._timers.cancel_all()
            elif isinstance(action.toast_id, str):
                self._timers.cancel(action.toast_id)
        elif isinstance(action, AddToast):
            # Toasts pushed out by capacity no longer need their removal timers.
            kept = set(after.ids())
            for toast_id in before.ids():
                if toast_id not in kept:
                    self._timers.cancel(toast_id)

    def _remove_after_delay(self, toast_id: str, generation: int) -> None:
        with self._lock:
            # A reset since scheduling may have reissued this id to a new toast.
            if generation != self._generation:
                logger.debug("Removal of toast %s from before a reset ignored", toast_id)
                return
            self.dispatch(RemoveToast(toast_id))

    def _notify(self, state: ToastState) -> None:
        for listener in list(self._listeners):
            try:
                listener(state)
            except Exception:
                logger.exception("Toast subscriber %r failed", listener)

    # ---- Public API --------------------------------------------------------
    def create(self, payload: Any = None, **fields: Any) -> ToastHandle:
        """Add a new open toast and return its handle.

        Args:
            payload: Mapping of toast fields (title, description, variant, or
                anything else). Non-mapping values are treated as empty.
            **fields: Extra fields, applied over ``payload``.
        """
        toast_id = self._next_id()
        handle = ToastHandle(toast_id, self)
        data: dict = {}
        if isinstance(payload, Mapping):
            data.update(payload)
        elif payload is not None:
            logger.debug("Non-mapping toast payload treated as empty: %r", payload)
        data.update(fields)
        toast = Toast.from_payload(toast_id, data, on_open_change=handle.on_open_change)
        self.dispatch(AddToast(toast))
        return handle

    def _next_id(self) -> str:
        try:
            return str(self._ids())
        except Exception:
            logger.exception("Toast id factory failed; falling back to a random id")
            return random_id()

    def dismiss(self, toast_id: Optional[str] = None) -> None:
        """Dismiss one toast, or all of them when ``toast_id`` is None."""
        self.dispatch(DismissToast(toast_id))

    def dismiss_all(self) -> None:
        self.dispatch(DismissToast())

    def clear_all(self) -> None:
        """Remove every toast immediately, skipping the removal delay."""
        self.dispatch(RemoveToast())

    def clear_timeout(self, toast_id: str) -> bool:
        """Cancel the pending removal of one toast; it stays in the store, closed."""
        return self._timers.cancel(toast_id)

    # ---- Subscriptions -----------------------------------------------------
    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register ``listener`` for state snapshots. Returns an idempotent unsubscribe."""
        with self._lock:
            if listener not in self._listeners:
                self._listeners.append(listener)
        active = [True]

        def unsubscribe() -> None:
            with self._lock:
                if not active[0]:
                    return
                active[0] = False
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return unsubscribe

    def listener_count(self) -> int:
        with self._lock:
            return len(self._listeners)

    def pending_timer_count(self) -> int:
        return self._timers.pending_count()

    def reset(self) -> None:
        """Drop subscribers, cancel pending removals and empty the store."""
        with self._lock:
            self._listeners.clear()
            cancelled = self._timers.cancel_all()
            self._queue.clear()
            self._state = EMPTY_STATE
            self._generation += 1
            restart = getattr(self._ids, "reset", None)
            if callable(restart):
                restart()
        logger.debug("Toast store reset (%d pending removals cancelled)", cancelled)


_DEFAULT_STORE: Optional[ToastStore] = None


def get_default_store() -> ToastStore:
    """Return a process-global ToastStore, creating one from ``load_config()`` if necessary."""
    global _DEFAULT_STORE
    if _DEFAULT_STORE is None:
        _DEFAULT_STORE = ToastStore(load_config())
    return _DEFAULT_STORE


__all__ = ["Listener", "ToastHandle", "ToastStore", "get_default_store"]
