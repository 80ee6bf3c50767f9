from __future__ import annotations

import logging
from typing import Any, Tuple

from .config import CAPACITY
from .models import AddToast, DismissToast, RemoveToast, Toast, ToastState, UpdateToast

logger = logging.getLogger(__name__)


def reduce(state: ToastState, action: Any, *, capacity: int = CAPACITY) -> ToastState:
    """Return the state that results from applying ``action`` to ``state``.

    Pure: no timers are touched here. Unknown actions, and id-specific
    actions whose id matches nothing, return ``state`` itself.
    """
    if isinstance(action, AddToast):
        if not isinstance(action.toast, Toast):
            logger.debug("AddToast without a Toast ignored: %r", action.toast)
            return state
        toasts = (action.toast,) + state.toasts
        return ToastState(toasts[: max(capacity, 0)])

    if isinstance(action, UpdateToast):
        if action.toast_id is None:
            return state
        changed = False
        toasts = []
        for toast in state.toasts:
            if toast.id == action.toast_id:
                updated = toast.merged(action.changes)
                changed = changed or updated is not toast
                toasts.append(updated)
            else:
                toasts.append(toast)
        return ToastState(tuple(toasts)) if changed else state

    if isinstance(action, DismissToast):
        if not any(_targets(action.toast_id, t) and t.open for t in state.toasts):
            return state
        return ToastState(
            tuple(t.closed() if _targets(action.toast_id, t) else t for t in state.toasts)
        )

    if isinstance(action, RemoveToast):
        if action.toast_id is None:
            return ToastState() if state.toasts else state
        toasts = tuple(t for t in state.toasts if t.id != action.toast_id)
        return ToastState(toasts) if len(toasts) != len(state.toasts) else state

    logger.debug("Unrecognized action ignored: %r", action)
    return state


def closed_by(action: Any, state: ToastState) -> Tuple[str, ...]:
    """Ids of the toasts a DISMISS action targets that are closed in ``state``.

    The dispatch core schedules removal for exactly these ids; the timer
    registry makes repeated scheduling for one id a no-op.
    """
    if not isinstance(action, DismissToast):
        return ()
    return tuple(t.id for t in state.toasts if _targets(action.toast_id, t) and not t.open)


def _targets(toast_id: Any, toast: Toast) -> bool:
    return toast_id is None or toast.id == toast_id


__all__ = ["closed_by", "reduce"]
