from __future__ import annotations

import asyncio
import threading

from toast_store.clock import AsyncioScheduler, ThreadingScheduler
from toast_store.config import ToastConfig
from toast_store.models import ToastState
from toast_store.store import ToastStore


def test_threading_scheduler_removes_dismissed_toasts():
    store = ToastStore(ToastConfig(capacity=5, remove_delay_ms=50), scheduler=ThreadingScheduler())
    emptied = threading.Event()

    def watch(state: ToastState) -> None:
        if not state.toasts:
            emptied.set()

    handles = [store.create(title=str(i)) for i in range(3)]
    store.subscribe(watch)
    store.dismiss_all()
    assert store.pending_timer_count() == 3

    assert emptied.wait(2.0)
    assert store.toast_count() == 0
    assert store.pending_timer_count() == 0
    assert all(store.get(h.id) is None for h in handles)


def test_asyncio_scheduler_removes_on_loop():
    async def scenario() -> tuple:
        store = ToastStore(ToastConfig(remove_delay_ms=10), scheduler=AsyncioScheduler())
        handle = store.create(title="A")
        handle.dismiss()
        during = (store.toast_count(), store.pending_timer_count())
        await asyncio.sleep(0.05)
        return during, (store.toast_count(), store.pending_timer_count())

    during, after = asyncio.run(scenario())
    assert during == (1, 1)
    assert after == (0, 0)


def test_asyncio_scheduler_outside_loop_does_not_raise():
    store = ToastStore(scheduler=AsyncioScheduler())
    handle = store.create(title="A")
    handle.dismiss()
    assert store.get(handle.id).open is False
    assert store.pending_timer_count() == 0
