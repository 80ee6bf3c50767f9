"""
toast_store package root.

A framework-agnostic store for transient notifications ("toasts"). UI
bindings subscribe to the store and re-render from the state snapshots it
publishes; application code creates, updates and dismisses toasts through
the handles it returns. Rendering and animation stay outside this package.
"""

from __future__ import annotations

__version__ = "0.1.0"

from .clock import AsyncioScheduler, ManualScheduler, ThreadingScheduler
from .config import CAPACITY, REMOVE_DELAY_MS, ToastConfig, load_config
from .exceptions import ConfigError, ToastStoreError
from .models import AddToast, DismissToast, RemoveToast, Toast, ToastState, UpdateToast
from .reducer import reduce
from .store import ToastHandle, ToastStore, get_default_store

__all__ = [
    "__version__",
    "AddToast",
    "AsyncioScheduler",
    "CAPACITY",
    "ConfigError",
    "DismissToast",
    "ManualScheduler",
    "REMOVE_DELAY_MS",
    "RemoveToast",
    "ThreadingScheduler",
    "Toast",
    "ToastConfig",
    "ToastHandle",
    "ToastState",
    "ToastStore",
    "ToastStoreError",
    "UpdateToast",
    "get_default_store",
    "load_config",
    "reduce",
]
