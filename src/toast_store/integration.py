from __future__ import annotations

import logging
from typing import Any, Awaitable, Callable, Optional, TypeVar

from .helpers import VARIANT_DESTRUCTIVE, ToastFactory, show_toast

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _error_message(exc: BaseException) -> str:
    return str(exc) or "Operation failed"


def _toast_error(create: Optional[ToastFactory], exc: BaseException, error_title: str) -> None:
    if callable(create):
        show_toast(create, _error_message(exc), error_title, VARIANT_DESTRUCTIVE)


def _toast_success(create: Optional[ToastFactory], message: Any) -> None:
    if callable(create) and message:
        show_toast(create, message, "Success")


def execute_with_error_toast(
    operation: Callable[[], T],
    create: Optional[ToastFactory],
    error_title: str = "Error",
) -> T:
    """Run ``operation``; on failure show a destructive toast and re-raise."""
    try:
        return operation()
    except Exception as exc:
        logger.debug("Operation failed, raising error toast: %s", exc)
        _toast_error(create, exc, error_title)
        raise


def execute_with_toast_feedback(
    operation: Callable[[], T],
    create: Optional[ToastFactory],
    success_message: Any,
    error_title: str = "Error",
) -> T:
    """Run ``operation`` and report the outcome as a toast.

    A success toast is shown when ``success_message`` is truthy; failures
    show a destructive toast and the exception propagates unchanged.
    """
    try:
        result = operation()
    except Exception as exc:
        logger.debug("Operation failed, raising error toast: %s", exc)
        _toast_error(create, exc, error_title)
        raise
    _toast_success(create, success_message)
    return result


async def aexecute_with_error_toast(
    operation: Callable[[], Awaitable[T]],
    create: Optional[ToastFactory],
    error_title: str = "Error",
) -> T:
    try:
        return await operation()
    except Exception as exc:
        logger.debug("Async operation failed, raising error toast: %s", exc)
        _toast_error(create, exc, error_title)
        raise


async def aexecute_with_toast_feedback(
    operation: Callable[[], Awaitable[T]],
    create: Optional[ToastFactory],
    success_message: Any,
    error_title: str = "Error",
) -> T:
    try:
        result = await operation()
    except Exception as exc:
        logger.debug("Async operation failed, raising error toast: %s", exc)
        _toast_error(create, exc, error_title)
        raise
    _toast_success(create, success_message)
    return result


__all__ = [
    "aexecute_with_error_toast",
    "aexecute_with_toast_feedback",
    "execute_with_error_toast",
    "execute_with_toast_feedback",
]
