"""Shorthands for the common toast kinds.

Each helper takes the toast factory (usually ``store.create``) first so the
same calls work against any store, and returns the created ToastHandle.
"""

from __future__ import annotations

from typing import Any, Callable

ToastFactory = Callable[..., Any]

VARIANT_DEFAULT = "default"
VARIANT_SUCCESS = "success"
VARIANT_DESTRUCTIVE = "destructive"
VARIANT_WARNING = "warning"


def show_toast(create: ToastFactory, message: Any, title: Any = "Notice", variant: str = VARIANT_DEFAULT) -> Any:
    return create({"title": title, "description": message, "variant": variant})


def show_success_toast(create: ToastFactory, title: Any, description: Any) -> Any:
    return show_toast(create, description, title, VARIANT_SUCCESS)


def show_error_toast(create: ToastFactory, title: Any, description: Any) -> Any:
    return show_toast(create, description, title, VARIANT_DESTRUCTIVE)


def show_info_toast(create: ToastFactory, title: Any, description: Any) -> Any:
    return show_toast(create, description, title, VARIANT_DEFAULT)


def show_warning_toast(create: ToastFactory, title: Any, description: Any) -> Any:
    return show_toast(create, description, title, VARIANT_WARNING)


def show_success(create: ToastFactory, message: Any) -> Any:
    return show_success_toast(create, "Success", message)


def show_error(create: ToastFactory, message: Any) -> Any:
    return show_error_toast(create, "Error", message)


def show_info(create: ToastFactory, message: Any) -> Any:
    return show_info_toast(create, "Info", message)


def show_warning(create: ToastFactory, message: Any) -> Any:
    return show_warning_toast(create, "Warning", message)


__all__ = [
    "ToastFactory",
    "VARIANT_DEFAULT",
    "VARIANT_DESTRUCTIVE",
    "VARIANT_SUCCESS",
    "VARIANT_WARNING",
    "show_error",
    "show_error_toast",
    "show_info",
    "show_info_toast",
    "show_success",
    "show_success_toast",
    "show_toast",
    "show_warning",
    "show_warning_toast",
]
