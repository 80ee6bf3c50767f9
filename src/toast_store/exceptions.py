class ToastStoreError(Exception):
    """Base exception for the toast_store package."""


class ConfigError(ToastStoreError, ValueError):
    """Raised when store configuration is out of range (e.g., zero capacity)."""
