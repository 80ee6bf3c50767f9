from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, ClassVar, Dict, Mapping, Optional, Tuple, Union

OpenChangeCallback = Callable[[bool], None]

# Fields the store owns; caller payloads and patches cannot set them.
MANAGED_FIELDS = frozenset({"id", "open"})
# Typed fields a payload or patch may set; any other key lands in ``extras``.
PATCHABLE_FIELDS = frozenset({"title", "description", "variant", "on_open_change"})


def split_changes(changes: Any) -> Tuple[Dict[str, Any], Dict[Any, Any]]:
    """Split a key/value patch into typed field updates and opaque extras.

    Anything that is not a mapping is treated as an empty patch.
    """
    known: Dict[str, Any] = {}
    extras: Dict[Any, Any] = {}
    if not isinstance(changes, Mapping):
        return known, extras
    for key, value in changes.items():
        if key in MANAGED_FIELDS:
            continue
        if key in PATCHABLE_FIELDS:
            known[key] = value
        else:
            extras[key] = value
    return known, extras


@dataclass(frozen=True)
class Toast:
    """A single notification as held in the store.

    Attributes:
        id: Unique id assigned by the store at creation.
        title: Opaque display payload.
        description: Opaque display payload.
        variant: Classification tag (e.g. "default", "destructive"); not interpreted.
        open: True while displayed. Dismissal flips it to False for good.
        on_open_change: Callback for UI layers; calling it with False dismisses the toast.
        extras: Any other caller-supplied keys (e.g. an ``action`` element).
    """

    id: str
    title: Any = None
    description: Any = None
    variant: str = "default"
    open: bool = True
    on_open_change: Optional[OpenChangeCallback] = field(default=None, compare=False, repr=False)
    extras: Mapping[Any, Any] = field(default_factory=dict, hash=False)

    @classmethod
    def from_payload(
        cls,
        toast_id: str,
        payload: Any,
        *,
        on_open_change: Optional[OpenChangeCallback] = None,
    ) -> "Toast":
        known, extras = split_changes(payload)
        if on_open_change is not None:
            known["on_open_change"] = on_open_change
        return cls(id=toast_id, open=True, extras=extras, **known)

    def merged(self, changes: Any) -> "Toast":
        """Return a copy with ``changes`` shallow-merged over this toast.

        ``id`` and ``open`` are never taken from the patch.
        """
        known, extras = split_changes(changes)
        if not known and not extras:
            return self
        if extras:
            merged_extras = dict(self.extras)
            merged_extras.update(extras)
            known["extras"] = merged_extras
        return dataclasses.replace(self, **known)

    def closed(self) -> "Toast":
        if not self.open:
            return self
        return dataclasses.replace(self, open=False)

    def as_dict(self) -> Dict[str, Any]:
        """Plain-data view (callbacks omitted), suitable for JSON output."""
        data: Dict[str, Any] = {str(k): v for k, v in self.extras.items()}
        data.update(
            {
                "id": self.id,
                "title": self.title,
                "description": self.description,
                "variant": self.variant,
                "open": self.open,
            }
        )
        return data


@dataclass(frozen=True)
class ToastState:
    """Immutable snapshot published to subscribers. Most recent toast first."""

    toasts: Tuple[Toast, ...] = ()

    def __len__(self) -> int:
        return len(self.toasts)

    def get(self, toast_id: Optional[str]) -> Optional[Toast]:
        for toast in self.toasts:
            if toast.id == toast_id:
                return toast
        return None

    def ids(self) -> Tuple[str, ...]:
        return tuple(t.id for t in self.toasts)


EMPTY_STATE = ToastState()


class ActionType(Enum):
    """Kinds of state transition understood by the reducer."""

    ADD_TOAST = "ADD_TOAST"
    UPDATE_TOAST = "UPDATE_TOAST"
    DISMISS_TOAST = "DISMISS_TOAST"
    REMOVE_TOAST = "REMOVE_TOAST"


@dataclass(frozen=True)
class AddToast:
    toast: Toast

    type: ClassVar[ActionType] = ActionType.ADD_TOAST


@dataclass(frozen=True)
class UpdateToast:
    """Merge ``changes`` into the toast with ``toast_id``. No id means no-op."""

    toast_id: Optional[str]
    changes: Mapping[Any, Any] = field(default_factory=dict)

    type: ClassVar[ActionType] = ActionType.UPDATE_TOAST


@dataclass(frozen=True)
class DismissToast:
    """Close one toast, or every toast when ``toast_id`` is None."""

    toast_id: Optional[str] = None

    type: ClassVar[ActionType] = ActionType.DISMISS_TOAST


@dataclass(frozen=True)
class RemoveToast:
    """Delete one toast, or every toast when ``toast_id`` is None."""

    toast_id: Optional[str] = None

    type: ClassVar[ActionType] = ActionType.REMOVE_TOAST


Action = Union[AddToast, UpdateToast, DismissToast, RemoveToast]


__all__ = [
    "Action",
    "ActionType",
    "AddToast",
    "DismissToast",
    "EMPTY_STATE",
    "MANAGED_FIELDS",
    "OpenChangeCallback",
    "PATCHABLE_FIELDS",
    "RemoveToast",
    "Toast",
    "ToastState",
    "UpdateToast",
    "split_changes",
]
