"""The `deprecated_after` marker.

Attach to a class, function, method, property or `__init__`::

    @deprecated_after("2026-03-31", reason="superseded by v2 client", replacement="Client.fetch")
    def fetch_legacy(...): ...

    @deprecated_after("3.0.0")
    class OldParser: ...

A marker placed above a property lands on its getter. To mark a setter or
deleter, put the marker directly on that function, below `@x.setter`.

The marker only records metadata on the decorated object; behaviour is left
untouched. Thresholds are evaluated by `deprecated-after validate`.
"""

from __future__ import annotations

import inspect
from dataclasses import dataclass
from typing import Any, Callable, TypeVar

T = TypeVar("T")

MARKER_ATTRIBUTE = "__deprecated_after__"


@dataclass(frozen=True)
class DeprecationMarker:
    value: str
    reason: str = ""
    replacement: str = ""


def deprecated_after(value: str, reason: str = "", replacement: str = "") -> Callable[[T], T]:
    for name, field_value in (("value", value), ("reason", reason), ("replacement", replacement)):
        if not isinstance(field_value, str):
            raise TypeError(f"deprecated_after {name} must be a string, got {type(field_value).__name__}")
    marker = DeprecationMarker(value=value, reason=reason, replacement=replacement)

    def decorator(target: T) -> T:
        holder = _marker_holder(target)
        if holder is None:
            raise TypeError(f"deprecated_after cannot mark {type(target).__name__} objects")
        existing = vars(holder).get(MARKER_ATTRIBUTE)
        if isinstance(target, property) and isinstance(existing, DeprecationMarker) and existing != marker:
            raise TypeError(
                f"deprecated_after would replace the marker on the `{holder.__name__}` getter; "
                "mark the setter or deleter function directly"
            )
        setattr(holder, MARKER_ATTRIBUTE, marker)
        return target

    return decorator


def _marker_holder(target: Any) -> Any:
    if isinstance(target, property):
        return target.fget
    if isinstance(target, (staticmethod, classmethod)):
        return target.__func__
    if inspect.ismethod(target):
        return target.__func__
    if inspect.isclass(target) or inspect.isfunction(target):
        return target
    return None


def marker_of(obj: Any) -> DeprecationMarker | None:
    """Return the marker declared directly on `obj`; inherited class markers are ignored."""
    holder = _marker_holder(obj)
    if holder is None:
        return None
    marker = vars(holder).get(MARKER_ATTRIBUTE)
    return marker if isinstance(marker, DeprecationMarker) else None
