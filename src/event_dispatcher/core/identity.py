"""Observer identity and object type tags.

``observer_key`` turns a callback into the string used to de-duplicate and
remove registrations.  ``type_tag`` gives the value class filters are
compared against.
"""

from __future__ import annotations

import inspect
from typing import Any, Callable


def observer_key(callback: Callable[..., Any], key: Any = None) -> str:
    """Return the registration key for *callback*.

    An explicit *key* always wins.  Otherwise the key is derived from the
    callable so that re-accessing the same bound method, or passing the
    same module-level function again, yields the same key.
    """
    if key is not None:
        return str(key)
    if not callable(callback):
        raise TypeError(f"Observer must be callable, got {type(callback).__name__}")

    if inspect.ismethod(callback):
        func = callback.__func__
        return f"{func.__module__}.{func.__qualname__}@{id(callback.__self__):#x}"

    owner = getattr(callback, "__self__", None)
    if inspect.isbuiltin(callback) and owner is not None and not inspect.ismodule(owner):
        # e.g. ``received.append``: a fresh object on every attribute access
        return f"{type(owner).__module__}.{callback.__qualname__}@{id(owner):#x}"

    module = getattr(callback, "__module__", None) or type(callback).__module__
    qualname = getattr(callback, "__qualname__", None)
    if inspect.isfunction(callback) and "<" not in qualname:
        return f"{module}.{qualname}"
    if qualname is None:
        # Callable instances, functools.partial, ...
        qualname = type(callback).__qualname__
    return f"{module}.{qualname}@{id(callback):#x}"


def type_tag(obj: Any) -> str:
    """Return the type tag class filters are matched against.

    Objects (or their classes) may expose ``__notification_type__``;
    otherwise the runtime class name is used.
    """
    tag = getattr(obj, "__notification_type__", None)
    if isinstance(tag, str):
        return tag
    return type(obj).__name__


def normalize_filter(class_filter: Any) -> str | None:
    """Coerce a class filter (string, class or None) to a tag string."""
    if class_filter is None or class_filter == "":
        return None
    if isinstance(class_filter, type):
        tag = getattr(class_filter, "__notification_type__", None)
        return tag if isinstance(tag, str) else class_filter.__name__
    return str(class_filter)


def tags_match(left: str, right: str) -> bool:
    """Case-insensitive tag comparison."""
    return left.casefold() == right.casefold()
