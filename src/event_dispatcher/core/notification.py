"""Notification value object.

A notification describes one event occurrence.  The same instance is
handed by reference to every observer of a post call (and to every
dispatcher it bubbles into), so observers can write results back onto
``info`` or onto ad-hoc attributes for the poster to read.
"""

from __future__ import annotations

from typing import Any

from event_dispatcher.core.identity import type_tag


class Notification:
    """A named event carrying an associated object and a user payload."""

    def __init__(self, object: Any, name: str, info: Any = None) -> None:
        self._object = object
        self._name = name
        self.info = {} if info is None else info
        self._cancelled = False
        self._delivery_count = 0

    @property
    def name(self) -> str:
        return self._name

    @property
    def object(self) -> Any:
        """The object posted with the notification, usually the sender."""
        return self._object

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    @property
    def delivery_count(self) -> int:
        """How many observers received this notification so far."""
        return self._delivery_count

    def cancel(self) -> None:
        """Stop delivery to the remaining observers.

        The observer calling this still completes; the notification is
        returned to the poster as usual.
        """
        self._cancelled = True

    def increase_delivery_count(self) -> None:
        self._delivery_count += 1

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(name={self._name!r}, "
            f"object={type_tag(self._object)}, "
            f"cancelled={self._cancelled}, delivery_count={self._delivery_count})"
        )
