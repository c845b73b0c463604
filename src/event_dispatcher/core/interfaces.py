"""Port definitions.

Observers and notification factories are supplied by the embedding
program; these Protocols describe what the dispatcher expects of them.
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class NotificationLike(Protocol):
    """What the dispatcher reads and writes on a notification."""

    @property
    def name(self) -> str: ...

    @property
    def object(self) -> Any: ...

    @property
    def cancelled(self) -> bool: ...

    @property
    def delivery_count(self) -> int: ...

    def increase_delivery_count(self) -> None: ...


@runtime_checkable
class Observer(Protocol):
    """Any callable taking a single notification argument."""

    def __call__(self, notification: Any) -> Any: ...


@runtime_checkable
class NotificationFactory(Protocol):
    """Builds the notification posted by ``Dispatcher.post``."""

    def __call__(self, object: Any, name: str, info: Any) -> NotificationLike: ...
