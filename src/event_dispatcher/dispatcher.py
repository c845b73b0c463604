"""Notification dispatcher.

The dispatcher acts as a notification dispatch table.  Observers register
with a dispatcher for a notification name (the empty name ``GLOBAL``
receives everything) and optionally for the type of the object posted
with the notification.  When a notification is posted the dispatcher calls
every matching observer synchronously, in registration order, passing the
notification as the sole argument, then bubbles it up to the nested
(parent) dispatchers.

Posted notifications are kept as *pending* by default so that observers
registering later are still called with them.
"""

from __future__ import annotations

import importlib
import threading
from dataclasses import dataclass
from typing import Any, Union

import structlog

from event_dispatcher.core.exceptions import ConfigurationError, DispatcherError
from event_dispatcher.core.identity import normalize_filter, observer_key, tags_match, type_tag
from event_dispatcher.core.interfaces import NotificationFactory, NotificationLike, Observer
from event_dispatcher.core.notification import Notification

logger = structlog.get_logger(__name__)

GLOBAL = ""
"""Notification name of the wildcard bucket."""

NotificationClass = Union[NotificationFactory, str]


@dataclass(frozen=True)
class Registration:
    """One observer registered under a notification name."""

    key: str
    callback: Observer
    class_filter: str | None = None

    def accepts(self, tag: str) -> bool:
        """Whether an object with type *tag* passes this entry's class filter."""
        return self.class_filter is None or tags_match(self.class_filter, tag)


def load_notification_class(target: NotificationClass | None) -> NotificationFactory:
    """Resolve a notification factory from a callable or a dotted path.

    Dotted paths may use ``package.module:Name`` or ``package.module.Name``.

    Raises:
        ConfigurationError: if *target* is empty or cannot be imported.
    """
    if target is None or target == "":
        raise ConfigurationError("No notification class configured")
    if not isinstance(target, str):
        if not callable(target):
            raise ConfigurationError(
                "Notification class is not callable", {"notification_class": repr(target)}
            )
        return target

    module_path, sep, attr = target.partition(":")
    if not sep:
        module_path, _, attr = target.rpartition(".")
    if not module_path or not attr:
        raise ConfigurationError("Invalid notification class path", {"notification_class": target})

    try:
        module = importlib.import_module(module_path)
        factory = getattr(module, attr)
    except (ImportError, AttributeError) as e:
        raise ConfigurationError(
            f"Cannot load notification class {target!r}: {e}", {"notification_class": target}
        ) from e
    if not callable(factory):
        raise ConfigurationError("Notification class is not callable", {"notification_class": target})
    return factory


class Dispatcher:
    """Dispatches notifications to registered observer callbacks.

    Prefer :func:`event_dispatcher.registry.get_instance` (or a
    :class:`~event_dispatcher.registry.DispatcherRegistry`) to constructing
    dispatchers directly, so that every component asking for a given name
    shares the same instance.
    """

    _default_notification_class: NotificationClass | None = Notification

    def __init__(
        self,
        name: str,
        notification_class: NotificationClass | None = None,
        *,
        pending_on_bubble: bool = False,
    ) -> None:
        self._name = name
        self._notification_class = notification_class or type(self)._default_notification_class
        self.pending_on_bubble = pending_on_bubble
        self._registrations: dict[str, dict[str, Registration]] = {}
        self._pending: dict[str, list[NotificationLike]] = {}
        self._nested: dict[str, Dispatcher] = {}
        self._lock = threading.RLock()

    @property
    def name(self) -> str:
        """Unique identifier of the dispatcher."""
        return self._name

    @property
    def notification_class(self) -> NotificationClass | None:
        return self._notification_class

    # ------------------------------------------------------------------
    # Observers
    # ------------------------------------------------------------------

    def add_observer(
        self,
        callback: Observer,
        name: str = GLOBAL,
        class_filter: Any = None,
        *,
        key: Any = None,
    ) -> None:
        """Register *callback* for notifications called *name*.

        With the default empty name the observer receives every posted
        notification.  *class_filter* restricts delivery to notifications
        whose object has that type tag (case-insensitive).  Registering the
        same observer key again under the same name replaces the entry.

        Pending notifications matching the criteria are delivered to the
        new observer straight away.
        """
        reg_key = observer_key(callback, key)
        class_filter = normalize_filter(class_filter)

        with self._lock:
            bucket = self._registrations.setdefault(name, {})
            bucket[reg_key] = Registration(key=reg_key, callback=callback, class_filter=class_filter)
            pending = list(self._pending.get(name, ()))

        log = logger.bind(dispatcher=self._name, notification=name, observer=reg_key)
        log.debug("dispatcher.observer.added", class_filter=class_filter, pending=len(pending))

        for notification in pending:
            if notification.cancelled:
                continue
            if class_filter is None or tags_match(class_filter, type_tag(notification.object)):
                callback(notification)
                notification.increase_delivery_count()
                log.debug("dispatcher.pending.replayed")

    def remove_observer(
        self,
        callback: Observer | None = None,
        name: str = GLOBAL,
        class_filter: Any = None,
        *,
        key: Any = None,
    ) -> bool:
        """Remove the observer matching the given criteria.

        Returns:
            True if an observer was removed, False otherwise.
        """
        reg_key = observer_key(callback, key)
        class_filter = normalize_filter(class_filter)
        removed = False

        with self._lock:
            bucket = self._registrations.get(name)
            if bucket is not None:
                registration = bucket.get(reg_key)
                if registration is not None and _filter_matches(registration, class_filter):
                    del bucket[reg_key]
                    removed = True
                if not bucket:
                    del self._registrations[name]

        logger.debug(
            "dispatcher.observer.removed",
            dispatcher=self._name,
            notification=name,
            observer=reg_key,
            removed=removed,
        )
        return removed

    def observer_registered(
        self,
        callback: Observer | None = None,
        name: str = GLOBAL,
        class_filter: Any = None,
        *,
        key: Any = None,
    ) -> bool:
        """Check whether the observer has been registered with the dispatcher."""
        reg_key = observer_key(callback, key)
        class_filter = normalize_filter(class_filter)
        with self._lock:
            registration = self._registrations.get(name, {}).get(reg_key)
        return registration is not None and _filter_matches(registration, class_filter)

    def get_observers(self, name: str = GLOBAL, class_filter: Any = None) -> list[str]:
        """Return the keys of the observers registered for *name*.

        Observers registered without a class filter are always included.
        """
        class_filter = normalize_filter(class_filter)
        with self._lock:
            bucket = list(self._registrations.get(name, {}).values())
        return [
            registration.key
            for registration in bucket
            if class_filter is None
            or registration.class_filter is None
            or tags_match(registration.class_filter, class_filter)
        ]

    # ------------------------------------------------------------------
    # Posting
    # ------------------------------------------------------------------

    def post(
        self,
        object: Any,
        name: str,
        info: Any = None,
        pending: bool = True,
        bubble: bool = True,
    ) -> NotificationLike:
        """Create a notification and post it.

        The associated *object* is usually the sender, so that observers
        can query it for more information.  *info* is handed along with the
        notification and may be modified by observers.

        Args:
            object: Object associated with the notification.
            name: Notification name.
            info: Optional user information, an empty dict by default.
            pending: Keep the notification for observers registered later.
            bubble: Forward the notification to nested dispatchers.

        Returns:
            The notification, after every observer has seen it.

        Raises:
            ConfigurationError: if the dispatcher has no usable
                notification class.
        """
        try:
            factory = load_notification_class(self._notification_class)
        except ConfigurationError as e:
            e.details.setdefault("dispatcher", self._name)
            raise
        notification = factory(object, name, {} if info is None else info)
        return self.post_notification(notification, pending=pending, bubble=bubble)

    def post_notification(
        self, notification: NotificationLike, pending: bool = True, bubble: bool = True
    ) -> NotificationLike:
        """Post an already built notification.

        Observers registered for the notification name are called first,
        then the global observers, then the nested dispatchers.  Delivery
        stops as soon as an observer cancels the notification.

        Returns:
            The notification object.
        """
        name = notification.name
        if pending:
            with self._lock:
                self._pending.setdefault(name, []).append(notification)

        tag = type_tag(notification.object)
        log = logger.bind(dispatcher=self._name, notification=name)
        log.debug("dispatcher.post", object_type=tag, pending=pending, bubble=bubble)

        for bucket_name in (name, GLOBAL):
            for registration in self._snapshot(bucket_name):
                if notification.cancelled:
                    log.debug("dispatcher.cancelled", delivered=notification.delivery_count)
                    return notification
                if registration.accepts(tag):
                    registration.callback(notification)
                    notification.increase_delivery_count()

        if not bubble:
            return notification

        with self._lock:
            nested = list(self._nested.values())
        for dispatcher in nested:
            log.debug("dispatcher.bubble", parent=dispatcher.name)
            notification = dispatcher.post_notification(
                notification, pending=pending or self.pending_on_bubble, bubble=True
            )
        return notification

    def _snapshot(self, name: str) -> list[Registration]:
        with self._lock:
            return list(self._registrations.get(name, {}).values())

    # ------------------------------------------------------------------
    # Pending notifications
    # ------------------------------------------------------------------

    def get_pending(self, name: str = GLOBAL) -> list[NotificationLike]:
        """Return the pending notifications called *name*, oldest first."""
        with self._lock:
            return list(self._pending.get(name, ()))

    def clear_pending(self, name: str | None = None) -> int:
        """Drop pending notifications called *name*, or all of them.

        Returns:
            Number of notifications dropped.
        """
        with self._lock:
            if name is None:
                count = sum(len(bucket) for bucket in self._pending.values())
                self._pending.clear()
            else:
                count = len(self._pending.pop(name, ()))
        logger.debug("dispatcher.pending.cleared", dispatcher=self._name, notification=name, count=count)
        return count

    # ------------------------------------------------------------------
    # Nesting
    # ------------------------------------------------------------------

    def add_nested_dispatcher(self, dispatcher: Dispatcher) -> None:
        """Bubble notifications up to *dispatcher* as well.

        A dispatcher already nested under the same name is replaced.  Nesting
        that would let a notification bubble back to this dispatcher raises
        :class:`DispatcherError`.
        """
        if dispatcher is self or dispatcher._bubbles_to(self):
            raise DispatcherError(
                "Nesting would create a bubbling cycle",
                {"dispatcher": self._name, "parent": dispatcher.name},
            )
        with self._lock:
            self._nested[dispatcher.name] = dispatcher
        logger.debug("dispatcher.nested.added", dispatcher=self._name, parent=dispatcher.name)

    def _bubbles_to(self, target: Dispatcher) -> bool:
        seen: set[int] = set()
        stack = [self]
        while stack:
            current = stack.pop()
            if id(current) in seen:
                continue
            seen.add(id(current))
            for parent in current.nested_dispatchers:
                if parent is target:
                    return True
                stack.append(parent)
        return False

    def remove_nested_dispatcher(self, dispatcher: Dispatcher | str) -> bool:
        """Stop bubbling to *dispatcher*, given as an instance or a name."""
        name = dispatcher.name if isinstance(dispatcher, Dispatcher) else dispatcher
        with self._lock:
            removed = self._nested.pop(name, None) is not None
        logger.debug("dispatcher.nested.removed", dispatcher=self._name, parent=name, removed=removed)
        return removed

    @property
    def nested_dispatchers(self) -> list[Dispatcher]:
        with self._lock:
            return list(self._nested.values())

    # ------------------------------------------------------------------
    # Notification class
    # ------------------------------------------------------------------

    def set_notification_class(self, notification_class: NotificationClass | None) -> None:
        """Change the notification class used by :meth:`post` on this dispatcher."""
        self._notification_class = notification_class

    @classmethod
    def set_default_notification_class(cls, notification_class: NotificationClass | None) -> None:
        """Change the notification class of dispatchers created from now on."""
        cls._default_notification_class = notification_class

    @classmethod
    def get_default_notification_class(cls) -> NotificationClass | None:
        return cls._default_notification_class

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self._name!r})"


def _filter_matches(registration: Registration, class_filter: str | None) -> bool:
    if class_filter is None:
        return True
    return registration.class_filter is not None and tags_match(registration.class_filter, class_filter)
