"""Dispatcher registry: maps names to dispatcher singletons.

There is usually no need for more than one dispatcher per name in an
application, so components look dispatchers up by name instead of passing
instances around.  A registry can be constructed and injected explicitly;
the module-level :func:`get_instance` uses a process-wide default registry
created on first use and discarded by :func:`reset_default_registry`.
"""

from __future__ import annotations

import threading

import structlog

from event_dispatcher.config.settings import Settings, get_settings
from event_dispatcher.dispatcher import Dispatcher

logger = structlog.get_logger(__name__)


class DispatcherRegistry:
    """Registry that lazily creates one :class:`Dispatcher` per name."""

    def __init__(self, settings: Settings | None = None) -> None:
        self._settings = settings or get_settings()
        self._dispatchers: dict[str, Dispatcher] = {}
        self._lock = threading.Lock()

    @property
    def default_name(self) -> str:
        return self._settings.default_dispatcher_name

    def get_instance(self, name: str | None = None) -> Dispatcher:
        """Return the dispatcher called *name*, creating it on first access."""
        if name is None:
            name = self.default_name
        with self._lock:
            dispatcher = self._dispatchers.get(name)
            if dispatcher is None:
                dispatcher = Dispatcher(
                    name,
                    notification_class=self._settings.notification_class,
                    pending_on_bubble=self._settings.pending_on_bubble,
                )
                self._dispatchers[name] = dispatcher
                logger.debug("registry.created", dispatcher=name)
        return dispatcher

    def names(self) -> list[str]:
        with self._lock:
            return list(self._dispatchers)

    def reset(self) -> None:
        """Forget every dispatcher created so far."""
        with self._lock:
            self._dispatchers.clear()

    def __contains__(self, name: object) -> bool:
        with self._lock:
            return name in self._dispatchers

    def __len__(self) -> int:
        with self._lock:
            return len(self._dispatchers)


_default_registry: DispatcherRegistry | None = None
_default_lock = threading.Lock()


def get_default_registry() -> DispatcherRegistry:
    """Return the process-wide registry, creating it once."""
    global _default_registry
    with _default_lock:
        if _default_registry is None:
            _default_registry = DispatcherRegistry()
        return _default_registry


def reset_default_registry() -> None:
    """Discard the process-wide registry (and every dispatcher in it)."""
    global _default_registry
    with _default_lock:
        _default_registry = None


def get_instance(name: str | None = None) -> Dispatcher:
    """Return the dispatcher called *name* from the process-wide registry.

    The default dispatcher is named ``__default`` unless configured
    otherwise.
    """
    return get_default_registry().get_instance(name)
