"""event-dispatcher: synchronous in-process notification dispatching."""

from event_dispatcher.core import ConfigurationError, DispatcherError, Notification
from event_dispatcher.dispatcher import GLOBAL, Dispatcher, Registration
from event_dispatcher.registry import (
    DispatcherRegistry,
    get_default_registry,
    get_instance,
    reset_default_registry,
)

__version__ = "1.0.0"

__all__ = [
    "GLOBAL",
    "Dispatcher",
    "DispatcherRegistry",
    "Registration",
    "Notification",
    "get_instance",
    "get_default_registry",
    "reset_default_registry",
    "DispatcherError",
    "ConfigurationError",
]
