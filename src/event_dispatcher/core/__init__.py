"""Core value objects, identity helpers and interfaces."""

from event_dispatcher.core.exceptions import ConfigurationError, DispatcherError
from event_dispatcher.core.identity import normalize_filter, observer_key, tags_match, type_tag
from event_dispatcher.core.interfaces import NotificationFactory, NotificationLike, Observer
from event_dispatcher.core.notification import Notification

__all__ = [
    # Models
    "Notification",
    # Identity
    "observer_key",
    "type_tag",
    "normalize_filter",
    "tags_match",
    # Interfaces
    "NotificationLike",
    "NotificationFactory",
    "Observer",
    # Exceptions
    "DispatcherError",
    "ConfigurationError",
]
