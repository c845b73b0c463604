"""Shared fixtures.

The default registry and the default notification class are process-wide
state; every test starts from a clean slate.
"""

from __future__ import annotations

import pytest
import structlog

from event_dispatcher.config.settings import get_settings
from event_dispatcher.core.notification import Notification
from event_dispatcher.dispatcher import Dispatcher
from event_dispatcher.registry import reset_default_registry


@pytest.fixture(autouse=True)
def _clean_process_state():
    get_settings.cache_clear()
    reset_default_registry()
    Dispatcher.set_default_notification_class(Notification)
    yield
    reset_default_registry()
    Dispatcher.set_default_notification_class(Notification)
    get_settings.cache_clear()
    structlog.reset_defaults()


@pytest.fixture
def dispatcher() -> Dispatcher:
    return Dispatcher("test")
