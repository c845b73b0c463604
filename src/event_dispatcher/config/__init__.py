"""Configuration module for event-dispatcher."""

from event_dispatcher.config.logging import configure_logging, get_logger
from event_dispatcher.config.settings import Settings, get_settings

__all__ = ["Settings", "get_settings", "configure_logging", "get_logger"]
