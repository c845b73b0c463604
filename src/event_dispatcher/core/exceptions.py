"""Custom exceptions for event-dispatcher."""


class DispatcherError(Exception):
    """Base exception for all event-dispatcher errors."""

    def __init__(self, message: str, details: dict | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ConfigurationError(DispatcherError):
    """Raised when a dispatcher is misconfigured (e.g. no notification factory)."""

    pass
