"""Application settings using Pydantic Settings."""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Dispatcher settings loaded from ``EVENT_DISPATCHER_*`` environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="EVENT_DISPATCHER_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Registry
    default_dispatcher_name: str = "__default"

    # Notifications
    notification_class: str | None = None  # dotted path, e.g. "myapp.events:AuditNotification"
    pending_on_bubble: bool = False

    # Logging
    log_level: str = "WARNING"
    log_json: bool = False


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
