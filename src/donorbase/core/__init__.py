"""Settings and logging shared by the API server, CLI and services."""

from donorbase.core.config import Settings, get_settings
from donorbase.core.logging import (
    bind_correlation_id,
    bind_event_id,
    clear_context,
    configure_logging,
    get_logger,
)

__all__ = [
    "Settings",
    "get_settings",
    "configure_logging",
    "get_logger",
    "bind_correlation_id",
    "bind_event_id",
    "clear_context",
]
