"""Core utilities package"""

from .config import Settings, settings, get_settings
from .logging import setup_logging, get_logger, get_context_logger
from .errors import (
    DivisionServiceError,
    SessionNotFoundError,
    ValidationError,
    engine_error_status,
    register_error_handlers,
)

__all__ = [
    "Settings",
    "settings",
    "get_settings",
    "setup_logging",
    "get_logger",
    "get_context_logger",
    "DivisionServiceError",
    "SessionNotFoundError",
    "ValidationError",
    "engine_error_status",
    "register_error_handlers",
]
