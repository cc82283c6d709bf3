# api/core/__init__.py
"""
Configuration, structured logging and the API exception hierarchy.
"""

from api.core.config import Settings, settings
from api.core.exceptions import BaseAPIException
from api.core.logging import configure_structlog, get_structlog_logger, set_request_id

__all__ = [
    "BaseAPIException",
    "Settings",
    "settings",
    "configure_structlog",
    "get_structlog_logger",
    "set_request_id",
]
