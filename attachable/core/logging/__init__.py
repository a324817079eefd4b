"""
Structured logging for attachable.

The library only emits records through ``get_logger(__name__)`` loggers under
the ``attachable`` namespace. Applications opt in to the JSON configuration:

Usage:
    from attachable.core.logging import setup_logging, add_to_log_context

    setup_logging()

    with add_to_log_context(tenant="acme"):
        await user.attach("avatar", "/tmp/upload.png")
"""

from .config import get_logger, get_logging_config, setup_logging
from .exceptions import log_exception_with_context
from .filters import add_to_log_context, clear_log_context, get_log_context, new_operation_id

__all__ = [
    "setup_logging",
    "get_logger",
    "get_logging_config",
    "add_to_log_context",
    "get_log_context",
    "clear_log_context",
    "new_operation_id",
    "log_exception_with_context",
]
