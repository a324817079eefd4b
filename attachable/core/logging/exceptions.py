import logging
from typing import Any, Dict, Optional

from attachable.core.exceptions.errors.base import get_entity_name
from attachable.core.logging.filters import get_log_context

logger = logging.getLogger(__name__)


def log_exception_with_context(
    exc: BaseException,
    message: str = "Exception occurred",
    level: int = logging.ERROR,
    extra_context: Optional[Dict[str, Any]] = None,
    log: Optional[logging.Logger] = None,
) -> None:
    """
    Log an exception with its traceback and the bound logging context.

    Errors raised on behalf of a collaborator also record its name under
    ``collaborator``.

    Args:
        exc: The exception to log
        message: Prefix of the log message
        level: Logging level to use
        extra_context: Additional fields for the record
        log: Logger to emit on, defaults to this module's logger
    """
    extra: Dict[str, Any] = {**get_log_context(), "exception_type": type(exc).__name__}

    entity = getattr(exc, "entity", None)
    if entity is not None:
        extra["collaborator"] = get_entity_name(entity)

    extra.update(extra_context or {})

    (log or logger).log(level, f"{message}: {exc}", exc_info=exc, extra=extra)
