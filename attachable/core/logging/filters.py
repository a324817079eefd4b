import contextvars
import logging
import os
import socket
import uuid
from contextlib import contextmanager
from typing import Any, Dict, Iterator

from attachable.core.config import settings

_log_context: contextvars.ContextVar[Dict[str, Any]] = contextvars.ContextVar("attachable_log_context", default={})


class BaseContextFilter(logging.Filter):
    """Copies ``context(record)`` onto every record. Records are never dropped."""

    def filter(self, record: logging.LogRecord) -> bool:
        for key, value in self.context(record).items():
            setattr(record, key, value)
        return True

    def context(self, record: logging.LogRecord) -> Dict[str, Any]:
        return {}


class GlobalContextFilter(BaseContextFilter):
    """Process wide fields: host, pid, environment, library name and version."""

    def __init__(self, name: str = "") -> None:
        super().__init__(name)
        self._context = {
            "hostname": socket.gethostname(),
            "process_id": os.getpid(),
            "environment": settings.ENVIRONMENT,
            "app_name": settings.APP_NAME,
            "app_version": settings.APP_VERSION,
        }

    def context(self, record: logging.LogRecord) -> Dict[str, Any]:
        return self._context


class DynamicContextFilter(BaseContextFilter):
    """Fields bound with ``add_to_log_context``, such as the attribute being attached."""

    def context(self, record: logging.LogRecord) -> Dict[str, Any]:
        return _log_context.get()


class CombinedContextFilter(BaseContextFilter):
    def __init__(self, name: str = "") -> None:
        super().__init__(name)
        self.filters = [GlobalContextFilter(name), DynamicContextFilter(name)]

    def context(self, record: logging.LogRecord) -> Dict[str, Any]:
        merged: Dict[str, Any] = {}
        for context_filter in self.filters:
            merged.update(context_filter.context(record))
        return merged


class OperationIdFilter(BaseContextFilter):
    """
    Ensures every record carries an ``operation_id``.

    The engine binds one per attach call so the records emitted while storing
    every style of one file can be correlated. Records emitted outside an
    operation get a fresh id.
    """

    def context(self, record: logging.LogRecord) -> Dict[str, Any]:
        return {"operation_id": _log_context.get().get("operation_id") or new_operation_id()}


@contextmanager
def add_to_log_context(**kwargs: Any) -> Iterator[Dict[str, Any]]:
    """
    Bind fields to every record logged inside the block, including records
    from coroutines awaited there.

    Example:
        with add_to_log_context(tenant="acme"):
            await user.attach("avatar", upload)
    """
    token = _log_context.set({**_log_context.get(), **kwargs})
    try:
        yield _log_context.get()
    finally:
        _log_context.reset(token)


def new_operation_id() -> str:
    return uuid.uuid4().hex


def get_log_context() -> Dict[str, Any]:
    return dict(_log_context.get())


def clear_log_context() -> None:
    _log_context.set({})
