import traceback
from typing import Any, Dict

from attachable.core.exceptions import ModuleError
from attachable.core.exceptions.errors.base import get_entity_name
from pythonjsonlogger.json import JsonFormatter


def describe_exception(exc_info: tuple) -> Dict[str, Any]:
    """
    Structured view of an exception: type, message, traceback and, for
    errors raised on behalf of a storage or preprocessor, the collaborator,
    attribute and underlying cause.
    """
    exc_type, exc_value, exc_traceback = exc_info

    data: Dict[str, Any] = {
        "type": exc_type.__name__ if exc_type else None,
        "message": str(exc_value) if exc_value else None,
        "traceback": traceback.format_exception(exc_type, exc_value, exc_traceback) if exc_traceback else None,
    }

    if isinstance(exc_value, ModuleError):
        data[exc_value.entity_name] = get_entity_name(exc_value.entity)
        data["attribute"] = exc_value.attribute

    cause = getattr(exc_value, "__cause__", None)
    if cause is not None:
        data["cause"] = {"type": type(cause).__name__, "message": str(cause)}

    return data


class StructuredExceptionJsonFormatter(JsonFormatter):
    """
    JSON formatter emitting exceptions as an ``exception`` object instead of
    a flat ``exc_info`` string.

    Accepts the ``format`` key used by ``dictConfig`` and YAML configs, and
    merges ``rename_fields`` over the class defaults.
    """

    default_format = "%(asctime)s %(name)s %(levelname)s %(message)s"
    default_datefmt = "%Y-%m-%dT%H:%M:%S"
    default_rename_fields: Dict[str, str] = {
        "levelname": "level",
        "asctime": "timestamp",
        "name": "logger",
    }

    def __init__(self, **kwargs: Any) -> None:
        kwargs["fmt"] = kwargs.pop("format", None) or kwargs.get("fmt") or self.default_format
        kwargs.setdefault("datefmt", self.default_datefmt)
        kwargs["rename_fields"] = {**self.default_rename_fields, **(kwargs.get("rename_fields") or {})}

        super().__init__(**kwargs)

    def add_fields(self, log_record: Dict[str, Any], record: Any, message_dict: Dict[str, Any]) -> None:
        super().add_fields(log_record, record, message_dict)

        if record.exc_info:
            log_record["exception"] = describe_exception(record.exc_info)
            log_record.pop("exc_info", None)
            log_record.pop("exc_text", None)


class ConsoleFormatter(StructuredExceptionJsonFormatter):
    """Compact output for development."""

    default_datefmt = "%Y-%m-%d %H:%M:%S"


class ProductionFormatter(StructuredExceptionJsonFormatter):
    """Adds source location and process fields."""

    default_format = (
        "%(asctime)s %(name)s %(levelname)s %(message)s %(pathname)s %(lineno)d %(funcName)s %(process)d %(thread)d"
    )
    default_rename_fields = {
        **StructuredExceptionJsonFormatter.default_rename_fields,
        "pathname": "file_path",
        "lineno": "line_number",
        "funcName": "function_name",
        "process": "process_id",
        "thread": "thread_id",
    }
