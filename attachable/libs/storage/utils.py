from typing import Any

from attachable.libs.storage.schemas import PathResolver


def resolve_path_segment(segment: str | PathResolver, attribute: str, instance: Any) -> str:
    """
    Resolve a configured path segment, calling it with the attribute and
    instance when it is callable, and strip surrounding slashes.
    """

    value = segment(attribute, instance) if callable(segment) else segment
    return str(value or "").strip("/")
