from typing import Any

from attachable.core.logging import get_logger
from attachable.domain.schemas import AttributeSpec

logger = get_logger(__name__)


def get_style_names(attribute: AttributeSpec) -> list[str]:
    """
    Returns the style names of an attribute in declaration order.

    Reserved configuration keys never appear. The same list drives provider
    registration, the store loop and the detach loop.

    Args:
        attribute (AttributeSpec): The attribute

    Returns:
        list[str]: The style names, empty for scalar attributes
    """

    return attribute.style_names


def resolve_styles(attribute: AttributeSpec, instance: Any) -> dict[str, Any]:
    """
    Evaluates an attribute's styles for one attach call.

    Computed styles are called with the instance, static ones are taken as
    they are. Styles resolving to ``None`` are dropped.

    Args:
        attribute (AttributeSpec): The attribute
        instance (Any): The model instance the file is attached to

    Returns:
        dict[str, Any]: Resolved style options keyed by style name
    """

    resolved: dict[str, Any] = {}
    for name, definition in attribute.styles.items():
        value = definition.resolve(instance)
        if value is None:
            logger.debug(f"Style {name!r} of {attribute.name!r} resolved to nothing, skipping")
            continue
        resolved[name] = value
    return resolved
