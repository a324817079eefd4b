from typing import Any

from attachable.core.exceptions import ValidationError
from attachable.core.helpers.misc import maybe_await
from attachable.core.logging import get_logger
from attachable.core.types import get_filename
from attachable.domain.schemas import AttributeSpec

logger = get_logger(__name__)


async def run_validation(attribute: AttributeSpec, filename: str, instance: Any) -> str:
    """
    Runs the validation pipeline of an attribute.

    When a validator is configured, ``before_validate`` runs first and may
    return a replacement file, which becomes the working file for the
    validator and every later step. The validator fails by raising or by
    returning ``False``.

    Args:
        attribute (AttributeSpec): The attribute being attached
        filename (str): The working file
        instance (Any): The model instance

    Returns:
        str: The working file after substitution

    Raises:
        ValidationError: If either hook fails
    """

    if attribute.validator is None:
        return filename

    try:
        if attribute.before_validate is not None:
            replacement = await maybe_await(attribute.before_validate(filename, instance))
            if replacement is not None:
                logger.debug(f"before_validate replaced {filename!r} for {attribute.name!r}")
                filename = get_filename(replacement)

        result = await maybe_await(attribute.validator(filename, instance))
    except ValidationError as e:
        logger.warning(f"{filename} rejected for {attribute.name!r}: {e.message}")
        raise ValidationError(attribute.name, e.message) from e
    except Exception as e:
        logger.warning(f"{filename} rejected for {attribute.name!r}: {e}")
        raise ValidationError(attribute.name, e) from e

    if result is False:
        logger.warning(f"{filename} rejected for {attribute.name!r}")
        raise ValidationError(attribute.name, f"{filename} is not a valid file for {attribute.name}")

    return filename
