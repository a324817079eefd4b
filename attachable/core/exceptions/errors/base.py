from typing import Any


def get_error_message(message: Any) -> str:
    """Extract a readable message from a string, an exception or any object."""
    if message is None:
        return ""
    if isinstance(message, BaseException):
        return str(message) or type(message).__name__
    return str(message)


def get_entity_name(entity: Any) -> str:
    """Name used for a collaborator (storage, preprocessor, provider) in messages."""
    name = getattr(entity, "name", None)
    if isinstance(name, str) and name:
        return name
    if isinstance(entity, type):
        return entity.__name__
    return type(entity).__name__


class AttachmentsError(Exception):
    """
    Base error for everything raised by attachable.
    """

    detail = "An error occurred while handling an attachment."

    def __init__(self, message: Any = None) -> None:
        self.message = get_error_message(message) or self.detail
        super().__init__(self.message)


class ConfigError(AttachmentsError):
    """
    Raised when the plugin, an attribute or a collaborator is misconfigured.
    """

    detail = "The attachments plugin is not configured correctly."
