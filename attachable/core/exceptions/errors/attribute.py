from typing import Any

from .base import AttachmentsError, ConfigError


class UnknownAttributeError(ConfigError):
    """
    Raised when attach/detach is called for an attribute the plugin doesn't manage.
    """

    def __init__(self, attribute: str) -> None:
        super().__init__(f'Attribute "{attribute}" isn\'t defined on the model')
        self.attribute = attribute


class ValidationError(AttachmentsError):
    """
    Raised when an attribute's validator rejects a file.

    Nothing has been stored when this error is raised.
    """

    detail = "The file didn't pass validation."

    def __init__(self, attribute: str, message: Any = None) -> None:
        super().__init__(message)
        self.attribute = attribute

    def __str__(self) -> str:
        return f"{self.attribute}: {self.message}"


class FileValidationError(ValidationError):
    """
    Raised by the built-in file validator.

    The engine re-wraps it with the attribute name.
    """

    def __init__(self, message: Any = None, attribute: str = "") -> None:
        super().__init__(attribute, message)

    def __str__(self) -> str:
        return self.message
