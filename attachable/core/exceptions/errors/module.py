from typing import Any, Mapping

from .base import AttachmentsError, ConfigError, get_entity_name


class ModuleError(AttachmentsError):
    """
    Error raised on behalf of a collaborator (storage, preprocessor, provider).

    The collaborator is exposed under ``entity_name`` (``err.storage``,
    ``err.preprocessor``...) and the attribute being processed, when known,
    under ``err.attribute``.
    """

    entity_name = "module"

    def __init__(self, entity: Any, message: Any = None, *, attribute: str | None = None) -> None:
        super().__init__(message)
        self.entity = entity
        self.attribute = attribute
        setattr(self, self.entity_name, entity)

    def __str__(self) -> str:
        label = f"{self.entity_name.capitalize()} {get_entity_name(self.entity)}"
        if self.attribute:
            label = f"{label} (attribute {self.attribute!r})"
        return f"{label}: {self.message}"


class PreprocessorError(ModuleError):
    """
    Raised when deriving styles fails: tool failure, malformed style, or a
    preprocessor returning nothing. Storage hasn't been touched.
    """

    entity_name = "preprocessor"
    detail = "The preprocessor failed to process the file."


class ConversionError(PreprocessorError):
    """
    Raised by a preprocessor backend when converting a single style fails.
    """

    detail = "The file conversion failed."

    def __init__(self, entity: Any, message: Any = None, *, style: str | None = None) -> None:
        super().__init__(entity, message)
        self.style = style


class StorageError(ModuleError):
    """
    Raised when writing or removing a stored file fails.
    """

    entity_name = "storage"
    detail = "An error occurred in the storage backend."


class PartialAttachError(StorageError):
    """
    Raised when a styled attach stored some styles before a write failed.

    Already stored files aren't removed; ``stored`` maps their style names to
    the identifiers the storage returned so callers can reconcile them.
    """

    def __init__(
        self,
        entity: Any,
        message: Any = None,
        *,
        attribute: str | None = None,
        stored: Mapping[str, Any] | None = None,
        failed_style: str | None = None,
    ) -> None:
        super().__init__(entity, message, attribute=attribute)
        self.stored = dict(stored or {})
        self.failed_style = failed_style


class ProviderError(ModuleError, ConfigError):
    """
    Raised when the model framework provider lacks a capability or doesn't
    bind an instance to a hook.
    """

    entity_name = "provider"
    detail = "The provider is not configured correctly."
