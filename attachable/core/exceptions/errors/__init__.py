from .attribute import FileValidationError, UnknownAttributeError, ValidationError  # noqa: F401
from .base import AttachmentsError, ConfigError  # noqa: F401
from .module import (  # noqa: F401
    ConversionError,
    ModuleError,
    PartialAttachError,
    PreprocessorError,
    ProviderError,
    StorageError,
)

__all__ = [
    "AttachmentsError",
    "ConfigError",
    "UnknownAttributeError",
    "ValidationError",
    "FileValidationError",
    "ModuleError",
    "PreprocessorError",
    "ConversionError",
    "StorageError",
    "PartialAttachError",
    "ProviderError",
]
