from . import messages  # noqa: F401
from .errors import (  # noqa: F401
    AttachmentsError,
    ConfigError,
    ConversionError,
    FileValidationError,
    ModuleError,
    PartialAttachError,
    PreprocessorError,
    ProviderError,
    StorageError,
    UnknownAttributeError,
    ValidationError,
)
