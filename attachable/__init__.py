import logging

from attachable.core.exceptions import (  # noqa: F401
    AttachmentsError,
    ConfigError,
    ConversionError,
    FileValidationError,
    PartialAttachError,
    PreprocessorError,
    ProviderError,
    StorageError,
    UnknownAttributeError,
    ValidationError,
)
from attachable.domain.schemas import AttributeSpec, ComputedStyle, StaticStyle  # noqa: F401
from attachable.domain.services import AttachmentsPlugin, create_plugin  # noqa: F401
from attachable.libs.frameworks import PlainProvider, ProviderInterface, SQLModelProvider  # noqa: F401
from attachable.libs.preprocessors import (  # noqa: F401
    BasePreprocessor,
    ImageMagickConfiguration,
    ImageMagickPreprocessor,
    PillowConfiguration,
    PillowPreprocessor,
    PreprocessorFactory,
    PreprocessorInterface,
)
from attachable.libs.storage import (  # noqa: F401
    LocalFsConfiguration,
    LocalFsStorage,
    S3Configuration,
    S3Storage,
    StorageFactory,
    StorageInterface,
)
from attachable.libs.validators import FileValidator, FileValidatorConfiguration, ValidatorInterface  # noqa: F401

logging.getLogger("attachable").addHandler(logging.NullHandler())
