from .factory import StorageFactory  # noqa: F401
from .interface import StorageInterface  # noqa: F401
from .providers import LocalFsStorage, S3Storage  # noqa: F401
from .schemas import LocalFsConfiguration, S3Configuration  # noqa: F401
