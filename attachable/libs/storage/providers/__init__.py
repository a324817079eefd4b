from .local import LocalFsStorage  # noqa: F401
from .s3 import S3Storage  # noqa: F401
