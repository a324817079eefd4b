from .file import FileValidator  # noqa: F401
from .interface import ValidatorInterface  # noqa: F401
from .schemas import FileValidatorConfiguration  # noqa: F401
