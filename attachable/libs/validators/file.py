import mimetypes
from typing import Any

import aiofiles.os
from attachable.core.exceptions import FileValidationError
from attachable.core.logging import get_logger
from attachable.libs.validators.interface import ValidatorInterface
from attachable.libs.validators.schemas import FileValidatorConfiguration

logger = get_logger(__name__)


class FileValidator(ValidatorInterface):
    """
    Checks the MIME type and size of incoming files.

    Example:
        attributes={
            "resume": {"validate": FileValidator(FileValidatorConfiguration(allowed_mime_types=["application/pdf"]))},
        }
    """

    def __init__(self, config: FileValidatorConfiguration | None = None) -> None:
        self.config = config or FileValidatorConfiguration()

    async def validate(self, filename: str, instance: Any) -> None:
        mime_type, _ = mimetypes.guess_type(filename)
        if mime_type not in self.config.allowed_mime_types:
            raise FileValidationError(f"File type {mime_type or 'unknown'} is not allowed")

        try:
            stat = await aiofiles.os.stat(filename)
        except FileNotFoundError as e:
            raise FileValidationError(f"File {filename} does not exist") from e

        if stat.st_size == 0 and not self.config.allow_empty:
            raise FileValidationError("File is empty")

        if stat.st_size > self.config.max_size:
            raise FileValidationError(
                f"File size {stat.st_size} bytes exceeds the maximum of {self.config.max_size} bytes"
            )

        logger.debug(f"Validated {filename} ({mime_type}, {stat.st_size} bytes)")
