from attachable.core.config import settings
from attachable.core.constants import ALLOWED_MIME_TYPES
from pydantic import BaseModel, Field


class FileValidatorConfiguration(BaseModel):
    """
    Schema for the file validator.

    Attributes:
        allowed_mime_types (list[str]): MIME types accepted, guessed from the file name.
        max_size (int): Maximum size in bytes.
        allow_empty (bool): Accept zero byte files.
    """

    allowed_mime_types: list[str] = Field(default_factory=lambda: list(ALLOWED_MIME_TYPES))
    max_size: int = Field(default_factory=lambda: settings.FILE_MAX_SIZE, gt=0)
    allow_empty: bool = False
