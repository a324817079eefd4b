from pathlib import Path
from typing import Literal, Self

from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="ATTACHABLE_",
        env_file=".env",
        env_ignore_empty=True,
        extra="ignore",
    )

    BASE_DIR: str = str(Path.cwd())

    APP_NAME: str = "attachable"
    APP_VERSION: str = "0.1.0"
    ENVIRONMENT: Literal["local", "staging", "production"] = "local"
    LOG_LEVEL: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] | None = None

    AFTER_DELETE: bool = True

    STORAGE_BACKEND: Literal["local", "s3"] = "local"
    STORAGE_PATH_TO_PUBLIC: str = str(Path.cwd() / "public")
    STORAGE_PUBLIC_BASEPATH: str = "uploads"
    STORAGE_S3_BUCKET_NAME: str | None = None
    STORAGE_S3_REGION_NAME: str | None = None
    STORAGE_S3_ACCESS_KEY_ID: str | None = None
    STORAGE_S3_SECRET_ACCESS_KEY: str | None = None
    STORAGE_S3_ENDPOINT_URL: str | None = None
    STORAGE_S3_KEY_PREFIX: str = "uploads"

    PREPROCESSOR_BACKEND: Literal["imagemagick", "pillow"] = "imagemagick"
    PREPROCESSOR_CLEANUP_SOURCE: bool = True
    IMAGEMAGICK_CONVERT_BINARY: str = "convert"
    PILLOW_DEFAULT_QUALITY: int = 85

    FILE_MAX_SIZE: int = 1024 * 1024 * 50  # 50 MB

    @model_validator(mode="after")
    def _enforce_storage_config(self) -> Self:
        if self.STORAGE_BACKEND == "s3" and (
            not self.STORAGE_S3_BUCKET_NAME
            or not self.STORAGE_S3_REGION_NAME
            or not self.STORAGE_S3_ACCESS_KEY_ID
            or not self.STORAGE_S3_SECRET_ACCESS_KEY
        ):
            raise ValueError("S3 configuration is incomplete. Please check S3 settings.")

        return self
