from typing import Literal

from .base import Settings as BaseSettings


class Settings(BaseSettings):
    """Production defaults: only warnings and errors are logged unless ``ATTACHABLE_LOG_LEVEL`` says otherwise."""

    ENVIRONMENT: Literal["local", "staging", "production"] = "production"
    LOG_LEVEL: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] | None = "WARNING"
