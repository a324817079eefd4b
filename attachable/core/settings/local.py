from typing import Literal

from .base import Settings as BaseSettings


class Settings(BaseSettings):
    """Development defaults: verbose logs, files under ./public."""

    ENVIRONMENT: Literal["local", "staging", "production"] = "local"
    LOG_LEVEL: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] | None = "DEBUG"
