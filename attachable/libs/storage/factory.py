from typing import Any

from attachable.core.config import settings
from attachable.core.exceptions import ConfigError
from attachable.core.logging import get_logger
from attachable.libs.storage.interface import StorageInterface
from attachable.libs.storage.providers.local import LocalFsStorage
from attachable.libs.storage.providers.s3 import S3Storage
from attachable.libs.storage.schemas import LocalFsConfiguration, S3Configuration

logger = get_logger(__name__)


class StorageFactory:
    """
    Factory for creating storage providers.
    """

    _providers: dict[str, type[StorageInterface]] = {
        "local": LocalFsStorage,
        "s3": S3Storage,
    }

    @classmethod
    def register_provider(cls, name: str, provider_class: type[StorageInterface]) -> None:
        cls._providers[name] = provider_class

    @classmethod
    def create_provider(cls, provider_type: str, config: Any) -> StorageInterface:
        """
        Create a provider instance.

        Args:
            provider_type: Type of provider to create
            config: Provider configuration

        Returns:
            An instance of the requested provider

        Raises:
            ConfigError: If the provider type is not supported
        """
        if provider_type not in cls._providers:
            raise ConfigError(f"Unsupported storage provider type: {provider_type}")

        provider_class = cls._providers[provider_type]
        logger.debug(f"Creating {provider_type} storage")
        return provider_class(config)  # type: ignore

    @classmethod
    def get_configured_provider(cls) -> StorageInterface:
        """
        Get the configured storage provider.

        Returns:
            An instance of the configured storage provider
        """
        provider_type = settings.STORAGE_BACKEND

        if provider_type == "local":
            config = LocalFsConfiguration(
                path_to_public=settings.STORAGE_PATH_TO_PUBLIC,
                public_basepath=settings.STORAGE_PUBLIC_BASEPATH,
            )
            return cls.create_provider("local", config)
        elif provider_type == "s3":
            config = S3Configuration(
                bucket_name=settings.STORAGE_S3_BUCKET_NAME,  # type: ignore
                region_name=settings.STORAGE_S3_REGION_NAME,  # type: ignore
                access_key_id=settings.STORAGE_S3_ACCESS_KEY_ID,  # type: ignore
                secret_access_key=settings.STORAGE_S3_SECRET_ACCESS_KEY,  # type: ignore
                endpoint_url=settings.STORAGE_S3_ENDPOINT_URL,
                key_prefix=settings.STORAGE_S3_KEY_PREFIX,
            )
            return cls.create_provider("s3", config)
        else:
            raise ConfigError(f"Unsupported storage backend: {provider_type}")
