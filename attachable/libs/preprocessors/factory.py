from typing import Any

from attachable.core.config import settings
from attachable.core.exceptions import ConfigError
from attachable.core.logging import get_logger
from attachable.libs.preprocessors.interface import PreprocessorInterface
from attachable.libs.preprocessors.providers.imagemagick import ImageMagickPreprocessor
from attachable.libs.preprocessors.providers.pillow import PillowPreprocessor
from attachable.libs.preprocessors.schemas import ImageMagickConfiguration, PillowConfiguration

logger = get_logger(__name__)


class PreprocessorFactory:
    """
    Factory for creating preprocessors.
    """

    _providers: dict[str, type[PreprocessorInterface]] = {
        "imagemagick": ImageMagickPreprocessor,
        "pillow": PillowPreprocessor,
    }

    @classmethod
    def register_provider(cls, name: str, provider_class: type[PreprocessorInterface]) -> None:
        cls._providers[name] = provider_class

    @classmethod
    def create_provider(cls, provider_type: str, config: Any = None) -> PreprocessorInterface:
        """
        Create a preprocessor instance.

        Args:
            provider_type: Type of preprocessor to create
            config: Preprocessor configuration

        Returns:
            An instance of the requested preprocessor

        Raises:
            ConfigError: If the preprocessor type is not supported
        """
        if provider_type not in cls._providers:
            raise ConfigError(f"Unsupported preprocessor type: {provider_type}")

        provider_class = cls._providers[provider_type]
        logger.debug(f"Creating {provider_type} preprocessor")
        return provider_class(config)  # type: ignore

    @classmethod
    def get_configured_provider(cls) -> PreprocessorInterface:
        """
        Get the preprocessor configured through settings.
        """
        provider_type = settings.PREPROCESSOR_BACKEND

        if provider_type == "imagemagick":
            config = ImageMagickConfiguration(
                cleanup_source=settings.PREPROCESSOR_CLEANUP_SOURCE,
                convert_binary=settings.IMAGEMAGICK_CONVERT_BINARY,
            )
            return cls.create_provider("imagemagick", config)
        elif provider_type == "pillow":
            config = PillowConfiguration(
                cleanup_source=settings.PREPROCESSOR_CLEANUP_SOURCE,
                quality=settings.PILLOW_DEFAULT_QUALITY,
            )
            return cls.create_provider("pillow", config)
        else:
            raise ConfigError(f"Unsupported preprocessor backend: {provider_type}")
