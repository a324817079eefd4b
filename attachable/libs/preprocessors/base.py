import asyncio
from abc import abstractmethod
from typing import Any

import aiofiles.os
from attachable.core.exceptions import ConfigError, ConversionError, messages
from attachable.core.logging import get_logger
from attachable.libs.preprocessors.interface import PreprocessorInterface
from attachable.libs.preprocessors.schemas import PreprocessorConfiguration
from attachable.libs.preprocessors.utils import (
    check_props,
    get_filename_for_style,
    get_props_for_data,
    get_style_format,
    is_original_style,
)

logger = get_logger(__name__)


class BasePreprocessor(PreprocessorInterface):
    """
    Derives style files concurrently through ``convert``.

    Subclasses turn style options into backend specific arguments
    (``build_arguments``) and produce one target file (``convert``).
    """

    def __init__(self, config: PreprocessorConfiguration | None = None) -> None:
        self.config = config or PreprocessorConfiguration()

    @abstractmethod
    def build_arguments(self, props: dict[str, Any]) -> Any:
        """
        Validate style options and build what ``convert`` needs.

        Raises:
            ConfigError: If the options can't be used
        """
        pass

    @abstractmethod
    async def convert(self, source: str, target: str, arguments: Any) -> str:
        """
        Write the derived file to ``target`` and return its path.
        """
        pass

    async def process(self, filename: str, styles: dict[str, Any], instance: Any = None) -> dict[str, str]:
        """
        Returns the derived files keyed by style.

        Styles named ``original`` (or resolving to ``True``) map to the source
        file untouched. Every other style is prepared before anything runs, so
        a malformed style fails the call without converting anything; the
        conversions then run concurrently and the first failure cancels the
        rest.

        Args:
            filename (str): The original file
            styles (dict[str, Any]): Style options keyed by style name
            instance (Any): Passed to callable style options

        Returns:
            dict[str, str]: Derived file path keyed by style, in style order

        Raises:
            ConfigError: If no style needs processing or a style has no options
        """
        styles = styles or {}

        originals = [style for style, props in styles.items() if is_original_style(style, props)]
        if len(originals) == len(styles):
            raise ConfigError(messages.NO_STYLES_ERROR)

        jobs: dict[str, tuple[str, Any]] = {}
        for style, props in styles.items():
            if style in originals:
                continue
            props = check_props(get_props_for_data(props, instance))
            target = get_filename_for_style(filename, style, get_style_format(props))
            jobs[style] = (target, self.build_arguments(dict(props)))

        logger.debug(f"Processing {filename} into {', '.join(jobs)}")

        try:
            async with asyncio.TaskGroup() as group:
                tasks = {
                    style: group.create_task(self._convert_style(style, filename, target, arguments))
                    for style, (target, arguments) in jobs.items()
                }
        except BaseExceptionGroup as group_error:
            raise group_error.exceptions[0]

        result = {style: filename if style in originals else tasks[style].result() for style in styles}

        if not originals and self.config.cleanup_source:
            await self.cleanup(filename)

        return result

    async def cleanup(self, filename: str) -> None:
        try:
            await aiofiles.os.remove(filename)
        except FileNotFoundError:
            logger.warning(f"Source file {filename} was already removed")

    async def _convert_style(self, style: str, source: str, target: str, arguments: Any) -> str:
        try:
            return await self.convert(source, target, arguments)
        except ConversionError as e:
            if e.style is None:
                e.style = style
            raise
