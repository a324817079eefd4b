from __future__ import annotations

import asyncio
from typing import Any

from attachable.core.exceptions import ConversionError
from attachable.core.logging import get_logger
from attachable.libs.preprocessors.base import BasePreprocessor
from attachable.libs.preprocessors.schemas import ImageMagickConfiguration
from attachable.libs.preprocessors.utils import get_args_from_props

logger = get_logger(__name__)


class ImageMagickPreprocessor(BasePreprocessor):
    """
    Preprocessor shelling out to ImageMagick ``convert``.

    Style options become command line flags in declaration order:
    ``{"resize": "64x64", "autoOrient": True}`` runs
    ``convert photo.jpg -resize 64x64 -auto-orient photo_thumb.jpg``.
    """

    name = "imagemagick"

    def __init__(self, config: ImageMagickConfiguration | None = None) -> None:
        super().__init__(config or ImageMagickConfiguration())

    def build_arguments(self, props: dict[str, Any]) -> list[str]:
        return get_args_from_props(props)

    async def convert(self, source: str, target: str, arguments: list[str]) -> str:
        command = [self.config.convert_binary, source, *arguments, target]

        try:
            process = await asyncio.create_subprocess_exec(
                *command,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as e:
            raise ConversionError(self, f"Could not run {self.config.convert_binary}: {e}") from e

        _, stderr = await process.communicate()
        output = stderr.decode(errors="replace").strip()

        if process.returncode != 0:
            raise ConversionError(
                self,
                f"convert exited with code {process.returncode}: {output or 'no output'}",
            )

        if output:
            logger.warning(f"convert reported warnings for {target}: {output}")

        return target
