from __future__ import annotations

import asyncio
import os
from collections.abc import Mapping
from typing import Any

from attachable.core.constants import RESERVED_PROPERTY_PREFIX
from attachable.core.exceptions import ConfigError, ConversionError, messages
from attachable.core.logging import get_logger
from attachable.libs.preprocessors.base import BasePreprocessor
from attachable.libs.preprocessors.schemas import PillowConfiguration
from attachable.libs.preprocessors.utils import parse_geometry
from PIL import Image, ImageOps, UnidentifiedImageError

logger = get_logger(__name__)

Operation = tuple[str, Any]

JPEG_EXTENSIONS = (".jpg", ".jpeg")


def _size(value: Any) -> tuple[int | None, int | None]:
    if isinstance(value, int):
        return value, value
    if isinstance(value, (tuple, list)) and len(value) == 2:
        return int(value[0]), int(value[1])
    width, height, _, _ = parse_geometry(value)
    return width, height


def _target_size(image: Image.Image, width: int | None, height: int | None) -> tuple[int, int]:
    """Exact when both sides are given, otherwise scaled keeping the aspect ratio."""
    if width is not None and height is not None:
        return width, height
    if width is None and height is None:
        return image.size
    ratio = width / image.width if width is not None else height / image.height
    return max(1, round(image.width * ratio)), max(1, round(image.height * ratio))


class PillowPreprocessor(BasePreprocessor):
    """
    Pure Python preprocessor backed by Pillow.

    Supports a subset of the ImageMagick vocabulary, applied in declaration
    order:

    - ``resize``: ``"WxH"`` exact size, ``"Wx"``/``"xH"`` scale to one side
    - ``thumbnail``: like ``resize`` but never enlarges
    - ``crop``: ``"WxH+X+Y"``, ``"WxH"`` (centred) or an int for a centred square
    - ``rotate``: degrees, counter clockwise
    - ``grayscale``/``monochrome``: ``True`` converts to grayscale
    - ``quality``: lossy output quality, defaults to the configured quality
    """

    name = "pillow"

    OPERATIONS = ("resize", "thumbnail", "crop", "rotate", "grayscale", "monochrome", "quality")

    def __init__(self, config: PillowConfiguration | None = None) -> None:
        super().__init__(config or PillowConfiguration())

    def build_arguments(self, props: dict[str, Any]) -> list[Operation]:
        operations: list[Operation] = []
        for key, value in props.items():
            if key.startswith(RESERVED_PROPERTY_PREFIX) or value is None or value is False:
                continue
            if key not in self.OPERATIONS:
                raise ConfigError(messages.UNSUPPORTED_OPERATION_ERROR(key, self.name))
            try:
                operations.append((key, self._parse(key, value)))
            except (TypeError, ValueError) as e:
                raise ConfigError(f"Invalid value for {key!r}: {value!r}") from e
        return operations

    @staticmethod
    def _parse(key: str, value: Any) -> Any:
        if key in ("resize", "thumbnail"):
            return _size(value)
        if key == "crop":
            if isinstance(value, Mapping):
                return int(value["width"]), int(value["height"]), value.get("x"), value.get("y")
            if isinstance(value, int):
                return value, value, None, None
            return parse_geometry(value)
        if key == "rotate":
            return float(value)
        if key == "quality":
            quality = int(value)
            if not 1 <= quality <= 100:
                raise ValueError(quality)
            return quality
        return bool(value)

    async def convert(self, source: str, target: str, arguments: list[Operation]) -> str:
        try:
            return await asyncio.to_thread(self._convert, source, target, arguments)
        except (OSError, UnidentifiedImageError, ValueError) as e:
            raise ConversionError(self, f"Failed to convert {source}: {e}") from e

    def _convert(self, source: str, target: str, operations: list[Operation]) -> str:
        quality = self.config.quality

        with Image.open(source) as original:
            image = ImageOps.exif_transpose(original)

            for operation, value in operations:
                if operation == "resize":
                    image = image.resize(_target_size(image, *value))
                elif operation == "thumbnail":
                    image = image.copy()
                    width, height = value
                    image.thumbnail((width or image.width, height or image.height))
                elif operation == "crop":
                    image = self._crop(image, *value)
                elif operation == "rotate":
                    image = image.rotate(value, expand=True)
                elif operation in ("grayscale", "monochrome"):
                    image = ImageOps.grayscale(image)
                elif operation == "quality":
                    quality = value

            if os.path.splitext(target)[1].lower() in JPEG_EXTENSIONS and image.mode not in ("RGB", "L"):
                image = image.convert("RGB")

            image.save(target, quality=quality)

        logger.debug(f"Converted {source} to {target}")

        return target

    @staticmethod
    def _crop(image: Image.Image, width: int | None, height: int | None, x: int | None, y: int | None) -> Image.Image:
        width = min(width or image.width, image.width)
        height = min(height or image.height, image.height)
        if x is None or y is None:
            x = (image.width - width) // 2
            y = (image.height - height) // 2
        return image.crop((x, y, x + width, y + height))
