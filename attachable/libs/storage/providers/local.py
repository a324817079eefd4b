from __future__ import annotations

import os
from pathlib import Path
from typing import Any

import aiofiles
import aiofiles.os
from attachable.core.logging import get_logger
from attachable.libs.storage.interface import StorageInterface
from attachable.libs.storage.schemas import LocalFsConfiguration
from attachable.libs.storage.utils import resolve_path_segment

logger = get_logger(__name__)

CHUNK_SIZE = 64 * 1024


class LocalFsStorage(StorageInterface):
    """
    Local filesystem storage.

    Files are moved below ``path_to_public`` and identified by their public
    path, e.g. ``/avatars/photo_thumb.jpg``.
    """

    name = "local"

    def __init__(self, config: LocalFsConfiguration):
        self.config = config
        self.path_to_public = Path(config.path_to_public)

    def get_basepath(self, attribute: str, instance: Any) -> str:
        return resolve_path_segment(self.config.public_basepath, attribute, instance)

    def get_public_path(self, filename: str, attribute: str, instance: Any) -> str:
        basepath = self.get_basepath(attribute, instance)
        return "/" + "/".join(part for part in (basepath, os.path.basename(filename)) if part)

    def get_absolute_path(self, identifier: str) -> Path:
        return self.path_to_public / identifier.lstrip("/")

    async def write(self, filename: str, attribute: str, instance: Any) -> str:
        """
        Move a file below ``path_to_public``.

        Args:
            filename (str): The local file to store
            attribute (str): Attribute the file is attached to
            instance (Any): The model instance

        Returns:
            str: The public path of the stored file
        """

        public_path = self.get_public_path(filename, attribute, instance)
        target = self.get_absolute_path(public_path)

        await aiofiles.os.makedirs(target.parent, exist_ok=True)

        if os.path.abspath(filename) == os.path.abspath(target):
            return public_path

        async with aiofiles.open(filename, "rb") as source_file, aiofiles.open(target, "wb") as target_file:
            while chunk := await source_file.read(CHUNK_SIZE):
                await target_file.write(chunk)

        await aiofiles.os.remove(filename)
        logger.debug(f"Stored {filename} as {public_path}")

        return public_path

    async def remove(self, identifier: str, attribute: str, instance: Any) -> None:
        """
        Delete a stored file and prune the directories it leaves empty.
        """

        path = self.get_absolute_path(identifier)

        try:
            await aiofiles.os.remove(path)
        except FileNotFoundError:
            logger.warning(f"Stored file {identifier} does not exist")
            return

        await self._prune(path.parent)

    async def _prune(self, directory: Path) -> None:
        root = self.path_to_public.resolve()
        directory = directory.resolve()

        while directory != root and root in directory.parents:
            try:
                await aiofiles.os.rmdir(directory)
            except OSError:
                # not empty
                return
            directory = directory.parent

