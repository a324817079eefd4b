import os
from collections.abc import Mapping
from typing import Any, Protocol, Union, runtime_checkable

from attachable.core.exceptions import ConfigError


@runtime_checkable
class HasPath(Protocol):
    """An uploaded-file like record carrying the path of its content on disk."""

    path: Any


FileInput = Union[str, os.PathLike, HasPath, Mapping[str, Any]]


def get_filename(file: FileInput) -> str:
    """
    Extract the path of a file argument.

    Args:
        file: A path, an object with a ``path`` attribute, or a mapping with a
            ``"path"`` key

    Returns:
        str: The file path

    Raises:
        ConfigError: If no path can be extracted
    """
    if isinstance(file, (str, os.PathLike)):
        return os.fspath(file)

    if isinstance(file, Mapping):
        path = file.get("path")
    else:
        path = getattr(file, "path", None)

    if isinstance(path, (str, os.PathLike)):
        return os.fspath(path)

    raise ConfigError(f"Can't get a file path from {type(file).__name__}")
