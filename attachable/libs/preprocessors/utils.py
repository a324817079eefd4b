import os
import re
from collections.abc import Mapping
from typing import Any

import inflection
from attachable.core.constants import FLAG_PREFIXES, FORMAT_KEY, ORIGINAL_STYLE, RESERVED_PROPERTY_PREFIX
from attachable.core.exceptions import ConfigError, messages

GEOMETRY_PATTERN = re.compile(r"^(?P<width>\d+)?x(?P<height>\d+)?(?:(?P<x>[+-]\d+)(?P<y>[+-]\d+))?$")


def get_props_for_data(props: Any, data: Any) -> Any:
    """
    Resolve lazily defined style options by passing them the instance.
    """
    return props(data) if callable(props) else props


def check_props(props: Any) -> Mapping[str, Any]:
    """
    Ensure style options are a non-empty mapping.

    Raises:
        ConfigError: If they aren't
    """
    if not isinstance(props, Mapping) or not props:
        raise ConfigError(messages.NO_PROPERTIES_ERROR)
    return props


def to_flag(key: str) -> str:
    """
    Convert a style option name to a command line flag.

    ``"resize"`` -> ``"-resize"``, ``"autoOrient"``/``"auto_orient"`` ->
    ``"-auto-orient"``; keys starting with ``-`` or ``+`` are kept as they are.
    """
    if key.startswith(FLAG_PREFIXES):
        return key
    return f"-{inflection.dasherize(inflection.underscore(key))}"


def get_args_from_props(props: Any) -> list[str]:
    """
    Converts style options to a list of arguments suitable for ``convert``.

    ``$`` prefixed keys are reserved (``$format``) and skipped. ``True``
    values emit the bare flag, ``None`` and ``False`` values are dropped.

    Args:
        props (Any): Style options

    Returns:
        list[str]: The arguments

    Raises:
        ConfigError: If the options aren't a non-empty mapping
    """
    props = check_props(props)

    args: list[str] = []
    for key, value in props.items():
        if key.startswith(RESERVED_PROPERTY_PREFIX):
            continue
        if value is None or value is False:
            continue
        args.append(to_flag(key))
        if value is not True:
            args.append(str(value))
    return args


def get_format(format: Any) -> str | None:
    """
    Ensures a dot before a format override: ``"gif"`` and ``".gif"`` -> ``".gif"``.
    """
    if not format:
        return None
    format = str(format)
    return format if format.startswith(".") else f".{format}"


def get_filename_for_style(filename: str, style: str, format: str | None = None) -> str:
    """
    Appends the style to the file basename: ``/some/dir/photo.jpg`` ->
    ``/some/dir/photo_thumb.jpg``.

    Args:
        filename (str): The original file
        style (str): Style name
        format (str | None): Extension override, with or without the dot

    Returns:
        str: The derived file path
    """
    directory, basename = os.path.split(filename)
    name, ext = os.path.splitext(basename)
    return os.path.join(directory, f"{name}_{style}{get_format(format) or ext}")


def get_style_format(props: Mapping[str, Any]) -> str | None:
    return get_format(props.get(FORMAT_KEY))


def parse_geometry(value: Any) -> tuple[int | None, int | None, int | None, int | None]:
    """
    Parse an ImageMagick like geometry: ``"64x64"``, ``"64x"``, ``"100x50+10+20"``.

    Returns:
        tuple: (width, height, x, y), missing parts are None

    Raises:
        ValueError: If the geometry can't be parsed
    """
    match = GEOMETRY_PATTERN.match(str(value).strip())
    if match is None:
        raise ValueError(f"Invalid geometry: {value!r}")

    def _int(group: str) -> int | None:
        part = match.group(group)
        return int(part) if part is not None else None

    return _int("width"), _int("height"), _int("x"), _int("y")


def is_original_style(name: str, props: Any) -> bool:
    """
    Whether a style passes the source through untouched: it is named
    ``original`` or its options are ``True``.
    """
    return name == ORIGINAL_STYLE or props is True
