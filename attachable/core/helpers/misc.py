import inspect
from typing import Any


async def maybe_await(value: Any) -> Any:
    """
    Await ``value`` if it is awaitable, otherwise return it unchanged.

    Lets hooks such as validators be written as plain functions or coroutines.
    """

    if inspect.isawaitable(value):
        return await value
    return value


def has_method(obj: Any, name: str) -> bool:
    """
    Check that ``obj`` exposes a callable ``name``.

    Attributes:\n
        obj (Any): Any object or type
        name (str): The name of the method
    """

    return callable(getattr(obj, name, None))
