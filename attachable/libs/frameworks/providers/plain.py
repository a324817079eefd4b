from __future__ import annotations

import asyncio
import functools
import inspect
from typing import Any

from attachable.core.exceptions import ProviderError
from attachable.core.logging import get_logger, log_exception_with_context
from attachable.libs.frameworks.interface import AfterDeleteHandler, AttachMethod, DetachMethod, ProviderInterface

logger = get_logger(__name__)


class PlainProvider(ProviderInterface):
    """
    Provider for plain Python classes.

    Attributes become ``None`` class defaults, ``attach``/``detach`` become
    methods and the after-delete handler runs once the class's ``delete``
    method returns.

    Example:
        class Document:
            resume = None

            async def delete(self):
                ...

        plugin.apply(Document)
        await document.attach("resume", "/tmp/upload.pdf")
    """

    name = "plain"

    def __init__(self) -> None:
        self._pending: set[asyncio.Task] = set()

    def add_attribute(self, model: Any, attribute: str, styles: list[str]) -> None:
        if not hasattr(model, attribute):
            setattr(model, attribute, None)

    def add_methods(self, model: Any, attach: AttachMethod, detach: DetachMethod) -> None:
        model.attach = attach
        model.detach = detach

    def add_after_delete(self, model: Any, handler: AfterDeleteHandler) -> None:
        """
        Wrap ``model.delete`` so ``handler(instance)`` runs after it.

        Async ``delete`` methods await the handler, so its errors propagate
        from ``delete``. Synchronous ones run it to completion when no event
        loop is running, with the same propagation. Called from inside a
        running loop, a synchronous ``delete`` can only schedule the handler
        as a task: a failure is then logged and never reaches the caller.
        Use an async ``delete`` in async code to get removal errors back.

        Raises:
            ProviderError: If the model has no ``delete`` method
        """
        original = getattr(model, "delete", None)
        if not callable(original):
            raise ProviderError(self, f"{getattr(model, '__name__', model)} has no delete method")

        if inspect.iscoroutinefunction(original):

            @functools.wraps(original)
            async def delete(instance, *args, **kwargs):
                result = await original(instance, *args, **kwargs)
                await handler(instance)
                return result

        else:

            @functools.wraps(original)
            def delete(instance, *args, **kwargs):
                result = original(instance, *args, **kwargs)
                self._run(handler(instance))
                return result

        model.delete = delete

    def _run(self, coroutine: Any) -> None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            asyncio.run(coroutine)
            return

        task = loop.create_task(coroutine)
        self._pending.add(task)
        task.add_done_callback(self._on_done)

    def _on_done(self, task: asyncio.Task) -> None:
        self._pending.discard(task)
        if not task.cancelled() and task.exception() is not None:
            log_exception_with_context(task.exception(), "After delete handler failed", log=logger)
