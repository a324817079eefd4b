from __future__ import annotations

import asyncio
from typing import Any

from attachable.core.exceptions import ProviderError
from attachable.core.logging import get_logger
from attachable.libs.frameworks.interface import AfterDeleteHandler, AttachMethod, DetachMethod, ProviderInterface
from sqlalchemy import event
from sqlalchemy.util import await_only

logger = get_logger(__name__)


class SQLModelProvider(ProviderInterface):
    """
    Provider for SQLModel table models.

    Attachment attributes must be mapped columns able to hold the stored
    value: a string column for scalar attributes, a JSON column for styled
    ones.

    Example:
        class User(SQLModel, table=True):
            id: int | None = Field(default=None, primary_key=True)
            avatar: dict | None = Field(default=None, sa_column=Column(JSON))

        plugin = AttachmentsPlugin(SQLModelProvider(), storage=storage, preprocessor=preprocessor,
                                   attributes={"avatar": {"thumb": {"resize": "64x64"}}})
        plugin.apply(User)
    """

    name = "sqlmodel"

    def __init__(self) -> None:
        self._listeners: dict[Any, list[Any]] = {}

    def add_attribute(self, model: Any, attribute: str, styles: list[str]) -> None:
        """
        Check the attribute is a mapped column and record its styles in
        ``model.__attachments__``.

        Raises:
            ProviderError: If the model isn't a table model or has no such column
        """
        table = getattr(model, "__table__", None)
        if table is None:
            raise ProviderError(self, f"{model.__name__} is not a table model")
        if attribute not in table.columns:
            raise ProviderError(self, f"{model.__name__} has no column {attribute!r}")

        attachments = dict(getattr(model, "__attachments__", None) or {})
        attachments[attribute] = list(styles)
        model.__attachments__ = attachments

    def add_methods(self, model: Any, attach: AttachMethod, detach: DetachMethod) -> None:
        model.attach = attach
        model.detach = detach

    def add_after_delete(self, model: Any, handler: AfterDeleteHandler) -> None:
        """
        Run ``handler`` from the mapper ``after_delete`` event.

        Inside an ``AsyncSession`` flush the handler is awaited on the running
        loop; with a sync ``Session`` it runs in its own loop.
        """

        def after_delete(mapper: Any, connection: Any, target: Any) -> None:
            logger.debug(f"Removing attachments of deleted {mapper.class_.__name__}")
            try:
                asyncio.get_running_loop()
            except RuntimeError:
                asyncio.run(handler(target))
            else:
                await_only(handler(target))

        event.listen(model, "after_delete", after_delete)
        self._listeners.setdefault(model, []).append(after_delete)

    def remove_after_delete(self, model: Any) -> None:
        """Remove the listeners this provider installed on the model."""
        for listener in self._listeners.pop(model, []):
            event.remove(model, "after_delete", listener)
