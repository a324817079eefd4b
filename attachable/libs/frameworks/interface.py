from abc import ABC, abstractmethod
from collections.abc import Awaitable, Callable
from typing import Any

AttachMethod = Callable[[Any, str, Any], Awaitable[Any]]
DetachMethod = Callable[[Any, str], Awaitable[Any]]
AfterDeleteHandler = Callable[[Any], Awaitable[None]]


class ProviderInterface(ABC):
    """
    Binds the attachments plugin to a model framework.
    """

    name: str = "provider"

    @abstractmethod
    def add_attribute(self, model: Any, attribute: str, styles: list[str]) -> None:
        """
        Declare a file-backed attribute on the model.

        Args:
            model (Any): The model class
            attribute (str): Attribute name
            styles (list[str]): Style names, empty for scalar attributes
        """
        pass

    @abstractmethod
    def add_methods(self, model: Any, attach: AttachMethod, detach: DetachMethod) -> None:
        """
        Install ``attach`` and ``detach`` so they're called with the instance
        as first argument (``await instance.attach("avatar", path)``).
        """
        pass

    def add_after_delete(self, model: Any, handler: AfterDeleteHandler) -> None:
        """
        Run ``handler(instance)`` after an instance of the model is deleted.

        Optional, only required when the plugin hooks deletes.
        """
        raise NotImplementedError
