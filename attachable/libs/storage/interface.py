from abc import ABC, abstractmethod
from typing import Any

from attachable.core.types import StoredIdentifier


class StorageInterface(ABC):
    """
    Abstract base class for attachment storage backends.

    Backends persist one file per call under an attribute scoped identity and
    return the identifier that gets assigned to the instance.
    """

    name: str = "storage"

    @abstractmethod
    async def write(self, filename: str, attribute: str, instance: Any) -> StoredIdentifier:
        """
        Persist a local file.

        Args:
            filename (str): Path of the local file to store
            attribute (str): Attribute the file is attached to
            instance (Any): The model instance

        Returns:
            StoredIdentifier: Identifier to hand back to ``remove``
        """
        pass

    @abstractmethod
    async def remove(self, identifier: StoredIdentifier, attribute: str, instance: Any) -> None:
        """
        Remove a stored file. A missing file is not an error.

        Args:
            identifier (StoredIdentifier): Identifier returned by ``write``
            attribute (str): Attribute the file is attached to
            instance (Any): The model instance
        """
        pass
