from abc import ABC, abstractmethod
from typing import Any


class ValidatorInterface(ABC):
    """
    Validates files before anything is derived or stored.

    Passing an instance as an attribute's ``validate`` option wires both hooks.
    """

    def before_validate(self, filename: str, instance: Any) -> Any:
        """
        Optionally substitute the file, e.g. with a normalized copy.

        Returns:
            The replacement file, or None to keep ``filename``
        """
        return None

    @abstractmethod
    async def validate(self, filename: str, instance: Any) -> None:
        """
        Raise when the file is not acceptable.
        """
        pass
