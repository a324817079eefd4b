from abc import ABC, abstractmethod
from typing import Any


class PreprocessorInterface(ABC):
    """
    Abstract base class for preprocessors deriving style files from an original.
    """

    name: str = "preprocessor"

    @abstractmethod
    async def process(self, filename: str, styles: dict[str, Any], instance: Any = None) -> dict[str, str]:
        """
        Derive one file per style.

        Args:
            filename (str): The original file
            styles (dict[str, Any]): Resolved style options keyed by style name
            instance (Any): The model instance, passed to callable style options

        Returns:
            dict[str, str]: Derived file path keyed by style name
        """
        pass
