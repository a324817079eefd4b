from typing import Any

import pytest
from attachable.core.logging import clear_log_context
from attachable.libs.preprocessors.interface import PreprocessorInterface
from attachable.libs.preprocessors.utils import get_filename_for_style, get_style_format, is_original_style
from attachable.libs.storage.interface import StorageInterface


class RecordingStorage(StorageInterface):
    """In-memory storage recording every call in order."""

    name = "memory"

    def __init__(self, fail_on: set[str] | None = None) -> None:
        self.calls: list[tuple[str, Any, str]] = []
        self.fail_on = fail_on or set()

    async def write(self, filename: str, attribute: str, instance: Any) -> str:
        self.calls.append(("write", filename, attribute))
        if filename in self.fail_on:
            raise OSError(f"Could not store {filename}")
        return f"stored:{filename}"

    async def remove(self, identifier: Any, attribute: str, instance: Any) -> None:
        self.calls.append(("remove", identifier, attribute))
        if identifier in self.fail_on:
            raise OSError(f"Could not remove {identifier}")

    @property
    def writes(self) -> list[Any]:
        return [call[1] for call in self.calls if call[0] == "write"]

    @property
    def removes(self) -> list[Any]:
        return [call[1] for call in self.calls if call[0] == "remove"]


class RecordingPreprocessor(PreprocessorInterface):
    """Preprocessor deriving file names only, recording the styles it received."""

    name = "recording"

    def __init__(self, result: dict[str, str] | None = None) -> None:
        self.calls: list[tuple[str, dict[str, Any]]] = []
        self.result = result

    async def process(self, filename: str, styles: dict[str, Any], instance: Any = None) -> dict[str, str]:
        self.calls.append((filename, dict(styles)))
        if self.result is not None:
            return self.result
        return {
            style: filename
            if is_original_style(style, props)
            else get_filename_for_style(filename, style, get_style_format(props))
            for style, props in styles.items()
        }


class Photo:
    def __init__(self, crop: Any = None) -> None:
        self.crop = crop


@pytest.fixture
def storage() -> RecordingStorage:
    return RecordingStorage()


@pytest.fixture
def preprocessor() -> RecordingPreprocessor:
    return RecordingPreprocessor()


@pytest.fixture(autouse=True)
def reset_log_context():
    yield
    clear_log_context()


@pytest.fixture
def model() -> type:
    """A fresh model class per test, providers mutate the class they're applied to."""

    class Picture(Photo):
        pass

    return Picture
