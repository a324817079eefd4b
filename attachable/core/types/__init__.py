from .file_input import FileInput, HasPath, get_filename  # noqa: F401
from .stored_value import StoredIdentifier, StoredValue  # noqa: F401
