from typing import Any, Union

# Identifier returned by a storage backend, usually a public path or object key
StoredIdentifier = Any

# Scalar attributes hold one identifier, styled attributes one per style
StoredValue = Union[StoredIdentifier, dict[str, StoredIdentifier]]
