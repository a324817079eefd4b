# Attribute config keys that configure behaviour instead of declaring a style
BEFORE_VALIDATE_KEY = "before_validate"
VALIDATE_KEY = "validate"
STORAGE_KEY = "storage"
PREPROCESSOR_KEY = "preprocessor"

RESERVED_ATTRIBUTE_KEYS: frozenset[str] = frozenset(
    {
        BEFORE_VALIDATE_KEY,
        VALIDATE_KEY,
        STORAGE_KEY,
        PREPROCESSOR_KEY,
    }
)

ORIGINAL_STYLE = "original"

# Style property prefixes
FORMAT_KEY = "$format"
RESERVED_PROPERTY_PREFIX = "$"
FLAG_PREFIXES = ("-", "+")

ALLOWED_MIME_TYPES = [
    "image/jpeg",
    "image/png",
    "image/gif",
    "image/webp",
    "image/svg+xml",
    "image/tiff",
    "application/pdf",
    "text/plain",
    "application/msword",
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    "application/vnd.ms-excel",
    "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    "application/zip",
]
