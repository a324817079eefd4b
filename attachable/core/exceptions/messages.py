PROVIDER_NOT_SET_ERROR = "Provider isn't set"

STORAGE_NOT_SET_ERROR = "options.storage must be set"

ATTRIBUTES_NOT_SET_ERROR = "options.attributes must be set"

PREPROCESSOR_NOT_SET_ERROR = "options.preprocessor must be set if attributes have pre-processing options"

PREPROCESSOR_DID_NOT_RETURN = "Preprocessor process() didn't return anything"

NO_STYLES_ERROR = "No styles was set to process"

NO_PROPERTIES_ERROR = "Can't have a style without any properties"


def STORAGE_METHOD_NOT_SET(method: str) -> str:
    return f"Storage doesn't have {method} method defined"


def PROVIDER_METHOD_NOT_SET(method: str) -> str:
    return f"Provider doesn't have {method} method defined"


def PROVIDER_DIDNT_BIND_INSTANCE(method: str, to: str) -> str:
    return f"Provider {method} didn't bind instance to {to}()"


def UNSUPPORTED_OPERATION_ERROR(operation: str, backend: str) -> str:
    return f"Style operation {operation!r} is not supported by the {backend} preprocessor"
