from .base import BasePreprocessor  # noqa: F401
from .factory import PreprocessorFactory  # noqa: F401
from .interface import PreprocessorInterface  # noqa: F401
from .providers import ImageMagickPreprocessor, PillowPreprocessor  # noqa: F401
from .schemas import ImageMagickConfiguration, PillowConfiguration, PreprocessorConfiguration  # noqa: F401
