from .imagemagick import ImageMagickPreprocessor  # noqa: F401
from .pillow import PillowPreprocessor  # noqa: F401
