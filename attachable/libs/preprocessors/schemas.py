from pydantic import BaseModel, Field


class PreprocessorConfiguration(BaseModel):
    """
    Options shared by every preprocessor.

    Attributes:
        cleanup_source (bool): Remove the source file after processing when no
            style keeps the original. Set it to False when the source is owned
            by the caller rather than a staged upload.
    """

    cleanup_source: bool = True


class ImageMagickConfiguration(PreprocessorConfiguration):
    """
    Schema for the ImageMagick preprocessor.

    Attributes:
        convert_binary (str): ``convert`` executable, ``magick`` works on ImageMagick 7.
    """

    convert_binary: str = "convert"


class PillowConfiguration(PreprocessorConfiguration):
    """
    Schema for the Pillow preprocessor.

    Attributes:
        quality (int): Default quality for lossy output formats.
    """

    quality: int = Field(default=85, ge=1, le=100)
