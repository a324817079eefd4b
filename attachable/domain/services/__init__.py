from .attachment_service import AttachmentsPlugin, create_plugin  # noqa: F401
from .style_service import get_style_names, resolve_styles  # noqa: F401
from .validation_service import run_validation  # noqa: F401
