from .attribute import (  # noqa: F401
    AttributeSpec,
    ComputedStyle,
    StaticStyle,
    StyleDefinition,
    to_style_definition,
)
