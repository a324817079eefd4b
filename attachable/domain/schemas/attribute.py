from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import Annotated, Any, Literal

import inflection
from attachable.core.constants import (
    BEFORE_VALIDATE_KEY,
    PREPROCESSOR_KEY,
    RESERVED_ATTRIBUTE_KEYS,
    STORAGE_KEY,
    VALIDATE_KEY,
)
from attachable.core.exceptions import ConfigError
from pydantic import BaseModel, ConfigDict, Field


class StaticStyle(BaseModel):
    """
    A style whose definition is known at configuration time.

    Attributes:
        value (Any): Options handed to the preprocessor, e.g. ``{"resize": "64x64"}``
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    kind: Literal["static"] = "static"
    value: Any = None

    def resolve(self, instance: Any) -> Any:
        return self.value


class ComputedStyle(BaseModel):
    """
    A style computed from the instance on every attach call.

    Attributes:
        function (Callable): Called with the instance, returns the style options
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    kind: Literal["computed"] = "computed"
    function: Callable[[Any], Any]

    def resolve(self, instance: Any) -> Any:
        return self.function(instance)


StyleDefinition = Annotated[StaticStyle | ComputedStyle, Field(discriminator="kind")]


def to_style_definition(value: Any) -> StaticStyle | ComputedStyle:
    if isinstance(value, (StaticStyle, ComputedStyle)):
        return value
    if callable(value):
        return ComputedStyle(function=value)
    return StaticStyle(value=value)


class AttributeSpec(BaseModel):
    """
    Configuration of one file-backed attribute.

    Attributes:
        name (str): Attribute name on the model
        styles (dict[str, StyleDefinition]): Styles in declaration order; empty for scalar attributes
        before_validate (Callable | None): Hook that may substitute the working file
        validator (Callable | None): Pass/fail validator, raises (or returns ``False``) on failure
        storage (Any | None): Storage overriding the plugin default
        preprocessor (Any | None): Preprocessor overriding the plugin default
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    name: str
    styles: dict[str, StyleDefinition] = Field(default_factory=dict)
    before_validate: Callable[..., Any] | None = None
    validator: Callable[..., Any] | None = None
    storage: Any | None = None
    preprocessor: Any | None = None

    @property
    def style_names(self) -> list[str]:
        return list(self.styles)

    @property
    def has_styles(self) -> bool:
        """Styled vs scalar. Derived from ``styles`` and never stored."""
        return bool(self.styles)

    @classmethod
    def from_config(cls, name: str, config: Any) -> AttributeSpec:
        """
        Build a spec from the dictionary form used in plugin options.

        Reserved keys (``before_validate``, ``validate``, ``storage``,
        ``preprocessor``, also accepted in camelCase) configure the attribute,
        every other key declares a style. Any non-mapping config (``True``
        for example) declares a scalar attribute.

        Args:
            name: Attribute name
            config: ``AttributeSpec``, mapping or scalar marker

        Returns:
            AttributeSpec: The normalized spec

        Raises:
            ConfigError: If a reserved key holds an unusable value or is given twice
        """
        if isinstance(config, AttributeSpec):
            return config if config.name == name else config.model_copy(update={"name": name})

        if not isinstance(config, Mapping):
            return cls(name=name)

        options: dict[str, Any] = {}
        styles: dict[str, StaticStyle | ComputedStyle] = {}
        for key, value in config.items():
            # beforeValidate and before_validate name the same option
            option = inflection.underscore(key) if isinstance(key, str) else key
            if option not in RESERVED_ATTRIBUTE_KEYS:
                styles[key] = to_style_definition(value)
                continue
            if option in options:
                raise ConfigError(f"Attribute {name!r}: {option} is configured more than once")
            options[option] = value

        before_validate = options.get(BEFORE_VALIDATE_KEY)
        validator = options.get(VALIDATE_KEY)

        # validator objects bundle both hooks
        if validator is not None and not callable(validator):
            if not callable(getattr(validator, "validate", None)):
                raise ConfigError(f"Attribute {name!r}: validate must be a callable or expose validate()")
            if before_validate is None:
                before_validate = getattr(validator, "before_validate", None)
            validator = validator.validate

        if before_validate is not None and not callable(before_validate):
            raise ConfigError(f"Attribute {name!r}: before_validate must be callable")

        return cls(
            name=name,
            styles=styles,
            before_validate=before_validate,
            validator=validator,
            storage=options.get(STORAGE_KEY),
            preprocessor=options.get(PREPROCESSOR_KEY),
        )
