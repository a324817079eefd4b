from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from typing import Any

from attachable.core.config import settings
from attachable.core.exceptions import (
    ConfigError,
    PartialAttachError,
    PreprocessorError,
    ProviderError,
    StorageError,
    UnknownAttributeError,
    messages,
)
from attachable.core.helpers.misc import has_method
from attachable.core.logging import add_to_log_context, get_logger, log_exception_with_context, new_operation_id
from attachable.core.types import FileInput, StoredIdentifier, StoredValue, get_filename
from attachable.domain.schemas import AttributeSpec
from attachable.domain.services.style_service import get_style_names, resolve_styles
from attachable.domain.services.validation_service import run_validation

logger = get_logger(__name__)


def _check_storage(storage: Any) -> None:
    for method in ("write", "remove"):
        if not has_method(storage, method):
            raise ConfigError(messages.STORAGE_METHOD_NOT_SET(method))


class AttachmentsPlugin:
    """
    Attaches files to model instances.

    Validates incoming files, derives styles through a preprocessor, stores
    every resulting file and removes files that get replaced or whose
    instance gets deleted.

    Args:
        provider: Model framework provider (see ``ProviderInterface``)
        storage: Default storage (see ``StorageInterface``)
        preprocessor: Default preprocessor, required if an attribute has styles
            and doesn't configure its own
        attributes: Attribute configs keyed by name, or ``AttributeSpec`` objects
        after_delete: Remove stored files when instances get deleted,
            defaults to ``settings.AFTER_DELETE``

    Raises:
        ConfigError: If a required option is missing or unusable

    Example:
        plugin = AttachmentsPlugin(
            PlainProvider(),
            storage=LocalFsStorage(LocalFsConfiguration(path_to_public="/srv/public", public_basepath="avatars")),
            preprocessor=ImageMagickPreprocessor(),
            attributes={
                "avatar": {
                    "original": True,
                    "thumb": {"resize": "64x64"},
                },
                "resume": True,
            },
        )
        plugin.apply(User)
    """

    def __init__(
        self,
        provider: Any = None,
        *,
        storage: Any = None,
        preprocessor: Any = None,
        attributes: Mapping[str, Any] | Iterable[AttributeSpec] | None = None,
        after_delete: bool | None = None,
    ) -> None:
        if provider is None:
            raise ConfigError(messages.PROVIDER_NOT_SET_ERROR)
        if storage is None:
            raise ConfigError(messages.STORAGE_NOT_SET_ERROR)
        if attributes is None:
            raise ConfigError(messages.ATTRIBUTES_NOT_SET_ERROR)

        _check_storage(storage)

        self.provider = provider
        self.storage = storage
        self.preprocessor = preprocessor
        self.after_delete = settings.AFTER_DELETE if after_delete is None else after_delete

        if not isinstance(attributes, Mapping):
            attributes = {spec.name: spec for spec in attributes}

        self.attributes: dict[str, AttributeSpec] = {
            name: AttributeSpec.from_config(name, config) for name, config in attributes.items()
        }

        for spec in self.attributes.values():
            if spec.storage is not None:
                _check_storage(spec.storage)
            if spec.has_styles and not has_method(self.get_preprocessor(spec), "process"):
                raise ConfigError(messages.PREPROCESSOR_NOT_SET_ERROR)

        logger.debug(
            "Attachments plugin configured",
            extra={"attributes": {name: spec.style_names for name, spec in self.attributes.items()}},
        )

    def get_attribute(self, attribute: str) -> AttributeSpec:
        try:
            return self.attributes[attribute]
        except KeyError:
            raise UnknownAttributeError(attribute) from None

    def get_storage(self, spec: AttributeSpec) -> Any:
        return spec.storage or self.storage

    def get_preprocessor(self, spec: AttributeSpec) -> Any:
        return spec.preprocessor or self.preprocessor

    def has_styles(self, attribute: str) -> bool:
        return self.get_attribute(attribute).has_styles

    async def attach(self, instance: Any, attribute: str, file: FileInput | None) -> Any:
        """
        Attach a file to an instance attribute.

        Files replacing a previous value are stored first; the previous files
        are only removed once every new file is stored.

        Args:
            instance (Any): The model instance
            attribute (str): Attribute name
            file (FileInput | None): The file, ``None`` detaches the attribute

        Returns:
            Any: The instance

        Raises:
            UnknownAttributeError: If the attribute isn't configured
            ConfigError: If no path can be read from ``file``
            ValidationError: If the validator rejects the file
            PreprocessorError: If resolving or deriving styles fails
            StorageError: If storing (or removing replaced) files fails;
                ``PartialAttachError`` when some styles were already stored
        """

        if file is None:
            return await self.detach(instance, attribute)

        spec = self.get_attribute(attribute)

        with add_to_log_context(attribute=attribute, operation="attach", operation_id=new_operation_id()):
            filename = await run_validation(spec, get_filename(file), instance)

            if spec.has_styles:
                stored = await self._store_styles(spec, filename, instance)
            else:
                stored = await self._write(spec, None, filename, instance)

            previous = getattr(instance, attribute, None)
            if previous is not None:
                # same-named uploads overwrite in place, their identifiers must survive
                keep = self._stored_identifiers(spec, stored)
                await self._remove(spec, instance, previous, keep=keep)
                setattr(instance, attribute, None)

            setattr(instance, attribute, stored)
            logger.info(f"Attached {filename} to {attribute}")

        return instance

    async def detach(self, instance: Any, attribute: str) -> Any:
        """
        Remove every stored file of an attribute and clear it.

        Removal stops at the first failure; files removed before it stay removed.

        Args:
            instance (Any): The model instance
            attribute (str): Attribute name

        Returns:
            Any: The instance

        Raises:
            UnknownAttributeError: If the attribute isn't configured
            StorageError: If a removal fails
        """

        spec = self.get_attribute(attribute)

        with add_to_log_context(attribute=attribute, operation="detach"):
            await self._remove(spec, instance, getattr(instance, attribute, None))
            setattr(instance, attribute, None)
            logger.debug(f"Detached {attribute}")

        return instance

    async def handle_after_delete(self, instance: Any = None) -> None:
        """
        Remove the stored files of every attribute of a deleted instance.

        Attributes are detached in configuration order, stopping at the first failure.

        Raises:
            ProviderError: If the provider didn't pass the instance
            StorageError: If a removal fails
        """

        if instance is None:
            raise ProviderError(
                self.provider,
                messages.PROVIDER_DIDNT_BIND_INSTANCE("add_after_delete", "handle_after_delete"),
            )

        for attribute in self.attributes:
            await self.detach(instance, attribute)

    async def _remove(
        self,
        spec: AttributeSpec,
        instance: Any,
        value: StoredValue,
        keep: list[StoredIdentifier] | None = None,
    ) -> None:
        storage = self.get_storage(spec)

        for identifier in self._stored_identifiers(spec, value):
            if keep and identifier in keep:
                logger.debug(f"Keeping {identifier}, it was just stored again")
                continue
            try:
                await storage.remove(identifier, spec.name, instance)
            except Exception as e:
                log_exception_with_context(e, f"Failed to remove {identifier}", logging.WARNING, log=logger)
                raise StorageError(storage, e, attribute=spec.name) from e

    async def _store_styles(self, spec: AttributeSpec, filename: str, instance: Any) -> dict[str, StoredIdentifier]:
        preprocessor = self.get_preprocessor(spec)

        try:
            styles = resolve_styles(spec, instance)
            processed = await preprocessor.process(filename, styles, instance)
        except Exception as e:
            log_exception_with_context(e, "Failed to process styles", log=logger)
            raise PreprocessorError(preprocessor, e, attribute=spec.name) from e

        if not processed:
            raise PreprocessorError(preprocessor, messages.PREPROCESSOR_DID_NOT_RETURN, attribute=spec.name)

        # stores run one at a time so a failure stops before touching more files
        stored: dict[str, StoredIdentifier] = {}
        for style in self._ordered_styles(spec, processed):
            stored[style] = await self._write(spec, stored, processed[style], instance, style=style)

        return stored

    async def _write(
        self,
        spec: AttributeSpec,
        stored: dict[str, StoredIdentifier] | None,
        filename: str,
        instance: Any,
        style: str | None = None,
    ) -> StoredIdentifier:
        storage = self.get_storage(spec)

        try:
            return await storage.write(filename, spec.name, instance)
        except Exception as e:
            log_exception_with_context(e, f"Failed to store {filename}", log=logger)
            if stored:
                raise PartialAttachError(
                    storage,
                    e,
                    attribute=spec.name,
                    stored=stored,
                    failed_style=style,
                ) from e
            raise StorageError(storage, e, attribute=spec.name) from e

    @staticmethod
    def _ordered_styles(spec: AttributeSpec, processed: Mapping[str, Any]) -> list[str]:
        names = [name for name in get_style_names(spec) if name in processed]
        return names + [name for name in processed if name not in spec.styles]

    @staticmethod
    def _stored_identifiers(spec: AttributeSpec, value: StoredValue) -> list[StoredIdentifier]:
        if value is None:
            return []
        if spec.has_styles and isinstance(value, Mapping):
            return [identifier for identifier in value.values() if identifier is not None]
        return [value]

    def attach_attributes(self, model: Any) -> None:
        """
        Declare every configured attribute on the model through the provider.
        """

        if not has_method(self.provider, "add_attribute"):
            raise ProviderError(self.provider, messages.PROVIDER_METHOD_NOT_SET("add_attribute"))

        for name, spec in self.attributes.items():
            self.provider.add_attribute(model, name, get_style_names(spec))

    def apply(self, model: Any) -> Any:
        """
        Install the plugin on a model: attributes, ``attach``/``detach``
        instance methods and, when enabled, the after-delete hook.

        Args:
            model (Any): Whatever the provider expects (a model class, a schema...)

        Returns:
            Any: The model

        Raises:
            ProviderError: If the provider lacks a required capability
        """

        self.attach_attributes(model)

        if not has_method(self.provider, "add_methods"):
            raise ProviderError(self.provider, messages.PROVIDER_METHOD_NOT_SET("add_methods"))

        plugin = self

        async def attach(instance: Any, attribute: str, file: FileInput | None) -> Any:
            return await plugin.attach(instance, attribute, file)

        async def detach(instance: Any, attribute: str) -> Any:
            return await plugin.detach(instance, attribute)

        self.provider.add_methods(model, attach, detach)

        if self.after_delete:
            if not has_method(self.provider, "add_after_delete"):
                raise ProviderError(self.provider, messages.PROVIDER_METHOD_NOT_SET("add_after_delete"))
            try:
                self.provider.add_after_delete(model, self.handle_after_delete)
            except NotImplementedError:
                raise ProviderError(self.provider, messages.PROVIDER_METHOD_NOT_SET("add_after_delete")) from None

        return model

    def create(self):
        """Returns the plugin function, ``apply`` bound to this plugin."""
        return self.apply


def create_plugin(provider: Any = None, **options: Any):
    """
    Creates the plugin function from ``AttachmentsPlugin`` options.

    Example:
        plugin = create_plugin(PlainProvider(), storage=storage, attributes={"resume": True})
        plugin(Candidate)
    """
    return AttachmentsPlugin(provider, **options).create()
