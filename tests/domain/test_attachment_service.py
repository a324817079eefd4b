from unittest.mock import AsyncMock, MagicMock

import pytest
from attachable.core.exceptions import (
    ConfigError,
    PartialAttachError,
    PreprocessorError,
    ProviderError,
    StorageError,
    UnknownAttributeError,
    ValidationError,
    messages,
)
from attachable.domain.schemas import AttributeSpec
from attachable.domain.services import AttachmentsPlugin, create_plugin
from attachable.libs.frameworks import PlainProvider

from conftest import Photo, RecordingPreprocessor, RecordingStorage


def picture_styles():
    return {
        "original": True,
        "small": lambda instance: {"resize": "16x16", "crop": instance.crop},
    }


class TestAttachmentsPluginConstruction:
    """Test cases for AttachmentsPlugin configuration checks"""

    def test_missing_provider(self, storage):
        """Test that a provider is required."""
        with pytest.raises(ConfigError, match=messages.PROVIDER_NOT_SET_ERROR):
            AttachmentsPlugin(None, storage=storage, attributes={"resume": True})

    def test_missing_storage(self):
        """Test that a storage is required."""
        with pytest.raises(ConfigError, match=messages.STORAGE_NOT_SET_ERROR):
            AttachmentsPlugin(PlainProvider(), attributes={"resume": True})

    def test_missing_attributes(self, storage):
        """Test that attributes are required."""
        with pytest.raises(ConfigError, match="options.attributes must be set"):
            AttachmentsPlugin(PlainProvider(), storage=storage)

    def test_storage_without_remove(self):
        """Test that a storage lacking remove() is rejected."""

        class WriteOnly:
            async def write(self, filename, attribute, instance):
                return filename

        with pytest.raises(ConfigError, match="remove"):
            AttachmentsPlugin(PlainProvider(), storage=WriteOnly(), attributes={"resume": True})

    def test_styled_attribute_without_preprocessor(self, storage):
        """Test that styles need a default or per-attribute preprocessor."""
        with pytest.raises(ConfigError, match="options.preprocessor must be set"):
            AttachmentsPlugin(PlainProvider(), storage=storage, attributes={"picture": picture_styles()})

    def test_styled_attribute_with_own_preprocessor(self, storage, preprocessor):
        """Test that a per-attribute preprocessor satisfies the check."""
        plugin = AttachmentsPlugin(
            PlainProvider(),
            storage=storage,
            attributes={"picture": {**picture_styles(), "preprocessor": preprocessor}},
        )

        spec = plugin.get_attribute("picture")
        assert plugin.get_preprocessor(spec) is preprocessor
        assert spec.style_names == ["original", "small"]

    def test_scalar_attribute_without_preprocessor(self, storage):
        """Test that scalar attributes don't need a preprocessor."""
        plugin = AttachmentsPlugin(PlainProvider(), storage=storage, attributes={"resume": True})

        assert plugin.has_styles("resume") is False

    def test_attributes_as_specs(self, storage, preprocessor):
        """Test that attributes may be given as AttributeSpec objects."""
        plugin = AttachmentsPlugin(
            PlainProvider(),
            storage=storage,
            preprocessor=preprocessor,
            attributes=[AttributeSpec.from_config("picture", picture_styles()), AttributeSpec(name="resume")],
        )

        assert list(plugin.attributes) == ["picture", "resume"]
        assert plugin.has_styles("picture") is True


class TestAttach:
    """Test cases for AttachmentsPlugin.attach"""

    def setup_method(self):
        self.storage = RecordingStorage()
        self.preprocessor = RecordingPreprocessor()
        self.plugin = AttachmentsPlugin(
            PlainProvider(),
            storage=self.storage,
            preprocessor=self.preprocessor,
            attributes={
                "picture": picture_styles(),
                "scalar": True,
                "broken": {"small": lambda instance: {"crop": instance.crop["box"]}},
            },
        )

    async def test_scalar_attach(self):
        """Test that a scalar attribute stores one file and assigns its identifier."""
        instance = Photo()

        result = await self.plugin.attach(instance, "scalar", "/tmp/b.bin")

        assert result is instance
        assert self.storage.calls == [("write", "/tmp/b.bin", "scalar")]
        assert instance.scalar == "stored:/tmp/b.bin"
        assert self.preprocessor.calls == []

    async def test_styled_attach(self):
        """Test that a styled attribute stores one file per style and assigns a mapping."""
        instance = Photo(crop=100)

        await self.plugin.attach(instance, "picture", "/tmp/a.jpg")

        assert self.preprocessor.calls == [
            ("/tmp/a.jpg", {"original": True, "small": {"resize": "16x16", "crop": 100}}),
        ]
        assert self.storage.writes == ["/tmp/a.jpg", "/tmp/a_small.jpg"]
        assert instance.picture == {
            "original": "stored:/tmp/a.jpg",
            "small": "stored:/tmp/a_small.jpg",
        }

    async def test_computed_style_is_late_bound(self):
        """Test that computed styles are evaluated on every attach."""
        instance = Photo(crop=10)
        await self.plugin.attach(instance, "picture", "/tmp/a.jpg")

        instance.crop = 20
        await self.plugin.attach(instance, "picture", "/tmp/c.jpg")

        assert self.preprocessor.calls[0][1]["small"]["crop"] == 10
        assert self.preprocessor.calls[1][1]["small"]["crop"] == 20

    async def test_attach_file_record(self):
        """Test that records carrying a path are accepted."""
        instance = Photo()

        await self.plugin.attach(instance, "scalar", {"path": "/tmp/upload.bin", "size": 3})

        assert instance.scalar == "stored:/tmp/upload.bin"

    async def test_attach_none_detaches(self):
        """Test that attaching None is the same as detaching."""
        instance = Photo()
        instance.scalar = "stored:/tmp/old.bin"

        await self.plugin.attach(instance, "scalar", None)

        assert self.storage.calls == [("remove", "stored:/tmp/old.bin", "scalar")]
        assert instance.scalar is None

    async def test_unknown_attribute(self):
        """Test that unknown attributes fail before any I/O."""
        with pytest.raises(UnknownAttributeError) as exc_info:
            await self.plugin.attach(Photo(), "cover", "/tmp/a.jpg")

        assert exc_info.value.attribute == "cover"
        assert isinstance(exc_info.value, ConfigError)
        assert self.storage.calls == []
        assert self.preprocessor.calls == []

    async def test_replacing_scalar_value(self):
        """Test that the previous file is removed only after the new one is stored."""
        instance = Photo()
        instance.scalar = "stored:/tmp/old.bin"

        await self.plugin.attach(instance, "scalar", "/tmp/new.bin")

        assert self.storage.calls == [
            ("write", "/tmp/new.bin", "scalar"),
            ("remove", "stored:/tmp/old.bin", "scalar"),
        ]
        assert instance.scalar == "stored:/tmp/new.bin"

    async def test_replacing_styled_value(self):
        """Test that every previously stored style is removed once, after the new stores."""
        instance = Photo(crop=5)
        instance.picture = {"original": "old-original", "small": "old-small"}

        await self.plugin.attach(instance, "picture", "/tmp/a.jpg")

        assert [call[0] for call in self.storage.calls] == ["write", "write", "remove", "remove"]
        assert self.storage.removes == ["old-original", "old-small"]

    async def test_reattaching_same_file_keeps_it(self):
        """Test that an identifier written again by the new attach is never removed."""
        instance = Photo()

        await self.plugin.attach(instance, "scalar", "/tmp/resume.pdf")
        await self.plugin.attach(instance, "scalar", "/tmp/resume.pdf")

        assert self.storage.writes == ["/tmp/resume.pdf", "/tmp/resume.pdf"]
        assert self.storage.removes == []
        assert instance.scalar == "stored:/tmp/resume.pdf"

    async def test_reattaching_styled_file_removes_only_stale_styles(self):
        """Test that only previous identifiers missing from the new value are removed."""
        instance = Photo(crop=3)
        instance.picture = {"original": "stored:/tmp/a.jpg", "small": "stored:/tmp/a_medium.jpg"}

        await self.plugin.attach(instance, "picture", "/tmp/a.jpg")

        assert self.storage.removes == ["stored:/tmp/a_medium.jpg"]
        assert instance.picture == {
            "original": "stored:/tmp/a.jpg",
            "small": "stored:/tmp/a_small.jpg",
        }

    async def test_failing_computed_style(self):
        """Test that a computed style raising is reported as a preprocessor error."""
        with pytest.raises(PreprocessorError) as exc_info:
            await self.plugin.attach(Photo(crop=None), "broken", "/tmp/a.jpg")

        assert exc_info.value.preprocessor is self.preprocessor
        assert exc_info.value.attribute == "broken"
        assert isinstance(exc_info.value.__cause__, TypeError)
        assert self.preprocessor.calls == []
        assert self.storage.calls == []

    async def test_unusable_file_argument(self):
        """Test that a file argument without a path is a configuration error."""
        with pytest.raises(ConfigError, match="Can't get a file path"):
            await self.plugin.attach(Photo(), "scalar", 42)

        assert self.storage.calls == []

    async def test_failed_write_keeps_previous_value(self):
        """Test that a failing store leaves the previous value in place."""
        storage = RecordingStorage(fail_on={"/tmp/new.bin"})
        plugin = AttachmentsPlugin(PlainProvider(), storage=storage, attributes={"scalar": True})
        instance = Photo()
        instance.scalar = "stored:/tmp/old.bin"

        with pytest.raises(StorageError) as exc_info:
            await plugin.attach(instance, "scalar", "/tmp/new.bin")

        assert not isinstance(exc_info.value, PartialAttachError)
        assert exc_info.value.storage is storage
        assert exc_info.value.attribute == "scalar"
        assert isinstance(exc_info.value.__cause__, OSError)
        assert storage.removes == []
        assert instance.scalar == "stored:/tmp/old.bin"

    async def test_partial_attach(self):
        """Test that a failure after earlier stores reports what was stored."""
        storage = RecordingStorage(fail_on={"/tmp/a_small.jpg"})
        plugin = AttachmentsPlugin(
            PlainProvider(),
            storage=storage,
            preprocessor=RecordingPreprocessor(),
            attributes={"picture": picture_styles()},
        )
        instance = Photo(crop=1)

        with pytest.raises(PartialAttachError) as exc_info:
            await plugin.attach(instance, "picture", "/tmp/a.jpg")

        assert exc_info.value.stored == {"original": "stored:/tmp/a.jpg"}
        assert exc_info.value.failed_style == "small"
        assert storage.writes == ["/tmp/a.jpg", "/tmp/a_small.jpg"]
        assert storage.removes == []
        assert getattr(instance, "picture", None) is None

    async def test_failing_validator_prevents_storage(self):
        """Test that a rejected file never reaches the preprocessor or storage."""

        def validate(filename, instance):
            raise ValueError("too large")

        plugin = AttachmentsPlugin(
            PlainProvider(),
            storage=self.storage,
            preprocessor=self.preprocessor,
            attributes={"picture": {**picture_styles(), "validate": validate}},
        )

        with pytest.raises(ValidationError) as exc_info:
            await plugin.attach(Photo(), "picture", "/tmp/a.jpg")

        assert exc_info.value.attribute == "picture"
        assert str(exc_info.value) == "picture: too large"
        assert self.preprocessor.calls == []
        assert self.storage.calls == []

    async def test_before_validate_replacement(self):
        """Test that the replacement file flows to the validator, preprocessor and storage."""
        validate = AsyncMock(return_value=None)

        plugin = AttachmentsPlugin(
            PlainProvider(),
            storage=self.storage,
            preprocessor=self.preprocessor,
            attributes={
                "picture": {
                    **picture_styles(),
                    "before_validate": lambda filename, instance: "/tmp/normalized.jpg",
                    "validate": validate,
                },
            },
        )
        instance = Photo(crop=1)

        await plugin.attach(instance, "picture", "/tmp/a.jpg")

        validate.assert_awaited_once_with("/tmp/normalized.jpg", instance)
        assert self.preprocessor.calls[0][0] == "/tmp/normalized.jpg"
        assert self.storage.writes == ["/tmp/normalized.jpg", "/tmp/normalized_small.jpg"]

    async def test_preprocessor_failure(self):
        """Test that pipeline failures are wrapped and storage isn't touched."""
        failing = MagicMock()
        failing.name = "failing"
        failing.process = AsyncMock(side_effect=RuntimeError("convert crashed"))

        plugin = AttachmentsPlugin(
            PlainProvider(),
            storage=self.storage,
            preprocessor=failing,
            attributes={"picture": picture_styles()},
        )

        with pytest.raises(PreprocessorError) as exc_info:
            await plugin.attach(Photo(), "picture", "/tmp/a.jpg")

        assert exc_info.value.preprocessor is failing
        assert exc_info.value.message == "convert crashed"
        assert isinstance(exc_info.value.__cause__, RuntimeError)
        assert self.storage.calls == []

    async def test_preprocessor_returning_nothing(self):
        """Test that an empty derived mapping is an error."""
        plugin = AttachmentsPlugin(
            PlainProvider(),
            storage=self.storage,
            preprocessor=RecordingPreprocessor(result={}),
            attributes={"picture": picture_styles()},
        )

        with pytest.raises(PreprocessorError, match="didn't return anything"):
            await plugin.attach(Photo(), "picture", "/tmp/a.jpg")

        assert self.storage.calls == []

    async def test_attribute_storage_override(self):
        """Test that a per-attribute storage is used instead of the default."""
        override = RecordingStorage()
        plugin = AttachmentsPlugin(
            PlainProvider(),
            storage=self.storage,
            attributes={"resume": {"storage": override}},
        )
        instance = Photo()

        await plugin.attach(instance, "resume", "/tmp/cv.pdf")

        assert override.writes == ["/tmp/cv.pdf"]
        assert self.storage.calls == []


class TestDetach:
    """Test cases for AttachmentsPlugin.detach"""

    def setup_method(self):
        self.storage = RecordingStorage()
        self.plugin = AttachmentsPlugin(
            PlainProvider(),
            storage=self.storage,
            preprocessor=RecordingPreprocessor(),
            attributes={"picture": picture_styles(), "scalar": True},
        )

    async def test_detach_styled(self):
        """Test that every stored style is removed and the attribute cleared."""
        instance = Photo()
        instance.picture = {"original": "a", "small": "b", "large": "c"}

        await self.plugin.detach(instance, "picture")

        assert self.storage.removes == ["a", "b", "c"]
        assert instance.picture is None

    async def test_detach_empty(self):
        """Test that detaching an empty attribute removes nothing."""
        instance = Photo()
        instance.scalar = None

        await self.plugin.detach(instance, "scalar")

        assert self.storage.calls == []
        assert instance.scalar is None

    async def test_detach_failure_aborts(self):
        """Test that the first failing removal stops the detach."""
        storage = RecordingStorage(fail_on={"b"})
        plugin = AttachmentsPlugin(
            PlainProvider(),
            storage=storage,
            preprocessor=RecordingPreprocessor(),
            attributes={"picture": picture_styles()},
        )
        instance = Photo()
        instance.picture = {"original": "a", "small": "b", "large": "c"}

        with pytest.raises(StorageError) as exc_info:
            await plugin.detach(instance, "picture")

        assert exc_info.value.attribute == "picture"
        assert storage.removes == ["a", "b"]
        assert instance.picture == {"original": "a", "small": "b", "large": "c"}

    async def test_detach_unknown_attribute(self):
        """Test that detaching an unknown attribute fails."""
        with pytest.raises(UnknownAttributeError):
            await self.plugin.detach(Photo(), "cover")


class TestAfterDelete:
    """Test cases for AttachmentsPlugin.handle_after_delete"""

    def setup_method(self):
        self.storage = RecordingStorage()
        self.plugin = AttachmentsPlugin(
            PlainProvider(),
            storage=self.storage,
            preprocessor=RecordingPreprocessor(),
            attributes={"picture": picture_styles(), "scalar": True},
        )

    async def test_requires_instance(self):
        """Test that the provider must bind an instance."""
        with pytest.raises(ProviderError) as exc_info:
            await self.plugin.handle_after_delete()

        assert isinstance(exc_info.value, ConfigError)
        assert "didn't bind instance" in str(exc_info.value)

    async def test_detaches_every_attribute_in_order(self):
        """Test that every attribute is detached in configuration order."""
        instance = Photo()
        instance.picture = {"original": "a", "small": "b"}
        instance.scalar = "c"

        await self.plugin.handle_after_delete(instance)

        assert self.storage.calls == [
            ("remove", "a", "picture"),
            ("remove", "b", "picture"),
            ("remove", "c", "scalar"),
        ]
        assert instance.picture is None
        assert instance.scalar is None


class TestApply:
    """Test cases for installing the plugin on a model"""

    async def test_apply_installs_methods(self, model, storage):
        """Test that attach/detach become instance methods."""
        plugin = AttachmentsPlugin(PlainProvider(), storage=storage, attributes={"scalar": True}, after_delete=False)

        plugin.apply(model)
        instance = model()

        assert instance.scalar is None

        await instance.attach("scalar", "/tmp/b.bin")
        assert instance.scalar == "stored:/tmp/b.bin"

        await instance.detach("scalar")
        assert instance.scalar is None

    def test_provider_without_add_methods(self, model, storage):
        """Test that providers must be able to install methods."""

        class AttributesOnly:
            def add_attribute(self, model, attribute, styles):
                pass

        plugin = AttachmentsPlugin(AttributesOnly(), storage=storage, attributes={"scalar": True})

        with pytest.raises(ProviderError, match="add_methods"):
            plugin.apply(model)

    def test_provider_without_after_delete(self, model, storage):
        """Test that enabling after_delete requires the provider capability."""

        class NoDeleteHook(PlainProvider):
            def add_after_delete(self, model, handler):
                raise NotImplementedError

        plugin = AttachmentsPlugin(NoDeleteHook(), storage=storage, attributes={"scalar": True}, after_delete=True)

        with pytest.raises(ProviderError, match="add_after_delete"):
            plugin.apply(model)

    def test_after_delete_disabled(self, model, storage):
        """Test that no hook is installed when after_delete is off."""
        provider = PlainProvider()
        provider.add_after_delete = MagicMock()
        plugin = AttachmentsPlugin(provider, storage=storage, attributes={"scalar": True}, after_delete=False)

        plugin.apply(model)

        provider.add_after_delete.assert_not_called()

    def test_attributes_registered_with_style_names(self, model, storage, preprocessor):
        """Test that providers receive style names without reserved keys."""
        provider = MagicMock()
        plugin = AttachmentsPlugin(
            provider,
            storage=storage,
            preprocessor=preprocessor,
            attributes={"picture": {**picture_styles(), "validate": lambda f, i: None}, "scalar": True},
            after_delete=False,
        )

        plugin.attach_attributes(model)

        provider.add_attribute.assert_any_call(model, "picture", ["original", "small"])
        provider.add_attribute.assert_any_call(model, "scalar", [])

    async def test_create_plugin(self, model, storage):
        """Test that create_plugin returns the function applying the plugin."""

        async def delete(self):
            pass

        model.delete = delete

        apply = create_plugin(PlainProvider(), storage=storage, attributes={"scalar": True})
        assert apply(model) is model

        instance = model()
        await instance.attach("scalar", "/tmp/b.bin")
        await instance.delete()

        assert storage.removes == ["stored:/tmp/b.bin"]
        assert instance.scalar is None
