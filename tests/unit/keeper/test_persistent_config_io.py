"""Unit tests for PersistentConfig load and save."""

from __future__ import annotations

import pytest

from core.errors import ConfkeepDeserializationError, ConfkeepSerializationError, ConfkeepStorageError
from keeper.persistent_config import PersistentConfig
from serializers.json_serializer import JsonSerializer
from serializers.yaml_serializer import YamlSerializer
from store.file_storage import FileStorage
from store.memory_storage import MemoryStorage
from tests.config_models import AppConfig, CallbackConfig, SubConfig
from tests.fake_storage import FailingStorage

VALID_DOCUMENT = b"stringProp: foo\nintProp: 11\nboolProp: true\nsubConfig:\n   key1: bar\n   key2: 22\n"


def test_constructor_performs_no_io() -> None:
    """Construction should keep the default and leave storage untouched."""
    storage = FailingStorage()

    config = PersistentConfig(AppConfig(string_prop="default"), storage, YamlSerializer(AppConfig))

    assert config.data == AppConfig(string_prop="default")
    assert storage.save_attempts == 0


def test_load_replaces_data() -> None:
    """A stored document should replace the default value."""
    config = PersistentConfig(AppConfig(), MemoryStorage(VALID_DOCUMENT), YamlSerializer(AppConfig))

    loaded = config.load()

    assert loaded is True
    assert config.data == AppConfig(
        string_prop="foo",
        int_prop=11,
        bool_prop=True,
        sub_config=SubConfig(key1="bar", key2=22),
    )


def test_load_missing_keeps_default() -> None:
    """Missing storage data should leave the default in place."""
    default_config = AppConfig(string_prop="default")
    config = PersistentConfig(default_config, MemoryStorage(), YamlSerializer(AppConfig))

    loaded = config.load()

    assert loaded is False
    assert config.data == AppConfig(string_prop="default")


def test_load_storage_error_propagates_and_keeps_data() -> None:
    """Storage errors should reach the caller unchanged."""
    storage = FailingStorage("unknown error")
    config = PersistentConfig(AppConfig(string_prop="default"), storage, YamlSerializer(AppConfig))

    with pytest.raises(ConfkeepStorageError) as error_info:
        config.load()

    assert error_info.value is storage.error
    assert config.data == AppConfig(string_prop="default")


@pytest.mark.parametrize(
    "raw_data",
    [
        b"stringProp: foo\nintProp: 11\nboolProp # error here\nsubConfig:\n   key1: bar\n",
        b"stringProp: foo\nintProp: 11\nboolProp: yes!\n",
    ],
)
def test_load_decode_error_keeps_data(raw_data: bytes) -> None:
    """Malformed or mistyped documents should not touch data."""
    config = PersistentConfig(
        AppConfig(string_prop="default"),
        MemoryStorage(raw_data),
        YamlSerializer(AppConfig),
    )

    with pytest.raises(ConfkeepDeserializationError):
        config.load()

    assert config.data == AppConfig(string_prop="default")


def test_save_writes_minimal_yaml_file(in_tmp_cwd) -> None:
    """Minimal configs should write config.yaml in the working directory."""
    config = PersistentConfig.minimal(
        AppConfig(string_prop="default", int_prop=11, bool_prop=True, sub_config=SubConfig("value 1", 22))
    )
    config.data.string_prop = "not default"
    config.data.sub_config.key2 = 33

    config.save()

    assert (in_tmp_cwd / "config.yaml").read_text(encoding="utf-8") == (
        "stringProp: not default\n"
        "intProp: 11\n"
        "boolProp: true\n"
        "subConfig:\n"
        "    key1: value 1\n"
        "    key2: 33\n"
    )


def test_save_serialization_error_propagates(in_tmp_cwd) -> None:
    """Values that cannot be encoded should fail without writing."""
    config = PersistentConfig.minimal(CallbackConfig(callback=lambda: None))

    with pytest.raises(ConfkeepSerializationError):
        config.save()

    assert not (in_tmp_cwd / "config.yaml").exists()


def test_save_storage_error_propagates() -> None:
    """Storage errors on save should reach the caller unchanged."""
    storage = FailingStorage("disk full")
    config = PersistentConfig(AppConfig(), storage, YamlSerializer(AppConfig))

    with pytest.raises(ConfkeepStorageError, match="disk full"):
        config.save()

    assert config.data == AppConfig()


def test_minimal_config_reloads_saved_value(in_tmp_cwd) -> None:
    """A second minimal config should load what the first one saved."""
    writer = PersistentConfig.minimal(AppConfig(string_prop="saved"))
    writer.save()
    reader = PersistentConfig.minimal(AppConfig())

    reader.load()

    assert reader.data == AppConfig(string_prop="saved")


def test_json_backed_config_roundtrips(tmp_path) -> None:
    """JSON serializer and file storage should compose like YAML."""
    storage = FileStorage(tmp_path / "config.json")
    writer = PersistentConfig(AppConfig(int_prop=5), storage, JsonSerializer(AppConfig, indent=2))
    writer.save()
    reader = PersistentConfig(AppConfig(), storage, JsonSerializer(AppConfig))

    reader.load()

    assert reader.data == AppConfig(int_prop=5)
