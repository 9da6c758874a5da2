"""Tests for key-value stores and the repository factory."""

import pytest

from gullycric.adapters.factory import create_cricket_repository, create_network_info
from gullycric.adapters.key_value_store import InMemoryKeyValueStore, JsonFileKeyValueStore
from gullycric.adapters.network_info import StaticNetworkInfo
from gullycric.config.settings import GullyCricConfig
from gullycric.domain.common.exceptions import CacheException


class TestJsonFileKeyValueStore:
    """Test the file-backed store."""

    def test_missing_file_is_empty(self, tmp_path):
        store = JsonFileKeyValueStore(tmp_path / "store.json")

        assert store.get_string("anything") is None
        assert store.keys() == []

    def test_values_survive_new_instance(self, tmp_path):
        path = tmp_path / "nested" / "store.json"
        JsonFileKeyValueStore(path).set_string("a", "1")

        reopened = JsonFileKeyValueStore(path)

        assert reopened.get_string("a") == "1"
        assert reopened.contains("a")

    def test_remove_and_clear(self, tmp_path):
        store = JsonFileKeyValueStore(tmp_path / "store.json")
        store.set_string("a", "1")
        store.set_string("b", "2")

        store.remove("a")
        assert store.keys() == ["b"]

        store.clear()
        assert store.keys() == []

    def test_no_temp_files_left(self, tmp_path):
        store = JsonFileKeyValueStore(tmp_path / "store.json")
        store.set_string("a", "1")

        assert [p.name for p in tmp_path.iterdir()] == ["store.json"]

    def test_failed_replace_removes_temp_file(self, tmp_path, monkeypatch):
        def fail(src, dst):
            raise OSError("disk full")

        monkeypatch.setattr("gullycric.adapters.key_value_store.os.replace", fail)
        store = JsonFileKeyValueStore(tmp_path / "store.json")

        with pytest.raises(CacheException, match="disk full"):
            store.set_string("a", "1")
        assert list(tmp_path.iterdir()) == []

    def test_failed_serialization_removes_temp_file(self, tmp_path, monkeypatch):
        def fail(*args, **kwargs):
            raise TypeError("not serializable")

        monkeypatch.setattr("gullycric.adapters.key_value_store.json.dump", fail)
        store = JsonFileKeyValueStore(tmp_path / "store.json")

        with pytest.raises(TypeError):
            store.set_string("a", "1")
        assert list(tmp_path.iterdir()) == []

    def test_corrupt_file_raises(self, tmp_path):
        path = tmp_path / "store.json"
        path.write_text("[1, 2")

        with pytest.raises(CacheException):
            JsonFileKeyValueStore(path).get_string("a")

    def test_non_object_raises(self, tmp_path):
        path = tmp_path / "store.json"
        path.write_text("[1, 2]")

        with pytest.raises(CacheException, match="not a JSON object"):
            JsonFileKeyValueStore(path).keys()


class TestInMemoryKeyValueStore:
    def test_initial_values_are_copied(self):
        initial = {"a": "1"}
        store = InMemoryKeyValueStore(initial)
        store.set_string("b", "2")

        assert initial == {"a": "1"}
        assert sorted(store.keys()) == ["a", "b"]


class TestFactory:
    def test_offline_config_gives_static_network(self):
        cfg = GullyCricConfig(network={"offline": True})

        info = create_network_info(cfg)

        assert isinstance(info, StaticNetworkInfo)
        assert not info.is_connected()

    def test_repository_uses_storage_settings(self, tmp_path):
        cfg = GullyCricConfig(storage={"data_dir": str(tmp_path), "mock_match_count": 2})

        repo = create_cricket_repository(cfg, network_info=StaticNetworkInfo(True))

        assert len(repo.get_matches().value) == 2
        assert (tmp_path / "store.json").exists()
