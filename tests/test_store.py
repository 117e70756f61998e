"""Tests for the profile-scoped key/value store."""

import pytest

from streamview.errors import StorageError
from streamview.models.media import MediaType
from streamview.services.store_service import StoreService, hidden_categories_key


class TestStoreService:

    def test_absent_key_returns_default(self, store):
        assert store.get("alice", "bucket", []) == []
        assert store.get("alice", "missing") == ""

    def test_set_then_get(self, store):
        store.set("alice", "bucket", ["movie-1", "series-2"])
        assert store.get("alice", "bucket", []) == ["movie-1", "series-2"]

    def test_profiles_are_isolated(self, store):
        store.set("alice", "bucket", ["movie-1"])
        store.set("bob", "bucket", ["live-9"])
        assert store.get("alice", "bucket", []) == ["movie-1"]
        assert store.get("bob", "bucket", []) == ["live-9"]
        assert store.get("carol", "bucket", []) == []

    def test_set_replaces_whole_value(self, store):
        store.set("alice", "k", [1, 2, 3])
        store.set("alice", "k", [4])
        assert store.get("alice", "k", []) == [4]

    def test_delete_and_keys(self, store):
        store.set("alice", "a", 1)
        store.set("alice", "b", 2)
        store.set("bob", "c", 3)
        assert store.keys("alice") == ["a", "b"]
        store.delete("alice", "a")
        assert store.keys("alice") == ["b"]

    def test_unserialisable_value_raises(self, store):
        with pytest.raises(StorageError):
            store.set("alice", "k", {"x": object()})

    def test_missing_schema_raises_storage_error(self, tmp_path):
        # No init_db(): the table does not exist
        bare = StoreService(str(tmp_path))
        with pytest.raises(StorageError):
            bare.get("alice", "bucket", [])
        with pytest.raises(StorageError):
            bare.set("alice", "bucket", [])

    def test_storage_error_is_an_ioerror(self):
        assert issubclass(StorageError, IOError)

    def test_hidden_categories_key(self):
        assert hidden_categories_key(MediaType.MOVIE) == "hiddenCategories:movie"
        assert hidden_categories_key("live") == "hiddenCategories:live"
