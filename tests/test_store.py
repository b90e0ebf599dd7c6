"""
Tests for the URI store, the prefix registry and the store registry.
"""
import pytest

from uri_shortener.exceptions import DuplicateCipher, DuplicateURI, StorageUnavailable
from uri_shortener.storage import MEMORY, StoreRegistry, database_url


class TestPrefixRegistry:
    """Test prefix rows"""

    def test_ensure_prefix_is_idempotent(self, store):
        first = store.ensure_prefix("https://a.test")
        second = store.ensure_prefix("https://a.test")
        assert first == second

    def test_distinct_prefixes_get_distinct_ids(self, store):
        assert store.ensure_prefix("https://a.test") != store.ensure_prefix("https://b.test")

    def test_find_unknown_prefix(self, store):
        assert store.find_prefix_id("https://nowhere.test") is None

    def test_delete_prefix_cascades_to_uris(self, store):
        prefix_id = store.ensure_prefix("https://a.test")
        store.insert("https://example.test/1", prefix_id, 100)
        store.insert("https://example.test/2", prefix_id, 100)

        assert store.delete_prefix("https://a.test") is True
        assert store.count() == 0
        assert store.find_by_uri("https://example.test/1") is None

    def test_delete_missing_prefix(self, store):
        assert store.delete_prefix("https://a.test") is False


class TestURIStore:
    """Test URI record operations"""

    def test_insert_and_find(self, store):
        prefix_id = store.ensure_prefix("https://a.test")
        row_id = store.insert("https://example.test/x", prefix_id, 100)

        row = store.find_by_uri("https://example.test/x")
        assert row.id == row_id
        assert row.cipher is None
        assert row.prefix == "https://a.test"

    def test_find_missing_uri(self, store):
        assert store.find_by_uri("https://example.test/missing") is None

    def test_duplicate_uri(self, store):
        prefix_id = store.ensure_prefix("https://a.test")
        store.insert("https://example.test/x", prefix_id, 100)

        with pytest.raises(DuplicateURI):
            store.insert("https://example.test/x", prefix_id, 200)

    def test_uri_is_unique_across_prefixes(self, store):
        a = store.ensure_prefix("https://a.test")
        b = store.ensure_prefix("https://b.test")
        store.insert("https://example.test/x", a, 100)

        with pytest.raises(DuplicateURI):
            store.insert("https://example.test/x", b, 100)

    def test_set_cipher_and_find_by_cipher(self, store):
        prefix_id = store.ensure_prefix("https://a.test")
        row_id = store.insert("https://example.test/x", prefix_id, 100)

        assert store.set_cipher(row_id, "Ab") is True
        assert store.find_by_cipher("Ab", "https://a.test") == "https://example.test/x"

    def test_find_by_cipher_is_scoped_to_prefix(self, store):
        prefix_id = store.ensure_prefix("https://a.test")
        store.ensure_prefix("https://b.test")
        row_id = store.insert("https://example.test/x", prefix_id, 100)
        store.set_cipher(row_id, "Ab")

        assert store.find_by_cipher("Ab", "https://b.test") is None
        assert store.find_by_cipher("Ab", "https://unknown.test") is None

    def test_duplicate_cipher(self, store):
        prefix_id = store.ensure_prefix("https://a.test")
        first = store.insert("https://example.test/1", prefix_id, 100)
        second = store.insert("https://example.test/2", prefix_id, 100)
        store.set_cipher(first, "Ab")

        with pytest.raises(DuplicateCipher) as exc_info:
            store.set_cipher(second, "Ab")
        assert exc_info.value.row_id == second

    def test_set_cipher_on_missing_row(self, store):
        assert store.set_cipher(999, "Ab") is False

    def test_delete_older_than(self, store):
        prefix_id = store.ensure_prefix("https://a.test")
        store.insert("https://example.test/old", prefix_id, 100)
        store.insert("https://example.test/edge", prefix_id, 200)
        store.insert("https://example.test/new", prefix_id, 300)

        assert store.delete_older_than(200) == 1
        assert store.find_by_uri("https://example.test/old") is None
        # Cutoff is exclusive
        assert store.find_by_uri("https://example.test/edge") is not None
        assert store.count() == 2

    def test_iter_records_pages_in_id_order(self, store):
        prefix_id = store.ensure_prefix("https://a.test")
        uris = [f"https://example.test/{n}" for n in range(7)]
        for uri in uris:
            store.insert(uri, prefix_id, 100)

        records = list(store.iter_records(batch_size=3))
        assert [r.uri for r in records] == uris
        assert all(r.prefix == "https://a.test" for r in records)


class TestStoreRegistry:
    """Test store handle memoization"""

    def test_same_location_same_store(self, registry):
        assert registry.get(MEMORY) is registry.get(MEMORY)
        assert len(registry) == 1

    def test_registries_are_isolated(self, registry):
        other = StoreRegistry()
        try:
            registry.get(MEMORY).ensure_prefix("https://a.test")
            assert other.get(MEMORY).find_prefix_id("https://a.test") is None
        finally:
            other.dispose()

    def test_file_store_persists(self, tmp_path):
        path = str(tmp_path / "uris.db")

        first = StoreRegistry()
        first.get(path).ensure_prefix("https://a.test")
        first.dispose()

        second = StoreRegistry()
        try:
            assert second.get(path).find_prefix_id("https://a.test") is not None
        finally:
            second.dispose()

    def test_unopenable_store(self, registry, tmp_path):
        path = str(tmp_path / "missing-dir" / "uris.db")
        with pytest.raises(StorageUnavailable):
            registry.get(path)
        assert path not in registry

    def test_dispose_forgets_stores(self, registry):
        registry.get(MEMORY)
        registry.dispose()
        assert MEMORY not in registry

    def test_database_url(self):
        assert database_url(MEMORY) == "sqlite://"
        assert database_url("/tmp/uris.db") == "sqlite:////tmp/uris.db"
        assert database_url("postgresql://u:p@db/uris") == "postgresql://u:p@db/uris"
