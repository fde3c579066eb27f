"""
Unit tests for the sharded existence cache.
"""

import hashlib

import pytest
from bunnystore.core.errors import CacheError
from bunnystore.infrastructure.cache import FileCache, InMemoryCache
from bunnystore.infrastructure.filesystem import MockFileSystem, RealFileSystem
from bunnystore.storage.existence import SHARD_COUNT, ExistenceCache, shard_key


class FailingStore:
    """Store whose reads and writes always fail."""

    def get(self, key):
        raise CacheError("store offline")

    def put(self, key, value):
        raise CacheError("store offline")


@pytest.fixture
def store():
    return InMemoryCache()


@pytest.fixture
def cache(store):
    return ExistenceCache(store)


class TestShardKey:
    """Tests for shard key derivation."""

    def test_shard_key_is_first_md5_hex_char(self):
        path = "media/image/a.png"
        assert shard_key(path) == hashlib.md5(path.encode()).hexdigest()[0]

    def test_shard_count_is_bounded(self):
        keys = {shard_key(f"media/image/{i}.png") for i in range(5000)}
        assert len(keys) <= SHARD_COUNT
        assert keys <= set("0123456789abcdef")


class TestExistenceCache:
    """Tests for ExistenceCache."""

    def test_unknown_path_is_not_contained(self, cache):
        assert cache.contains("a.png") is False

    def test_mark_then_contains(self, cache, store):
        cache.mark("a.png")

        assert cache.contains("a.png") is True
        assert store.get(shard_key("a.png")) == {"a.png": True}

    def test_mark_writes_through_only_once(self, cache, store):
        cache.mark("a.png")
        cache.mark("a.png")
        assert store.put_count == 1

    def test_mark_keeps_other_paths_in_shard(self, cache, store):
        key = shard_key("a.png")
        store.put(key, {"neighbour.png": True})

        cache.mark("a.png")

        assert store.get(key) == {"neighbour.png": True, "a.png": True}

    def test_unmark_removes_entry(self, cache, store):
        cache.mark("a.png")
        cache.unmark("a.png")

        assert cache.contains("a.png") is False
        assert store.get(shard_key("a.png")) == {}

    def test_unmark_unknown_path_does_not_write(self, cache, store):
        cache.unmark("a.png")
        assert store.put_count == 0

    def test_shard_without_path_is_a_miss(self, cache, store):
        store.put(shard_key("a.png"), {"something-else.png": True})
        assert cache.contains("a.png") is False

    def test_non_mapping_shard_is_a_miss(self, cache, store):
        store.put(shard_key("a.png"), ["a.png"])
        assert cache.contains("a.png") is False

    def test_occupied_shards_never_exceed_shard_count(self, cache, store):
        for i in range(2000):
            cache.mark(f"media/{i}/file.jpg")

        assert len(store.keys()) <= SHARD_COUNT
        assert all(cache.contains(f"media/{i}/file.jpg") for i in range(0, 2000, 97))

    def test_corrupt_file_shard_is_a_miss(self):
        fs = MockFileSystem()
        store = FileCache(fs, "/cache")
        fs.write(f"/cache/bunnystore_{shard_key('a.png')}.json", "garbage")

        assert ExistenceCache(store).contains("a.png") is False

    def test_non_utf8_file_shard_is_a_miss(self, tmp_path):
        store = FileCache(RealFileSystem(), str(tmp_path))
        (tmp_path / f"bunnystore_{shard_key('a.txt')}.json").write_bytes(b"\xff\xfe\x00garbage")
        cache = ExistenceCache(store)

        assert cache.contains("a.txt") is False

        cache.mark("a.txt")
        assert cache.contains("a.txt") is True

    def test_mark_replaces_false_flag(self, cache, store):
        store.put(shard_key("a.png"), {"a.png": False})

        cache.mark("a.png")

        assert cache.contains("a.png") is True
        assert store.get(shard_key("a.png")) == {"a.png": True}

    def test_failing_store_reads_as_miss_and_swallows_writes(self):
        cache = ExistenceCache(FailingStore())

        cache.mark("a.png")

        assert cache.contains("a.png") is False
