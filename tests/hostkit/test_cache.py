"""Unit tests for expiring cache backends."""

from __future__ import annotations

from pathlib import Path

from hostkit.cache import FileCache, MemoryCache


def test_memory_cache_set_and_get(clock) -> None:  # type: ignore[no-untyped-def]
    """MemoryCache should return value after set."""
    cache = MemoryCache(clock=clock)

    cache.set("foo", {"x": 1}, ttl=10)

    assert cache.get("foo") == {"x": 1}


def test_memory_cache_miss_returns_none() -> None:
    cache = MemoryCache()

    assert cache.get("missing") is None


def test_memory_cache_expires_exactly_at_ttl(clock) -> None:  # type: ignore[no-untyped-def]
    """An entry is present just before set_time + ttl and absent from then on."""
    cache = MemoryCache(clock=clock)
    cache.set("short", "ok", ttl=60)

    clock.advance(59)
    assert cache.get("short") == "ok"

    clock.advance(1)
    assert cache.get("short") is None


def test_memory_cache_without_ttl_never_expires(clock) -> None:  # type: ignore[no-untyped-def]
    cache = MemoryCache(clock=clock)
    cache.set("forever", 1)

    clock.advance(10 * 365 * 24 * 3600)

    assert cache.get("forever") == 1


def test_memory_cache_non_positive_ttl_removes_key() -> None:
    cache = MemoryCache()
    cache.set("k", "v")

    cache.set("k", "v2", ttl=0)

    assert cache.get("k") is None


def test_memory_cache_delete_and_clear() -> None:
    cache = MemoryCache()
    cache.set("a", 1)
    cache.set("b", 2)

    cache.delete("a")
    assert cache.get("a") is None
    assert cache.get("b") == 2

    cache.clear()
    assert cache.get("b") is None


def test_file_cache_persistence_across_instances(tmp_path: Path) -> None:
    """FileCache should persist cache files across instances."""
    writer = FileCache(cache_dir=tmp_path / "cache")
    writer.set("persist", {"v": 42}, ttl=10)

    reader = FileCache(cache_dir=tmp_path / "cache")
    assert reader.get("persist") == {"v": 42}


def test_file_cache_reads_without_creating_directory(tmp_path: Path) -> None:
    cache = FileCache(cache_dir=tmp_path / "transients")

    assert cache.get("anything") is None
    assert not (tmp_path / "transients").exists()


def test_file_cache_ttl_expiration(tmp_path: Path, clock) -> None:  # type: ignore[no-untyped-def]
    """FileCache should remove expired entries when read."""
    cache = FileCache(cache_dir=tmp_path, clock=clock)
    cache.set("ttl-file", True, ttl=5)

    clock.advance(5)

    assert cache.get("ttl-file") is None
    assert list(tmp_path.glob("cache_*")) == []


def test_file_cache_ignores_corrupt_records(tmp_path: Path) -> None:
    cache = FileCache(cache_dir=tmp_path)
    cache.set("k", 1)
    for file in tmp_path.glob("cache_*"):
        file.write_text("{not json", encoding="utf-8")

    assert cache.get("k") is None


def test_file_cache_clear(tmp_path: Path) -> None:
    cache = FileCache(cache_dir=tmp_path)
    cache.set("a", 1)
    cache.set("b", 2)

    cache.clear()

    assert cache.get("a") is None
    assert cache.get("b") is None
