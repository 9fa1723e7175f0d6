"""Shared fixtures: a controllable clock, in-memory host services and a
writer for compiled gettext catalogs."""

from __future__ import annotations

import struct
from collections.abc import Callable
from pathlib import Path

import pytest

from hostkit.cache import MemoryCache
from hostkit.context import HostServices, create_memory_host

MO_HEADER = "Content-Type: text/plain; charset=UTF-8\n"


class FakeClock:
    """Clock whose time only moves when a test advances it."""

    def __init__(self, start: float = 1_700_000_000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def _write_mo(path: Path, messages: dict[str, str]) -> None:
    """Write a minimal UTF-8 GNU ``.mo`` catalog without a hash table."""
    entries = {"": MO_HEADER, **messages}
    keys = sorted(entries)
    ids = [key.encode("utf-8") for key in keys]
    strs = [entries[key].encode("utf-8") for key in keys]

    count = len(keys)
    orig_table = 7 * 4
    trans_table = orig_table + count * 8
    ids_start = trans_table + count * 8
    strs_start = ids_start + sum(len(item) + 1 for item in ids)

    data = struct.pack("<7I", 0x950412DE, 0, count, orig_table, trans_table, 0, 0)
    for start, items in ((ids_start, ids), (strs_start, strs)):
        offset = start
        for item in items:
            data += struct.pack("<2I", len(item), offset)
            offset += len(item) + 1
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(data + b"".join(item + b"\0" for item in ids + strs))


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def host(clock: FakeClock) -> HostServices:
    return create_memory_host(cache=MemoryCache(clock=clock))


@pytest.fixture()
def write_mo() -> Callable[[Path, dict[str, str]], None]:
    return _write_mo
