"""Shared fixtures."""

from datetime import datetime, timezone
from typing import Any, Optional

import pytest

from tipster_monitor.core import CandidateItem, KeyValueStore, StorageError


class MemoryStore(KeyValueStore):
    """In-memory key-value store."""

    def __init__(self, data: Optional[dict[str, Any]] = None) -> None:
        self.data = dict(data or {})
        self.set_calls = 0

    async def get(self, key: str) -> Optional[Any]:
        value = self.data.get(key)
        return list(value) if isinstance(value, list) else value

    async def set(self, key: str, value: Any) -> None:
        self.set_calls += 1
        self.data[key] = list(value)

    async def delete(self, key: str) -> None:
        self.data.pop(key, None)


class BrokenStore(KeyValueStore):
    """Store that fails on reads and/or writes."""

    def __init__(self, fail_reads: bool = True, fail_writes: bool = True) -> None:
        self.fail_reads = fail_reads
        self.fail_writes = fail_writes
        self.data: dict[str, Any] = {}

    async def get(self, key: str) -> Optional[Any]:
        if self.fail_reads:
            raise StorageError("read unavailable")
        return self.data.get(key)

    async def set(self, key: str, value: Any) -> None:
        if self.fail_writes:
            raise StorageError("write unavailable")
        self.data[key] = value

    async def delete(self, key: str) -> None:
        if self.fail_writes:
            raise StorageError("write unavailable")
        self.data.pop(key, None)


@pytest.fixture
def memory_store() -> MemoryStore:
    return MemoryStore()


@pytest.fixture
def make_store():
    """Factory for stores with preset contents or failures."""
    def factory(data: Optional[dict[str, Any]] = None, broken: Optional[str] = None) -> KeyValueStore:
        if broken == "reads":
            return BrokenStore(fail_reads=True, fail_writes=False)
        if broken == "writes":
            return BrokenStore(fail_reads=False, fail_writes=True)
        if broken == "all":
            return BrokenStore()
        return MemoryStore(data)
    return factory


@pytest.fixture
def make_item():
    """Factory for candidate items."""
    def factory(n: int = 1, title: Optional[str] = None, link: Optional[str] = None) -> CandidateItem:
        return CandidateItem(
            title=title or f"Rhys Williams tips {n}",
            link=link or f"https://betting.betfair.com/horse-racing/tips-{n}/",
            published_at=datetime(2025, 3, n, 9, 0, tzinfo=timezone.utc),
            author="Rhys Williams",
        )
    return factory
