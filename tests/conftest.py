"""Pytest fixtures and configuration."""

from __future__ import annotations

from typing import Any

import pytest


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    """Skip integration tests by default unless -m integration is specified."""
    markexpr = config.getoption("-m", default="")
    if "integration" in markexpr:
        return

    skip_integration = pytest.mark.skip(reason="Integration test - run with: pytest -m integration")
    for item in items:
        if "integration" in item.keywords:
            item.add_marker(skip_integration)


@pytest.fixture
def anyio_backend() -> str:
    """Use asyncio for async tests."""
    return "asyncio"


# ---------------------------------------------------------------------------
# In-memory Redis double (decode_responses=True semantics)
# ---------------------------------------------------------------------------


class _Pipeline:
    def __init__(self, redis: InMemoryRedis) -> None:
        self._redis = redis
        self._queued: list[str] = []

    async def __aenter__(self) -> _Pipeline:
        return self

    async def __aexit__(self, *exc: object) -> None:
        self._queued.clear()

    def hgetall(self, key: str) -> _Pipeline:
        self._queued.append(key)
        return self

    async def execute(self) -> list[dict[str, str]]:
        return [await self._redis.hgetall(key) for key in self._queued]


class InMemoryRedis:
    """Covers the subset of redis.asyncio.Redis used by the storage layer."""

    def __init__(self) -> None:
        self.strings: dict[str, str] = {}
        self.hashes: dict[str, dict[str, str]] = {}
        self.sets: dict[str, set[str]] = {}

    async def ping(self) -> bool:
        return True

    async def aclose(self) -> None:
        return None

    def pipeline(self, transaction: bool = True) -> _Pipeline:
        return _Pipeline(self)

    async def exists(self, key: str) -> int:
        return int(key in self.strings or key in self.hashes or key in self.sets)

    async def get(self, key: str) -> str | None:
        return self.strings.get(key)

    async def delete(self, *keys: str) -> int:
        removed = 0
        for key in keys:
            for store in (self.strings, self.hashes, self.sets):
                if store.pop(key, None) is not None:
                    removed += 1
        return removed

    async def set(self, key: str, value: Any, nx: bool = False) -> bool | None:
        if nx and key in self.strings:
            return None
        self.strings[key] = str(value)
        return True

    async def hset(self, key: str, mapping: dict[str, str]) -> int:
        h = self.hashes.setdefault(key, {})
        added = len(set(mapping) - set(h))
        h.update({k: str(v) for k, v in mapping.items()})
        return added

    async def hsetnx(self, key: str, field: str, value: str) -> int:
        h = self.hashes.setdefault(key, {})
        if field in h:
            return 0
        h[field] = value
        return 1

    async def hget(self, key: str, field: str) -> str | None:
        return self.hashes.get(key, {}).get(field)

    async def hgetall(self, key: str) -> dict[str, str]:
        return dict(self.hashes.get(key, {}))

    async def hlen(self, key: str) -> int:
        return len(self.hashes.get(key, {}))

    async def hdel(self, key: str, *fields: str) -> int:
        h = self.hashes.get(key, {})
        removed = sum(1 for f in fields if h.pop(f, None) is not None)
        if key in self.hashes and not h:
            del self.hashes[key]
        return removed

    async def sadd(self, key: str, *members: str) -> int:
        s = self.sets.setdefault(key, set())
        added = len(set(members) - s)
        s.update(members)
        return added

    async def srem(self, key: str, *members: str) -> int:
        s = self.sets.get(key, set())
        removed = len(s & set(members))
        s.difference_update(members)
        return removed

    async def smembers(self, key: str) -> set[str]:
        return set(self.sets.get(key, set()))

    async def scard(self, key: str) -> int:
        return len(self.sets.get(key, set()))


@pytest.fixture
def memory_redis() -> InMemoryRedis:
    return InMemoryRedis()
