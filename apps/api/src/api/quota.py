from __future__ import annotations

import time
from abc import ABC, abstractmethod
from collections.abc import Callable
from datetime import date, datetime, timezone
from typing import Protocol

QUOTA_KEY_TTL_SECONDS = 2 * 24 * 60 * 60


class QuotaStore(ABC):
    @abstractmethod
    async def get_count(self, key: str) -> int:
        raise NotImplementedError

    @abstractmethod
    async def increment(self, key: str) -> int:
        raise NotImplementedError


class RedisLikeQuotaClient(Protocol):
    async def get(self, key: str) -> str | None: ...

    async def incr(self, key: str) -> int: ...

    async def expire(self, key: str, time: int) -> bool: ...


class InMemoryQuotaStore(QuotaStore):
    """Counts in process memory; keys expire after the same TTL the Redis store sets."""

    def __init__(
        self,
        ttl_seconds: int = QUOTA_KEY_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._ttl_seconds = ttl_seconds
        self._clock = clock
        self._counts: dict[str, int] = {}
        self._expires_at: dict[str, float] = {}

    async def get_count(self, key: str) -> int:
        self._evict_expired()
        return self._counts.get(key, 0)

    async def increment(self, key: str) -> int:
        self._evict_expired()
        count = self._counts.get(key, 0) + 1
        self._counts[key] = count
        if count == 1:
            self._expires_at[key] = self._clock() + self._ttl_seconds
        return count

    def _evict_expired(self) -> None:
        now = self._clock()
        for key in [key for key, expires_at in self._expires_at.items() if expires_at <= now]:
            del self._expires_at[key]
            self._counts.pop(key, None)


class RedisQuotaStore(QuotaStore):
    def __init__(self, client: RedisLikeQuotaClient, ttl_seconds: int = QUOTA_KEY_TTL_SECONDS) -> None:
        self._client = client
        self._ttl_seconds = ttl_seconds

    async def get_count(self, key: str) -> int:
        raw = await self._client.get(key)
        return int(raw) if raw else 0

    async def increment(self, key: str) -> int:
        count = await self._client.incr(key)
        if count == 1:
            await self._client.expire(key, self._ttl_seconds)
        return count


def _utc_today() -> date:
    return datetime.now(timezone.utc).date()


class DailyQuotaGuard:
    """Per-source daily call budget; a new key is used every calendar day."""

    def __init__(
        self,
        store: QuotaStore,
        source: str,
        limit: int,
        today: Callable[[], date] = _utc_today,
    ) -> None:
        if limit < 0:
            raise ValueError("limit must be >= 0")
        self.source = source
        self.limit = limit
        self._store = store
        self._today = today

    async def check_quota(self) -> bool:
        return await self._store.get_count(self.current_key()) < self.limit

    async def increment_quota(self) -> None:
        await self._store.increment(self.current_key())

    async def used_today(self) -> int:
        return await self._store.get_count(self.current_key())

    def current_key(self) -> str:
        return f"quota:{self.source}:{self._today().isoformat()}"
