from datetime import date

import pytest

from api.quota import DailyQuotaGuard, InMemoryQuotaStore


@pytest.mark.asyncio
async def test_quota_guard_blocks_after_limit() -> None:
    guard = DailyQuotaGuard(InMemoryQuotaStore(), source="overpass", limit=2, today=lambda: date(2026, 1, 1))

    assert await guard.check_quota() is True
    await guard.increment_quota()
    assert await guard.check_quota() is True
    await guard.increment_quota()
    assert await guard.check_quota() is False
    assert await guard.used_today() == 2


@pytest.mark.asyncio
async def test_quota_guard_resets_on_new_day() -> None:
    current = {"day": date(2026, 1, 1)}
    guard = DailyQuotaGuard(InMemoryQuotaStore(), source="overpass", limit=1, today=lambda: current["day"])

    await guard.increment_quota()
    assert await guard.check_quota() is False

    current["day"] = date(2026, 1, 2)
    assert await guard.check_quota() is True
    assert guard.current_key() == "quota:overpass:2026-01-02"


def test_quota_guard_rejects_negative_limit() -> None:
    with pytest.raises(ValueError):
        DailyQuotaGuard(InMemoryQuotaStore(), source="overpass", limit=-1)


@pytest.mark.asyncio
async def test_in_memory_store_evicts_keys_after_ttl() -> None:
    now = {"t": 0.0}
    store = InMemoryQuotaStore(ttl_seconds=60, clock=lambda: now["t"])

    assert await store.increment("quota:overpass:2026-01-01") == 1
    now["t"] = 30.0
    assert await store.increment("quota:overpass:2026-01-01") == 2
    assert await store.increment("quota:overpass:2026-01-02") == 1

    now["t"] = 61.0
    assert await store.get_count("quota:overpass:2026-01-01") == 0
    assert await store.get_count("quota:overpass:2026-01-02") == 1
    assert "quota:overpass:2026-01-01" not in store._counts

    now["t"] = 91.0
    await store.increment("quota:overpass:2026-01-03")
    assert list(store._counts) == ["quota:overpass:2026-01-03"]
