"""Testes dos stores de dedupe inbound."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import pytest

from connect_volunteers.config.settings import Settings
from connect_volunteers.domain.protocols import DedupeError
from connect_volunteers.infra.dedupe import (
    InMemoryDedupeStore,
    RedisDedupeStore,
    create_dedupe_store,
)


class TestInMemoryDedupeStore:
    @pytest.mark.asyncio
    async def test_first_mark_is_new_second_is_duplicate(self):
        store = InMemoryDedupeStore()

        assert await store.mark_if_new("telegram:1") is True
        assert await store.mark_if_new("telegram:1") is False

    @pytest.mark.asyncio
    async def test_clear_allows_reprocessing(self):
        store = InMemoryDedupeStore()
        await store.mark_if_new("telegram:1")

        assert await store.clear("telegram:1") is True
        assert await store.mark_if_new("telegram:1") is True

    @pytest.mark.asyncio
    async def test_expired_keys_are_forgotten(self):
        store = InMemoryDedupeStore(ttl_seconds=0)
        store._seen["telegram:1"] = 0.0

        assert await store.mark_if_new("telegram:1") is True


class TestRedisDedupeStore:
    @pytest.mark.asyncio
    async def test_uses_set_nx_with_ttl(self):
        redis = MagicMock()
        redis.set = AsyncMock(return_value=True)
        store = RedisDedupeStore(redis, ttl_seconds=60)

        assert await store.mark_if_new("telegram:5") is True
        redis.set.assert_awaited_once_with("dedupe:telegram:5", "1", nx=True, ex=60)

    @pytest.mark.asyncio
    async def test_existing_key_is_duplicate(self):
        redis = MagicMock()
        redis.set = AsyncMock(return_value=None)
        store = RedisDedupeStore(redis)

        assert await store.mark_if_new("telegram:5") is False

    @pytest.mark.asyncio
    async def test_backend_failure_is_fail_closed(self):
        redis = MagicMock()
        redis.set = AsyncMock(side_effect=ConnectionError("down"))
        store = RedisDedupeStore(redis)

        with pytest.raises(DedupeError):
            await store.mark_if_new("telegram:5")

    @pytest.mark.asyncio
    async def test_clear_deletes_key(self):
        redis = MagicMock()
        redis.delete = AsyncMock(return_value=1)
        store = RedisDedupeStore(redis)

        assert await store.clear("telegram:5") is True
        redis.delete.assert_awaited_once_with("dedupe:telegram:5")


class TestFactory:
    def test_memory_backend(self, settings: Settings):
        assert isinstance(create_dedupe_store(settings), InMemoryDedupeStore)

    def test_redis_backend_requires_client(self, settings: Settings):
        settings.dedupe_backend = "redis"
        with pytest.raises(ValueError):
            create_dedupe_store(settings)

    def test_redis_backend(self, settings: Settings):
        settings.dedupe_backend = "redis"
        assert isinstance(create_dedupe_store(settings, MagicMock()), RedisDedupeStore)
