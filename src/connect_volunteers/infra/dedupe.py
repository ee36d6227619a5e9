"""Dedupe de entregas inbound (Telegram reenvia updates sem ACK).

- Redis é o backend de produção (SET NX EX, atômico)
- InMemoryDedupeStore apenas para dev/testes
- Fail-closed: falha de backend levanta DedupeError e o update não é processado
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from connect_volunteers.domain.protocols.dedupe import DedupeError, DedupeStore
from connect_volunteers.observability.logging import get_logger

if TYPE_CHECKING:
    from connect_volunteers.config.settings import Settings

logger: logging.Logger = get_logger(__name__)


@dataclass(slots=True)
class InMemoryDedupeStore(DedupeStore):
    """Dedupe em memória para desenvolvimento e testes.

    ATENÇÃO: não persiste entre restarts nem entre instâncias.
    """

    _seen: dict[str, float] = field(default_factory=dict)
    ttl_seconds: int = 86400

    async def mark_if_new(self, key: str) -> bool:
        self._cleanup_expired()

        if key in self._seen:
            logger.debug("Dedupe hit (in-memory)", extra={"key": key})
            return False

        self._seen[key] = time.time()
        return True

    async def clear(self, key: str) -> bool:
        return self._seen.pop(key, None) is not None

    def _cleanup_expired(self) -> None:
        """Remove chaves expiradas (TTL simulado)."""
        now = time.time()
        expired = [k for k, ts in self._seen.items() if now - ts > self.ttl_seconds]
        for k in expired:
            del self._seen[k]


class RedisDedupeStore(DedupeStore):
    """Dedupe via Redis com TTL nativo e fail-closed."""

    def __init__(
        self,
        redis_client: Any,
        ttl_seconds: int = 86400,
        key_prefix: str = "dedupe:",
    ) -> None:
        self._redis = redis_client
        self._ttl_seconds = ttl_seconds
        self._key_prefix = key_prefix

    async def mark_if_new(self, key: str) -> bool:
        full_key = f"{self._key_prefix}{key}"
        try:
            was_set = await self._redis.set(full_key, "1", nx=True, ex=self._ttl_seconds)
        except Exception as e:
            logger.error(
                "Redis dedupe failed (fail-closed)",
                extra={"error": str(e)},
            )
            raise DedupeError(f"Redis unavailable: {e}") from e

        if not was_set:
            logger.debug("Dedupe hit (Redis)", extra={"key": key})
        return bool(was_set)

    async def clear(self, key: str) -> bool:
        try:
            return bool(await self._redis.delete(f"{self._key_prefix}{key}"))
        except Exception as e:  # pragma: no cover - log best effort
            logger.error("Redis dedupe clear failed", extra={"error": str(e)})
            return False


def create_dedupe_store(settings: Settings, redis_client: Any | None = None) -> DedupeStore:
    """Factory do store de dedupe conforme `dedupe_backend`."""
    backend = settings.dedupe_backend.lower()

    if backend == "redis":
        if redis_client is None:
            raise ValueError("DEDUPE_BACKEND=redis requer REDIS_URL configurado")
        logger.info("Usando RedisDedupeStore")
        return RedisDedupeStore(redis_client, ttl_seconds=settings.dedupe_ttl_seconds)

    if backend == "memory":
        logger.info("Usando InMemoryDedupeStore")
        return InMemoryDedupeStore(ttl_seconds=settings.dedupe_ttl_seconds)

    raise ValueError(f"Backend de dedupe não reconhecido: {backend}")
