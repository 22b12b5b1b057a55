"""
Two-tier cache manager.

Reads try the distributed tier first and fall through to the local tier;
writes go to both tiers concurrently. Distributed failures (errors and
timeouts alike) are logged and absorbed: a read becomes a miss, a write
stays local-only. There is no rollback, so the tiers may diverge until the
entry expires.
"""

import asyncio
import contextlib
import json
import time
from dataclasses import asdict, dataclass
from typing import Any, Self

import structlog

from tap2go.content.cache.backends import CacheEntry, Clock, LocalCacheTier, RedisCacheTier
from tap2go.content.exceptions import CacheTierError
from tap2go.content.settings import Settings

logger = structlog.get_logger(__name__)


@dataclass
class CacheStats:
    """Counters for cache operations."""

    distributed_hits: int = 0
    local_hits: int = 0
    misses: int = 0
    sets: int = 0
    deletes: int = 0
    distributed_errors: int = 0

    @property
    def hit_rate(self) -> float:
        total = self.distributed_hits + self.local_hits + self.misses
        return (self.distributed_hits + self.local_hits) / total if total > 0 else 0.0


class CacheManager:
    """
    Read-through two-tier cache.

    Args:
        distributed: Redis tier, or ``None`` to run local-only
        enabled: Global kill switch; when False every read misses and writes are dropped
        key_prefix: Namespace prepended to every key and pattern
        sweep_interval: Seconds between background local-tier sweeps
        local_max_entries: Local tier capacity
        clock: Wall clock in epoch seconds, shared by both tiers for expiry
    """

    def __init__(
        self,
        distributed: RedisCacheTier | None = None,
        *,
        enabled: bool = True,
        key_prefix: str = "",
        sweep_interval: float = 300.0,
        local_max_entries: int = 10_000,
        clock: Clock = time.time,
    ) -> None:
        self.distributed = distributed
        self.enabled = enabled
        self.key_prefix = key_prefix
        self.sweep_interval = sweep_interval
        self.clock = clock
        self.local = LocalCacheTier(maxsize=local_max_entries, clock=clock)
        self.stats = CacheStats()
        self._sweep_task: asyncio.Task[None] | None = None

    @classmethod
    def from_settings(cls, config: Settings.CacheSettings, clock: Clock = time.time) -> Self:
        distributed = None
        if config.redis_url:
            distributed = RedisCacheTier.from_url(config.redis_url, config.operation_timeout)
        else:
            logger.info("cache.local_only", reason="no distributed cache URL configured")
        return cls(
            distributed,
            enabled=config.enabled,
            key_prefix=config.key_prefix,
            sweep_interval=config.sweep_interval,
            local_max_entries=config.local_max_entries,
            clock=clock,
        )

    def _key(self, key: str) -> str:
        return f"{self.key_prefix}:{key}" if self.key_prefix else key

    def _distributed_failed(self, event: str, error: CacheTierError) -> None:
        self.stats.distributed_errors += 1
        logger.warning(event, error=error.message, **error.context)

    # ------------------------------------------------------------------
    # Reads and writes
    # ------------------------------------------------------------------

    async def get(self, key: str) -> Any | None:
        """Return the cached value for ``key``, or ``None`` on a miss."""
        if not self.enabled:
            return None

        full_key = self._key(key)
        entry: CacheEntry | None = None

        if self.distributed is not None:
            try:
                entry = await self.distributed.get(full_key)
            except CacheTierError as exc:
                self._distributed_failed("cache.distributed_get_failed", exc)
            if entry is not None and entry.is_expired(self.clock()):
                entry = None
            if entry is not None:
                self.stats.distributed_hits += 1
                logger.debug("cache.hit", tier="distributed", key=full_key)
                return json.loads(entry.payload)

        entry = self.local.get(full_key)
        if entry is not None:
            self.stats.local_hits += 1
            logger.debug("cache.hit", tier="local", key=full_key)
            return json.loads(entry.payload)

        self.stats.misses += 1
        logger.debug("cache.miss", key=full_key)
        return None

    async def set(self, key: str, value: Any, ttl: float) -> None:
        """Write ``value`` to both tiers; it must be JSON-serializable."""
        if not self.enabled:
            return

        full_key = self._key(key)
        entry = CacheEntry(full_key, json.dumps(value, default=str), self.clock() + ttl)
        await asyncio.gather(self._set_local(entry), self._set_distributed(entry, ttl))
        self.stats.sets += 1
        logger.debug("cache.set", key=full_key, ttl=ttl)

    async def _set_local(self, entry: CacheEntry) -> None:
        self.local.set(entry)

    async def _set_distributed(self, entry: CacheEntry, ttl: float) -> None:
        if self.distributed is None:
            return
        try:
            await self.distributed.set(entry, ttl)
        except CacheTierError as exc:
            self._distributed_failed("cache.distributed_set_failed", exc)

    async def delete(self, key: str) -> None:
        if not self.enabled:
            return

        full_key = self._key(key)
        self.local.delete(full_key)
        if self.distributed is not None:
            try:
                await self.distributed.delete(full_key)
            except CacheTierError as exc:
                self._distributed_failed("cache.distributed_delete_failed", exc)
        self.stats.deletes += 1

    async def delete_pattern(self, pattern: str) -> int:
        """
        Remove every key matching a Redis-style glob from both tiers.

        Returns:
            Number of local-tier entries removed
        """
        if not self.enabled:
            return 0

        full_pattern = self._key(pattern)
        removed = self.local.delete_pattern(full_pattern)
        if self.distributed is not None:
            try:
                await self.distributed.delete_pattern(full_pattern)
            except CacheTierError as exc:
                self._distributed_failed("cache.distributed_delete_pattern_failed", exc)
        self.stats.deletes += removed
        logger.info("cache.pattern_invalidated", pattern=full_pattern, local_removed=removed)
        return removed

    async def clear(self) -> None:
        """Drop every entry in this manager's namespace from both tiers."""
        self.local.clear()
        if self.distributed is None:
            return
        try:
            if self.key_prefix:
                await self.distributed.delete_pattern(self._key("*"))
            else:
                await self.distributed.flush()
        except CacheTierError as exc:
            self._distributed_failed("cache.distributed_clear_failed", exc)

    # ------------------------------------------------------------------
    # Health and statistics
    # ------------------------------------------------------------------

    async def distributed_available(self) -> bool:
        if self.distributed is None:
            return False
        try:
            return await self.distributed.ping()
        except CacheTierError as exc:
            self._distributed_failed("cache.distributed_ping_failed", exc)
            return False

    def get_stats(self) -> dict[str, Any]:
        return {
            **asdict(self.stats),
            "hit_rate": self.stats.hit_rate,
            "local_size": len(self.local),
            "distributed_enabled": self.distributed is not None,
            "enabled": self.enabled,
        }

    # ------------------------------------------------------------------
    # Background sweep
    # ------------------------------------------------------------------

    def start(self) -> None:
        """Start the periodic local-tier sweep on the running event loop."""
        if self._sweep_task is None or self._sweep_task.done():
            self._sweep_task = asyncio.create_task(self._sweep_loop(), name="cache-sweep")

    async def _sweep_loop(self) -> None:
        while True:
            await asyncio.sleep(self.sweep_interval)
            removed = self.local.sweep()
            if removed:
                logger.debug("cache.swept", removed=removed)

    async def close(self) -> None:
        if self._sweep_task is not None:
            self._sweep_task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await self._sweep_task
            self._sweep_task = None
        if self.distributed is not None:
            await self.distributed.close()

    async def __aenter__(self) -> Self:
        self.start()
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()
