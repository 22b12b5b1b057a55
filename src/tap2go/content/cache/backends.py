"""
Cache tiers.

``LocalCacheTier`` is the in-process fallback: a cachetools ``TLRUCache``
whose per-entry expiry is fixed at write time. ``RedisCacheTier`` is the
shared distributed tier; every failure it meets is raised as
:class:`CacheTierError` so the manager can decide to absorb it.
"""

import asyncio
import json
import math
import re
import threading
import time
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any, Self, TypeVar

import structlog
from cachetools import TLRUCache
from redis.asyncio import Redis
from redis.exceptions import RedisError

from tap2go.content.exceptions import CacheTierError

logger = structlog.get_logger(__name__)

T = TypeVar("T")
Clock = Callable[[], float]


@dataclass(frozen=True, slots=True)
class CacheEntry:
    """A cached payload with its absolute expiry time."""

    key: str
    payload: str
    expires_at: float

    def is_expired(self, now: float) -> bool:
        return now >= self.expires_at


def glob_to_regex(pattern: str) -> re.Pattern[str]:
    """
    Compile a Redis-style glob into an anchored regular expression.

    Supports ``*``, ``?``, ``[abc]``, ``[a-z]``, negated classes ``[^...]`` /
    ``[!...]`` and backslash escapes, matching what ``SCAN MATCH`` accepts.
    """
    parts: list[str] = []
    i, n = 0, len(pattern)
    while i < n:
        char = pattern[i]
        if char == "\\" and i + 1 < n:
            parts.append(re.escape(pattern[i + 1]))
            i += 2
            continue
        if char == "*":
            parts.append(".*")
        elif char == "?":
            parts.append(".")
        elif char == "[":
            end = pattern.find("]", i + 2)
            if end == -1:
                parts.append(re.escape(char))
            else:
                parts.append(_translate_class(pattern[i + 1 : end]))
                i = end + 1
                continue
        else:
            parts.append(re.escape(char))
        i += 1
    return re.compile("".join(parts), re.DOTALL)


def _translate_class(body: str) -> str:
    negate = body[:1] in ("^", "!")
    if negate:
        body = body[1:]
    out: list[str] = []
    i = 0
    while i < len(body):
        char = body[i]
        if char == "\\" and i + 1 < len(body):
            out.append(re.escape(body[i + 1]))
            i += 2
            continue
        out.append("-" if char == "-" else re.escape(char))
        i += 1
    if not out:
        return "(?!)" if not negate else "."
    return f"[{'^' if negate else ''}{''.join(out)}]"


class LocalCacheTier:
    """
    In-process tier.

    Reads, writes and the periodic sweep share one lock, so an entry being
    served is never evicted halfway through a read.
    """

    def __init__(self, maxsize: int = 10_000, clock: Clock = time.time) -> None:
        self.clock = clock
        self._lock = threading.RLock()
        self._cache: TLRUCache[str, CacheEntry] = TLRUCache(
            maxsize=maxsize,
            ttu=lambda _key, entry, _now: entry.expires_at,
            timer=clock,
        )

    def get(self, key: str) -> CacheEntry | None:
        with self._lock:
            entry = self._cache.get(key)
            if entry is None or entry.is_expired(self.clock()):
                return None
            return entry

    def set(self, entry: CacheEntry) -> None:
        with self._lock:
            self._cache[entry.key] = entry

    def delete(self, key: str) -> bool:
        with self._lock:
            return self._cache.pop(key, None) is not None

    def delete_pattern(self, pattern: str) -> int:
        matcher = glob_to_regex(pattern)
        with self._lock:
            matched = [key for key in list(self._cache.keys()) if matcher.fullmatch(key)]
            for key in matched:
                self._cache.pop(key, None)
        return len(matched)

    def clear(self) -> None:
        with self._lock:
            self._cache.clear()

    def sweep(self) -> int:
        """Evict expired entries; returns how many were removed."""
        with self._lock:
            return len(self._cache.expire())

    def __len__(self) -> int:
        with self._lock:
            return len(self._cache)


class RedisCacheTier:
    """Distributed tier backed by redis.asyncio."""

    def __init__(self, client: Redis, operation_timeout: float = 2.0) -> None:
        self.client = client
        self.operation_timeout = operation_timeout

    @classmethod
    def from_url(cls, url: str, operation_timeout: float = 2.0) -> Self:
        client = Redis.from_url(
            url,
            decode_responses=True,
            socket_timeout=operation_timeout,
            socket_connect_timeout=operation_timeout,
        )
        return cls(client, operation_timeout)

    async def _call(self, operation: str, key: str | None, fn: Callable[[], Awaitable[T]]) -> T:
        try:
            async with asyncio.timeout(self.operation_timeout):
                return await fn()
        except TimeoutError as exc:
            raise CacheTierError(f"Redis {operation} timed out", operation, key) from exc
        except (RedisError, OSError) as exc:
            raise CacheTierError(f"Redis {operation} failed: {exc}", operation, key) from exc

    async def get(self, key: str) -> CacheEntry | None:
        raw = await self._call("get", key, lambda: self.client.get(key))
        if raw is None:
            return None
        try:
            envelope: dict[str, Any] = json.loads(raw)
            return CacheEntry(key, envelope["payload"], float(envelope["expires_at"]))
        except (ValueError, TypeError, KeyError) as exc:
            raise CacheTierError("Malformed cache envelope", "get", key) from exc

    async def set(self, entry: CacheEntry, ttl: float) -> None:
        envelope = json.dumps({"payload": entry.payload, "expires_at": entry.expires_at})
        seconds = max(1, math.ceil(ttl))
        await self._call("set", entry.key, lambda: self.client.setex(entry.key, seconds, envelope))

    async def delete(self, key: str) -> int:
        return int(await self._call("delete", key, lambda: self.client.delete(key)))

    async def delete_pattern(self, pattern: str) -> int:
        async def _scan_and_delete() -> int:
            keys = [key async for key in self.client.scan_iter(match=pattern, count=500)]
            deleted = 0
            for start in range(0, len(keys), 500):
                deleted += await self.client.delete(*keys[start : start + 500])
            return deleted

        return await self._call("delete_pattern", pattern, _scan_and_delete)

    async def flush(self) -> None:
        await self._call("flushdb", None, lambda: self.client.flushdb())

    async def ping(self) -> bool:
        return bool(await self._call("ping", None, lambda: self.client.ping()))

    async def close(self) -> None:
        await self.client.aclose()
