"""
Service wiring.

Builds the content stack from settings: content store client, content
service, cache manager, invalidator and (given an operational store) the
hybrid resolver. Each container owns its own instances; nothing is shared
through module globals.
"""

from typing import Self

import structlog

from tap2go.content.cache.invalidation import CacheInvalidator
from tap2go.content.cache.manager import CacheManager
from tap2go.content.cms.service import ContentService
from tap2go.content.db import ContentStoreClient
from tap2go.content.hybrid.adapter import OperationalStoreAdapter
from tap2go.content.hybrid.resolver import HybridResolver
from tap2go.content.settings import Settings

logger = structlog.get_logger(__name__)


class ContentContainer:
    """Owns the lifecycle of one content stack."""

    def __init__(
        self,
        config: Settings,
        operational_store: OperationalStoreAdapter | None = None,
    ) -> None:
        self.config = config
        self.client = ContentStoreClient.from_settings(config.database)
        self.content = ContentService(self.client)
        self.cache = CacheManager.from_settings(config.cache)
        self.invalidator = CacheInvalidator(self.cache)
        self._resolver: HybridResolver | None = None
        if operational_store is not None:
            self._resolver = HybridResolver(
                operational_store,
                self.content,
                self.cache,
                operational_timeout=config.operational.timeout,
                search_limit=config.operational.search_limit,
            )

    @property
    def resolver(self) -> HybridResolver:
        if self._resolver is None:
            raise RuntimeError("No operational store configured for hybrid resolution")
        return self._resolver

    async def health(self) -> dict[str, bool]:
        """Reachability of the content store and the distributed cache tier."""
        return {
            "content_store": await self.client.health_check(),
            "distributed_cache": await self.cache.distributed_available(),
            "cache_enabled": self.cache.enabled,
        }

    async def start(self) -> None:
        self.cache.start()
        logger.info(
            "content.container_started",
            distributed_cache=self.cache.distributed is not None,
            resolver=self._resolver is not None,
        )

    async def close(self) -> None:
        await self.cache.close()
        await self.client.close()
        logger.info("content.container_closed")

    async def __aenter__(self) -> Self:
        await self.start()
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()
