"""
Cache invalidation per content category.

Content rows are hard-deleted and edited outside the cache, so every write
path must clear the keys derived from the row. A specific id removes the
direct keys; no id clears the whole category by prefix pattern.
"""

from enum import Enum

import structlog

from tap2go.content.cache.config import CacheKeys, CachePrefix
from tap2go.content.cache.manager import CacheManager

logger = structlog.get_logger(__name__)


class InvalidationTarget(str, Enum):
    """Categories that can be invalidated."""

    RESTAURANT = "restaurant"
    MENU = "menu"
    BLOG = "blog"
    PROMOTIONS = "promotions"
    STATIC_PAGES = "static_pages"
    BANNERS = "banners"
    ALL = "all"


class CacheInvalidator:
    """Invalidation helpers bound to one cache manager."""

    def __init__(self, cache: CacheManager) -> None:
        self.cache = cache

    async def invalidate_restaurant(self, external_id: str | None = None) -> None:
        """
        Drop cached restaurant content and the views built from it.

        Searches embed restaurant content, so they are cleared either way.
        """
        if external_id:
            await self.cache.delete(CacheKeys.restaurant(external_id))
            await self.cache.delete(CacheKeys.hybrid_restaurant(external_id))
            # Slug keys do not carry the id.
            await self.cache.delete_pattern(CacheKeys.restaurant_by_slug("*"))
        else:
            await self.cache.delete_pattern(CacheKeys.pattern(CachePrefix.RESTAURANT))
            await self.cache.delete_pattern(CacheKeys.pattern(CachePrefix.HYBRID_RESTAURANT))
        await self.cache.delete_pattern(CacheKeys.pattern(CachePrefix.SEARCH))
        logger.info("cache.invalidated", target="restaurant", id=external_id)

    async def invalidate_menu(self, restaurant_id: str | None = None) -> None:
        if restaurant_id:
            await self.cache.delete(CacheKeys.menu_categories(restaurant_id))
            await self.cache.delete_pattern(f"{CachePrefix.MENU_ITEM}{restaurant_id}:*")
            await self.cache.delete(CacheKeys.hybrid_menu(restaurant_id))
        else:
            await self.cache.delete_pattern(CacheKeys.pattern("menu-"))
            await self.cache.delete_pattern(CacheKeys.pattern(CachePrefix.HYBRID_MENU))
        logger.info("cache.invalidated", target="menu", id=restaurant_id)

    async def invalidate_blog(self) -> None:
        await self.cache.delete_pattern(CacheKeys.pattern("blog-"))
        logger.info("cache.invalidated", target="blog")

    async def invalidate_promotions(self) -> None:
        await self.cache.delete_pattern(CacheKeys.pattern(CachePrefix.PROMOTION))
        logger.info("cache.invalidated", target="promotions")

    async def invalidate_static_pages(self) -> None:
        await self.cache.delete_pattern(CacheKeys.pattern(CachePrefix.STATIC_PAGE))
        logger.info("cache.invalidated", target="static_pages")

    async def invalidate_banners(self) -> None:
        await self.cache.delete_pattern(CacheKeys.pattern(CachePrefix.BANNER))
        logger.info("cache.invalidated", target="banners")

    async def invalidate(self, target: InvalidationTarget, entity_id: str | None = None) -> None:
        """Dispatch by target name."""
        match target:
            case InvalidationTarget.RESTAURANT:
                await self.invalidate_restaurant(entity_id)
            case InvalidationTarget.MENU:
                await self.invalidate_menu(entity_id)
            case InvalidationTarget.BLOG:
                await self.invalidate_blog()
            case InvalidationTarget.PROMOTIONS:
                await self.invalidate_promotions()
            case InvalidationTarget.STATIC_PAGES:
                await self.invalidate_static_pages()
            case InvalidationTarget.BANNERS:
                await self.invalidate_banners()
            case InvalidationTarget.ALL:
                await self.cache.clear()
                logger.info("cache.invalidated", target="all")
