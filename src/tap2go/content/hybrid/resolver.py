"""
Hybrid data resolver.

Merges operational records with editorial content into read-only hybrid
views. Each read follows the same steps:

1. check the cache for the composite key and return a hit as-is;
2. fetch the operational record (mandatory: failures raise AdapterError,
   absence returns None and caches nothing);
3. fetch content (best-effort: any failure leaves ``content`` unset);
4. merge into a new view without touching the operational record;
5. write the view through the cache with the view's TTL and return the
   cached form, so hits and misses yield identical values.

Content entries are also read through the cache under their category keys
and TTLs. Missing entries are not cached; empty lists are.

No lock spans the miss-fetch-write sequence. Concurrent misses on the same
key both resolve and write equivalent views; the last write wins.
"""

import asyncio
from collections.abc import Awaitable, Callable, Mapping
from typing import Any, TypeVar

import structlog
from pydantic import BaseModel, ValidationError

from tap2go.content.cache.config import CacheKeys, CacheTTL, ContentCategory
from tap2go.content.cache.manager import CacheManager
from tap2go.content.cms.schemas import (
    BlogPostEntry,
    HomepageBannerEntry,
    MenuCategoryEntry,
    MenuItemEntry,
    PromotionEntry,
    RestaurantContentEntry,
    StaticPageEntry,
)
from tap2go.content.cms.service import ContentService
from tap2go.content.exceptions import AdapterError
from tap2go.content.hybrid.adapter import (
    RESTAURANTS,
    OperationalRecord,
    OperationalStoreAdapter,
    menu_categories_collection,
    menu_items_collection,
)
from tap2go.content.hybrid.schemas import (
    RESERVED_KEYS,
    HybridMenuCategory,
    HybridMenuItem,
    HybridRestaurant,
    MenuCategoryContentView,
    MenuItemContentView,
    RestaurantContentView,
)
from tap2go.content.operations.base import Clock, utc_now

logger = structlog.get_logger(__name__)

T = TypeVar("T")
ViewT = TypeVar("ViewT", bound=BaseModel)


def _operational_fields(record: OperationalRecord, fallback_id: str | None = None) -> dict[str, Any]:
    fields = {key: value for key, value in record.items() if key not in RESERVED_KEYS}
    fields["id"] = str(record.get("id", fallback_id))
    return fields


def restaurant_content_view(entry: RestaurantContentEntry) -> RestaurantContentView:
    attrs = entry.attributes
    return RestaurantContentView(
        story=attrs.story,
        long_description=attrs.long_description,
        hero_image=attrs.hero_image,
        gallery=attrs.gallery,
        awards=attrs.awards,
        certifications=attrs.certifications,
        special_features=attrs.special_features,
        social_media=attrs.social_media,
        seo=attrs.seo,
    )


def menu_item_content_view(entry: MenuItemEntry) -> MenuItemContentView:
    attrs = entry.attributes
    return MenuItemContentView(
        detailed_description=attrs.detailed_description,
        images=attrs.images,
        ingredients=attrs.ingredients,
        allergens=attrs.allergens,
        nutritional_info=attrs.nutritional_info,
        preparation_steps=attrs.preparation_steps,
        chef_notes=attrs.chef_notes,
        tags=attrs.tags,
        is_vegetarian=attrs.is_vegetarian,
        is_vegan=attrs.is_vegan,
        is_gluten_free=attrs.is_gluten_free,
        spice_level=attrs.spice_level,
    )


def menu_category_content_view(entry: MenuCategoryEntry) -> MenuCategoryContentView:
    return MenuCategoryContentView(
        detailed_description=entry.attributes.description,
        image=entry.attributes.image,
    )


class HybridResolver:
    """
    Resolves hybrid restaurant and menu views, and reads content through the cache.

    Args:
        operational_store: Read adapter for the operational store
        content: Content service for editorial records
        cache: Two-tier cache for composite views
        operational_timeout: Seconds allowed per operational store call
        search_limit: Default number of search candidates
        clock: Source of ``last_updated`` timestamps
    """

    def __init__(
        self,
        operational_store: OperationalStoreAdapter,
        content: ContentService,
        cache: CacheManager,
        *,
        operational_timeout: float = 10.0,
        search_limit: int = 20,
        clock: Clock = utc_now,
    ) -> None:
        self.operational_store = operational_store
        self.content = content
        self.cache = cache
        self.operational_timeout = operational_timeout
        self.search_limit = search_limit
        self.clock = clock

    # ------------------------------------------------------------------
    # Step helpers
    # ------------------------------------------------------------------

    async def _operational(
        self, collection: str, record_id: str | None, call: Callable[[], Awaitable[T]]
    ) -> T:
        try:
            async with asyncio.timeout(self.operational_timeout):
                return await call()
        except TimeoutError as exc:
            logger.error("hybrid.operational_timeout", collection=collection, id=record_id)
            raise AdapterError(
                f"Operational store timed out after {self.operational_timeout}s",
                collection,
                record_id,
            ) from exc
        except AdapterError:
            raise
        except Exception as exc:
            logger.error(
                "hybrid.operational_failed", collection=collection, id=record_id, error=str(exc)
            )
            raise AdapterError(f"Operational store call failed: {exc}", collection, record_id) from exc

    async def _best_effort(self, what: str, key: str, call: Callable[[], Awaitable[T]]) -> T | None:
        try:
            return await call()
        except Exception as exc:
            logger.warning("hybrid.content_fetch_failed", content=what, key=key, error=str(exc))
            return None

    async def _cached(self, key: str, model: type[ViewT]) -> ViewT | None:
        payload = await self.cache.get(key)
        if payload is None:
            return None
        try:
            return model.model_validate(payload)
        except ValidationError as exc:
            logger.warning("hybrid.cached_view_invalid", key=key, error=str(exc))
            return None

    async def _cached_list(self, key: str, model: type[ViewT]) -> list[ViewT] | None:
        payload = await self.cache.get(key)
        if not isinstance(payload, list):
            return None
        try:
            return [model.model_validate(item) for item in payload]
        except ValidationError as exc:
            logger.warning("hybrid.cached_view_invalid", key=key, error=str(exc))
            return None

    @staticmethod
    def _dump(view: BaseModel) -> dict[str, Any]:
        return view.model_dump(mode="json", by_alias=True)

    def _restaurant_view(
        self,
        operational: OperationalRecord,
        content: RestaurantContentEntry | None,
        fallback_id: str | None = None,
    ) -> HybridRestaurant:
        return HybridRestaurant(
            **_operational_fields(operational, fallback_id),
            content=restaurant_content_view(content) if content is not None else None,
            has_rich_content=content is not None,
            last_updated=self.clock(),
        )

    async def _menu_item_view(
        self, item: OperationalRecord, content: MenuItemEntry | None = None
    ) -> HybridMenuItem:
        item_id = str(item.get("id"))
        if content is None:
            content = await self._best_effort(
                "menu_item", item_id, lambda: self.content.get_menu_item_content(item_id)
            )
        return HybridMenuItem(
            **_operational_fields(item),
            content=menu_item_content_view(content) if content is not None else None,
            has_rich_content=content is not None,
        )

    # ------------------------------------------------------------------
    # Views
    # ------------------------------------------------------------------

    async def get_restaurant_complete(self, external_id: str) -> HybridRestaurant | None:
        """Restaurant with its editorial content, or None if the restaurant does not exist."""
        cache_key = CacheKeys.hybrid_restaurant(external_id)
        cached = await self._cached(cache_key, HybridRestaurant)
        if cached is not None:
            return cached

        operational = await self._operational(
            RESTAURANTS,
            external_id,
            lambda: self.operational_store.get_by_id(RESTAURANTS, external_id),
        )
        if operational is None:
            logger.debug("hybrid.restaurant_not_found", id=external_id)
            return None

        content = await self._best_effort(
            "restaurant", external_id, lambda: self.content.get_restaurant_content(external_id)
        )
        payload = self._dump(self._restaurant_view(operational, content, external_id))
        await self.cache.set(cache_key, payload, CacheTTL.HYBRID_RESTAURANT)
        return HybridRestaurant.model_validate(payload)

    async def get_menu_complete(self, restaurant_id: str) -> list[HybridMenuCategory]:
        """
        Restaurant menu: operational categories in ``sortOrder`` with their items.

        An empty menu is returned without caching so a menu published later
        shows up on the next call.
        """
        cache_key = CacheKeys.hybrid_menu(restaurant_id)
        cached = await self._cached_list(cache_key, HybridMenuCategory)
        if cached is not None:
            return cached

        categories_collection = menu_categories_collection(restaurant_id)
        categories = await self._operational(
            categories_collection,
            restaurant_id,
            lambda: self.operational_store.query(categories_collection),
        )
        if not categories:
            return []

        items_collection = menu_items_collection(restaurant_id)
        items = await self._operational(
            items_collection,
            restaurant_id,
            lambda: self.operational_store.query(items_collection),
        )

        content_categories = await self._best_effort(
            "menu_categories", restaurant_id, lambda: self.content.get_menu_categories(restaurant_id)
        )
        content_by_id = {
            entry.attributes.external_id: entry for entry in content_categories or []
        }

        item_views = await asyncio.gather(*(self._menu_item_view(item) for item in items))
        items_by_category: dict[str, list[HybridMenuItem]] = {}
        for item, view in zip(items, item_views, strict=True):
            items_by_category.setdefault(str(item.get("category")), []).append(view)

        menu: list[HybridMenuCategory] = []
        for category in sorted(categories, key=lambda c: c.get("sortOrder") or 0):
            category_id = str(category.get("id"))
            content = content_by_id.get(category_id)
            menu.append(
                HybridMenuCategory(
                    **_operational_fields(category),
                    content=menu_category_content_view(content) if content is not None else None,
                    items=items_by_category.get(category_id, []),
                    has_rich_content=content is not None,
                )
            )

        payload = [self._dump(category) for category in menu]
        await self.cache.set(cache_key, payload, CacheTTL.HYBRID_MENU)
        return [HybridMenuCategory.model_validate(category) for category in payload]

    async def get_menu_item_complete(
        self, restaurant_id: str, item_id: str
    ) -> HybridMenuItem | None:
        """Single menu item with content; not cached."""
        collection = menu_items_collection(restaurant_id)
        item = await self._operational(
            collection, item_id, lambda: self.operational_store.get_by_id(collection, item_id)
        )
        if item is None:
            return None
        return await self._menu_item_view({"id": item_id, **item})

    async def search_restaurants_with_content(
        self,
        filters: Mapping[str, Any] | None = None,
        limit: int | None = None,
    ) -> list[HybridRestaurant]:
        """
        Operational restaurant search with content attached to each result.

        Content lookups run concurrently and independently: one failed lookup
        only leaves that restaurant without content.
        """
        filters = dict(filters or {})
        limit = self.search_limit if limit is None else limit
        cache_key = CacheKeys.restaurant_search(filters, limit)
        cached = await self._cached_list(cache_key, HybridRestaurant)
        if cached is not None:
            return cached

        found = await self._operational(
            RESTAURANTS, None, lambda: self.operational_store.query(RESTAURANTS, filters, limit)
        )
        candidates = [candidate for candidate in found if candidate.get("id") is not None]
        if len(candidates) < len(found):
            logger.warning(
                "hybrid.search_candidates_without_id", skipped=len(found) - len(candidates)
            )
        if not candidates:
            return []

        async def _content_for(candidate: OperationalRecord) -> RestaurantContentEntry | None:
            restaurant_id = str(candidate.get("id"))
            return await self._best_effort(
                "restaurant", restaurant_id, lambda: self.content.get_restaurant_content(restaurant_id)
            )

        contents = await asyncio.gather(*(_content_for(candidate) for candidate in candidates))
        views = [
            self._restaurant_view(candidate, content)
            for candidate, content in zip(candidates, contents, strict=True)
        ]

        payload = [self._dump(view) for view in views]
        await self.cache.set(cache_key, payload, CacheTTL.HYBRID_RESTAURANT)
        return [HybridRestaurant.model_validate(view) for view in payload]

    # ------------------------------------------------------------------
    # Cached content reads
    # ------------------------------------------------------------------

    async def _cached_entry(
        self,
        key: str,
        category: ContentCategory,
        model: type[ViewT],
        load: Callable[[], Awaitable[ViewT | None]],
    ) -> ViewT | None:
        cached = await self._cached(key, model)
        if cached is not None:
            return cached
        entry = await load()
        if entry is None:
            return None
        payload = self._dump(entry)
        await self.cache.set(key, payload, CacheTTL.for_category(category))
        return model.model_validate(payload)

    async def _cached_entries(
        self,
        key: str,
        category: ContentCategory,
        model: type[ViewT],
        load: Callable[[], Awaitable[list[ViewT]]],
    ) -> list[ViewT]:
        cached = await self._cached_list(key, model)
        if cached is not None:
            return cached
        payload = [self._dump(entry) for entry in await load()]
        await self.cache.set(key, payload, CacheTTL.for_category(category))
        return [model.model_validate(entry) for entry in payload]

    async def get_restaurant_content(self, external_id: str) -> RestaurantContentEntry | None:
        return await self._cached_entry(
            CacheKeys.restaurant(external_id),
            ContentCategory.RESTAURANT_CONTENT,
            RestaurantContentEntry,
            lambda: self.content.get_restaurant_content(external_id),
        )

    async def get_restaurant_by_slug(self, slug: str) -> RestaurantContentEntry | None:
        return await self._cached_entry(
            CacheKeys.restaurant_by_slug(slug),
            ContentCategory.RESTAURANT_CONTENT,
            RestaurantContentEntry,
            lambda: self.content.get_restaurant_by_slug(slug),
        )

    async def get_menu_categories(self, restaurant_id: str) -> list[MenuCategoryEntry]:
        return await self._cached_entries(
            CacheKeys.menu_categories(restaurant_id),
            ContentCategory.MENU_CONTENT,
            MenuCategoryEntry,
            lambda: self.content.get_menu_categories(restaurant_id),
        )

    async def get_menu_items(
        self, restaurant_id: str, category_id: str | None = None
    ) -> list[MenuItemEntry]:
        """Published item content of one category, or of the whole restaurant."""

        async def load() -> list[MenuItemEntry]:
            if category_id is not None:
                return await self.content.get_menu_items(category_id)
            return await self.content.get_restaurant_menu_items(restaurant_id)

        return await self._cached_entries(
            CacheKeys.menu_items(restaurant_id, category_id),
            ContentCategory.MENU_CONTENT,
            MenuItemEntry,
            load,
        )

    async def get_blog_posts(self, limit: int = 10, offset: int = 0) -> list[BlogPostEntry]:
        return await self._cached_entries(
            CacheKeys.blog_post_list({"limit": limit, "offset": offset}),
            ContentCategory.BLOG_POSTS,
            BlogPostEntry,
            lambda: self.content.get_blog_posts(limit=limit, offset=offset),
        )

    async def get_featured_blog_posts(self, limit: int = 6) -> list[BlogPostEntry]:
        return await self._cached_entries(
            CacheKeys.blog_post_list({"featured": True, "limit": limit}),
            ContentCategory.BLOG_POSTS,
            BlogPostEntry,
            lambda: self.content.get_featured_blog_posts(limit=limit),
        )

    async def get_blog_post(self, slug: str) -> BlogPostEntry | None:
        return await self._cached_entry(
            CacheKeys.blog_post(slug),
            ContentCategory.BLOG_POSTS,
            BlogPostEntry,
            lambda: self.content.get_blog_post(slug),
        )

    async def get_active_promotions(self) -> list[PromotionEntry]:
        return await self._cached_entries(
            CacheKeys.active_promotions(),
            ContentCategory.PROMOTIONS,
            PromotionEntry,
            self.content.get_active_promotions,
        )

    async def get_restaurant_promotions(self, restaurant_id: str) -> list[PromotionEntry]:
        return await self._cached_entries(
            CacheKeys.restaurant_promotions(restaurant_id),
            ContentCategory.PROMOTIONS,
            PromotionEntry,
            lambda: self.content.get_promotions_by_restaurant(restaurant_id),
        )

    async def get_static_page(self, slug: str) -> StaticPageEntry | None:
        return await self._cached_entry(
            CacheKeys.static_page(slug),
            ContentCategory.STATIC_PAGES,
            StaticPageEntry,
            lambda: self.content.get_static_page(slug),
        )

    async def get_navigation_pages(self) -> list[StaticPageEntry]:
        return await self._cached_entries(
            CacheKeys.navigation_pages(),
            ContentCategory.STATIC_PAGES,
            StaticPageEntry,
            self.content.get_navigation_pages,
        )

    async def get_homepage_banners(self) -> list[HomepageBannerEntry]:
        return await self._cached_entries(
            CacheKeys.active_banners(),
            ContentCategory.HOMEPAGE_BANNERS,
            HomepageBannerEntry,
            self.content.get_homepage_banners,
        )
