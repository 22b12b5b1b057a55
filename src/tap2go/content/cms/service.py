"""
Content service.

The content contract consumed by the hybrid resolver and by editorial
tooling. Every method delegates to the per-category operations and maps rows
to :class:`ContentEntry` objects. No caching happens here; writes and deletes
leave cache invalidation to the caller.
"""

from collections.abc import Callable
from typing import TypeVar

from tap2go.content.cms import mappers
from tap2go.content.cms.schemas import (
    BlogPostEntry,
    HomepageBannerEntry,
    MenuCategoryEntry,
    MenuItemEntry,
    PromotionEntry,
    RestaurantContentEntry,
    StaticPageEntry,
)
from tap2go.content.db import ContentStoreClient
from tap2go.content.models import (
    BlogPostCreate,
    BlogPostPatch,
    MenuCategoryCreate,
    MenuCategoryPatch,
    MenuItemCreate,
    MenuItemPatch,
    PromotionCreate,
    PromotionPatch,
    RestaurantContentCreate,
    RestaurantContentPatch,
)
from tap2go.content.operations import (
    BlogPostOperations,
    HomepageBannerOperations,
    MenuCategoryOperations,
    MenuItemOperations,
    PromotionOperations,
    RestaurantContentOperations,
    StaticPageOperations,
)
from tap2go.content.operations.base import Clock, utc_now

R = TypeVar("R")
E = TypeVar("E")


def _map_optional(record: R | None, mapper: Callable[[R], E]) -> E | None:
    return mapper(record) if record is not None else None


class ContentService:
    """Typed content access across every content category."""

    def __init__(self, client: ContentStoreClient, clock: Clock = utc_now) -> None:
        self.restaurants = RestaurantContentOperations(client, clock)
        self.menu_categories = MenuCategoryOperations(client, clock)
        self.menu_items = MenuItemOperations(client, clock)
        self.blog_posts = BlogPostOperations(client, clock)
        self.promotions = PromotionOperations(client, clock)
        self.static_pages = StaticPageOperations(client, clock)
        self.banners = HomepageBannerOperations(client, clock)

    # ==========================================
    # Restaurant content
    # ==========================================

    async def get_restaurant_content(self, external_id: str) -> RestaurantContentEntry | None:
        record = await self.restaurants.get_by_external_id(external_id)
        return _map_optional(record, mappers.restaurant_content_entry)

    async def get_restaurant_by_slug(self, slug: str) -> RestaurantContentEntry | None:
        record = await self.restaurants.get_by_slug(slug)
        return _map_optional(record, mappers.restaurant_content_entry)

    async def create_restaurant_content(
        self, fields: RestaurantContentCreate
    ) -> RestaurantContentEntry:
        return mappers.restaurant_content_entry(await self.restaurants.create(fields))

    async def update_restaurant_content(
        self, record_id: int, patch: RestaurantContentPatch
    ) -> RestaurantContentEntry:
        return mappers.restaurant_content_entry(await self.restaurants.update(record_id, patch))

    async def delete_restaurant_content(self, record_id: int) -> bool:
        return await self.restaurants.delete(record_id)

    # ==========================================
    # Menu content
    # ==========================================

    async def get_menu_categories(self, restaurant_id: str) -> list[MenuCategoryEntry]:
        records = await self.menu_categories.get_by_restaurant(restaurant_id)
        return [mappers.menu_category_entry(record) for record in records]

    async def get_menu_category(self, external_id: str) -> MenuCategoryEntry | None:
        record = await self.menu_categories.get_by_external_id(external_id)
        return _map_optional(record, mappers.menu_category_entry)

    async def create_menu_category(self, fields: MenuCategoryCreate) -> MenuCategoryEntry:
        return mappers.menu_category_entry(await self.menu_categories.create(fields))

    async def update_menu_category(
        self, record_id: int, patch: MenuCategoryPatch
    ) -> MenuCategoryEntry:
        return mappers.menu_category_entry(await self.menu_categories.update(record_id, patch))

    async def delete_menu_category(self, record_id: int) -> bool:
        return await self.menu_categories.delete(record_id)

    async def get_menu_items(self, category_id: str) -> list[MenuItemEntry]:
        records = await self.menu_items.get_by_category(category_id)
        return [mappers.menu_item_entry(record) for record in records]

    async def get_restaurant_menu_items(self, restaurant_id: str) -> list[MenuItemEntry]:
        records = await self.menu_items.get_by_restaurant(restaurant_id)
        return [mappers.menu_item_entry(record) for record in records]

    async def get_menu_item_content(self, external_id: str) -> MenuItemEntry | None:
        record = await self.menu_items.get_by_external_id(external_id)
        return _map_optional(record, mappers.menu_item_entry)

    async def create_menu_item(self, fields: MenuItemCreate) -> MenuItemEntry:
        return mappers.menu_item_entry(await self.menu_items.create(fields))

    async def update_menu_item(self, record_id: int, patch: MenuItemPatch) -> MenuItemEntry:
        return mappers.menu_item_entry(await self.menu_items.update(record_id, patch))

    async def delete_menu_item(self, record_id: int) -> bool:
        return await self.menu_items.delete(record_id)

    # ==========================================
    # Promotions
    # ==========================================

    async def get_active_promotions(self) -> list[PromotionEntry]:
        return [mappers.promotion_entry(record) for record in await self.promotions.get_active()]

    async def get_promotions_by_restaurant(self, restaurant_id: str) -> list[PromotionEntry]:
        records = await self.promotions.get_by_restaurant(restaurant_id)
        return [mappers.promotion_entry(record) for record in records]

    async def create_promotion(self, fields: PromotionCreate) -> PromotionEntry:
        return mappers.promotion_entry(await self.promotions.create(fields))

    async def update_promotion(self, record_id: int, patch: PromotionPatch) -> PromotionEntry:
        return mappers.promotion_entry(await self.promotions.update(record_id, patch))

    async def delete_promotion(self, record_id: int) -> bool:
        return await self.promotions.delete(record_id)

    # ==========================================
    # Blog
    # ==========================================

    async def get_blog_posts(self, limit: int = 10, offset: int = 0) -> list[BlogPostEntry]:
        records = await self.blog_posts.list_published(limit=limit, offset=offset)
        return [mappers.blog_post_entry(record) for record in records]

    async def get_blog_post(self, slug: str) -> BlogPostEntry | None:
        return _map_optional(await self.blog_posts.get_by_slug(slug), mappers.blog_post_entry)

    async def get_featured_blog_posts(self, limit: int = 6) -> list[BlogPostEntry]:
        records = await self.blog_posts.get_featured(limit=limit)
        return [mappers.blog_post_entry(record) for record in records]

    async def create_blog_post(self, fields: BlogPostCreate) -> BlogPostEntry:
        return mappers.blog_post_entry(await self.blog_posts.create(fields))

    async def update_blog_post(self, record_id: int, patch: BlogPostPatch) -> BlogPostEntry:
        return mappers.blog_post_entry(await self.blog_posts.update(record_id, patch))

    async def delete_blog_post(self, record_id: int) -> bool:
        return await self.blog_posts.delete(record_id)

    # ==========================================
    # Static pages and homepage
    # ==========================================

    async def get_static_page(self, slug: str) -> StaticPageEntry | None:
        return _map_optional(await self.static_pages.get_by_slug(slug), mappers.static_page_entry)

    async def get_navigation_pages(self) -> list[StaticPageEntry]:
        records = await self.static_pages.list_navigation()
        return [mappers.static_page_entry(record) for record in records]

    async def get_homepage_banners(self) -> list[HomepageBannerEntry]:
        return [mappers.homepage_banner_entry(record) for record in await self.banners.get_active()]

