"""
Cache TTL table and key namespace.

Every cached value belongs to a content category; the category fixes both
its TTL and its key prefix, so bulk invalidation can target a whole category
with a ``<prefix>*`` pattern without knowing individual ids.
"""

import hashlib
import json
from enum import Enum
from typing import Any


class ContentCategory(str, Enum):
    """Cached content categories."""

    RESTAURANT_CONTENT = "restaurant_content"
    MENU_CONTENT = "menu_content"
    BLOG_POSTS = "blog_posts"
    PROMOTIONS = "promotions"
    STATIC_PAGES = "static_pages"
    HOMEPAGE_BANNERS = "homepage_banners"
    HYBRID_RESTAURANT = "hybrid_restaurant"
    HYBRID_MENU = "hybrid_menu"


class CacheTTL:
    """TTLs in seconds per content category."""

    RESTAURANT_CONTENT = 3600  # 1 hour
    MENU_CONTENT = 1800  # 30 minutes
    BLOG_POSTS = 7200  # 2 hours
    PROMOTIONS = 900  # 15 minutes
    STATIC_PAGES = 86400  # 24 hours
    HOMEPAGE_BANNERS = 3600  # 1 hour
    HYBRID_RESTAURANT = 900  # 15 minutes
    HYBRID_MENU = 1800  # 30 minutes

    @classmethod
    def for_category(cls, category: ContentCategory) -> int:
        return int(getattr(cls, category.name))


class CachePrefix:
    """Key prefix per category."""

    RESTAURANT = "restaurant:"
    MENU_CATEGORY = "menu-category:"
    MENU_ITEM = "menu-item:"
    BLOG_POST = "blog-post:"
    PROMOTION = "promotion:"
    STATIC_PAGE = "static-page:"
    BANNER = "banner:"
    SEARCH = "search:"
    HYBRID_RESTAURANT = "hybrid:restaurant:"
    HYBRID_MENU = "hybrid:menu:"


class CacheKeys:
    """Cache key generator for content entities."""

    @staticmethod
    def restaurant(external_id: str) -> str:
        return f"{CachePrefix.RESTAURANT}{external_id}"

    @staticmethod
    def restaurant_by_slug(slug: str) -> str:
        return f"{CachePrefix.RESTAURANT}slug:{slug}"

    @staticmethod
    def menu_categories(restaurant_id: str) -> str:
        return f"{CachePrefix.MENU_CATEGORY}{restaurant_id}"

    @staticmethod
    def menu_items(restaurant_id: str, category_id: str | None = None) -> str:
        return f"{CachePrefix.MENU_ITEM}{restaurant_id}:{category_id or 'all'}"

    @staticmethod
    def blog_post(slug: str) -> str:
        return f"{CachePrefix.BLOG_POST}{slug}"

    @staticmethod
    def blog_post_list(params: dict[str, Any] | None = None) -> str:
        return f"{CachePrefix.BLOG_POST}list:{CacheKeys.generate_hash(params or {})}"

    @staticmethod
    def active_promotions() -> str:
        return f"{CachePrefix.PROMOTION}active"

    @staticmethod
    def restaurant_promotions(restaurant_id: str) -> str:
        return f"{CachePrefix.PROMOTION}restaurant:{restaurant_id}"

    @staticmethod
    def static_page(slug: str) -> str:
        return f"{CachePrefix.STATIC_PAGE}{slug}"

    @staticmethod
    def navigation_pages() -> str:
        return f"{CachePrefix.STATIC_PAGE}navigation"

    @staticmethod
    def active_banners() -> str:
        return f"{CachePrefix.BANNER}active"

    @staticmethod
    def restaurant_search(filters: dict[str, Any], limit: int) -> str:
        digest = CacheKeys.generate_hash({"filters": filters, "limit": limit})
        return f"{CachePrefix.SEARCH}restaurants:{digest}"

    @staticmethod
    def hybrid_restaurant(external_id: str) -> str:
        return f"{CachePrefix.HYBRID_RESTAURANT}{external_id}"

    @staticmethod
    def hybrid_menu(restaurant_id: str) -> str:
        return f"{CachePrefix.HYBRID_MENU}{restaurant_id}"

    @staticmethod
    def pattern(prefix: str) -> str:
        """Glob matching every key under ``prefix``."""
        return f"{prefix}*"

    @staticmethod
    def generate_hash(data: dict[str, Any]) -> str:
        """Stable digest of a parameter mapping for list/search keys."""
        json_str = json.dumps(data, sort_keys=True, default=str)
        return hashlib.md5(json_str.encode(), usedforsecurity=False).hexdigest()  # nosec B324
