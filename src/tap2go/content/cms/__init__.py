"""Content abstraction layer: typed ``{id, attributes}`` entries over content operations."""

from tap2go.content.cms.schemas import (
    BlogPostEntry,
    ContentEntry,
    HomepageBannerEntry,
    MenuCategoryEntry,
    MenuItemEntry,
    PromotionEntry,
    RestaurantContentEntry,
    StaticPageEntry,
)
from tap2go.content.cms.service import ContentService

__all__ = [
    "BlogPostEntry",
    "ContentEntry",
    "ContentService",
    "HomepageBannerEntry",
    "MenuCategoryEntry",
    "MenuItemEntry",
    "PromotionEntry",
    "RestaurantContentEntry",
    "StaticPageEntry",
]
