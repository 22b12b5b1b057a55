"""Typed CRUD helpers, one per content category."""

from tap2go.content.operations.base import ContentOperations, utc_now
from tap2go.content.operations.blog_posts import BlogPostOperations
from tap2go.content.operations.homepage_banners import HomepageBannerOperations
from tap2go.content.operations.menu_categories import MenuCategoryOperations
from tap2go.content.operations.menu_items import MenuItemOperations
from tap2go.content.operations.promotions import PromotionOperations
from tap2go.content.operations.restaurant_content import RestaurantContentOperations
from tap2go.content.operations.static_pages import StaticPageOperations

__all__ = [
    "ContentOperations",
    "utc_now",
    "RestaurantContentOperations",
    "MenuCategoryOperations",
    "MenuItemOperations",
    "BlogPostOperations",
    "PromotionOperations",
    "StaticPageOperations",
    "HomepageBannerOperations",
]
