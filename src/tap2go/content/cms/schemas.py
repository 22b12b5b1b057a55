"""
Content attribute schemas.

Callers see content as ``{id, attributes}`` where the attribute names are
domain names (``external_id``, ``hero_image``, ``seo``) rather than storage
columns. Serialized output uses camelCase aliases.
"""

from datetime import datetime
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class AttributesBase(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


AttributesT = TypeVar("AttributesT", bound=AttributesBase)


class ContentEntry(BaseModel, Generic[AttributesT]):
    """Uniform content shape returned by the content service."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: int
    attributes: AttributesT


class RestaurantContentAttributes(AttributesBase):
    external_id: str
    slug: str
    story: str | None = None
    long_description: str | None = None
    hero_image: str | None = None
    gallery: list[Any] = Field(default_factory=list)
    awards: list[Any] = Field(default_factory=list)
    certifications: list[Any] = Field(default_factory=list)
    special_features: list[Any] = Field(default_factory=list)
    social_media: dict[str, Any] = Field(default_factory=dict)
    seo: dict[str, Any] = Field(default_factory=dict)
    is_published: bool = False
    published_at: datetime | None = None
    updated_at: datetime | None = None


class MenuCategoryAttributes(AttributesBase):
    external_id: str
    restaurant_id: str
    name: str
    description: str | None = None
    image: str | None = None
    sort_order: int = 0
    is_active: bool = True


class MenuItemAttributes(AttributesBase):
    external_id: str
    category_id: str | None = None
    restaurant_id: str
    name: str
    detailed_description: str | None = None
    short_description: str | None = None
    images: list[Any] = Field(default_factory=list)
    ingredients: list[Any] = Field(default_factory=list)
    allergens: list[Any] = Field(default_factory=list)
    nutritional_info: dict[str, Any] = Field(default_factory=dict)
    preparation_steps: list[Any] = Field(default_factory=list)
    chef_notes: str | None = None
    tags: list[Any] = Field(default_factory=list)
    is_vegetarian: bool = False
    is_vegan: bool = False
    is_gluten_free: bool = False
    spice_level: str | None = None
    preparation_time: int | None = None
    seo: dict[str, Any] = Field(default_factory=dict)
    is_published: bool = False


class Author(AttributesBase):
    name: str | None = None
    bio: str | None = None
    avatar: str | None = None


class BlogPostAttributes(AttributesBase):
    title: str
    slug: str
    content: str | None = None
    excerpt: str | None = None
    featured_image: str | None = None
    author: Author = Field(default_factory=Author)
    categories: list[Any] = Field(default_factory=list)
    tags: list[Any] = Field(default_factory=list)
    related_restaurants: list[Any] = Field(default_factory=list)
    reading_time: int | None = None
    is_published: bool = False
    is_featured: bool = False
    seo: dict[str, Any] = Field(default_factory=dict)
    published_at: datetime | None = None


class PromotionAttributes(AttributesBase):
    title: str
    description: str | None = None
    short_description: str | None = None
    image: str | None = None
    banner_image: str | None = None
    promotion_type: str | None = None
    discount_type: str | None = None
    discount_value: float | None = None
    minimum_order_value: float | None = None
    valid_from: datetime
    valid_until: datetime
    is_active: bool = True
    target_restaurants: list[str] = Field(default_factory=list)
    target_categories: list[str] = Field(default_factory=list)
    target_menu_items: list[str] = Field(default_factory=list)
    max_usage_per_user: int | None = None
    total_usage_limit: int | None = None
    current_usage_count: int = 0
    promo_code: str | None = None
    terms: str | None = None
    seo: dict[str, Any] = Field(default_factory=dict)


class StaticPageAttributes(AttributesBase):
    title: str
    slug: str
    content: str | None = None
    excerpt: str | None = None
    is_published: bool = False
    show_in_navigation: bool = False
    navigation_order: int = 0
    seo: dict[str, Any] = Field(default_factory=dict)
    published_at: datetime | None = None


class HomepageBannerAttributes(AttributesBase):
    title: str
    subtitle: str | None = None
    description: str | None = None
    image: str
    mobile_image: str | None = None
    cta_text: str | None = None
    cta_link: str | None = None
    sort_order: int = 0
    show_on_mobile: bool = True
    show_on_desktop: bool = True
    start_date: datetime | None = None
    end_date: datetime | None = None


RestaurantContentEntry = ContentEntry[RestaurantContentAttributes]
MenuCategoryEntry = ContentEntry[MenuCategoryAttributes]
MenuItemEntry = ContentEntry[MenuItemAttributes]
BlogPostEntry = ContentEntry[BlogPostAttributes]
PromotionEntry = ContentEntry[PromotionAttributes]
StaticPageEntry = ContentEntry[StaticPageAttributes]
HomepageBannerEntry = ContentEntry[HomepageBannerAttributes]
