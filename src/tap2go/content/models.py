"""
Content store record types.

Three models per content category:

* ``<Category>Create`` lists the columns written on INSERT. Structured
  columns default to an empty list/object.
* ``<Category>Record`` is a persisted row (create columns plus the generated
  id and timestamps). Field names equal the storage columns.
* ``<Category>Patch`` lists the columns an UPDATE may touch. Every field is
  optional; only fields explicitly set on the patch are written, so leaving a
  field out is different from setting it to ``None``. Setting ``None`` is
  rejected for columns the create model does not allow to be null.
"""

from datetime import datetime
from typing import Any, ClassVar, get_args

from pydantic import BaseModel, ConfigDict, Field, model_validator


class ContentModel(BaseModel):
    """Base for all content store models."""

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    # Columns stored as serialized JSON text.
    json_columns: ClassVar[tuple[str, ...]] = ()


def _accepts_none(annotation: Any) -> bool:
    return annotation is None or type(None) in get_args(annotation)


class ContentPatch(BaseModel):
    """Base for partial-update models."""

    model_config = ConfigDict(extra="forbid")

    json_columns: ClassVar[tuple[str, ...]] = ()
    create_model: ClassVar[type[ContentModel] | None] = None

    @model_validator(mode="after")
    def _reject_null_for_required_columns(self) -> "ContentPatch":
        if self.create_model is None:
            return self
        columns = self.create_model.model_fields
        nulled = sorted(
            name
            for name in self.model_fields_set
            if getattr(self, name) is None
            and name in columns
            and not _accepts_none(columns[name].annotation)
        )
        if nulled:
            raise ValueError(f"Columns cannot be set to null: {', '.join(nulled)}")
        return self

    def changes(self) -> dict[str, Any]:
        """Fields explicitly supplied by the caller."""
        return self.model_dump(exclude_unset=True)


class PersistedMixin(BaseModel):
    id: int
    created_at: datetime | None = None
    updated_at: datetime | None = None


# ==========================================
# Restaurant content
# ==========================================

_RESTAURANT_JSON = (
    "gallery_images",
    "awards",
    "certifications",
    "special_features",
    "social_media",
    "seo_data",
)


class RestaurantContentCreate(ContentModel):
    json_columns: ClassVar[tuple[str, ...]] = _RESTAURANT_JSON

    firebase_id: str
    slug: str
    story: str | None = None
    long_description: str | None = None
    hero_image_url: str | None = None
    gallery_images: list[Any] = Field(default_factory=list)
    awards: list[Any] = Field(default_factory=list)
    certifications: list[Any] = Field(default_factory=list)
    special_features: list[Any] = Field(default_factory=list)
    social_media: dict[str, Any] = Field(default_factory=dict)
    seo_data: dict[str, Any] = Field(default_factory=dict)
    is_published: bool = False
    published_at: datetime | None = None


class RestaurantContentRecord(PersistedMixin, RestaurantContentCreate):
    pass


class RestaurantContentPatch(ContentPatch):
    create_model: ClassVar[type[ContentModel] | None] = RestaurantContentCreate
    json_columns: ClassVar[tuple[str, ...]] = _RESTAURANT_JSON

    slug: str | None = None
    story: str | None = None
    long_description: str | None = None
    hero_image_url: str | None = None
    gallery_images: list[Any] | None = None
    awards: list[Any] | None = None
    certifications: list[Any] | None = None
    special_features: list[Any] | None = None
    social_media: dict[str, Any] | None = None
    seo_data: dict[str, Any] | None = None
    is_published: bool | None = None
    published_at: datetime | None = None


# ==========================================
# Menu categories
# ==========================================


class MenuCategoryCreate(ContentModel):
    firebase_id: str
    restaurant_firebase_id: str
    name: str
    description: str | None = None
    image_url: str | None = None
    sort_order: int = 0
    is_active: bool = True


class MenuCategoryRecord(PersistedMixin, MenuCategoryCreate):
    pass


class MenuCategoryPatch(ContentPatch):
    create_model: ClassVar[type[ContentModel] | None] = MenuCategoryCreate

    name: str | None = None
    description: str | None = None
    image_url: str | None = None
    sort_order: int | None = None
    is_active: bool | None = None


# ==========================================
# Menu items
# ==========================================

_MENU_ITEM_JSON = (
    "images",
    "ingredients",
    "allergens",
    "nutritional_info",
    "preparation_steps",
    "tags",
    "seo_data",
)


class MenuItemCreate(ContentModel):
    json_columns: ClassVar[tuple[str, ...]] = _MENU_ITEM_JSON

    firebase_id: str
    category_firebase_id: str | None = None
    restaurant_firebase_id: str
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
    seo_data: dict[str, Any] = Field(default_factory=dict)
    is_published: bool = False
    published_at: datetime | None = None


class MenuItemRecord(PersistedMixin, MenuItemCreate):
    pass


class MenuItemPatch(ContentPatch):
    create_model: ClassVar[type[ContentModel] | None] = MenuItemCreate
    json_columns: ClassVar[tuple[str, ...]] = _MENU_ITEM_JSON

    category_firebase_id: str | None = None
    name: str | None = None
    detailed_description: str | None = None
    short_description: str | None = None
    images: list[Any] | None = None
    ingredients: list[Any] | None = None
    allergens: list[Any] | None = None
    nutritional_info: dict[str, Any] | None = None
    preparation_steps: list[Any] | None = None
    chef_notes: str | None = None
    tags: list[Any] | None = None
    is_vegetarian: bool | None = None
    is_vegan: bool | None = None
    is_gluten_free: bool | None = None
    spice_level: str | None = None
    preparation_time: int | None = None
    seo_data: dict[str, Any] | None = None
    is_published: bool | None = None
    published_at: datetime | None = None


# ==========================================
# Blog posts
# ==========================================

_BLOG_JSON = ("categories", "tags", "related_restaurants", "seo_data")


class BlogPostCreate(ContentModel):
    json_columns: ClassVar[tuple[str, ...]] = _BLOG_JSON

    title: str
    slug: str
    content: str | None = None
    excerpt: str | None = None
    featured_image_url: str | None = None
    author_name: str | None = None
    author_bio: str | None = None
    author_avatar_url: str | None = None
    categories: list[Any] = Field(default_factory=list)
    tags: list[Any] = Field(default_factory=list)
    related_restaurants: list[Any] = Field(default_factory=list)
    reading_time: int | None = None
    is_published: bool = False
    is_featured: bool = False
    seo_data: dict[str, Any] = Field(default_factory=dict)
    published_at: datetime | None = None


class BlogPostRecord(PersistedMixin, BlogPostCreate):
    pass


class BlogPostPatch(ContentPatch):
    create_model: ClassVar[type[ContentModel] | None] = BlogPostCreate
    json_columns: ClassVar[tuple[str, ...]] = _BLOG_JSON

    title: str | None = None
    slug: str | None = None
    content: str | None = None
    excerpt: str | None = None
    featured_image_url: str | None = None
    author_name: str | None = None
    author_bio: str | None = None
    author_avatar_url: str | None = None
    categories: list[Any] | None = None
    tags: list[Any] | None = None
    related_restaurants: list[Any] | None = None
    reading_time: int | None = None
    is_published: bool | None = None
    is_featured: bool | None = None
    seo_data: dict[str, Any] | None = None
    published_at: datetime | None = None


# ==========================================
# Promotions
# ==========================================

_PROMOTION_JSON = ("target_restaurants", "target_categories", "target_menu_items", "seo_data")


class PromotionCreate(ContentModel):
    json_columns: ClassVar[tuple[str, ...]] = _PROMOTION_JSON

    title: str
    description: str | None = None
    short_description: str | None = None
    image_url: str | None = None
    banner_image_url: str | None = None
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
    seo_data: dict[str, Any] = Field(default_factory=dict)

    def applies_to_restaurant(self, restaurant_id: str) -> bool:
        """An empty target list applies to every restaurant."""
        return not self.target_restaurants or restaurant_id in self.target_restaurants


class PromotionRecord(PersistedMixin, PromotionCreate):
    pass


class PromotionPatch(ContentPatch):
    create_model: ClassVar[type[ContentModel] | None] = PromotionCreate
    json_columns: ClassVar[tuple[str, ...]] = _PROMOTION_JSON

    title: str | None = None
    description: str | None = None
    short_description: str | None = None
    image_url: str | None = None
    banner_image_url: str | None = None
    promotion_type: str | None = None
    discount_type: str | None = None
    discount_value: float | None = None
    minimum_order_value: float | None = None
    valid_from: datetime | None = None
    valid_until: datetime | None = None
    is_active: bool | None = None
    target_restaurants: list[str] | None = None
    target_categories: list[str] | None = None
    target_menu_items: list[str] | None = None
    max_usage_per_user: int | None = None
    total_usage_limit: int | None = None
    current_usage_count: int | None = None
    promo_code: str | None = None
    terms: str | None = None
    seo_data: dict[str, Any] | None = None


# ==========================================
# Static pages
# ==========================================


class StaticPageCreate(ContentModel):
    json_columns: ClassVar[tuple[str, ...]] = ("seo_data",)

    title: str
    slug: str
    content: str | None = None
    excerpt: str | None = None
    is_published: bool = False
    show_in_navigation: bool = False
    navigation_order: int = 0
    seo_data: dict[str, Any] = Field(default_factory=dict)
    published_at: datetime | None = None


class StaticPageRecord(PersistedMixin, StaticPageCreate):
    pass


class StaticPagePatch(ContentPatch):
    create_model: ClassVar[type[ContentModel] | None] = StaticPageCreate
    json_columns: ClassVar[tuple[str, ...]] = ("seo_data",)

    title: str | None = None
    slug: str | None = None
    content: str | None = None
    excerpt: str | None = None
    is_published: bool | None = None
    show_in_navigation: bool | None = None
    navigation_order: int | None = None
    seo_data: dict[str, Any] | None = None
    published_at: datetime | None = None


# ==========================================
# Homepage banners
# ==========================================


class HomepageBannerCreate(ContentModel):
    title: str
    subtitle: str | None = None
    description: str | None = None
    image_url: str
    mobile_image_url: str | None = None
    cta_text: str | None = None
    cta_link: str | None = None
    is_active: bool = True
    sort_order: int = 0
    show_on_mobile: bool = True
    show_on_desktop: bool = True
    start_date: datetime | None = None
    end_date: datetime | None = None


class HomepageBannerRecord(PersistedMixin, HomepageBannerCreate):
    pass


class HomepageBannerPatch(ContentPatch):
    create_model: ClassVar[type[ContentModel] | None] = HomepageBannerCreate

    title: str | None = None
    subtitle: str | None = None
    description: str | None = None
    image_url: str | None = None
    mobile_image_url: str | None = None
    cta_text: str | None = None
    cta_link: str | None = None
    is_active: bool | None = None
    sort_order: int | None = None
    show_on_mobile: bool | None = None
    show_on_desktop: bool | None = None
    start_date: datetime | None = None
    end_date: datetime | None = None
