"""
Hybrid view schemas.

A hybrid view carries every field of the operational record unchanged (as
pydantic extras) plus an optional ``content`` block and merge metadata.
Views serialize with camelCase aliases: ``hasRichContent``, ``lastUpdated``.
"""

from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

# Keys owned by the view; operational fields with these names are dropped.
RESERVED_KEYS = frozenset(
    {"content", "source", "items", "has_rich_content", "hasRichContent", "last_updated", "lastUpdated"}
)


class ViewModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class RestaurantContentView(ViewModel):
    story: str | None = None
    long_description: str | None = None
    hero_image: str | None = None
    gallery: list[Any] = Field(default_factory=list)
    awards: list[Any] = Field(default_factory=list)
    certifications: list[Any] = Field(default_factory=list)
    special_features: list[Any] = Field(default_factory=list)
    social_media: dict[str, Any] = Field(default_factory=dict)
    seo: dict[str, Any] = Field(default_factory=dict)


class MenuItemContentView(ViewModel):
    detailed_description: str | None = None
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


class MenuCategoryContentView(ViewModel):
    detailed_description: str | None = None
    image: str | None = None


class HybridView(ViewModel):
    """Operational fields pass through as extras."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="allow")

    id: str
    source: Literal["hybrid"] = "hybrid"
    has_rich_content: bool = False


class HybridMenuItem(HybridView):
    content: MenuItemContentView | None = None


class HybridMenuCategory(HybridView):
    content: MenuCategoryContentView | None = None
    items: list[HybridMenuItem] = Field(default_factory=list)


class HybridRestaurant(HybridView):
    content: RestaurantContentView | None = None
    last_updated: datetime
