"""Tests for per-category content operations."""

from datetime import datetime

import pytest
from pydantic import ValidationError

from tap2go.content.exceptions import ContentNotFoundError, QueryError
from tap2go.content.models import (
    BlogPostCreate,
    HomepageBannerCreate,
    MenuCategoryCreate,
    MenuCategoryPatch,
    MenuItemCreate,
    PromotionCreate,
    RestaurantContentCreate,
    RestaurantContentPatch,
    StaticPageCreate,
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

pytestmark = pytest.mark.integration


def _stored_fields(record, fields):
    """Project a persisted record onto the columns of its create model."""
    return record.model_dump(include=set(type(fields).model_fields))


@pytest.fixture
def restaurants(content_client, clock):
    return RestaurantContentOperations(content_client, clock)


@pytest.fixture
def promotions(content_client, clock):
    return PromotionOperations(content_client, clock)


class TestRoundTrip:
    """create() followed by a lookup returns what was written."""

    @pytest.mark.asyncio
    async def test_restaurant_content(self, restaurants):
        fields = RestaurantContentCreate(
            firebase_id="r1",
            slug="joes-diner",
            story="Est. 1990",
            long_description="A classic American diner.",
            hero_image_url="https://cdn.example.com/joes/hero.jpg",
            gallery_images=["https://cdn.example.com/joes/1.jpg"],
            awards=[{"name": "Best Burger", "year": 2023}],
            certifications=[{"name": "Halal"}],
            special_features=["outdoor seating"],
            social_media={"instagram": "@joesdiner"},
            seo_data={"title": "Joe's Diner"},
            is_published=True,
            published_at=datetime(2025, 1, 15, 9, 30),
        )

        created = await restaurants.create(fields)
        fetched = await restaurants.get_by_external_id("r1")

        assert created.id > 0
        assert created.created_at is not None
        assert fetched == created
        assert _stored_fields(fetched, fields) == fields.model_dump()
        assert await restaurants.get_by_slug("joes-diner") == created

    @pytest.mark.asyncio
    async def test_structured_fields_default_to_empty(self, restaurants):
        created = await restaurants.create(RestaurantContentCreate(firebase_id="r1", slug="joes"))

        assert created.gallery_images == []
        assert created.awards == []
        assert created.social_media == {}
        assert created.seo_data == {}
        assert created.is_published is False

    @pytest.mark.asyncio
    async def test_menu_category(self, content_client, clock):
        ops = MenuCategoryOperations(content_client, clock)
        fields = MenuCategoryCreate(
            firebase_id="c1",
            restaurant_firebase_id="r1",
            name="Starters",
            description="Small plates",
            sort_order=1,
        )

        await ops.create(fields)
        fetched = await ops.get_by_external_id("c1")

        assert _stored_fields(fetched, fields) == fields.model_dump()
        assert fetched.is_active is True

    @pytest.mark.asyncio
    async def test_menu_item(self, content_client, clock):
        ops = MenuItemOperations(content_client, clock)
        fields = MenuItemCreate(
            firebase_id="i1",
            category_firebase_id="c1",
            restaurant_firebase_id="r1",
            name="Tomato Soup",
            detailed_description="Slow-roasted tomatoes and basil.",
            images=["soup.jpg"],
            ingredients=[{"name": "tomato"}, {"name": "basil"}],
            allergens=[],
            nutritional_info={"calories": 180},
            preparation_steps=["roast", "blend"],
            chef_notes="Serve hot.",
            tags=["soup"],
            is_vegetarian=True,
            is_gluten_free=True,
            spice_level="mild",
            preparation_time=15,
            is_published=True,
        )

        await ops.create(fields)
        fetched = await ops.get_by_external_id("i1")

        assert _stored_fields(fetched, fields) == fields.model_dump()

    @pytest.mark.asyncio
    async def test_blog_post(self, content_client, clock):
        ops = BlogPostOperations(content_client, clock)
        fields = BlogPostCreate(
            title="Ten Dishes to Try",
            slug="ten-dishes",
            content="...",
            author_name="Ana",
            categories=["guides"],
            tags=["food"],
            related_restaurants=["r1"],
            reading_time=4,
            is_published=True,
            is_featured=True,
            published_at=datetime(2025, 5, 1),
        )

        await ops.create(fields)
        fetched = await ops.get_by_slug("ten-dishes")

        assert _stored_fields(fetched, fields) == fields.model_dump()

    @pytest.mark.asyncio
    async def test_promotion(self, promotions):
        fields = PromotionCreate(
            title="Summer Deal",
            discount_type="percentage",
            discount_value=15.0,
            minimum_order_value=20.0,
            valid_from=datetime(2025, 5, 1),
            valid_until=datetime(2025, 7, 1),
            target_restaurants=["r1"],
            promo_code="SUMMER15",
        )

        created = await promotions.create(fields)
        fetched = await promotions.get_by_id(created.id)

        assert _stored_fields(fetched, fields) == fields.model_dump()
        assert fetched.current_usage_count == 0


class TestPartialUpdate:
    """update() writes only the supplied fields."""

    @pytest.mark.asyncio
    async def test_updating_one_field_leaves_others(self, restaurants):
        created = await restaurants.create(
            RestaurantContentCreate(
                firebase_id="r1",
                slug="joes",
                story="Est. 1990",
                hero_image_url="hero.jpg",
                awards=[{"name": "Best Burger"}],
            )
        )

        updated = await restaurants.update(created.id, RestaurantContentPatch(story="Since 1990"))

        assert updated.story == "Since 1990"
        assert updated.slug == "joes"
        assert updated.hero_image_url == "hero.jpg"
        assert updated.awards == [{"name": "Best Burger"}]

    @pytest.mark.asyncio
    async def test_explicit_null_differs_from_missing(self, restaurants):
        created = await restaurants.create(
            RestaurantContentCreate(
                firebase_id="r1", slug="joes", story="Est. 1990", hero_image_url="hero.jpg"
            )
        )

        updated = await restaurants.update(
            created.id, RestaurantContentPatch(hero_image_url=None)
        )

        assert updated.hero_image_url is None
        assert updated.story == "Est. 1990"

    @pytest.mark.asyncio
    async def test_structured_field_update(self, restaurants):
        created = await restaurants.create(RestaurantContentCreate(firebase_id="r1", slug="joes"))

        updated = await restaurants.update(
            created.id, RestaurantContentPatch(social_media={"instagram": "@joes"})
        )

        assert updated.social_media == {"instagram": "@joes"}
        assert updated.gallery_images == []

    @pytest.mark.asyncio
    async def test_update_missing_row_raises(self, content_client, clock):
        ops = MenuCategoryOperations(content_client, clock)

        with pytest.raises(ContentNotFoundError) as exc_info:
            await ops.update(999, MenuCategoryPatch(name="Ghost"))

        assert exc_info.value.context == {"table": "menu_categories", "id": 999}

    def test_patch_rejects_unknown_fields(self):
        with pytest.raises(ValidationError):
            RestaurantContentPatch(firebase_id="r2")

    @pytest.mark.parametrize(
        "patch_type, fields",
        [
            (RestaurantContentPatch, {"gallery_images": None}),
            (RestaurantContentPatch, {"social_media": None}),
            (RestaurantContentPatch, {"slug": None}),
            (RestaurantContentPatch, {"is_published": None}),
            (MenuCategoryPatch, {"name": None}),
            (MenuCategoryPatch, {"sort_order": None}),
        ],
    )
    def test_patch_rejects_null_for_required_columns(self, patch_type, fields):
        with pytest.raises(ValidationError, match="cannot be set to null"):
            patch_type(**fields)

    def test_patch_allows_null_for_nullable_columns(self):
        patch = MenuCategoryPatch(description=None, image_url=None)

        assert patch.changes() == {"description": None, "image_url": None}


class TestInvalidRows:
    """Rows that do not fit their record type surface as QueryError."""

    @pytest.mark.asyncio
    async def test_null_json_column_raises_query_error(self, restaurants, content_client):
        created = await restaurants.create(RestaurantContentCreate(firebase_id="r1", slug="joes"))
        await content_client.query(
            "UPDATE restaurant_contents SET gallery_images = NULL WHERE id = :id",
            {"id": created.id},
        )

        with pytest.raises(QueryError) as exc_info:
            await restaurants.get_by_external_id("r1")

        assert exc_info.value.context["table"] == "restaurant_contents"
        assert exc_info.value.context["errors"][0]["loc"] == ("gallery_images",)


class TestDeleteAndList:
    @pytest.mark.asyncio
    async def test_delete_removes_row(self, restaurants):
        created = await restaurants.create(RestaurantContentCreate(firebase_id="r1", slug="joes"))

        assert await restaurants.delete(created.id) is True
        assert await restaurants.get_by_id(created.id) is None
        assert await restaurants.delete(created.id) is False

    @pytest.mark.asyncio
    async def test_list_all_newest_first(self, restaurants):
        for index in range(3):
            await restaurants.create(
                RestaurantContentCreate(firebase_id=f"r{index}", slug=f"slug-{index}")
            )

        listed = await restaurants.list_all(limit=2)

        assert [record.firebase_id for record in listed] == ["r2", "r1"]
        page_two = await restaurants.list_all(limit=2, offset=2)
        assert [record.firebase_id for record in page_two] == ["r0"]


class TestMenuQueries:
    @pytest.mark.asyncio
    async def test_categories_active_in_display_order(self, content_client, clock):
        ops = MenuCategoryOperations(content_client, clock)
        await ops.create(MenuCategoryCreate(firebase_id="c1", restaurant_firebase_id="r1", name="Mains", sort_order=2))
        await ops.create(MenuCategoryCreate(firebase_id="c2", restaurant_firebase_id="r1", name="Drinks", sort_order=1))
        await ops.create(MenuCategoryCreate(firebase_id="c3", restaurant_firebase_id="r1", name="Bakery", sort_order=1))
        await ops.create(
            MenuCategoryCreate(firebase_id="c4", restaurant_firebase_id="r1", name="Retired", is_active=False)
        )
        await ops.create(MenuCategoryCreate(firebase_id="c5", restaurant_firebase_id="r2", name="Other"))

        categories = await ops.get_by_restaurant("r1")

        assert [category.firebase_id for category in categories] == ["c3", "c2", "c1"]

    @pytest.mark.asyncio
    async def test_items_published_only(self, content_client, clock):
        ops = MenuItemOperations(content_client, clock)
        await ops.create(
            MenuItemCreate(
                firebase_id="i1", category_firebase_id="c1", restaurant_firebase_id="r1",
                name="Soup", is_published=True,
            )
        )
        await ops.create(
            MenuItemCreate(
                firebase_id="i2", category_firebase_id="c1", restaurant_firebase_id="r1",
                name="Bread", is_published=True,
            )
        )
        await ops.create(
            MenuItemCreate(
                firebase_id="i3", category_firebase_id="c1", restaurant_firebase_id="r1",
                name="Draft Dish",
            )
        )

        by_category = await ops.get_by_category("c1")
        by_restaurant = await ops.get_by_restaurant("r1")

        assert [item.firebase_id for item in by_category] == ["i2", "i1"]
        assert [item.firebase_id for item in by_restaurant] == ["i2", "i1"]


class TestPromotionWindow:
    """get_active() honours is_active and the validity window."""

    @pytest.mark.asyncio
    async def test_only_current_active_promotions(self, promotions):
        await promotions.create(
            PromotionCreate(title="Current", valid_from=datetime(2025, 5, 1), valid_until=datetime(2025, 7, 1))
        )
        await promotions.create(
            PromotionCreate(title="Expired", valid_from=datetime(2025, 4, 1), valid_until=datetime(2025, 5, 15))
        )
        await promotions.create(
            PromotionCreate(title="Upcoming", valid_from=datetime(2025, 6, 15), valid_until=datetime(2025, 8, 1))
        )
        await promotions.create(
            PromotionCreate(
                title="Disabled",
                valid_from=datetime(2025, 5, 1),
                valid_until=datetime(2025, 7, 1),
                is_active=False,
            )
        )

        active = await promotions.get_active()

        assert [promotion.title for promotion in active] == ["Current"]

    @pytest.mark.asyncio
    async def test_window_follows_clock(self, promotions, clock):
        await promotions.create(
            PromotionCreate(title="Flash", valid_from=datetime(2025, 6, 1), valid_until=datetime(2025, 6, 2))
        )
        assert len(await promotions.get_active()) == 1

        clock.advance(days=2)

        assert await promotions.get_active() == []

    @pytest.mark.asyncio
    async def test_by_restaurant_treats_empty_targets_as_all(self, promotions):
        window = {"valid_from": datetime(2025, 5, 1), "valid_until": datetime(2025, 7, 1)}
        await promotions.create(PromotionCreate(title="Everyone", **window))
        await promotions.create(PromotionCreate(title="Joe's only", target_restaurants=["r1"], **window))
        await promotions.create(PromotionCreate(title="Sakura only", target_restaurants=["r2"], **window))

        for_r1 = await promotions.get_by_restaurant("r1")

        assert sorted(promotion.title for promotion in for_r1) == ["Everyone", "Joe's only"]


class TestEditorialPages:
    @pytest.mark.asyncio
    async def test_static_page_navigation(self, content_client, clock):
        ops = StaticPageOperations(content_client, clock)
        await ops.create(StaticPageCreate(title="Terms", slug="terms", is_published=True))
        await ops.create(
            StaticPageCreate(title="About", slug="about", is_published=True, show_in_navigation=True, navigation_order=2)
        )
        await ops.create(
            StaticPageCreate(title="Help", slug="help", is_published=True, show_in_navigation=True, navigation_order=1)
        )
        await ops.create(StaticPageCreate(title="Draft", slug="draft", show_in_navigation=True))

        navigation = await ops.list_navigation()

        assert [page.slug for page in navigation] == ["help", "about"]
        assert await ops.get_by_slug("draft") is None
        assert (await ops.get_by_slug("terms")).title == "Terms"

    @pytest.mark.asyncio
    async def test_banners_respect_schedule(self, content_client, clock):
        ops = HomepageBannerOperations(content_client, clock)
        await ops.create(HomepageBannerCreate(title="Always", image_url="a.jpg", sort_order=2))
        await ops.create(
            HomepageBannerCreate(
                title="June",
                image_url="june.jpg",
                sort_order=1,
                start_date=datetime(2025, 6, 1),
                end_date=datetime(2025, 6, 30),
            )
        )
        await ops.create(
            HomepageBannerCreate(title="Ended", image_url="old.jpg", end_date=datetime(2025, 5, 1))
        )
        await ops.create(HomepageBannerCreate(title="Hidden", image_url="h.jpg", is_active=False))

        banners = await ops.get_active()

        assert [banner.title for banner in banners] == ["June", "Always"]


class TestBlogQueries:
    """Published and featured listings."""

    @pytest.mark.asyncio
    async def test_published_newest_first(self, content_client, clock):
        ops = BlogPostOperations(content_client, clock)
        await ops.create(
            BlogPostCreate(title="Older", slug="older", is_published=True, published_at=datetime(2025, 3, 1))
        )
        await ops.create(
            BlogPostCreate(
                title="Newer",
                slug="newer",
                is_published=True,
                is_featured=True,
                published_at=datetime(2025, 5, 1),
            )
        )
        await ops.create(BlogPostCreate(title="Draft", slug="draft", is_featured=True))

        published = await ops.list_published()
        featured = await ops.get_featured()

        assert [post.slug for post in published] == ["newer", "older"]
        assert [post.slug for post in featured] == ["newer"]
        assert [post.slug for post in await ops.list_published(limit=1, offset=1)] == ["older"]
        assert await ops.get_by_slug("draft") is None
