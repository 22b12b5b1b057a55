"""Tests for per-category cache invalidation."""

import pytest

from tap2go.content.cache import CacheInvalidator, CacheKeys, InvalidationTarget


@pytest.fixture
def invalidator(cache):
    return CacheInvalidator(cache)


async def _seed(cache, *keys):
    for key in keys:
        await cache.set(key, {"key": key}, ttl=600)


async def _cached(cache, *keys):
    return {key for key in keys if await cache.get(key) is not None}


class TestRestaurantInvalidation:
    @pytest.mark.asyncio
    async def test_single_restaurant(self, cache, invalidator):
        search = CacheKeys.restaurant_search({"cuisine": "thai"}, 20)
        keys = (
            CacheKeys.restaurant("r1"),
            CacheKeys.hybrid_restaurant("r1"),
            CacheKeys.restaurant("r2"),
            CacheKeys.hybrid_restaurant("r2"),
            CacheKeys.restaurant_by_slug("joes-diner"),
            search,
        )
        await _seed(cache, *keys)

        await invalidator.invalidate_restaurant("r1")

        assert await _cached(cache, *keys) == {"restaurant:r2", "hybrid:restaurant:r2"}

    @pytest.mark.asyncio
    async def test_all_restaurants(self, cache, invalidator):
        keys = (
            CacheKeys.restaurant("r1"),
            CacheKeys.restaurant_by_slug("joes"),
            CacheKeys.hybrid_restaurant("r2"),
            CacheKeys.menu_categories("r1"),
        )
        await _seed(cache, *keys)

        await invalidator.invalidate_restaurant()

        assert await _cached(cache, *keys) == {"menu-category:r1"}


class TestMenuInvalidation:
    @pytest.mark.asyncio
    async def test_single_restaurant_menu(self, cache, invalidator):
        keys = (
            CacheKeys.menu_categories("r1"),
            CacheKeys.menu_items("r1"),
            CacheKeys.menu_items("r1", "c1"),
            CacheKeys.hybrid_menu("r1"),
            CacheKeys.menu_categories("r10"),
            CacheKeys.menu_items("r10", "c9"),
        )
        await _seed(cache, *keys)

        await invalidator.invalidate_menu("r1")

        assert await _cached(cache, *keys) == {"menu-category:r10", "menu-item:r10:c9"}

    @pytest.mark.asyncio
    async def test_every_menu(self, cache, invalidator):
        keys = (
            CacheKeys.menu_categories("r1"),
            CacheKeys.menu_items("r2", "c1"),
            CacheKeys.hybrid_menu("r3"),
            CacheKeys.restaurant("r1"),
        )
        await _seed(cache, *keys)

        await invalidator.invalidate_menu()

        assert await _cached(cache, *keys) == {"restaurant:r1"}


class TestDispatch:
    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        ("target", "cleared", "kept"),
        [
            (InvalidationTarget.BLOG, "blog-post:ten-dishes", "promotion:active"),
            (InvalidationTarget.PROMOTIONS, "promotion:restaurant:r1", "banner:active"),
            (InvalidationTarget.STATIC_PAGES, "static-page:navigation", "blog-post:ten-dishes"),
            (InvalidationTarget.BANNERS, "banner:active", "static-page:about"),
        ],
    )
    async def test_category_targets(self, cache, invalidator, target, cleared, kept):
        await _seed(cache, cleared, kept)

        await invalidator.invalidate(target)

        assert await _cached(cache, cleared, kept) == {kept}

    @pytest.mark.asyncio
    async def test_restaurant_target_with_id(self, cache, invalidator):
        await _seed(cache, "restaurant:r1", "restaurant:r2")

        await invalidator.invalidate(InvalidationTarget.RESTAURANT, "r1")

        assert await _cached(cache, "restaurant:r1", "restaurant:r2") == {"restaurant:r2"}

    @pytest.mark.asyncio
    async def test_all(self, cache, invalidator, fake_redis):
        await _seed(cache, "restaurant:r1", "blog-post:a", "banner:active")

        await invalidator.invalidate(InvalidationTarget.ALL)

        assert await _cached(cache, "restaurant:r1", "blog-post:a", "banner:active") == set()
        assert await fake_redis.dbsize() == 0
