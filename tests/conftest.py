"""
Global pytest configuration and fixtures for the Tap2Go content platform tests.

The content store runs on a file-backed SQLite database (aiosqlite) created
per test; the distributed cache tier runs on fakeredis.
"""

import asyncio
import os
import sys
from datetime import UTC, datetime, timedelta

import fakeredis
import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

# Add src to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

from tap2go.content.cache.backends import RedisCacheTier  # noqa: E402
from tap2go.content.cache.manager import CacheManager  # noqa: E402
from tap2go.content.cms.service import ContentService  # noqa: E402
from tap2go.content.db import ContentStoreClient  # noqa: E402
from tap2go.content.hybrid.adapter import InMemoryOperationalStore  # noqa: E402

CONTENT_SCHEMA = [
    """
    CREATE TABLE restaurant_contents (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        firebase_id VARCHAR(255) UNIQUE NOT NULL,
        slug VARCHAR(255) UNIQUE NOT NULL,
        story TEXT,
        long_description TEXT,
        hero_image_url TEXT,
        gallery_images TEXT DEFAULT '[]',
        awards TEXT DEFAULT '[]',
        certifications TEXT DEFAULT '[]',
        special_features TEXT DEFAULT '[]',
        social_media TEXT DEFAULT '{}',
        seo_data TEXT DEFAULT '{}',
        is_published BOOLEAN DEFAULT 0,
        published_at TIMESTAMP,
        created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
        updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
    )
    """,
    """
    CREATE TABLE menu_categories (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        firebase_id VARCHAR(255) UNIQUE NOT NULL,
        restaurant_firebase_id VARCHAR(255) NOT NULL,
        name VARCHAR(255) NOT NULL,
        description TEXT,
        image_url TEXT,
        sort_order INTEGER DEFAULT 0,
        is_active BOOLEAN DEFAULT 1,
        created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
        updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
    )
    """,
    """
    CREATE TABLE menu_items (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        firebase_id VARCHAR(255) UNIQUE NOT NULL,
        category_firebase_id VARCHAR(255),
        restaurant_firebase_id VARCHAR(255) NOT NULL,
        name VARCHAR(255) NOT NULL,
        detailed_description TEXT,
        short_description TEXT,
        images TEXT DEFAULT '[]',
        ingredients TEXT DEFAULT '[]',
        allergens TEXT DEFAULT '[]',
        nutritional_info TEXT DEFAULT '{}',
        preparation_steps TEXT DEFAULT '[]',
        chef_notes TEXT,
        tags TEXT DEFAULT '[]',
        is_vegetarian BOOLEAN DEFAULT 0,
        is_vegan BOOLEAN DEFAULT 0,
        is_gluten_free BOOLEAN DEFAULT 0,
        spice_level VARCHAR(20),
        preparation_time INTEGER,
        seo_data TEXT DEFAULT '{}',
        is_published BOOLEAN DEFAULT 0,
        published_at TIMESTAMP,
        created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
        updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
    )
    """,
    """
    CREATE TABLE blog_posts (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        title VARCHAR(255) NOT NULL,
        slug VARCHAR(255) UNIQUE NOT NULL,
        content TEXT,
        excerpt TEXT,
        featured_image_url TEXT,
        author_name VARCHAR(255),
        author_bio TEXT,
        author_avatar_url TEXT,
        categories TEXT DEFAULT '[]',
        tags TEXT DEFAULT '[]',
        related_restaurants TEXT DEFAULT '[]',
        reading_time INTEGER,
        is_published BOOLEAN DEFAULT 0,
        is_featured BOOLEAN DEFAULT 0,
        seo_data TEXT DEFAULT '{}',
        published_at TIMESTAMP,
        created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
        updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
    )
    """,
    """
    CREATE TABLE promotions (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        title VARCHAR(255) NOT NULL,
        description TEXT,
        short_description TEXT,
        image_url TEXT,
        banner_image_url TEXT,
        promotion_type VARCHAR(50),
        discount_type VARCHAR(20),
        discount_value DECIMAL(10, 2),
        minimum_order_value DECIMAL(10, 2),
        valid_from TIMESTAMP NOT NULL,
        valid_until TIMESTAMP NOT NULL,
        is_active BOOLEAN DEFAULT 1,
        target_restaurants TEXT DEFAULT '[]',
        target_categories TEXT DEFAULT '[]',
        target_menu_items TEXT DEFAULT '[]',
        max_usage_per_user INTEGER,
        total_usage_limit INTEGER,
        current_usage_count INTEGER DEFAULT 0,
        promo_code VARCHAR(50),
        terms TEXT,
        seo_data TEXT DEFAULT '{}',
        created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
        updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
    )
    """,
    """
    CREATE TABLE static_pages (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        title VARCHAR(255) NOT NULL,
        slug VARCHAR(255) UNIQUE NOT NULL,
        content TEXT,
        excerpt TEXT,
        is_published BOOLEAN DEFAULT 0,
        show_in_navigation BOOLEAN DEFAULT 0,
        navigation_order INTEGER DEFAULT 0,
        seo_data TEXT DEFAULT '{}',
        published_at TIMESTAMP,
        created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
        updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
    )
    """,
    """
    CREATE TABLE homepage_banners (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        title VARCHAR(255) NOT NULL,
        subtitle VARCHAR(255),
        description TEXT,
        image_url TEXT NOT NULL,
        mobile_image_url TEXT,
        cta_text VARCHAR(100),
        cta_link TEXT,
        is_active BOOLEAN DEFAULT 1,
        sort_order INTEGER DEFAULT 0,
        show_on_mobile BOOLEAN DEFAULT 1,
        show_on_desktop BOOLEAN DEFAULT 1,
        start_date TIMESTAMP,
        end_date TIMESTAMP,
        created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
        updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
    )
    """,
]

FIXED_NOW = datetime(2025, 6, 1, 12, 0, tzinfo=UTC)


class FakeClock:
    """Controllable UTC clock for time-windowed queries."""

    def __init__(self, now: datetime = FIXED_NOW) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> None:
        self.now += timedelta(**kwargs)


class FakeTimer:
    """Controllable epoch-seconds timer for cache expiry."""

    def __init__(self, start: float = 1_700_000_000.0) -> None:
        self.value = start

    def __call__(self) -> float:
        return self.value

    def advance(self, seconds: float) -> None:
        self.value += seconds


class UnavailableRedis:
    """Redis client whose every call fails like a refused connection."""

    async def get(self, *args, **kwargs):
        raise RedisConnectionError("Connection refused")

    setex = delete = flushdb = ping = get

    def scan_iter(self, *args, **kwargs):
        raise RedisConnectionError("Connection refused")

    async def aclose(self):
        return None


class SlowRedis(UnavailableRedis):
    """Redis client that never answers within any reasonable timeout."""

    async def get(self, *args, **kwargs):
        await asyncio.sleep(10)

    setex = delete = flushdb = ping = get


async def create_schema(client: ContentStoreClient) -> None:
    for statement in CONTENT_SCHEMA:
        await client.query(statement)


@pytest.fixture
async def content_client(tmp_path):
    """Content store client on a fresh SQLite database with the content schema."""
    client = ContentStoreClient(
        f"sqlite+aiosqlite:///{tmp_path / 'content.db'}",
        pool_min=1,
        pool_max=5,
        connection_timeout=5.0,
    )
    await create_schema(client)
    yield client
    await client.close()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def timer():
    return FakeTimer()


@pytest.fixture
def content_service(content_client, clock):
    return ContentService(content_client, clock)


@pytest.fixture
async def fake_redis():
    client = fakeredis.FakeAsyncRedis(decode_responses=True)
    yield client
    await client.flushall()
    await client.aclose()


@pytest.fixture
def cache(fake_redis, timer):
    """Two-tier cache on fakeredis with a controllable timer."""
    return CacheManager(RedisCacheTier(fake_redis, operation_timeout=1.0), clock=timer)


@pytest.fixture
def local_cache(timer):
    """Local-only cache with a controllable timer."""
    return CacheManager(None, clock=timer)


@pytest.fixture
def operational_store():
    return InMemoryOperationalStore(
        {
            "restaurants": [
                {
                    "id": "r1",
                    "name": "Joe's Diner",
                    "isOpen": True,
                    "rating": 4.6,
                    "cuisine": "american",
                },
                {
                    "id": "r2",
                    "name": "Sakura",
                    "isOpen": False,
                    "rating": 4.8,
                    "cuisine": "japanese",
                },
            ],
        }
    )
