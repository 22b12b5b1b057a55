"""Blog post operations."""

from tap2go.content.models import BlogPostCreate, BlogPostPatch, BlogPostRecord
from tap2go.content.operations.base import ContentOperations

_PUBLISHED_ORDER = "published_at DESC, created_at DESC, id DESC"


class BlogPostOperations(ContentOperations[BlogPostRecord, BlogPostCreate, BlogPostPatch]):
    table = "blog_posts"
    record_model = BlogPostRecord

    async def get_by_slug(self, slug: str) -> BlogPostRecord | None:
        """Published post with ``slug``; drafts are not returned."""
        return await self._fetch_one(
            "SELECT * FROM blog_posts WHERE slug = :slug AND is_published = TRUE",
            {"slug": slug},
        )

    async def list_published(self, limit: int = 10, offset: int = 0) -> list[BlogPostRecord]:
        return await self._fetch_all(
            f"""
            SELECT * FROM blog_posts
            WHERE is_published = TRUE
            ORDER BY {_PUBLISHED_ORDER}
            LIMIT :limit OFFSET :offset
            """,
            {"limit": limit, "offset": offset},
        )

    async def get_featured(self, limit: int = 6) -> list[BlogPostRecord]:
        return await self._fetch_all(
            f"""
            SELECT * FROM blog_posts
            WHERE is_published = TRUE AND is_featured = TRUE
            ORDER BY {_PUBLISHED_ORDER}
            LIMIT :limit
            """,
            {"limit": limit},
        )
