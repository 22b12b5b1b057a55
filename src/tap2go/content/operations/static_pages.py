"""Static page operations."""

from tap2go.content.models import StaticPageCreate, StaticPagePatch, StaticPageRecord
from tap2go.content.operations.base import ContentOperations


class StaticPageOperations(ContentOperations[StaticPageRecord, StaticPageCreate, StaticPagePatch]):
    table = "static_pages"
    record_model = StaticPageRecord

    async def get_by_slug(self, slug: str) -> StaticPageRecord | None:
        return await self._fetch_one(
            "SELECT * FROM static_pages WHERE slug = :slug AND is_published = TRUE",
            {"slug": slug},
        )

    async def list_navigation(self) -> list[StaticPageRecord]:
        """Published pages flagged for the site navigation, in menu order."""
        return await self._fetch_all(
            """
            SELECT * FROM static_pages
            WHERE is_published = TRUE AND show_in_navigation = TRUE
            ORDER BY navigation_order ASC, title ASC
            """
        )
