"""Homepage banner operations."""

from tap2go.content.models import HomepageBannerCreate, HomepageBannerPatch, HomepageBannerRecord
from tap2go.content.operations.base import ContentOperations


class HomepageBannerOperations(
    ContentOperations[HomepageBannerRecord, HomepageBannerCreate, HomepageBannerPatch]
):
    table = "homepage_banners"
    record_model = HomepageBannerRecord

    async def get_active(self) -> list[HomepageBannerRecord]:
        """Active banners inside their optional scheduling window, in slot order."""
        return await self._fetch_all(
            """
            SELECT * FROM homepage_banners
            WHERE is_active = TRUE
              AND (start_date IS NULL OR start_date <= :now)
              AND (end_date IS NULL OR end_date >= :now)
            ORDER BY sort_order ASC, id ASC
            """,
            {"now": self.clock()},
        )
