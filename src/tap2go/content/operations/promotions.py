"""Promotion operations."""

from tap2go.content.models import PromotionCreate, PromotionPatch, PromotionRecord
from tap2go.content.operations.base import ContentOperations


class PromotionOperations(ContentOperations[PromotionRecord, PromotionCreate, PromotionPatch]):
    table = "promotions"
    record_model = PromotionRecord

    async def get_active(self) -> list[PromotionRecord]:
        """Active promotions whose validity window contains the current time."""
        return await self._fetch_all(
            """
            SELECT * FROM promotions
            WHERE is_active = TRUE
              AND valid_from <= :now
              AND valid_until >= :now
            ORDER BY created_at DESC, id DESC
            """,
            {"now": self.clock()},
        )

    async def get_by_restaurant(self, restaurant_external_id: str) -> list[PromotionRecord]:
        """
        Active promotions targeting a restaurant.

        The target list is a JSON column, so membership is tested on the
        decoded value; an empty target list applies to every restaurant.
        """
        active = await self.get_active()
        return [
            promotion
            for promotion in active
            if promotion.applies_to_restaurant(restaurant_external_id)
        ]
