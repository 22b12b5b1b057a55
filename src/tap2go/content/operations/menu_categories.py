"""Menu category operations."""

from tap2go.content.models import MenuCategoryCreate, MenuCategoryPatch, MenuCategoryRecord
from tap2go.content.operations.base import ContentOperations


class MenuCategoryOperations(
    ContentOperations[MenuCategoryRecord, MenuCategoryCreate, MenuCategoryPatch]
):
    table = "menu_categories"
    record_model = MenuCategoryRecord

    async def get_by_external_id(self, external_id: str) -> MenuCategoryRecord | None:
        return await self._fetch_one(
            "SELECT * FROM menu_categories WHERE firebase_id = :external_id",
            {"external_id": external_id},
        )

    async def get_by_restaurant(self, restaurant_external_id: str) -> list[MenuCategoryRecord]:
        """Active categories of a restaurant in display order."""
        return await self._fetch_all(
            """
            SELECT * FROM menu_categories
            WHERE restaurant_firebase_id = :restaurant_id AND is_active = TRUE
            ORDER BY sort_order ASC, name ASC
            """,
            {"restaurant_id": restaurant_external_id},
        )
