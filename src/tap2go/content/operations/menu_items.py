"""Menu item operations."""

from tap2go.content.models import MenuItemCreate, MenuItemPatch, MenuItemRecord
from tap2go.content.operations.base import ContentOperations


class MenuItemOperations(ContentOperations[MenuItemRecord, MenuItemCreate, MenuItemPatch]):
    table = "menu_items"
    record_model = MenuItemRecord

    async def get_by_external_id(self, external_id: str) -> MenuItemRecord | None:
        return await self._fetch_one(
            "SELECT * FROM menu_items WHERE firebase_id = :external_id",
            {"external_id": external_id},
        )

    async def get_by_category(self, category_external_id: str) -> list[MenuItemRecord]:
        """Published items of one category, alphabetically."""
        return await self._fetch_all(
            """
            SELECT * FROM menu_items
            WHERE category_firebase_id = :category_id AND is_published = TRUE
            ORDER BY name ASC
            """,
            {"category_id": category_external_id},
        )

    async def get_by_restaurant(self, restaurant_external_id: str) -> list[MenuItemRecord]:
        """Published items of one restaurant, alphabetically."""
        return await self._fetch_all(
            """
            SELECT * FROM menu_items
            WHERE restaurant_firebase_id = :restaurant_id AND is_published = TRUE
            ORDER BY name ASC
            """,
            {"restaurant_id": restaurant_external_id},
        )
