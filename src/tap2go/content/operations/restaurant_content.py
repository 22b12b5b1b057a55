"""Restaurant content operations."""

from tap2go.content.models import (
    RestaurantContentCreate,
    RestaurantContentPatch,
    RestaurantContentRecord,
)
from tap2go.content.operations.base import ContentOperations


class RestaurantContentOperations(
    ContentOperations[RestaurantContentRecord, RestaurantContentCreate, RestaurantContentPatch]
):
    table = "restaurant_contents"
    record_model = RestaurantContentRecord

    async def get_by_external_id(self, external_id: str) -> RestaurantContentRecord | None:
        """Content augmenting the operational restaurant ``external_id``."""
        return await self._fetch_one(
            "SELECT * FROM restaurant_contents WHERE firebase_id = :external_id",
            {"external_id": external_id},
        )

    async def get_by_slug(self, slug: str) -> RestaurantContentRecord | None:
        return await self._fetch_one(
            "SELECT * FROM restaurant_contents WHERE slug = :slug", {"slug": slug}
        )
