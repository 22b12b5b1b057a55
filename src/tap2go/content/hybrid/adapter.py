"""
Operational store adapter contract.

The operational store (restaurants, menu categories, menu items) is owned by
another system. The resolver only reads from it, through this protocol.
Collections are path-like names: ``restaurants`` for restaurants and
``restaurants/<id>/menuCategories`` / ``restaurants/<id>/menuItems`` for a
restaurant's menu.
"""

import copy
from collections.abc import Mapping
from typing import Any, Protocol, runtime_checkable

OperationalRecord = dict[str, Any]

RESTAURANTS = "restaurants"


def menu_categories_collection(restaurant_id: str) -> str:
    return f"restaurants/{restaurant_id}/menuCategories"


def menu_items_collection(restaurant_id: str) -> str:
    return f"restaurants/{restaurant_id}/menuItems"


@runtime_checkable
class OperationalStoreAdapter(Protocol):
    """Read access to the operational store."""

    async def get_by_id(self, collection: str, record_id: str) -> OperationalRecord | None:
        """Return the record with ``record_id`` (including its ``id``), or None."""
        ...

    async def query(
        self,
        collection: str,
        filters: Mapping[str, Any] | None = None,
        limit: int | None = None,
    ) -> list[OperationalRecord]:
        """Return records whose fields equal every filter value."""
        ...


class InMemoryOperationalStore:
    """
    Dict-backed operational store.

    Used for local development and tests. Records are copied on the way in
    and out so callers never share state with the store.
    """

    def __init__(self, collections: Mapping[str, list[OperationalRecord]] | None = None) -> None:
        self._collections: dict[str, dict[str, OperationalRecord]] = {}
        for name, records in (collections or {}).items():
            for record in records:
                self.put(name, record)

    def put(self, collection: str, record: OperationalRecord) -> None:
        self._collections.setdefault(collection, {})[str(record["id"])] = copy.deepcopy(record)

    def remove(self, collection: str, record_id: str) -> None:
        self._collections.get(collection, {}).pop(record_id, None)

    async def get_by_id(self, collection: str, record_id: str) -> OperationalRecord | None:
        record = self._collections.get(collection, {}).get(record_id)
        return copy.deepcopy(record) if record is not None else None

    async def query(
        self,
        collection: str,
        filters: Mapping[str, Any] | None = None,
        limit: int | None = None,
    ) -> list[OperationalRecord]:
        matches = [
            copy.deepcopy(record)
            for record in self._collections.get(collection, {}).values()
            if all(record.get(field) == value for field, value in (filters or {}).items())
        ]
        return matches[:limit] if limit is not None else matches
