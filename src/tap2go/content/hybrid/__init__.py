"""Hybrid views: operational records merged with editorial content."""

from tap2go.content.hybrid.adapter import InMemoryOperationalStore, OperationalStoreAdapter
from tap2go.content.hybrid.resolver import HybridResolver
from tap2go.content.hybrid.schemas import HybridMenuCategory, HybridMenuItem, HybridRestaurant

__all__ = [
    "HybridMenuCategory",
    "HybridMenuItem",
    "HybridResolver",
    "HybridRestaurant",
    "InMemoryOperationalStore",
    "OperationalStoreAdapter",
]
