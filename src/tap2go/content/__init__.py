"""
Tap2Go content platform.

Hybrid content resolution for the Tap2Go ordering platform:
- Content store client and typed per-category content operations
- Content abstraction layer mapping rows to ``{id, attributes}`` entries
- Two-tier (Redis + in-process) cache with category TTLs and pattern invalidation
- Hybrid resolver merging operational records with editorial content
"""

__version__ = "1.0.0"


def get_version() -> str:
    """Get content platform version."""
    return __version__
