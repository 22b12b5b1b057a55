"""
Content platform exceptions.

Only operational-store failures and content-store query failures reach
callers of the hybrid resolver. Distributed cache failures are raised by the
Redis tier and absorbed by the cache manager.
"""

from typing import Any


class ContentPlatformError(Exception):
    """
    Base content platform error.

    Attributes:
        message: Human-readable error message
        error_code: Machine-readable error code
        context: Additional context data about the error
    """

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        context: dict[str, Any] | None = None,
    ):
        self.message = message
        self.error_code = error_code or "CONTENT_PLATFORM_ERROR"
        self.context = context or {}
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for API responses."""
        return {
            "error_code": self.error_code,
            "message": self.message,
            "context": self.context,
        }


class QueryError(ContentPlatformError):
    """A content store statement failed."""

    def __init__(
        self,
        message: str,
        sql: str | None = None,
        context: dict[str, Any] | None = None,
    ):
        context = dict(context or {})
        if sql:
            context["sql"] = " ".join(sql.split())
        super().__init__(message, "QUERY_ERROR", context=context)


class ConnectionTimeoutError(QueryError):
    """No pooled connection became available within the configured timeout."""

    def __init__(self, message: str, timeout: float | None = None, sql: str | None = None) -> None:
        super().__init__(message, sql=sql, context={"timeout": timeout} if timeout else None)
        self.error_code = "CONNECTION_TIMEOUT"


class ContentNotFoundError(ContentPlatformError):
    """Update targeted a content record that does not exist."""

    def __init__(self, table: str, record_id: int) -> None:
        super().__init__(
            f"No row with id {record_id} in {table}",
            "CONTENT_NOT_FOUND",
            context={"table": table, "id": record_id},
        )


class AdapterError(ContentPlatformError):
    """The operational store call failed or timed out."""

    def __init__(self, message: str, collection: str, record_id: str | None = None) -> None:
        context: dict[str, Any] = {"collection": collection}
        if record_id is not None:
            context["id"] = record_id
        super().__init__(message, "ADAPTER_ERROR", context=context)


class CacheTierError(ContentPlatformError):
    """The distributed cache tier failed or timed out."""

    def __init__(self, message: str, operation: str, key: str | None = None) -> None:
        context: dict[str, Any] = {"operation": operation}
        if key is not None:
            context["key"] = key
        super().__init__(message, "CACHE_TIER_ERROR", context=context)
